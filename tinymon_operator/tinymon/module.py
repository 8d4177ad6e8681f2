from injector import Module, provider, singleton
from loguru import logger

from tinymon_operator.settings import Settings
from tinymon_operator.tinymon.client import TinyMonClient


class TinyMonModule(Module):
    """Dependency injection module for operator settings and the push client."""

    @provider
    @singleton
    def provide_settings(self) -> Settings:
        return Settings.from_env()

    @provider
    @singleton
    def provide_client(self, settings: Settings) -> TinyMonClient:
        logger.info(f"Using TinyMon at {settings.tinymon_url} for cluster {settings.cluster}")
        return TinyMonClient(
            settings.tinymon_url,
            settings.api_key,
            timeout=settings.timeout,
            retry_attempts=settings.retry_attempts,
            retry_max_wait=settings.retry_max_wait,
        )
