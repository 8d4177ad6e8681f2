import os
from dataclasses import dataclass


class SettingsException(Exception):
    """Raised when the operator environment is incomplete or malformed"""
    pass


MIN_SYNC_INTERVAL = 30


def _required(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise SettingsException(f"{name} environment variable is required")
    return value


def _number(name: str, default, cast):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise SettingsException(f"{name} must be a number, got '{raw}'")


def sync_interval_from_env() -> float:
    """Periodic re-sync interval for the resync loop, never below 30 seconds."""
    interval = _number("TINYMON_SYNC_INTERVAL", 60.0, float)
    return max(interval, MIN_SYNC_INTERVAL)


@dataclass(frozen=True)
class Settings:
    """
    Operator settings read from the environment.

    Environment Variables:
    - TINYMON_URL: base URL of the TinyMon push API (required)
    - TINYMON_API_KEY: bearer token for the push API (required)
    - CLUSTER_NAME: cluster segment used in addresses and topics (required)
    - TINYMON_TIMEOUT: per-call HTTP timeout in seconds (default: 10)
    - TINYMON_RETRY_ATTEMPTS: attempts per remote call (default: 3)
    - TINYMON_RETRY_MAX_WAIT: backoff ceiling in seconds (default: 5)
    - TINYMON_SYNC_INTERVAL: periodic re-sync in seconds (default: 60)
    """
    tinymon_url: str
    api_key: str
    cluster: str
    timeout: float = 10.0
    retry_attempts: int = 3
    retry_max_wait: float = 5.0
    sync_interval: float = 60.0

    @classmethod
    def from_env(cls) -> "Settings":
        retry_attempts = _number("TINYMON_RETRY_ATTEMPTS", 3, int)
        if retry_attempts < 1:
            raise SettingsException("TINYMON_RETRY_ATTEMPTS must be at least 1")

        timeout = _number("TINYMON_TIMEOUT", 10.0, float)
        if timeout <= 0:
            raise SettingsException("TINYMON_TIMEOUT must be positive")

        return cls(
            tinymon_url=_required("TINYMON_URL").rstrip("/"),
            api_key=_required("TINYMON_API_KEY"),
            cluster=_required("CLUSTER_NAME"),
            timeout=timeout,
            retry_attempts=retry_attempts,
            retry_max_wait=_number("TINYMON_RETRY_MAX_WAIT", 5.0, float),
            sync_interval=sync_interval_from_env(),
        )
