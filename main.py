from injector import Injector
from loguru import logger
import kopf
from tinymon_operator.common.resync import ResyncLoop
from tinymon_operator.kube.module import KubeModule
from tinymon_operator.tinymon.module import TinyMonModule
from tinymon_operator.settings import Settings, SettingsException
import os
import importlib
from tinymon_operator.logging_interceptor.handler import setup_logging

setup_logging()

injector = Injector([KubeModule(), TinyMonModule()])

default_plugins = [
    "node",
    "deployment",
    "ingress",
    "pvc",
    "backup_schedule",
]


@kopf.on.startup()
def startup_fn(settings: kopf.OperatorSettings, **kwargs):
    logger.info("Starting tinymon-operator...")
    logger.debug(f"Operator Settings: {settings}")

    try:
        operator_settings = injector.get(Settings)
    except SettingsException as e:
        logger.error(f"Invalid configuration: {e}")
        raise kopf.PermanentError(str(e))
    logger.info(f"Syncing cluster '{operator_settings.cluster}' to {operator_settings.tinymon_url}")

    plugins_env = os.getenv("TINYMON_OPERATOR_PLUGINS", "")
    if not plugins_env:
        plugins_env = ",".join(default_plugins)

    plugins = [plugin.strip() for plugin in plugins_env.split(",") if plugin.strip()]

    for plugin_name in plugins:
        try:
            logger.info(f"Loading plugin: {plugin_name}")
            module = importlib.import_module(f"tinymon_operator.{plugin_name}.operator")
            module.register_handlers(injector)
            logger.info(f"Successfully loaded plugin: {plugin_name}")
        except ImportError as e:
            logger.error(f"Failed to import plugin '{plugin_name}': {e}")
        except AttributeError as e:
            logger.error(f"Plugin '{plugin_name}' does not have register_handlers function: {e}")
        except Exception as e:
            logger.error(f"Failed to load plugin '{plugin_name}': {e}")

    injector.get(ResyncLoop).start()


@kopf.on.cleanup()
def cleanup_fn(**kwargs):
    logger.info("Stopping tinymon-operator...")
    injector.get(ResyncLoop).stop()


if __name__ == "__main__":
    logger.error("Do not run this file directly, use `kopf run main.py` instead.")
    exit(1)
