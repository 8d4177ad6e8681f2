from injector import Injector
from loguru import logger
import kopf

from tinymon_operator.common.resync import ResyncLoop, enabled_objects
from tinymon_operator.common.synchronizer import run_sync
from tinymon_operator.deployment.manager import DeploymentSynchronizer
from tinymon_operator.deployment.state import DeploymentState

injector: Injector = None


def register_handlers(inj: Injector):
    global injector
    injector = inj
    logger.info("Registering Deployment handlers...")
    inj.get(DeploymentSynchronizer)
    inj.get(ResyncLoop).register("deployments", resync_deployments)


@kopf.on.event("apps", "v1", "deployments")
def deployment_event(type, body, name, namespace, **kwargs):
    synchronizer = injector.get(DeploymentSynchronizer)
    identity = synchronizer.identity(name, namespace)
    state = None if type == "DELETED" else DeploymentState.from_body(body)
    run_sync(synchronizer, identity, state)


def resync_deployments():
    synchronizer = injector.get(DeploymentSynchronizer)
    for body in enabled_objects("deployments.apps"):
        metadata = body["metadata"]
        identity = synchronizer.identity(metadata["name"], metadata.get("namespace"))
        run_sync(synchronizer, identity, DeploymentState.from_body(body))
