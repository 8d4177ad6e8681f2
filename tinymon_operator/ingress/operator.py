from injector import Injector
from loguru import logger
import kopf

from tinymon_operator.common.resync import ResyncLoop, enabled_objects
from tinymon_operator.common.synchronizer import run_sync
from tinymon_operator.ingress.manager import IngressSynchronizer
from tinymon_operator.ingress.state import IngressState

injector: Injector = None


def register_handlers(inj: Injector):
    global injector
    injector = inj
    logger.info("Registering Ingress handlers...")
    inj.get(IngressSynchronizer)
    inj.get(ResyncLoop).register("ingresses", resync_ingresses)


@kopf.on.event("networking.k8s.io", "v1", "ingresses")
def ingress_event(type, body, name, namespace, **kwargs):
    synchronizer = injector.get(IngressSynchronizer)
    identity = synchronizer.identity(name, namespace)
    state = None if type == "DELETED" else IngressState.from_body(body)
    run_sync(synchronizer, identity, state)


# Pull checks only; resync re-asserts the definitions in case TinyMon lost them
def resync_ingresses():
    synchronizer = injector.get(IngressSynchronizer)
    for body in enabled_objects("ingresses.networking.k8s.io"):
        metadata = body["metadata"]
        identity = synchronizer.identity(metadata["name"], metadata.get("namespace"))
        run_sync(synchronizer, identity, IngressState.from_body(body))
