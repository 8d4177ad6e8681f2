from injector import Injector
from loguru import logger
import kopf

from tinymon_operator.common.resync import ResyncLoop, enabled_objects
from tinymon_operator.common.synchronizer import run_sync
from tinymon_operator.pvc.manager import PVCSynchronizer
from tinymon_operator.pvc.state import PVCState

injector: Injector = None


def register_handlers(inj: Injector):
    global injector
    injector = inj
    logger.info("Registering PersistentVolumeClaim handlers...")
    inj.get(PVCSynchronizer)
    inj.get(ResyncLoop).register("persistentvolumeclaims", resync_pvcs)


@kopf.on.event("persistentvolumeclaims")
def pvc_event(type, body, name, namespace, **kwargs):
    synchronizer = injector.get(PVCSynchronizer)
    identity = synchronizer.identity(name, namespace)
    state = None if type == "DELETED" else PVCState.from_body(body)
    run_sync(synchronizer, identity, state)


def resync_pvcs():
    synchronizer = injector.get(PVCSynchronizer)
    for body in enabled_objects("persistentvolumeclaims"):
        metadata = body["metadata"]
        identity = synchronizer.identity(metadata["name"], metadata.get("namespace"))
        run_sync(synchronizer, identity, PVCState.from_body(body))
