from injector import Injector
from loguru import logger
import kopf

from tinymon_operator.backup_schedule.manager import BackupScheduleSynchronizer
from tinymon_operator.backup_schedule.state import BackupScheduleState
from tinymon_operator.common.annotations import is_enabled
from tinymon_operator.common.resync import ResyncLoop, enabled_objects
from tinymon_operator.common.synchronizer import annotations_of, run_sync
from tinymon_operator.kube.providers import BackupProvider

injector: Injector = None


def register_handlers(inj: Injector):
    global injector
    injector = inj
    logger.info("Registering k8up Schedule handlers...")
    inj.get(BackupScheduleSynchronizer)
    inj.get(ResyncLoop).register("schedules", resync_schedules)


def current_state(body, namespace: str) -> BackupScheduleState:
    if not is_enabled(annotations_of(body)):
        return BackupScheduleState.from_body(body, backups=[])
    backups = injector.get(BackupProvider).list_backups(namespace)
    return BackupScheduleState.from_body(body, backups=backups)


@kopf.on.event("k8up.io", "v1", "schedules")
def schedule_event(type, body, name, namespace, **kwargs):
    synchronizer = injector.get(BackupScheduleSynchronizer)
    identity = synchronizer.identity(name, namespace)
    state = None if type == "DELETED" else current_state(body, namespace)
    run_sync(synchronizer, identity, state)


def resync_schedules():
    synchronizer = injector.get(BackupScheduleSynchronizer)
    for body in enabled_objects("schedules.k8up.io"):
        metadata = body["metadata"]
        identity = synchronizer.identity(metadata["name"], metadata["namespace"])
        run_sync(synchronizer, identity, current_state(body, metadata["namespace"]))
