from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from injector import inject, singleton

from tinymon_operator.backup_schedule.state import BackupRecord, BackupScheduleState
from tinymon_operator.common.annotations import ResourceConfig
from tinymon_operator.common.formatting import format_duration
from tinymon_operator.common.identity import ResourceIdentity, ResourceKind
from tinymon_operator.common.synchronizer import Synchronizer
from tinymon_operator.settings import Settings
from tinymon_operator.tinymon.client import TinyMonClient
from tinymon_operator.tinymon.models import Check, Result, Status

CHECK_TYPE = "status"

STALE_AFTER = timedelta(hours=48)
IN_PROGRESS_WITHIN = timedelta(hours=2)


def latest_backup(backups: Sequence[BackupRecord]) -> Optional[BackupRecord]:
    if not backups:
        return None
    # Stable sort, so backups with equal timestamps keep their listing order
    return sorted(backups, key=lambda backup: backup.created, reverse=True)[0]


def backup_status(backups: Sequence[BackupRecord], now: datetime) -> Tuple[str, str, float]:
    """Verdict for a schedule from its most recent backup.

    Args:
        backups: Backup objects of the schedule's namespace
        now: Reference time for the age computation

    Returns:
        tuple: (status, message, age of the latest backup in seconds)
    """
    latest = latest_backup(backups)
    if latest is None:
        return Status.WARNING, "No backups found", 0

    age = now - latest.created
    age_seconds = age.total_seconds()
    age_str = format_duration(age)

    for condition in latest.conditions:
        if condition.type == "Completed" and condition.status == "True":
            if age > STALE_AFTER:
                return Status.WARNING, f"Last backup completed {age_str} ago (stale)", age_seconds
            return Status.OK, f"Last backup completed {age_str} ago", age_seconds
        if condition.type == "Failed" and condition.status == "True":
            return Status.CRITICAL, f"Last backup failed {age_str} ago: {condition.message}", age_seconds

    # No terminal condition yet, the backup may still be running
    if age < IN_PROGRESS_WITHIN:
        return Status.OK, f"Backup in progress ({age_str} ago)", age_seconds
    if age > STALE_AFTER:
        return Status.WARNING, f"No recent backup (last: {age_str} ago)", age_seconds
    return Status.OK, f"Last backup: {age_str} ago", age_seconds


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@singleton
class BackupScheduleSynchronizer(Synchronizer[BackupScheduleState]):
    kind = ResourceKind.BACKUP_SCHEDULE
    default_interval = 60

    @inject
    def __init__(self, client: TinyMonClient, settings: Settings):
        super().__init__(client, settings.cluster)
        self.clock: Callable[[], datetime] = utcnow

    def describe(self, identity: ResourceIdentity, state: BackupScheduleState) -> str:
        return f"K8up Schedule {state.namespace}/{state.name}"

    def build_checks(self, address: str, state: BackupScheduleState, config: ResourceConfig) -> List[Check]:
        return [Check(host_address=address, type=CHECK_TYPE, interval_seconds=config.check_interval_seconds)]

    def derive_results(self, address: str, state: BackupScheduleState, config: ResourceConfig) -> List[Result]:
        if state.backups is None:
            return [Result(host_address=address, check_type=CHECK_TYPE, status=Status.UNKNOWN,
                           message="Failed to list backup objects")]

        status, message, age_seconds = backup_status(state.backups, self.clock())
        return [Result(host_address=address, check_type=CHECK_TYPE, status=status, message=message,
                       value=age_seconds)]
