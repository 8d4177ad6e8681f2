# tests/test_backup_schedule.py

from datetime import datetime, timedelta, timezone

import pytest

from conftest import ENABLED, make_body
from tinymon_operator.backup_schedule.manager import BackupScheduleSynchronizer, backup_status, latest_backup
from tinymon_operator.backup_schedule.state import BackupCondition, BackupRecord, BackupScheduleState

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def backup(age, *conditions, name="backup"):
    return BackupRecord(
        name=name,
        created=NOW - age,
        conditions=[BackupCondition(type=t, status=s, message=m) for t, s, m in conditions],
    )


COMPLETED = ("Completed", "True", "")


def test_no_backups():
    assert backup_status([], NOW) == ("warning", "No backups found", 0)


def test_recent_completed_backup():
    status, message, age = backup_status([backup(timedelta(hours=3), COMPLETED)], NOW)
    assert status == "ok"
    assert message == "Last backup completed 3h ago"
    assert age == 3 * 3600


def test_stale_completed_backup():
    status, message, _ = backup_status([backup(timedelta(days=3), COMPLETED)], NOW)
    assert status == "warning"
    assert message == "Last backup completed 3d ago (stale)"


def test_completed_at_exactly_48h_is_ok():
    status, _, _ = backup_status([backup(timedelta(hours=48), COMPLETED)], NOW)
    assert status == "ok"


def test_failed_backup():
    failed = backup(timedelta(minutes=20), ("Failed", "True", "repository locked"))
    status, message, _ = backup_status([failed], NOW)
    assert status == "critical"
    assert message == "Last backup failed 20m ago: repository locked"


@pytest.mark.parametrize("age, expected", [
    (timedelta(minutes=30), ("ok", "Backup in progress (30m ago)")),
    (timedelta(hours=5), ("ok", "Last backup: 5h ago")),
    (timedelta(days=4), ("warning", "No recent backup (last: 4d ago)")),
])
def test_backup_without_terminal_condition(age, expected):
    status, message, _ = backup_status([backup(age, ("Scrubbed", "True", ""))], NOW)
    assert (status, message) == expected


def test_only_latest_backup_counts():
    old_failure = backup(timedelta(days=1), ("Failed", "True", "boom"), name="old")
    fresh = backup(timedelta(hours=1), COMPLETED, name="fresh")

    assert latest_backup([old_failure, fresh]).name == "fresh"
    assert backup_status([old_failure, fresh], NOW)[0] == "ok"


def test_equal_timestamps_keep_listing_order():
    first = backup(timedelta(hours=1), name="first")
    second = backup(timedelta(hours=1), name="second")
    assert latest_backup([first, second]).name == "first"
    assert latest_backup([second, first]).name == "second"


def test_state_from_body():
    raw = {
        "metadata": {"name": "b-1", "creationTimestamp": "2026-10-19T10:00:00Z"},
        "status": {"conditions": [{"type": "Completed", "status": "True", "message": "done"}]},
    }
    state = BackupScheduleState.from_body(make_body("daily", "db", annotations=ENABLED), backups=[raw])

    assert state.backups[0].created == datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)
    assert state.backups[0].conditions == [BackupCondition(type="Completed", status="True", message="done")]
    assert BackupScheduleState.from_body(make_body("daily", "db"), backups=None).backups is None


@pytest.fixture
def synchronizer(client, settings):
    synchronizer = BackupScheduleSynchronizer(client, settings)
    synchronizer.clock = lambda: NOW
    return synchronizer


def test_sync_pushes_age(synchronizer, client):
    state = BackupScheduleState(name="daily", namespace="db", annotations=ENABLED,
                                backups=[backup(timedelta(hours=2), COMPLETED)])

    synchronizer.sync(synchronizer.identity("daily", "db"), state)

    host = client.upsert_host.call_args.args[0]
    assert host.address == "k8s://prod/backup-schedule/db/daily"
    assert host.description == "K8up Schedule db/daily"
    result = client.push_result.call_args.args[0]
    assert result.status == "ok"
    assert result.value == 7200


def test_sync_with_no_backups(synchronizer, client):
    state = BackupScheduleState(name="daily", namespace="db", annotations=ENABLED, backups=[])

    synchronizer.sync(synchronizer.identity("daily", "db"), state)

    result = client.push_result.call_args.args[0]
    assert (result.status, result.message, result.value) == ("warning", "No backups found", 0)


def test_sync_when_listing_failed(synchronizer, client):
    state = BackupScheduleState(name="daily", namespace="db", annotations=ENABLED, backups=None)

    synchronizer.sync(synchronizer.identity("daily", "db"), state)

    result = client.push_result.call_args.args[0]
    assert result.status == "unknown"
    assert result.message == "Failed to list backup objects"
