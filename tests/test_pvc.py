# tests/test_pvc.py

import pytest

from conftest import ENABLED, make_body
from tinymon_operator.pvc.manager import PVCSynchronizer, pvc_status, size_gib
from tinymon_operator.pvc.state import PVCState


def pvc_body(phase, size="10Gi", storage_class="standard"):
    spec = {"resources": {"requests": {"storage": size}}} if size else {}
    if storage_class:
        spec["storageClassName"] = storage_class
    return make_body("data", "db", annotations=ENABLED, spec=spec, status={"phase": phase})


def test_pending_claim():
    status, message = pvc_status(PVCState.from_body(pvc_body("Pending")))
    assert status == "warning"
    assert "Pending" in message
    assert "10Gi" in message
    assert "standard" in message


@pytest.mark.parametrize("phase, expected", [("Bound", "ok"), ("Pending", "warning"), ("Lost", "critical")])
def test_phase_mapping(phase, expected):
    status, message = pvc_status(PVCState.from_body(pvc_body(phase)))
    assert status == expected
    assert message == f"{phase}, 10Gi (standard)"


def test_unknown_phase():
    assert pvc_status(PVCState.from_body(pvc_body("Resizing"))) == ("unknown", "Phase: Resizing, 10Gi (standard)")
    assert pvc_status(PVCState.from_body(pvc_body(""))) == ("unknown", "Phase: Unknown, 10Gi (standard)")


def test_message_without_storage_class():
    assert pvc_status(PVCState.from_body(pvc_body("Bound", storage_class=None))) == ("ok", "Bound, 10Gi")


def test_size_in_gib():
    assert size_gib(PVCState.from_body(pvc_body("Bound", size="512Mi"))) == 0.5
    assert size_gib(PVCState.from_body(pvc_body("Bound", size=None))) is None


def test_sync_pushes_size_as_value(client, settings):
    synchronizer = PVCSynchronizer(client, settings)

    synchronizer.sync(synchronizer.identity("data", "db"), PVCState.from_body(pvc_body("Bound")))

    host = client.upsert_host.call_args.args[0]
    assert host.address == "k8s://prod/pvc/db/data"
    assert host.description == "PVC db/data (10Gi, standard)"
    assert client.upsert_check.call_args.args[0].type == "status"
    result = client.push_result.call_args.args[0]
    assert result.status == "ok"
    assert result.value == 10.0
