# tests/test_node.py

from decimal import Decimal

from conftest import ENABLED, make_body
from tinymon_operator.kube.providers import FilesystemUsage, NodeUsage
from tinymon_operator.node.manager import NodeSynchronizer, disk_result, load_result, memory_result
from tinymon_operator.node.state import NodeState

GIB = 1024 ** 3
ADDRESS = "k8s://prod/node/worker-1"


def node(usage=None, filesystem=None, conditions=None):
    body = make_body("worker-1", annotations=ENABLED, status={
        "allocatable": {"cpu": "4", "memory": "16Gi"},
        "conditions": conditions or [],
    })
    return NodeState.from_body(body, usage=usage, filesystem=filesystem)


USAGE = NodeUsage(cpu_millicores=Decimal(3600), memory_bytes=Decimal(8 * GIB))


def test_from_body_parses_allocatable():
    state = node()
    assert state.allocatable_cpu_millicores == 4000
    assert state.allocatable_memory_bytes == 16 * GIB
    assert state.namespace is None


def test_memory_from_metrics():
    result = memory_result(ADDRESS, node(usage=USAGE))
    assert result.status == "ok"
    assert result.value == 50.0
    assert result.message == "50.0% used (8.0Gi / 16.0Gi)"


def test_load_from_metrics():
    result = load_result(ADDRESS, node(usage=USAGE))
    assert result.status == "critical"
    assert result.value == 90.0
    assert result.message == "90.0% CPU (3600m / 4000m)"


def test_metrics_unavailable_is_unknown():
    state = node()
    for result in (memory_result(ADDRESS, state), load_result(ADDRESS, state)):
        assert result.status == "unknown"
        assert result.value is None
        assert result.message == "Metrics API not available"


def test_disk_from_filesystem_stats():
    result = disk_result(ADDRESS, node(filesystem=FilesystemUsage(used_bytes=85 * GIB, capacity_bytes=100 * GIB)))
    assert result.status == "warning"
    assert result.value == 85.0
    assert result.message == "85.0% used (85.0Gi / 100.0Gi)"


def test_disk_falls_back_to_pressure_condition():
    pressure = node(conditions=[{"type": "DiskPressure", "status": "True"}])
    relaxed = node(conditions=[{"type": "DiskPressure", "status": "False"}])
    absent = node(conditions=[{"type": "Ready", "status": "True"}])

    assert disk_result(ADDRESS, pressure).status == "critical"
    assert disk_result(ADDRESS, relaxed).status == "ok"
    assert disk_result(ADDRESS, absent).status == "unknown"
    assert disk_result(ADDRESS, absent).value is None


def test_memory_unavailable_disk_independent(client, settings):
    synchronizer = NodeSynchronizer(client, settings)
    state = node(filesystem=FilesystemUsage(used_bytes=10 * GIB, capacity_bytes=100 * GIB))

    outcome = synchronizer.sync(synchronizer.identity("worker-1"), state)

    assert [c.type for c in outcome.checks] == ["load", "memory", "disk"]
    results = {r.check_type: r for r in client.push_bulk.call_args.args[0]}
    assert results["memory"].status == "unknown"
    assert results["memory"].value is None
    assert results["disk"].status == "ok"
    assert results["disk"].value == 10.0
    assert client.upsert_host.call_args.args[0].description == "Kubernetes Node worker-1"
