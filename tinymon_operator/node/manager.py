from typing import List

from injector import inject, singleton

from tinymon_operator.common.annotations import ResourceConfig
from tinymon_operator.common.formatting import format_bytes, threshold_status
from tinymon_operator.common.identity import ResourceIdentity, ResourceKind
from tinymon_operator.common.synchronizer import Synchronizer
from tinymon_operator.node.state import NodeState
from tinymon_operator.settings import Settings
from tinymon_operator.tinymon.client import TinyMonClient
from tinymon_operator.tinymon.models import Check, Result, Status

LOAD = "load"
MEMORY = "memory"
DISK = "disk"
CHECK_TYPES = (LOAD, MEMORY, DISK)

METRICS_UNAVAILABLE = "Metrics API not available"


def _percent(used, total) -> float:
    return round(float(used) / float(total) * 100, 2)


def memory_result(address: str, state: NodeState) -> Result:
    if state.usage is None:
        return Result(host_address=address, check_type=MEMORY, status=Status.UNKNOWN, message=METRICS_UNAVAILABLE)
    if not state.allocatable_memory_bytes:
        return Result(host_address=address, check_type=MEMORY, status=Status.UNKNOWN,
                      message="Node reports no allocatable memory")

    used, total = state.usage.memory_bytes, state.allocatable_memory_bytes
    pct = _percent(used, total)
    return Result(
        host_address=address,
        check_type=MEMORY,
        status=threshold_status(pct),
        value=pct,
        message=f"{pct:.1f}% used ({format_bytes(used)} / {format_bytes(total)})",
    )


def load_result(address: str, state: NodeState) -> Result:
    if state.usage is None:
        return Result(host_address=address, check_type=LOAD, status=Status.UNKNOWN, message=METRICS_UNAVAILABLE)
    if not state.allocatable_cpu_millicores:
        return Result(host_address=address, check_type=LOAD, status=Status.UNKNOWN,
                      message="Node reports no allocatable CPU")

    used, total = state.usage.cpu_millicores, state.allocatable_cpu_millicores
    pct = _percent(used, total)
    return Result(
        host_address=address,
        check_type=LOAD,
        status=threshold_status(pct),
        value=pct,
        message=f"{pct:.1f}% CPU ({int(used)}m / {int(total)}m)",
    )


def disk_result(address: str, state: NodeState) -> Result:
    """Disk verdict from kubelet filesystem stats, falling back to the DiskPressure condition."""
    fs = state.filesystem
    if fs is not None and fs.capacity_bytes > 0:
        pct = _percent(fs.used_bytes, fs.capacity_bytes)
        return Result(
            host_address=address,
            check_type=DISK,
            status=threshold_status(pct),
            value=pct,
            message=f"{pct:.1f}% used ({format_bytes(fs.used_bytes)} / {format_bytes(fs.capacity_bytes)})",
        )

    if state.disk_pressure is True:
        return Result(host_address=address, check_type=DISK, status=Status.CRITICAL,
                      message="DiskPressure condition is True (kubelet stats unavailable)")
    if state.disk_pressure is False:
        return Result(host_address=address, check_type=DISK, status=Status.OK,
                      message="No disk pressure (kubelet stats unavailable)")
    return Result(host_address=address, check_type=DISK, status=Status.UNKNOWN,
                  message="Kubelet stats unavailable and no DiskPressure condition reported")


@singleton
class NodeSynchronizer(Synchronizer[NodeState]):
    kind = ResourceKind.NODE
    default_interval = 60

    @inject
    def __init__(self, client: TinyMonClient, settings: Settings):
        super().__init__(client, settings.cluster)

    def describe(self, identity: ResourceIdentity, state: NodeState) -> str:
        return f"Kubernetes Node {state.name}"

    def build_checks(self, address: str, state: NodeState, config: ResourceConfig) -> List[Check]:
        return [
            Check(host_address=address, type=check_type, interval_seconds=config.check_interval_seconds)
            for check_type in CHECK_TYPES
        ]

    def derive_results(self, address: str, state: NodeState, config: ResourceConfig) -> List[Result]:
        return [load_result(address, state), memory_result(address, state), disk_result(address, state)]
