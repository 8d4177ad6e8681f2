from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from tinymon_operator.common.formatting import quantity
from tinymon_operator.common.synchronizer import annotations_of
from tinymon_operator.kube.providers import FilesystemUsage, NodeUsage


def _disk_pressure(conditions) -> Optional[bool]:
    for condition in conditions or []:
        if condition.get("type") == "DiskPressure":
            status = condition.get("status")
            if status == "True":
                return True
            if status == "False":
                return False
    return None


@dataclass(frozen=True)
class NodeState:
    name: str
    annotations: Dict[str, str] = field(default_factory=dict)
    allocatable_cpu_millicores: Optional[Decimal] = None
    allocatable_memory_bytes: Optional[Decimal] = None
    disk_pressure: Optional[bool] = None
    usage: Optional[NodeUsage] = None
    filesystem: Optional[FilesystemUsage] = None

    @property
    def namespace(self) -> None:
        return None

    @classmethod
    def from_body(
        cls,
        body: Mapping[str, Any],
        usage: Optional[NodeUsage] = None,
        filesystem: Optional[FilesystemUsage] = None,
    ) -> "NodeState":
        status = body.get("status") or {}
        allocatable = status.get("allocatable") or {}
        cpu = quantity(allocatable.get("cpu"))
        return cls(
            name=(body.get("metadata") or {}).get("name", ""),
            annotations=annotations_of(body),
            allocatable_cpu_millicores=cpu * 1000 if cpu is not None else None,
            allocatable_memory_bytes=quantity(allocatable.get("memory")),
            disk_pressure=_disk_pressure(status.get("conditions")),
            usage=usage,
            filesystem=filesystem,
        )
