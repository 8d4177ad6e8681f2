from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from tinymon_operator.common.synchronizer import annotations_of


@dataclass(frozen=True)
class PVCState:
    name: str
    namespace: str
    annotations: Dict[str, str] = field(default_factory=dict)
    phase: str = ""
    size: str = ""
    storage_class: str = ""

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> "PVCState":
        metadata = body.get("metadata") or {}
        spec = body.get("spec") or {}
        requests = (spec.get("resources") or {}).get("requests") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            annotations=annotations_of(body),
            phase=(body.get("status") or {}).get("phase") or "",
            size=str(requests.get("storage") or ""),
            storage_class=spec.get("storageClassName") or "",
        )
