from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from tinymon_operator.common.synchronizer import annotations_of


@dataclass(frozen=True)
class DeploymentState:
    name: str
    namespace: str
    annotations: Dict[str, str] = field(default_factory=dict)
    replicas: Optional[int] = None
    ready_replicas: int = 0
    available_replicas: int = 0

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> "DeploymentState":
        metadata = body.get("metadata") or {}
        spec = body.get("spec") or {}
        status = body.get("status") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            annotations=annotations_of(body),
            replicas=spec.get("replicas"),
            ready_replicas=status.get("readyReplicas") or 0,
            available_replicas=status.get("availableReplicas") or 0,
        )
