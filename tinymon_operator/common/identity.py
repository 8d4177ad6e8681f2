from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResourceKind(str, Enum):
    NODE = "node"
    DEPLOYMENT = "deployment"
    INGRESS = "ingress"
    PVC = "pvc"
    BACKUP_SCHEDULE = "backup-schedule"

    @property
    def cluster_scoped(self) -> bool:
        return self is ResourceKind.NODE


@dataclass(frozen=True)
class ResourceIdentity:
    cluster: str
    kind: ResourceKind
    name: str
    namespace: Optional[str] = None

    def __post_init__(self):
        # Cluster-scoped kinds never carry a namespace segment
        if self.kind.cluster_scoped and self.namespace:
            object.__setattr__(self, "namespace", None)

    @property
    def address(self) -> str:
        """Stable monitoring address, k8s://<cluster>/<kind>[/<namespace>]/<name>."""
        if self.namespace:
            return f"k8s://{self.cluster}/{self.kind.value}/{self.namespace}/{self.name}"
        return f"k8s://{self.cluster}/{self.kind.value}/{self.name}"

    @property
    def default_topic(self) -> str:
        if self.namespace:
            return f"Kubernetes/{self.cluster}/{self.kind.value}/{self.namespace}"
        return f"Kubernetes/{self.cluster}/{self.kind.value}"

    def __str__(self):
        if self.namespace:
            return f"{self.kind.value} {self.namespace}/{self.name}"
        return f"{self.kind.value} {self.name}"
