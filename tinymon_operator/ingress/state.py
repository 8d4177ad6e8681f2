from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from tinymon_operator.common.synchronizer import annotations_of


@dataclass(frozen=True)
class IngressState:
    name: str
    namespace: str
    annotations: Dict[str, str] = field(default_factory=dict)
    hosts: List[str] = field(default_factory=list)
    tls_hosts: List[str] = field(default_factory=list)

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> "IngressState":
        metadata = body.get("metadata") or {}
        spec = body.get("spec") or {}
        hosts = [rule["host"] for rule in spec.get("rules") or [] if rule.get("host")]
        tls_hosts = [host for tls in spec.get("tls") or [] for host in tls.get("hosts") or [] if host]
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            annotations=annotations_of(body),
            hosts=hosts,
            tls_hosts=tls_hosts,
        )
