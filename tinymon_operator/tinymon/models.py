from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class Status:
    """Result status constants"""
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Host:
    name: str
    address: str
    description: str = ""
    topic: str = ""
    enabled: bool = True

    def to_payload(self) -> Dict[str, Any]:
        payload = {"name": self.name, "address": self.address}
        if self.description:
            payload["description"] = self.description
        if self.topic:
            payload["topic"] = self.topic
        payload["enabled"] = 1 if self.enabled else 0
        return payload


@dataclass(frozen=True)
class Check:
    host_address: str
    type: str
    config: Dict[str, Any] = field(default_factory=dict)
    interval_seconds: int = 0
    enabled: bool = True

    def to_payload(self) -> Dict[str, Any]:
        payload = {"host_address": self.host_address, "type": self.type}
        if self.config:
            payload["config"] = dict(self.config)
        if self.interval_seconds:
            payload["interval_seconds"] = self.interval_seconds
        payload["enabled"] = 1 if self.enabled else 0
        return payload


@dataclass(frozen=True)
class Result:
    host_address: str
    check_type: str
    status: str
    message: str = ""
    value: Optional[float] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "host_address": self.host_address,
            "check_type": self.check_type,
            "status": self.status,
        }
        if self.value is not None:
            payload["value"] = self.value
        if self.message:
            payload["message"] = self.message
        return payload
