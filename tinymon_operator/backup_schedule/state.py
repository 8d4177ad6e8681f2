from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from tinymon_operator.common.synchronizer import annotations_of

EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class BackupCondition:
    type: str
    status: str
    message: str = ""


@dataclass(frozen=True)
class BackupRecord:
    name: str
    created: datetime
    conditions: List[BackupCondition] = field(default_factory=list)

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> "BackupRecord":
        metadata = body.get("metadata") or {}
        conditions = [
            BackupCondition(
                type=condition.get("type", ""),
                status=condition.get("status", ""),
                message=condition.get("message") or "",
            )
            for condition in (body.get("status") or {}).get("conditions") or []
        ]
        return cls(
            name=metadata.get("name", ""),
            created=parse_timestamp(metadata.get("creationTimestamp")) or EPOCH,
            conditions=conditions,
        )


@dataclass(frozen=True)
class BackupScheduleState:
    """A k8up Schedule together with the Backup objects of its namespace.

    backups is None when the Backup objects could not be listed.
    """
    name: str
    namespace: str
    annotations: Dict[str, str] = field(default_factory=dict)
    backups: Optional[List[BackupRecord]] = None

    @classmethod
    def from_body(cls, body: Mapping[str, Any], backups: Optional[List[Mapping[str, Any]]]) -> "BackupScheduleState":
        metadata = body.get("metadata") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            annotations=annotations_of(body),
            backups=None if backups is None else [BackupRecord.from_body(b) for b in backups],
        )
