from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from tinymon_operator.common.identity import ResourceIdentity

ANNOTATION_ENABLED = "tinymon.io/enabled"
ANNOTATION_NAME = "tinymon.io/name"
ANNOTATION_TOPIC = "tinymon.io/topic"
ANNOTATION_INTERVAL = "tinymon.io/interval"
ANNOTATION_EXPECTED_STATUS = "tinymon.io/expected-status"
ANNOTATION_HTTP_PATH = "tinymon.io/http-path"
ANNOTATION_ICECAST_MOUNTS = "tinymon.io/icecast-mounts"

MIN_INTERVAL_SECONDS = 30


@dataclass(frozen=True)
class ResourceConfig:
    """Per-resource settings resolved from tinymon.io/* annotations."""
    enabled: bool
    display_name: str
    topic: str
    check_interval_seconds: int
    interval_override: Optional[int] = None
    expected_http_status: Optional[int] = None
    http_path: str = ""
    icecast_mounts: List[str] = field(default_factory=list)

    def interval_or(self, default: int) -> int:
        """Annotation override if one was given, otherwise the check type's own default."""
        return self.interval_override if self.interval_override is not None else default


def is_enabled(annotations: Optional[Mapping[str, str]]) -> bool:
    if not annotations:
        return False
    return annotations.get(ANNOTATION_ENABLED) == "true"


def _parse_int(value) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_interval(annotations: Optional[Mapping[str, str]]) -> Optional[int]:
    interval = _parse_int((annotations or {}).get(ANNOTATION_INTERVAL))
    if interval is None or interval < MIN_INTERVAL_SECONDS:
        return None
    return interval


def check_interval(annotations: Optional[Mapping[str, str]], default: int) -> int:
    """Interval annotation if it is an integer >= 30, otherwise the given default."""
    interval = parse_interval(annotations)
    return interval if interval is not None else default


def expected_http_status(annotations: Optional[Mapping[str, str]]) -> Optional[int]:
    status = _parse_int((annotations or {}).get(ANNOTATION_EXPECTED_STATUS))
    if status is None or not 100 <= status < 600:
        return None
    return status


def http_path(annotations: Optional[Mapping[str, str]]) -> str:
    """Canonical path suffix: no trailing slash, exactly one leading slash, or empty."""
    path = ((annotations or {}).get(ANNOTATION_HTTP_PATH) or "").strip().rstrip("/")
    if not path:
        return ""
    if not path.startswith("/"):
        path = "/" + path
    return path


def icecast_mounts(annotations: Optional[Mapping[str, str]]) -> List[str]:
    raw = (annotations or {}).get(ANNOTATION_ICECAST_MOUNTS) or ""
    return [mount.strip() for mount in raw.split(",") if mount.strip()]


def resolve(
    identity: ResourceIdentity,
    annotations: Optional[Mapping[str, str]],
    default_interval: int,
) -> Tuple[str, ResourceConfig]:
    """Derive the monitoring address and resource config.

    Never raises: malformed annotation values fall back to their defaults.

    Args:
        identity: Identity of the cluster resource
        annotations: Raw metadata annotations, may be None
        default_interval: Kind-specific check interval

    Returns:
        tuple: (address, ResourceConfig)
    """
    annotations = annotations or {}
    override = parse_interval(annotations)

    config = ResourceConfig(
        enabled=is_enabled(annotations),
        display_name=annotations.get(ANNOTATION_NAME) or identity.name,
        topic=annotations.get(ANNOTATION_TOPIC) or identity.default_topic,
        check_interval_seconds=override if override is not None else default_interval,
        interval_override=override,
        expected_http_status=expected_http_status(annotations),
        http_path=http_path(annotations),
        icecast_mounts=icecast_mounts(annotations),
    )
    return identity.address, config
