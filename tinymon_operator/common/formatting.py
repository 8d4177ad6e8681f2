from datetime import timedelta
from decimal import Decimal
from typing import Optional, Union

from kubernetes.utils import parse_quantity

GIB = 1024 ** 3
MIB = 1024 ** 2


def threshold_status(pct: float) -> str:
    if pct >= 90:
        return "critical"
    if pct >= 80:
        return "warning"
    return "ok"


def format_duration(age: Union[timedelta, float]) -> str:
    """Render an age as 45s, 12m, 5h or 3d, truncating to the largest unit."""
    seconds = age.total_seconds() if isinstance(age, timedelta) else float(age)
    seconds = max(seconds, 0)
    if seconds < 60:
        return f"{int(seconds)}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h"
    return f"{int(seconds // 86400)}d"


def format_bytes(value: Union[int, float, Decimal]) -> str:
    value = float(value)
    if value >= GIB:
        return f"{value / GIB:.1f}Gi"
    return f"{value / MIB:.0f}Mi"


def quantity(value) -> Optional[Decimal]:
    """Parse a Kubernetes quantity ("2Gi", "1500m"), None if missing or malformed."""
    if value is None or value == "":
        return None
    try:
        return parse_quantity(value)
    except (ValueError, TypeError):
        return None
