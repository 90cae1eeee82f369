# utils/time_utils.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current instant, zone-aware UTC."""
    return datetime.now(timezone.utc)


def to_local_time(value: Optional[datetime]) -> Optional[datetime]:
    """
    Wire (zone-aware) -> local (UTC-naive).

    - None -> None
    - aware values are converted to UTC, then tzinfo is stripped
    - naive values are already local by convention and pass through
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_wire_time(value: Optional[datetime]) -> Optional[datetime]:
    """
    Local (UTC-naive) -> wire (zone-aware UTC).

    Naive values are interpreted as UTC. Aware values are normalized to UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into a zone-aware UTC datetime.

    - None / "" -> None
    - trailing "Z" is accepted
    - text without an offset is interpreted as UTC
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    return to_wire_time(datetime.fromisoformat(s))


def format_iso_datetime(value: Optional[datetime]) -> Optional[str]:
    """Serialize to ISO-8601 with an explicit offset. Naive values are treated as UTC."""
    if value is None:
        return None
    return to_wire_time(value).isoformat()
