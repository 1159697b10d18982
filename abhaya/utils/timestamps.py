"""
Timestamp helpers for records read back from Firestore.

Stored times come in several shapes: datetime objects (Firestore returns
DatetimeWithNanoseconds), ISO strings (datetime-local form input, mock DB
JSON), protobuf-style timestamps, or the {"seconds": n} dict the web SDK
serializes. Everything is normalized to timezone-aware UTC.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

TIME_NOT_AVAILABLE = "Time Not Available"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse various timestamp formats to timezone-aware datetime (UTC).
    Returns None for anything unrecognized.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if isinstance(seconds, (int, float)):
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        return None
    if isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    # Firestore / protobuf Timestamp interfaces
    if hasattr(value, "ToDatetime"):
        return parse_timestamp(value.ToDatetime())
    if hasattr(value, "to_datetime"):
        return parse_timestamp(value.to_datetime())
    return None


def display_time(record: Dict[str, Any]) -> str:
    """
    Time shown for an incident or alert on the dashboard.

    The user-entered incidentTime wins; otherwise the submission timestamp;
    otherwise TIME_NOT_AVAILABLE.
    """
    for key in ("incidentTime", "timestamp"):
        parsed = parse_timestamp(record.get(key))
        if parsed is not None:
            return parsed.isoformat()
    return TIME_NOT_AVAILABLE
