"""
General helper utilities
"""
from datetime import datetime, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value: Optional[datetime] = None) -> str:
    """ISO-8601 string with a trailing Z for payloads sent to clients"""
    value = value or utcnow()
    return value.isoformat() + "Z"


def safe_json_parse(text: str, default: Any = None) -> Any:
    """Safely parse JSON string"""
    import json
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return default
