"""
Utility functions shared by the GreenZest apps
"""
import math
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional


def to_json_safe(value: Any) -> Any:
    """
    Convert UUIDs, decimals and datetimes nested in ``value`` into JSON
    friendly primitives (used for JSONField payloads).
    """
    if isinstance(value, dict):
        return {str(k): to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_safe(v) for v in value]
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Interpret a query-string flag such as ``unread_only=true``."""
    if value is None:
        return default
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def parse_positive_int(value: Optional[str], default: int, maximum: int = None) -> int:
    """Parse a pagination parameter, falling back to ``default`` on junk."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        number = min(number, maximum)
    return number


def page_bounds(page: int, limit: int, total: int) -> Dict[str, int]:
    """
    Offsets and page metadata for a ``page``/``limit`` pair.
    """
    return {
        "offset": (page - 1) * limit,
        "end": page * limit,
        "total_pages": math.ceil(total / limit) if limit else 0,
    }


def truncate_for_display(text: str, max_length: int = 100) -> str:
    """
    Truncate text for display purposes.
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."
