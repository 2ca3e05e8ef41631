# utils/formatting.py
from datetime import date, datetime
from typing import Union


def _parse_timestamp(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    # older rows were written with a trailing "Z"
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_order_date(value: str) -> str:
    """
    Format an ISO date for the order list.
    Example: "2026-10-16" -> "October 16, 2026"
    """
    try:
        d = date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return value or ""
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def format_timeline_timestamp(value: Union[str, datetime]) -> str:
    """
    Example: "2026-10-16T23:05:00+00:00" -> "Oct 16, 23:05"
    """
    try:
        ts = _parse_timestamp(value)
    except (TypeError, ValueError):
        return str(value or "")
    return f"{ts.strftime('%b')} {ts.day}, {ts.strftime('%H:%M')}"


def format_challan_timestamp(value: Union[str, datetime]) -> str:
    """
    Example: "2026-10-16T09:05:00+00:00" -> "Oct 16, 2026, 9:05:00 AM"
    """
    try:
        ts = _parse_timestamp(value)
    except (TypeError, ValueError):
        return str(value or "")
    clock = ts.strftime("%I:%M:%S %p").lstrip("0")
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}, {clock}"
