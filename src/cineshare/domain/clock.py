"""
UTC clock for stored timestamps.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (columns are timezone-less)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
