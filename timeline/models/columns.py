"""
Shared column helpers.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite DateTime columns store no tz)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
