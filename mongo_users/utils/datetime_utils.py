"""
Centralized DateTime Utilities
==============================

Provides consistent datetime handling for user timestamps.

Functions:
- utc_now(): timezone-aware current UTC time
- bson_now(): utc_now() truncated to BSON Date precision (milliseconds)
- truncate_to_millis(): drop sub-millisecond precision
- ensure_utc(): normalize naive/aware datetimes read back from MongoDB

All timestamps persisted to MongoDB are produced by bson_now(), so the value a
service returns right after a write equals the value a later read returns.
"""
from datetime import datetime, timezone as dt_timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC time as a timezone-aware datetime.
    """
    return datetime.now(dt_timezone.utc)


def truncate_to_millis(dt: datetime) -> datetime:
    """Drop microseconds below millisecond precision (BSON Date resolution)."""
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def bson_now() -> datetime:
    """
    Current UTC time at millisecond precision.

    Use this for all timestamps that will be persisted to MongoDB (BSON Date).
    """
    return truncate_to_millis(utc_now())


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime into a timezone-aware UTC datetime.

    - If dt is None -> None
    - If dt is naive -> assume it represents UTC (this matches MongoDB/PyMongo behavior)
    - If dt is aware -> convert to UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)
