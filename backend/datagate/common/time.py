"""
Time Utilities

Backend policy:
- Store/query in database as UTC (naive) timestamps.
- Response envelopes carry integer unix seconds.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

UTC = timezone.utc


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


def utc_now_naive() -> datetime:
    """Return current UTC time without tzinfo, for database columns."""
    return utc_now().replace(tzinfo=None)


def unix_timestamp() -> int:
    """Return current unix time in whole seconds."""
    return int(time.time())
