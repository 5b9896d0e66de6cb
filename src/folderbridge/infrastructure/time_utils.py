"""Time utility helpers.

Use timezone-aware UTC consistently across the project. Persisted and
wire-facing timestamps are integer milliseconds since the Unix epoch.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return current timezone-aware UTC datetime as ISO string."""
    return utc_now().isoformat()


def epoch_ms() -> int:
    """Return current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000

