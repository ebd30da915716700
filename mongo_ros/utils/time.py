"""Time utilities. All datetimes in UTC."""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def wall_time() -> float:
    """Return wall-clock seconds. Default clock for connection deadlines."""
    return time.time()
