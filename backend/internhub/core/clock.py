"""Time helpers bound to the configured timezone."""

from __future__ import annotations

from datetime import datetime

import pytz

from .config import settings

UTC = pytz.UTC


def utcnow() -> datetime:
    return datetime.now(UTC)


def local_now(tz_name: str | None = None) -> datetime:
    return utcnow().astimezone(pytz.timezone(tz_name or settings.TZ))


def today(tz_name: str | None = None) -> str:
    """Return the local calendar date as ``YYYY-MM-DD``."""
    return local_now(tz_name).date().isoformat()


def clock_label(tz_name: str | None = None) -> str:
    """Return the local wall-clock time as ``HH:MM``."""
    return local_now(tz_name).strftime("%H:%M")
