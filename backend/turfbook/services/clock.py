# backend/turfbook/services/clock.py

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from ..config import settings


def local_now() -> datetime:
    """Naive wall-clock time in the venues' timezone."""
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


def utc_now() -> datetime:
    """Naive UTC timestamp, as stored in created_at/updated_at."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
