# backend/turfbook/services/slots/invalidator.py
"""
Cache invalidation for venue base grids.

Triggers:
✓ Venue opening/closing time or slot_interval changed → invalidate all dates
✓ Blocked date created/deleted → invalidate affected dates
✓ Event created/deleted → invalidate affected dates

Does NOT trigger:
✗ Booking created/confirmed/cancelled (overlaid on every read)
✗ Peak hours changed (prices are calculated on-the-fly)
"""

import logging
from datetime import date, timedelta

from redis import Redis
from redis.exceptions import RedisError

from .redis_store import SlotsRedisStore

logger = logging.getLogger(__name__)


def invalidate_venue_cache(
    redis: Redis,
    venue_id: int,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached grids for venue.

    Args:
        redis: Redis client
        venue_id: Venue ID
        dates: List of specific dates to invalidate,
               or None to invalidate all cached dates

    Returns:
        Number of deleted cache keys (0 when Redis is unreachable)
    """
    store = SlotsRedisStore(redis)
    try:
        return store.delete_day_grids(venue_id, dates)
    except RedisError as e:
        logger.warning(f"Slots cache invalidation failed for venue {venue_id}: {e}")
        return 0


def get_affected_dates(
    date_start: date,
    date_end: date | None,
) -> list[date]:
    """
    Get list of dates in range [date_start, date_end].

    Args:
        date_start: Start date (inclusive)
        date_end: End date (inclusive); None → single day

    Returns:
        List of dates
    """
    if date_end is None:
        return [date_start]

    if date_start > date_end:
        date_start, date_end = date_end, date_start

    dates = []
    current = date_start
    while current <= date_end:
        dates.append(current)
        current += timedelta(days=1)

    return dates
