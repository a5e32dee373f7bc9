# backend/turfbook/services/slots/availability.py
"""
Day availability for a venue: slots with status and hourly price.

Base grid (venue hours + admin blocks + events) is cached in Redis when a
client is given; reservations and the caller's "now" are overlaid on every
request, so a new booking never needs a cache flush.
"""

import logging
from datetime import date, datetime, time
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from .config import SlotsConfig, get_slots_config
from .domain import Slot, Venue
from .loader import get_venue, load_blocks, load_peak_rules, load_reservations, venue_from_row
from .pricing import price_for_slot
from .redis_store import SlotsRedisStore
from .resolver import apply_blocks, apply_past, apply_reservations, generate_slots, resolve_granularity

logger = logging.getLogger(__name__)


def get_day_availability(
    db: Session,
    venue_id: int,
    target_date: date,
    reference_now: Optional[datetime],
    granularity_minutes: Optional[int] = None,
    config: SlotsConfig | None = None,
    redis: Redis | None = None,
    with_prices: bool = True,
) -> dict:
    """
    Calculate slots of a venue day.

    Returns:
        Dict for SlotsDayResponse.

    Raises:
        LookupError: venue does not exist.
        ConfigurationError: venue hours/interval/base price are unusable.
    """
    config = config or get_slots_config()

    # Step 1: Venue
    row = get_venue(db, venue_id)
    if row is None:
        raise LookupError(f"Venue {venue_id} not found")
    venue = venue_from_row(row)
    step = resolve_granularity(venue, granularity_minutes, config)

    # Step 2: Base grid (Level 1, cacheable)
    slots = _get_base_grid(db, venue, target_date, step, config, redis)

    # Step 3: Overlay bookings and past
    reservations = load_reservations(db, venue_id, target_date)
    slots = apply_reservations(slots, reservations, step)
    if reference_now is not None:
        slots = apply_past(slots, target_date, reference_now)

    # Step 4: Prices
    if with_prices:
        rules = load_peak_rules(db, venue_id)
        slots = [
            Slot(
                start_minute=s.start_minute,
                end_minute=s.end_minute,
                status=s.status,
                price=price_for_slot(
                    venue,
                    target_date,
                    time(s.start_minute // 60, s.start_minute % 60),
                    rules,
                    config,
                ),
            )
            for s in slots
        ]

    return {
        "venue_id": venue_id,
        "date": target_date,
        "slot_minutes": step,
        "slots": [
            {
                "start": s.start,
                "end": s.end,
                "status": s.status,
                "price_per_hour": s.price,
            }
            for s in slots
        ],
    }


# ── Base grid (Level 1 with cache) ───────────────────────────────────────


def _get_base_grid(
    db: Session,
    venue: Venue,
    target_date: date,
    step: int,
    config: SlotsConfig,
    redis: Redis | None,
) -> list[Slot]:
    """Get the blocked-aware grid, using Redis cache when available."""
    if redis is not None:
        store = SlotsRedisStore(redis, config)
        try:
            cached = store.get_base_grid(venue.id, target_date, step)
        except RedisError as e:
            logger.warning(f"Slots cache read failed for venue {venue.id}: {e}")
            return _calculate_base_grid(db, venue, target_date, step, config)
        if cached is not None:
            return cached

        # Cache miss — calculate and store
        slots = _calculate_base_grid(db, venue, target_date, step, config)
        try:
            store.store_base_grid(venue.id, target_date, step, slots)
        except RedisError as e:
            logger.warning(f"Slots cache write failed for venue {venue.id}: {e}")
        return slots

    # No Redis — calculate on the fly
    return _calculate_base_grid(db, venue, target_date, step, config)


def _calculate_base_grid(
    db: Session,
    venue: Venue,
    target_date: date,
    step: int,
    config: SlotsConfig,
) -> list[Slot]:
    slots = generate_slots(venue, step, config)
    blocks = load_blocks(db, venue.id, target_date)
    return apply_blocks(slots, blocks, target_date)
