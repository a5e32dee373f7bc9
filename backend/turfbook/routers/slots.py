# backend/turfbook/routers/slots.py
"""
Slots API endpoints.

GET  /slots/day        - Slots of a venue day with status and hourly price
GET  /slots/price      - Hourly rate (and scaled amount) of one slot start
POST /slots/invalidate - Drop cached grids for a venue (admin endpoint)
"""

from datetime import date, datetime, time, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.slots import (
    SlotPriceResponse,
    SlotsDayResponse,
    SlotsInvalidateResponse,
)
from ..services.bookings import expire_stale_holds
from ..services.clock import local_now
from ..services.slots import (
    get_day_availability,
    get_slots_config,
    invalidate_venue_cache,
    price_for_slot,
    scale_to_duration,
)
from ..services.slots.loader import get_venue, load_peak_rules, venue_from_row
from ..services.slots.resolver import resolve_granularity


router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    venue_id: int,
    target_date: date = Query(..., alias="date"),
    slot_minutes: int | None = Query(None, gt=0),
    now: datetime | None = Query(
        None, alias="local_now", description="Caller's local wall-clock time"
    ),
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    """Get slots of a venue on a specific day."""
    config = get_slots_config()
    reference_now = now.replace(tzinfo=None) if now else local_now()

    today = reference_now.date()
    max_date = today + timedelta(days=config.horizon_days)

    if target_date < today:
        raise HTTPException(status_code=400, detail="Date cannot be in the past")

    if target_date > max_date:
        raise HTTPException(status_code=400, detail=f"Date cannot be more than {config.horizon_days} days ahead")

    expire_stale_holds(db, venue_id)

    try:
        result = get_day_availability(
            db=db,
            venue_id=venue_id,
            target_date=target_date,
            reference_now=reference_now,
            granularity_minutes=slot_minutes,
            config=config,
            redis=redis,
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Venue not found")

    return SlotsDayResponse(**result)


@router.get("/price", response_model=SlotPriceResponse)
def get_slot_price(
    venue_id: int,
    target_date: date = Query(..., alias="date"),
    start: time = Query(..., alias="time"),
    minutes: int | None = Query(None, gt=0),
    db: Session = Depends(get_db),
):
    """Hourly rate of a slot start; `amount` is scaled to `minutes`."""
    config = get_slots_config()
    row = get_venue(db, venue_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Venue not found")

    venue = venue_from_row(row)
    minutes = minutes or resolve_granularity(venue, None, config)
    rate = price_for_slot(venue, target_date, start, load_peak_rules(db, venue_id), config)

    return SlotPriceResponse(
        venue_id=venue_id,
        date=target_date,
        time=start.strftime("%H:%M"),
        price_per_hour=rate,
        minutes=minutes,
        amount=scale_to_duration(rate, minutes),
    )


@router.post("/invalidate", response_model=SlotsInvalidateResponse)
def invalidate_slots_cache(
    venue_id: int,
    dates: list[date] | None = Query(None),
    redis: Redis = Depends(get_redis),
):
    """Manually invalidate slots cache for venue (admin endpoint)."""
    deleted = invalidate_venue_cache(redis, venue_id, dates)

    return SlotsInvalidateResponse(
        venue_id=venue_id,
        deleted_keys=deleted,
        dates=dates if dates else "all",
    )
