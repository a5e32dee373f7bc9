# backend/turfbook/routers/blocked_dates.py
# API.md: PATCH = 405, DELETE = ALLOWED (hard)

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..models.generated import BlockedDates as DBBlockedDates, Venues as DBVenues
from ..schemas.blocked_dates import (
    BlockedDateCreate,
    BlockedDateRead,
)
from ..services.bookings import has_active_bookings
from ..services.slots.invalidator import get_affected_dates, invalidate_venue_cache

router = APIRouter(prefix="/blocked_dates", tags=["blocked_dates"])


@router.get("/", response_model=list[BlockedDateRead])
def list_blocked_dates(
    venue_id: int | None = None,
    from_date: date | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBBlockedDates)
    if venue_id is not None:
        query = query.filter(DBBlockedDates.venue_id == venue_id)
    if from_date is not None:
        query = query.filter(
            (DBBlockedDates.end_date >= from_date)
            | (DBBlockedDates.start_date >= from_date)
        )
    return query.order_by(DBBlockedDates.start_date).all()


@router.get("/{id}", response_model=BlockedDateRead)
def get_blocked_date(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBlockedDates, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post(
    "/", response_model=BlockedDateRead, status_code=status.HTTP_201_CREATED
)
def create_blocked_date(
    data: BlockedDateCreate,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    if not db.get(DBVenues, data.venue_id):
        raise HTTPException(status_code=404, detail="Venue not found")

    if has_active_bookings(db, data.venue_id, data.start_date, data.end_date):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot block dates with active bookings",
        )

    obj = DBBlockedDates(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)

    invalidate_venue_cache(
        redis, obj.venue_id, get_affected_dates(obj.start_date, obj.end_date)
    )
    return obj


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blocked_date(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    obj = db.get(DBBlockedDates, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    venue_id = obj.venue_id
    dates = get_affected_dates(obj.start_date, obj.end_date)
    db.delete(obj)
    db.commit()

    invalidate_venue_cache(redis, venue_id, dates)
