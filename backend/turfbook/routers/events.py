# backend/turfbook/routers/events.py
# API.md: PATCH /{id}/status = ALLOWED, DELETE = ALLOWED (hard)

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..models.generated import Events as DBEvents, Venues as DBVenues
from ..schemas.events import (
    EventCreate,
    EventRead,
    EventStatusUpdate,
)
from ..services.slots.invalidator import get_affected_dates, invalidate_venue_cache

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/", response_model=list[EventRead])
def list_events(venue_id: int | None = None, db: Session = Depends(get_db)):
    query = db.query(DBEvents)
    if venue_id is not None:
        query = query.filter(DBEvents.venue_id == venue_id)
    return query.order_by(DBEvents.start_date, DBEvents.start_time).all()


@router.get("/{id}", response_model=EventRead)
def get_event(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBEvents, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=EventRead, status_code=status.HTTP_201_CREATED)
def create_event(
    data: EventCreate,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    if not db.get(DBVenues, data.venue_id):
        raise HTTPException(status_code=404, detail="Venue not found")

    obj = DBEvents(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)

    invalidate_venue_cache(
        redis, obj.venue_id, get_affected_dates(obj.start_date, obj.end_date)
    )
    return obj


@router.patch("/{id}/status", response_model=EventRead)
def update_event_status(
    id: int,
    data: EventStatusUpdate,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    obj = db.get(DBEvents, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.status = data.status
    db.commit()
    db.refresh(obj)

    # Cancelled events free their window
    invalidate_venue_cache(
        redis, obj.venue_id, get_affected_dates(obj.start_date, obj.end_date)
    )
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    obj = db.get(DBEvents, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    venue_id = obj.venue_id
    dates = get_affected_dates(obj.start_date, obj.end_date)
    db.delete(obj)
    db.commit()

    invalidate_venue_cache(redis, venue_id, dates)
