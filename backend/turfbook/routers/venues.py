# backend/turfbook/routers/venues.py
# API.md: PATCH = ALLOWED, DELETE = soft-delete (is_disabled)

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..models.generated import Venues as DBVenues
from ..schemas.venues import (
    VenueCreate,
    VenueUpdate,
    VenueRead,
)
from ..services.slots.invalidator import invalidate_venue_cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/venues", tags=["venues"])

# Fields that change the base slot grid
GRID_FIELDS = {"opening_time", "closing_time", "slot_interval"}


@router.get("/", response_model=list[VenueRead])
def list_venues(
    include_disabled: bool = False,
    db: Session = Depends(get_db),
):
    query = db.query(DBVenues)
    if not include_disabled:
        query = query.filter(DBVenues.is_disabled.is_(False))
    return query.order_by(DBVenues.id).all()


@router.get("/{id}", response_model=VenueRead)
def get_venue(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBVenues, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=VenueRead, status_code=status.HTTP_201_CREATED)
def create_venue(
    data: VenueCreate,
    db: Session = Depends(get_db),
):
    obj = DBVenues(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info(f"Venue created: venue_id={obj.id}, name={obj.name!r}")
    return obj


@router.patch("/{id}", response_model=VenueRead)
def update_venue(
    id: int,
    data: VenueUpdate,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    obj = db.get(DBVenues, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    changes = data.model_dump(exclude_unset=True)
    opening = changes.get("opening_time", obj.opening_time)
    closing = changes.get("closing_time", obj.closing_time)
    if opening is not None and closing is not None and opening >= closing:
        raise HTTPException(
            status_code=400,
            detail="opening_time must be before closing_time",
        )

    for field, value in changes.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)

    # Invalidate slots cache when the grid changes
    if GRID_FIELDS & changes.keys():
        invalidate_venue_cache(redis, id)

    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_venue(
    id: int,
    reason: str | None = None,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    obj = db.get(DBVenues, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_disabled = True
    obj.disabled_reason = reason
    db.commit()

    invalidate_venue_cache(redis, id)
