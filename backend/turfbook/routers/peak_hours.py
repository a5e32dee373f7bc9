# backend/turfbook/routers/peak_hours.py
# Prices are computed per request, so no cache invalidation here.

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import PeakHours as DBPeakHours, Venues as DBVenues
from ..schemas.peak_hours import (
    PeakHourCreate,
    PeakHourRead,
    PeakHourUpdate,
)
from ..services.slots.config import time_str_to_minutes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/peak_hours", tags=["peak_hours"])


@router.get("/", response_model=list[PeakHourRead])
def list_peak_hours(venue_id: int | None = None, db: Session = Depends(get_db)):
    query = db.query(DBPeakHours)
    if venue_id is not None:
        query = query.filter(DBPeakHours.venue_id == venue_id)
    return query.order_by(DBPeakHours.start_time, DBPeakHours.id).all()


@router.get("/{id}", response_model=PeakHourRead)
def get_peak_hour(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBPeakHours, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post(
    "/", response_model=PeakHourRead, status_code=status.HTTP_201_CREATED
)
def create_peak_hour(
    data: PeakHourCreate,
    db: Session = Depends(get_db),
):
    if not db.get(DBVenues, data.venue_id):
        raise HTTPException(status_code=404, detail="Venue not found")

    obj = DBPeakHours(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info(
        f"Peak hour created: id={obj.id}, venue_id={obj.venue_id}, "
        f"{obj.start_time}-{obj.end_time} @ {obj.price}"
    )
    return obj


@router.patch("/{id}", response_model=PeakHourRead)
def update_peak_hour(
    id: int,
    data: PeakHourUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBPeakHours, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    changes = data.model_dump(exclude_unset=True)
    try:
        start = time_str_to_minutes(changes.get("start_time", obj.start_time))
        end = time_str_to_minutes(changes.get("end_time", obj.end_time))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if start >= end:
        raise HTTPException(status_code=400, detail="start_time must be before end_time")

    for field, value in changes.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_peak_hour(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBPeakHours, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    db.delete(obj)
    db.commit()
