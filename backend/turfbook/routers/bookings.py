# backend/turfbook/routers/bookings.py
# API.md: PATCH = 405, DELETE = 405 (use /confirm, /cancel)

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Bookings as DBBookings
from ..schemas.bookings import (
    BookingCancel,
    BookingCreate,
    BookingRead,
)
from ..services import bookings as booking_service
from ..services.clock import local_now

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/", response_model=list[BookingRead])
def list_bookings(
    venue_id: int | None = None,
    booking_date: date | None = None,
    booking_status: str | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    query = db.query(DBBookings)
    if venue_id is not None:
        query = query.filter(DBBookings.venue_id == venue_id)
    if booking_date is not None:
        query = query.filter(DBBookings.date == booking_date)
    if booking_status is not None:
        query = query.filter(DBBookings.status == booking_status)
    return query.order_by(DBBookings.date, DBBookings.start_time).all()


@router.get("/{id}", response_model=BookingRead)
def get_booking(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBBookings, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
):
    booking_service.expire_stale_holds(db, data.venue_id)
    try:
        return booking_service.create_booking(db, data, local_now())
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except booking_service.BookingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except booking_service.BookingConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/{id}/confirm", response_model=BookingRead)
def confirm_booking(id: int, db: Session = Depends(get_db)):
    try:
        return booking_service.confirm_booking(db, id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Not found")
    except booking_service.BookingStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/{id}/cancel", response_model=BookingRead)
def cancel_booking(
    id: int,
    data: BookingCancel | None = None,
    db: Session = Depends(get_db),
):
    try:
        return booking_service.cancel_booking(db, id, data.reason if data else None)
    except LookupError:
        raise HTTPException(status_code=404, detail="Not found")
    except booking_service.BookingStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
