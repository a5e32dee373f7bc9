# backend/turfbook/services/bookings.py
"""
Booking lifecycle: create (pending), confirm, cancel, expire.

Availability is a snapshot read, so create_booking re-checks it inside the
write transaction after locking the venue row (on SQLite, the database write
lock taken by BEGIN IMMEDIATE): two customers racing for the same slot are
serialized on that lock and the second one sees the first one's pending hold.

confirm_booking is idempotent: the payment webhook and the client's polling
verification may both confirm the same booking.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..models.generated import Bookings as DBBookings, Venues as DBVenues
from ..schemas.bookings import BookingCreate
from .clock import utc_now
from .events import emit_event
from .slots.config import SlotsConfig, get_slots_config, minutes_to_time, time_to_minutes
from .slots.domain import Quote, SlotStatus
from .slots.loader import load_blocks, load_peak_rules, load_reservations, venue_from_row
from .slots.pricing import quote_slots
from .slots.resolver import resolve_granularity, resolve_slots

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ("pending", "confirmed", "blocked")


class BookingError(ValueError):
    """Base class for booking rule violations."""


class BookingValidationError(BookingError):
    """Request does not fit the venue's rules (grid, duration, hours)."""


class BookingConflictError(BookingError):
    """Requested time is no longer bookable."""


class BookingStateError(BookingError):
    """Transition not allowed from the booking's current status."""


def create_booking(
    db: Session,
    data: BookingCreate,
    reference_now: datetime,
    config: SlotsConfig | None = None,
) -> DBBookings:
    """
    Create a pending booking after re-validating availability.

    Args:
        db: Database session
        data: Booking request
        reference_now: Venue-local "now" for past-slot checks

    Raises:
        LookupError: venue not found
        BookingValidationError: off-grid start, bad duration, past closing
        BookingConflictError: slot booked, blocked or in the past
        ConfigurationError: venue cannot produce slots or prices
    """
    config = config or get_slots_config()

    try:
        booking, quote = _insert_pending(db, data, reference_now, config)
    except Exception:
        # Release the venue lock (the SQLite write lock) before reporting
        db.rollback()
        raise

    logger.info(
        f"Booking created: booking_id={booking.id}, venue_id={booking.venue_id}, "
        f"time={data.date} {booking.start_time:%H:%M} ({data.duration_minutes} min), "
        f"total={quote.total}"
    )
    emit_event("booking_created", {"booking_id": booking.id, "venue_id": booking.venue_id})

    return booking


def _insert_pending(
    db: Session,
    data: BookingCreate,
    reference_now: datetime,
    config: SlotsConfig,
) -> tuple[DBBookings, Quote]:
    """Validate, price and commit a pending booking in one transaction."""
    # Step 1: Lock venue row (serializes concurrent bookings for the venue)
    row = (
        db.query(DBVenues)
        .filter(DBVenues.id == data.venue_id)
        .with_for_update()
        .first()
    )
    if row is None:
        raise LookupError(f"Venue {data.venue_id} not found")
    if row.is_disabled:
        raise BookingValidationError(
            f"Venue is not accepting bookings: {row.disabled_reason or 'disabled'}"
        )

    venue = venue_from_row(row)
    step = resolve_granularity(venue, None, config)

    # Step 2: Request shape
    if data.date < reference_now.date():
        raise BookingConflictError("Date cannot be in the past")
    if data.date > reference_now.date() + timedelta(days=config.horizon_days):
        raise BookingValidationError(
            f"Date cannot be more than {config.horizon_days} days ahead"
        )

    start = time_to_minutes(data.start_time)
    end = start + data.duration_minutes
    if start < venue.opening_minute or (start - venue.opening_minute) % step:
        raise BookingValidationError(
            f"Start time must be on the venue's {step}-minute grid"
        )
    if data.duration_minutes % step:
        raise BookingValidationError(
            f"Duration must be a multiple of {step} minutes"
        )
    if not row.min_hours * 60 <= data.duration_minutes <= row.max_hours * 60:
        raise BookingValidationError(
            f"Duration must be between {row.min_hours} and {row.max_hours} hours"
        )
    if end > venue.closing_minute:
        raise BookingValidationError("Booking exceeds venue closing time")

    # Step 3: Re-validate availability inside the transaction
    slots = resolve_slots(
        venue,
        data.date,
        step,
        load_reservations(db, venue.id, data.date),
        load_blocks(db, venue.id, data.date),
        reference_now,
        config,
    )
    covered = [s for s in slots if start <= s.start_minute < end]
    unavailable = [s for s in covered if s.status is not SlotStatus.BOOKABLE]
    if unavailable or len(covered) * step != data.duration_minutes:
        first = unavailable[0] if unavailable else None
        reason = first.status.value if first else "unavailable"
        raise BookingConflictError(
            f"Selected time slot is {reason}"
            + (f" at {first.start}" if first else "")
        )

    # Step 4: Price
    quote = quote_slots(
        venue,
        data.date,
        [s.start_minute for s in covered],
        step,
        load_peak_rules(db, venue.id),
        config,
    )

    now = utc_now()
    booking = DBBookings(
        venue_id=venue.id,
        date=data.date,
        start_time=data.start_time.replace(second=0, microsecond=0),
        end_time=minutes_to_time(end),
        duration_minutes=data.duration_minutes,
        total_price=quote.total,
        price_breakup=quote.as_breakup(),
        status="pending",
        payment_method=data.payment_method,
        customer_name=data.customer_name,
        customer_phone=data.customer_phone,
        customer_email=data.customer_email,
        created_at=now,
        updated_at=now,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)

    return booking, quote


def confirm_booking(db: Session, booking_id: int) -> DBBookings:
    """
    pending → confirmed. Confirming a confirmed booking is a no-op.

    Raises:
        LookupError: booking not found
        BookingStateError: booking is cancelled/expired/refunded/...
    """
    booking = _get_for_update(db, booking_id)

    if booking.status == "confirmed":
        logger.info(f"Booking {booking_id} already confirmed, nothing to do")
        return booking
    if booking.status != "pending":
        raise BookingStateError(
            f"Booking {booking_id} cannot be confirmed from status '{booking.status}'"
        )

    booking.status = "confirmed"
    booking.updated_at = utc_now()
    db.commit()
    db.refresh(booking)

    logger.info(f"Booking {booking_id} confirmed")
    emit_event("booking_confirmed", {"booking_id": booking.id, "venue_id": booking.venue_id})
    return booking


def cancel_booking(
    db: Session,
    booking_id: int,
    reason: Optional[str] = None,
) -> DBBookings:
    """
    Active → cancelled. Cancelling a cancelled booking is a no-op.

    Raises:
        LookupError: booking not found
        BookingStateError: booking is expired/refunded/rejected
    """
    booking = _get_for_update(db, booking_id)

    if booking.status == "cancelled":
        return booking
    if booking.status not in ACTIVE_STATUSES:
        raise BookingStateError(
            f"Booking {booking_id} cannot be cancelled from status '{booking.status}'"
        )

    booking.status = "cancelled"
    booking.cancel_reason = reason
    booking.updated_at = utc_now()
    db.commit()
    db.refresh(booking)

    logger.info(f"Booking {booking_id} cancelled: {reason or 'no reason'}")
    emit_event("booking_cancelled", {"booking_id": booking.id, "venue_id": booking.venue_id})
    return booking


def expire_stale_holds(
    db: Session,
    venue_id: int,
    now: Optional[datetime] = None,
    hold_minutes: Optional[int] = None,
) -> int:
    """
    Release pending bookings whose payment never arrived.

    Returns:
        Number of bookings moved to 'expired'.
    """
    now = now or utc_now()
    if hold_minutes is None:
        hold_minutes = get_slots_config().pending_hold_minutes
    cutoff = now - timedelta(minutes=hold_minutes)

    expired = (
        db.query(DBBookings)
        .filter(
            DBBookings.venue_id == venue_id,
            DBBookings.status == "pending",
            DBBookings.created_at < cutoff,
        )
        .update(
            {DBBookings.status: "expired", DBBookings.updated_at: now},
            synchronize_session=False,
        )
    )
    if expired:
        db.commit()
        logger.info(f"Expired {expired} stale pending bookings for venue {venue_id}")
    return expired


def has_active_bookings(
    db: Session,
    venue_id: int,
    start_date: date,
    end_date: Optional[date] = None,
) -> bool:
    """Whether any active booking falls within [start_date, end_date]."""
    return (
        db.query(DBBookings.id)
        .filter(
            DBBookings.venue_id == venue_id,
            DBBookings.date >= start_date,
            DBBookings.date <= (end_date or start_date),
            DBBookings.status.in_(ACTIVE_STATUSES),
        )
        .first()
        is not None
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _get_for_update(db: Session, booking_id: int) -> DBBookings:
    booking = (
        db.query(DBBookings)
        .filter(DBBookings.id == booking_id)
        .with_for_update()
        .first()
    )
    if booking is None:
        raise LookupError(f"Booking {booking_id} not found")
    return booking
