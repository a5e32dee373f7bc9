# backend/turfbook/services/slots/loader.py
"""
Database rows → slot domain objects.

The resolver and price calculator assume well-formed inputs; this is where
collaborator data is checked. A malformed row is skipped with a warning so
that one bad record cannot take down a whole day of availability.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ...models.generated import (
    BlockedDates as DBBlockedDates,
    Bookings as DBBookings,
    Events as DBEvents,
    PeakHours as DBPeakHours,
    Venues as DBVenues,
)
from .config import time_str_to_minutes, time_to_minutes
from .domain import AdminBlock, PeakHourRule, PeakRuleKind, Reservation, TimeRange, Venue

logger = logging.getLogger(__name__)

# Statuses that no longer hold a slot
INACTIVE_BOOKING_STATUSES = ("cancelled", "rejected", "refunded", "expired")

LEGACY_BLOCK_MINUTES = 60

DAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


# ── Row converters ───────────────────────────────────────────────────────


def venue_from_row(row: DBVenues) -> Venue:
    return Venue(
        id=row.id,
        opening_time=row.opening_time,
        closing_time=row.closing_time,
        price_per_hour=row.price_per_hour,
        slot_interval=row.slot_interval,
        is_weekday_pricing_enabled=bool(row.is_weekday_pricing_enabled),
        weekday_morning_start=row.weekday_morning_start,
        weekday_evening_start=row.weekday_evening_start,
        weekday_morning_price=row.weekday_morning_price,
        weekday_evening_price=row.weekday_evening_price,
        is_weekend_pricing_enabled=bool(row.is_weekend_pricing_enabled),
        weekend_morning_start=row.weekend_morning_start,
        weekend_evening_start=row.weekend_evening_start,
        weekend_morning_price=row.weekend_morning_price,
        weekend_evening_price=row.weekend_evening_price,
    )


def reservation_from_row(row: DBBookings) -> Optional[Reservation]:
    if row.start_time is None:
        logger.warning(f"Booking {row.id} has no start time, skipped")
        return None
    return Reservation(
        id=row.id,
        start_time=row.start_time,
        duration_minutes=row.duration_minutes,
        status=row.status,
    )


def block_from_row(row: DBBlockedDates) -> Optional[AdminBlock]:
    """
    Convert a blocked_dates row.

    blocked_ranges: [{"start": "HH:MM", "end": "HH:MM"}, ...]
    blocked_times (legacy): ["HH:MM", ...], one hour from each time.
    A row whose ranges are all unreadable is skipped rather than being
    widened to a whole-day block.
    """
    raw_ranges = row.blocked_ranges or []
    raw_times = row.blocked_times or []
    ranges: list[TimeRange] = []

    for item in raw_ranges:
        try:
            ranges.append(TimeRange.from_strings(item["start"], item["end"]))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Blocked date {row.id}: malformed range {item!r}, skipped")

    for item in raw_times:
        try:
            start = time_str_to_minutes(str(item))
            ranges.append(TimeRange(start, min(start + LEGACY_BLOCK_MINUTES, 24 * 60)))
        except (TypeError, ValueError):
            logger.warning(f"Blocked date {row.id}: malformed time {item!r}, skipped")

    if (raw_ranges or raw_times) and not ranges:
        logger.warning(f"Blocked date {row.id}: no readable time ranges, skipped")
        return None

    return AdminBlock(
        id=row.id,
        start_date=row.start_date,
        end_date=row.end_date,
        ranges=tuple(ranges),
        reason=row.reason,
    )


def event_to_block(row: DBEvents) -> Optional[AdminBlock]:
    """An event reserves its daily [start_time, end_time) window for its dates."""
    try:
        window = TimeRange(time_to_minutes(row.start_time), time_to_minutes(row.end_time))
    except (AttributeError, TypeError, ValueError):
        logger.warning(f"Event {row.id}: invalid time window, skipped")
        return None
    return AdminBlock(
        start_date=row.start_date,
        end_date=row.end_date,
        ranges=(window,),
        reason=f"Event: {row.title}",
    )


def peak_rule_from_row(row: DBPeakHours) -> Optional[PeakHourRule]:
    try:
        kind = PeakRuleKind(row.type)
    except ValueError:
        logger.warning(f"Peak hour {row.id}: unknown type {row.type!r}, skipped")
        return None

    try:
        start = time_str_to_minutes(row.start_time)
        end = time_str_to_minutes(row.end_time)
    except (AttributeError, ValueError):
        logger.warning(f"Peak hour {row.id}: malformed times, skipped")
        return None
    if start >= end:
        logger.warning(
            f"Peak hour {row.id}: start {row.start_time} is not before end {row.end_time}, skipped"
        )
        return None

    try:
        price = row.price if isinstance(row.price, Decimal) else Decimal(str(row.price))
    except InvalidOperation:
        logger.warning(f"Peak hour {row.id}: non-numeric price {row.price!r}, skipped")
        return None

    weekdays: frozenset[int] = frozenset()
    if kind is PeakRuleKind.DAY_OF_WEEK:
        weekdays = parse_weekdays(row.days_of_week or [])
        if not weekdays:
            logger.warning(f"Peak hour {row.id}: no readable weekdays, skipped")
            return None
    elif row.specific_date is None:
        logger.warning(f"Peak hour {row.id}: date rule without a date, skipped")
        return None

    return PeakHourRule(
        id=row.id,
        kind=kind,
        start_minute=start,
        end_minute=end,
        price=price,
        weekdays=weekdays,
        specific_date=row.specific_date,
    )


def parse_weekdays(values: list) -> frozenset[int]:
    """
    Weekday indices (0 = Monday) from a mixed list.

    Supports:
      [0, 5, 6]
      ["0", "5"]
      ["Monday", "sat", "SUNDAY"]
    """
    result = set()
    for value in values:
        if isinstance(value, int) and 0 <= value <= 6:
            result.add(value)
            continue
        text_value = str(value).strip().lower()
        if text_value.isdigit() and 0 <= int(text_value) <= 6:
            result.add(int(text_value))
        elif text_value[:3] in DAY_NAMES:
            result.add(DAY_NAMES.index(text_value[:3]))
        else:
            logger.warning(f"Unknown weekday {value!r} ignored")
    return frozenset(result)


# ── Database helpers ─────────────────────────────────────────────────────


def get_venue(db: Session, venue_id: int) -> Optional[DBVenues]:
    """Get venue by ID."""
    return db.get(DBVenues, venue_id)


def load_reservations(db: Session, venue_id: int, target_date: date) -> list[Reservation]:
    """Active bookings of a venue on a date."""
    rows = (
        db.query(DBBookings)
        .filter(
            DBBookings.venue_id == venue_id,
            DBBookings.date == target_date,
            DBBookings.status.notin_(INACTIVE_BOOKING_STATUSES),
        )
        .order_by(DBBookings.start_time)
        .all()
    )
    return [r for r in map(reservation_from_row, rows) if r is not None]


def load_blocks(db: Session, venue_id: int, target_date: date) -> list[AdminBlock]:
    """Blocked dates covering target_date plus non-cancelled events on it."""
    blocked_rows = (
        db.query(DBBlockedDates)
        .filter(
            DBBlockedDates.venue_id == venue_id,
            DBBlockedDates.start_date <= target_date,
            or_(
                DBBlockedDates.end_date >= target_date,
                and_(
                    DBBlockedDates.end_date.is_(None),
                    DBBlockedDates.start_date == target_date,
                ),
            ),
        )
        .all()
    )
    event_rows = (
        db.query(DBEvents)
        .filter(
            DBEvents.venue_id == venue_id,
            DBEvents.start_date <= target_date,
            DBEvents.end_date >= target_date,
            DBEvents.status != "cancelled",
        )
        .all()
    )

    blocks = [b for b in map(block_from_row, blocked_rows) if b is not None]
    blocks += [b for b in map(event_to_block, event_rows) if b is not None]
    return blocks


def load_peak_rules(db: Session, venue_id: int) -> list[PeakHourRule]:
    """All readable peak-hour rules of a venue; date/weekday filtering is pricing's job."""
    rows = (
        db.query(DBPeakHours)
        .filter(DBPeakHours.venue_id == venue_id)
        .order_by(DBPeakHours.id)
        .all()
    )
    return [r for r in map(peak_rule_from_row, rows) if r is not None]
