# backend/turfbook/services/slots/resolver.py
"""
Availability resolver: the ordered slot list of one venue day.

Steps (each a pure function, reused by the cached path in availability.py):
  1. generate_slots      - grid from opening to closing time
  2. apply_blocks        - admin blocks / events        → BLOCKED
  3. apply_reservations  - active bookings              → BOOKED
  4. apply_past          - caller-observed "now"        → PAST

Status precedence when several reasons apply: PAST > BLOCKED > BOOKED.

Contains:
✓ venue opening/closing hours and slot granularity
✓ admin blocks (whole day or time sub-ranges)
✓ active reservations (half-open overlap)
✓ past-slot suppression for the current day

Does NOT contain:
✗ Prices (pricing.py)
✗ Status filtering of bookings (caller passes active ones only)
✗ Any I/O
"""

from datetime import date, datetime
from typing import Iterable, Iterator, Optional

from .config import SlotsConfig, get_slots_config, minutes_to_time
from .domain import AdminBlock, Reservation, Slot, SlotStatus, Venue
from .errors import ConfigurationError


def resolve_slots(
    venue: Venue,
    target_date: date,
    granularity_minutes: Optional[int],
    reservations: Iterable[Reservation],
    blocks: Iterable[AdminBlock],
    reference_now: Optional[datetime],
    config: SlotsConfig | None = None,
) -> list[Slot]:
    """
    Build the slot list for a venue on target_date.

    Args:
        venue: Venue hours and interval
        target_date: Calendar day being queried
        granularity_minutes: Step between slot starts; None → venue interval,
            then the configured default (30)
        reservations: Active reservations for this venue and date
        blocks: Admin blocks whose date range includes target_date
        reference_now: Caller's local "now"; None disables past suppression

    Returns:
        Slots ordered by ascending start time.

    Raises:
        ConfigurationError: opening >= closing, or granularity <= 0.
    """
    config = config or get_slots_config()
    step = resolve_granularity(venue, granularity_minutes, config)

    slots = generate_slots(venue, step, config)
    slots = apply_blocks(slots, blocks, target_date)
    slots = apply_reservations(slots, reservations, step)
    if reference_now is not None:
        slots = apply_past(slots, target_date, reference_now)
    return slots


def resolve_granularity(
    venue: Venue,
    granularity_minutes: Optional[int],
    config: SlotsConfig,
) -> int:
    """Requested granularity, else the venue's, else the system default."""
    if granularity_minutes is not None:
        step = granularity_minutes
    elif venue.slot_interval is not None:
        step = venue.slot_interval
    else:
        step = config.default_slot_minutes

    if step <= 0:
        raise ConfigurationError(
            f"Slot granularity must be positive, got {step}", venue_id=venue.id
        )
    return step


def iter_slot_starts(venue: Venue, step: int) -> Iterator[int]:
    """Candidate start minutes from opening (inclusive) up to closing."""
    t = venue.opening_minute
    closing = venue.closing_minute
    while t < closing:
        yield t
        t += step


def generate_slots(
    venue: Venue,
    step: int,
    config: SlotsConfig | None = None,
) -> list[Slot]:
    """
    Bare slot grid for the venue, every slot BOOKABLE.

    A trailing slot that would run past closing is dropped unless
    config.clamp_trailing_slot is set, in which case it ends at closing.
    """
    config = config or get_slots_config()
    if step <= 0:
        raise ConfigurationError(
            f"Slot granularity must be positive, got {step}", venue_id=venue.id
        )
    if venue.opening_minute >= venue.closing_minute:
        raise ConfigurationError(
            f"Opening time {venue.opening_time} must be before "
            f"closing time {venue.closing_time}",
            venue_id=venue.id,
        )

    closing = venue.closing_minute
    slots: list[Slot] = []
    for start in iter_slot_starts(venue, step):
        end = start + step
        if end > closing:
            if not config.clamp_trailing_slot:
                break
            end = closing
        slots.append(Slot(start_minute=start, end_minute=end))
    return slots


def apply_blocks(
    slots: list[Slot],
    blocks: Iterable[AdminBlock],
    target_date: date,
) -> list[Slot]:
    """Mark slots BLOCKED by whole-day blocks or overlapping sub-ranges."""
    covering = [b for b in blocks if b.covers(target_date)]
    if not covering:
        return slots

    if any(b.is_whole_day for b in covering):
        return [_with_status(s, SlotStatus.BLOCKED) for s in slots]

    ranges = [r for b in covering for r in b.ranges]
    result = []
    for slot in slots:
        if any(r.overlaps(slot.start_minute, slot.end_minute) for r in ranges):
            slot = _with_status(slot, SlotStatus.BLOCKED)
        result.append(slot)
    return result


def apply_reservations(
    slots: list[Slot],
    reservations: Iterable[Reservation],
    fallback_minutes: int,
) -> list[Slot]:
    """Mark still-bookable slots BOOKED when a reservation overlaps them."""
    windows = [r.window(fallback_minutes) for r in reservations]
    if not windows:
        return slots

    result = []
    for slot in slots:
        if slot.status is SlotStatus.BOOKABLE and any(
            slot.start_minute < r_end and r_start < slot.end_minute
            for r_start, r_end in windows
        ):
            slot = _with_status(slot, SlotStatus.BOOKED)
        result.append(slot)
    return result


def apply_past(
    slots: list[Slot],
    target_date: date,
    reference_now: datetime,
) -> list[Slot]:
    """Mark PAST every slot starting at or before reference_now on its own day."""
    if target_date != reference_now.date():
        return slots

    now_time = reference_now.time()
    return [
        _with_status(s, SlotStatus.PAST)
        if minutes_to_time(s.start_minute) <= now_time
        else s
        for s in slots
    ]


# ── Helpers ──────────────────────────────────────────────────────────────


def _with_status(slot: Slot, status: SlotStatus) -> Slot:
    if slot.status is status:
        return slot
    return Slot(
        start_minute=slot.start_minute,
        end_minute=slot.end_minute,
        status=status,
        price=slot.price,
    )
