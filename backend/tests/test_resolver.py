from dataclasses import replace
from datetime import date, datetime, time

import pytest

from turfbook.services.slots import (
    AdminBlock,
    ConfigurationError,
    Reservation,
    SlotStatus,
    SlotsConfig,
    TimeRange,
    resolve_slots,
)
from turfbook.services.slots.resolver import generate_slots, resolve_granularity

MONDAY = date(2030, 1, 7)


def statuses(slots):
    return {s.start: s.status for s in slots}


def test_open_day_has_sixteen_bookable_hourly_slots(venue, config):
    slots = resolve_slots(venue, MONDAY, 60, [], [], None, config)

    assert len(slots) == 16
    assert (slots[0].start, slots[0].end) == ("06:00", "07:00")
    assert (slots[-1].start, slots[-1].end) == ("21:00", "22:00")
    assert all(s.status is SlotStatus.BOOKABLE for s in slots)


@pytest.mark.parametrize("step", [10, 15, 30, 45, 60, 90, 120])
def test_slots_are_ordered_distinct_and_full_length(venue, config, step):
    slots = resolve_slots(venue, MONDAY, step, [], [], None, config)

    starts = [s.start_minute for s in slots]
    assert starts == sorted(set(starts))
    assert all(s.duration_minutes == step for s in slots)
    assert slots[-1].end_minute <= venue.closing_minute


def test_exact_reservation_marks_only_its_slot_booked(venue, config):
    booking = Reservation(start_time=time(14, 0), duration_minutes=60)

    slots = resolve_slots(venue, MONDAY, 60, [booking], [], None, config)

    result = statuses(slots)
    assert result.pop("14:00") is SlotStatus.BOOKED
    assert set(result.values()) == {SlotStatus.BOOKABLE}


def test_reservation_overlap_is_half_open(venue, config):
    # 14:30–15:30 touches the 14:00 and 15:00 hour slots, not 16:00
    booking = Reservation(start_time=time(14, 30), duration_minutes=60)

    result = statuses(resolve_slots(venue, MONDAY, 60, [booking], [], None, config))

    assert result["13:00"] is SlotStatus.BOOKABLE
    assert result["14:00"] is SlotStatus.BOOKED
    assert result["15:00"] is SlotStatus.BOOKED
    assert result["16:00"] is SlotStatus.BOOKABLE


def test_reservation_without_duration_uses_granularity(venue, config):
    booking = Reservation(start_time=time(8, 0), duration_minutes=None)

    result = statuses(resolve_slots(venue, MONDAY, 30, [booking], [], None, config))

    assert result["08:00"] is SlotStatus.BOOKED
    assert result["08:30"] is SlotStatus.BOOKABLE


def test_whole_day_block_blocks_every_slot(venue, config):
    block = AdminBlock(start_date=MONDAY, reason="Maintenance")

    slots = resolve_slots(venue, MONDAY, 60, [], [block], None, config)

    assert len(slots) == 16
    assert all(s.status is SlotStatus.BLOCKED for s in slots)


def test_multi_day_block_covers_dates_in_range(venue, config):
    block = AdminBlock(start_date=date(2030, 1, 6), end_date=date(2030, 1, 8))

    inside = resolve_slots(venue, MONDAY, 60, [], [block], None, config)
    outside = resolve_slots(venue, date(2030, 1, 9), 60, [], [block], None, config)

    assert {s.status for s in inside} == {SlotStatus.BLOCKED}
    assert {s.status for s in outside} == {SlotStatus.BOOKABLE}


def test_block_sub_range_blocks_overlapping_slots(venue, config):
    block = AdminBlock(start_date=MONDAY, ranges=(TimeRange.from_strings("09:30", "11:00"),))

    result = statuses(resolve_slots(venue, MONDAY, 60, [], [block], None, config))

    assert result["08:00"] is SlotStatus.BOOKABLE
    assert result["09:00"] is SlotStatus.BLOCKED
    assert result["10:00"] is SlotStatus.BLOCKED
    assert result["11:00"] is SlotStatus.BOOKABLE


def test_blocked_is_reported_over_booked(venue, config):
    booking = Reservation(start_time=time(10, 0), duration_minutes=60)
    block = AdminBlock(start_date=MONDAY, ranges=(TimeRange.from_strings("10:00", "11:00"),))

    result = statuses(resolve_slots(venue, MONDAY, 60, [booking], [block], None, config))

    assert result["10:00"] is SlotStatus.BLOCKED


def test_past_slots_on_current_day(venue, config):
    booking = Reservation(start_time=time(7, 0), duration_minutes=60)
    block = AdminBlock(start_date=MONDAY, ranges=(TimeRange.from_strings("08:00", "09:00"),))
    now = datetime(2030, 1, 7, 9, 0)

    result = statuses(resolve_slots(venue, MONDAY, 60, [booking], [block], now, config))

    # At or before 09:00 is past, whatever else applies
    for start in ("06:00", "07:00", "08:00", "09:00"):
        assert result[start] is SlotStatus.PAST
    assert result["10:00"] is SlotStatus.BOOKABLE


def test_reference_now_on_another_day_does_not_mark_past(venue, config):
    now = datetime(2030, 1, 6, 23, 0)

    slots = resolve_slots(venue, MONDAY, 60, [], [], now, config)

    assert {s.status for s in slots} == {SlotStatus.BOOKABLE}


def test_trailing_partial_slot_is_dropped_by_default(venue, config):
    slots = generate_slots(replace(venue, closing_time=time(21, 30)), 60, config)

    assert slots[-1].start == "20:00"
    assert slots[-1].end == "21:00"


def test_trailing_partial_slot_is_clamped_when_configured(venue):
    config = SlotsConfig(clamp_trailing_slot=True)

    slots = generate_slots(replace(venue, closing_time=time(21, 30)), 60, config)

    assert (slots[-1].start, slots[-1].end) == ("21:00", "21:30")
    assert slots[-1].duration_minutes == 30


def test_late_venue_slots_end_at_closing(venue, config):
    late = replace(venue, opening_time=time(20, 0), closing_time=time(23, 30))

    slots = generate_slots(late, 90, config)

    assert [(s.start, s.end) for s in slots] == [("20:00", "21:30"), ("21:30", "23:00")]


def test_opening_not_before_closing_is_a_configuration_error(venue, config):
    broken = replace(venue, opening_time=time(22, 0), closing_time=time(6, 0))

    with pytest.raises(ConfigurationError):
        resolve_slots(broken, MONDAY, 60, [], [], None, config)


@pytest.mark.parametrize("step", [0, -15])
def test_non_positive_granularity_is_a_configuration_error(venue, config, step):
    with pytest.raises(ConfigurationError):
        resolve_slots(venue, MONDAY, step, [], [], None, config)


def test_granularity_falls_back_to_venue_then_default(venue, config):
    assert resolve_granularity(venue, 15, config) == 15
    assert resolve_granularity(venue, None, config) == 60
    assert resolve_granularity(replace(venue, slot_interval=None), None, config) == 30


def test_resolution_is_repeatable(venue, config):
    booking = Reservation(start_time=time(14, 0), duration_minutes=90)
    first = resolve_slots(venue, MONDAY, 30, [booking], [], None, config)
    second = resolve_slots(venue, MONDAY, 30, [booking], [], None, config)

    assert first == second
