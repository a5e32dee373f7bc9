# backend/turfbook/services/slots/pricing.py
"""
Slot price calculation.

price_for_slot() returns the HOURLY rate that applies to a slot start.
It never scales by duration: callers multiply by (minutes / 60), see
scale_to_duration() and quote_slots().

Rule order (first match wins):
  1. peak rule for this specific date
  2. peak rule for this weekday
  3. day-part pricing (weekend or weekday toggle) morning / evening
  4. venue.price_per_hour
"""

import logging
from datetime import date, time
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from .config import SlotsConfig, get_slots_config, minutes_to_time_str, time_to_minutes
from .domain import PeakHourRule, PeakRuleKind, Quote, QuoteItem, Venue
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

WEEKEND_DAYS = (5, 6)  # Saturday, Sunday
CENTS = Decimal("0.01")


def price_for_slot(
    venue: Venue,
    target_date: date,
    start_time: time,
    peak_rules: Iterable[PeakHourRule],
    config: SlotsConfig | None = None,
) -> Decimal:
    """
    Hourly rate for a slot starting at start_time on target_date.

    Returns:
        Hourly rate as Decimal. NOT scaled by the slot duration.

    Raises:
        ConfigurationError: venue.price_per_hour is missing or not numeric
            and the slot falls through to it.
    """
    config = config or get_slots_config()
    minute = time_to_minutes(start_time)
    rules = list(peak_rules)

    # Step 1: specific-date overrides
    rule = _pick_rule(rules, PeakRuleKind.SPECIFIC_DATE, target_date, minute, venue)
    if rule is None:
        # Step 2: recurring weekday overrides
        rule = _pick_rule(rules, PeakRuleKind.DAY_OF_WEEK, target_date, minute, venue)
    if rule is not None:
        return rule.price

    # Step 3: day-part pricing
    if target_date.weekday() in WEEKEND_DAYS:
        if venue.is_weekend_pricing_enabled:
            return _day_part_price(
                minute,
                venue.weekend_morning_start,
                venue.weekend_evening_start,
                venue.weekend_morning_price,
                venue.weekend_evening_price,
                venue,
                config,
            )
    elif venue.is_weekday_pricing_enabled:
        return _day_part_price(
            minute,
            venue.weekday_morning_start,
            venue.weekday_evening_start,
            venue.weekday_morning_price,
            venue.weekday_evening_price,
            venue,
            config,
        )

    # Step 4: base fallback
    return _base_price(venue)


def scale_to_duration(hourly_rate: Decimal, minutes: int) -> Decimal:
    """Amount for `minutes` at an hourly rate, rounded to cents."""
    return (hourly_rate * Decimal(minutes) / Decimal(60)).quantize(CENTS)


def quote_slots(
    venue: Venue,
    target_date: date,
    start_minutes: Iterable[int],
    slot_minutes: int,
    peak_rules: Iterable[PeakHourRule],
    config: SlotsConfig | None = None,
) -> Quote:
    """
    Price a run of slots: each slot is priced at its own start time and
    scaled to slot_minutes, then summed.
    """
    rules = list(peak_rules)
    items = []
    for start in start_minutes:
        start_str = minutes_to_time_str(start)
        rate = price_for_slot(
            venue, target_date, time(start // 60, start % 60), rules, config
        )
        items.append(QuoteItem(
            start=start_str,
            minutes=slot_minutes,
            hourly_rate=rate,
            amount=scale_to_duration(rate, slot_minutes),
        ))
    return Quote(items=tuple(items))


# ── Helpers ──────────────────────────────────────────────────────────────


def _base_price(venue: Venue) -> Decimal:
    """venue.price_per_hour as Decimal; the one value pricing cannot do without."""
    value = venue.price_per_hour
    if value is None or isinstance(value, bool):
        raise ConfigurationError("Venue has no base price per hour", venue_id=venue.id)
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(
            f"Venue base price is not numeric: {value!r}", venue_id=venue.id
        )
    if not price.is_finite():
        raise ConfigurationError(
            f"Venue base price is not numeric: {value!r}", venue_id=venue.id
        )
    return price


def _pick_rule(
    rules: list[PeakHourRule],
    kind: PeakRuleKind,
    target_date: date,
    minute: int,
    venue: Venue,
) -> Optional[PeakHourRule]:
    """
    Matching rule of one kind. Overlapping rules are a configuration anomaly:
    the one with the smallest start time wins (then the smallest id).
    """
    matches = [
        r for r in rules
        if r.kind is kind and r.applies_to(target_date) and r.contains(minute)
    ]
    if not matches:
        return None

    matches.sort(key=lambda r: (r.start_minute, r.id if r.id is not None else 0))
    if len(matches) > 1:
        logger.warning(
            f"Venue {venue.id}: {len(matches)} overlapping '{kind.value}' peak rules "
            f"match {target_date} {minutes_to_time_str(minute)}, "
            f"using rule {matches[0].id} starting {minutes_to_time_str(matches[0].start_minute)}"
        )
    return matches[0]


def _day_part_price(
    minute: int,
    morning_start: Optional[time],
    evening_start: Optional[time],
    morning_price: Optional[Decimal],
    evening_price: Optional[Decimal],
    venue: Venue,
    config: SlotsConfig,
) -> Decimal:
    """Morning price inside [morning_start, evening_start), evening price otherwise."""
    start = time_to_minutes(morning_start or config.morning_start)
    end = time_to_minutes(evening_start or config.evening_start)

    if start <= minute < end:
        return morning_price if morning_price is not None else _base_price(venue)
    return evening_price if evening_price is not None else _base_price(venue)
