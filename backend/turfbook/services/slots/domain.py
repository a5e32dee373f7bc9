# backend/turfbook/services/slots/domain.py
"""
Value objects consumed and produced by the slots core.

Pure configuration/records, decoupled from the ORM rows in models/generated.py.
Time windows are stored as minutes since midnight so that an end of 24:00
stays representable.
"""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Optional

from .config import MINUTES_PER_DAY, minutes_to_time_str, time_str_to_minutes, time_to_minutes


class SlotStatus(str, Enum):
    BOOKABLE = "bookable"
    BOOKED = "booked"
    BLOCKED = "blocked"
    PAST = "past"


class PeakRuleKind(str, Enum):
    DAY_OF_WEEK = "day"
    SPECIFIC_DATE = "date"


@dataclass(frozen=True)
class TimeRange:
    """Half-open [start_minute, end_minute) window within one day."""

    start_minute: int
    end_minute: int

    def __post_init__(self):
        if not 0 <= self.start_minute < self.end_minute <= MINUTES_PER_DAY:
            raise ValueError(
                f"Invalid time range {self.start_minute}..{self.end_minute}"
            )

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeRange":
        return cls(time_str_to_minutes(start), time_str_to_minutes(end))

    def contains(self, minute: int) -> bool:
        return self.start_minute <= minute < self.end_minute

    def overlaps(self, start_minute: int, end_minute: int) -> bool:
        return self.start_minute < end_minute and start_minute < self.end_minute

    def __str__(self) -> str:
        return f"{minutes_to_time_str(self.start_minute)}-{minutes_to_time_str(self.end_minute)}"


@dataclass(frozen=True)
class Venue:
    """Venue (turf) configuration relevant to availability and pricing."""

    id: int
    opening_time: time
    closing_time: time
    price_per_hour: Optional[Decimal]
    slot_interval: Optional[int] = None

    is_weekday_pricing_enabled: bool = False
    weekday_morning_start: Optional[time] = None
    weekday_evening_start: Optional[time] = None
    weekday_morning_price: Optional[Decimal] = None
    weekday_evening_price: Optional[Decimal] = None

    is_weekend_pricing_enabled: bool = False
    weekend_morning_start: Optional[time] = None
    weekend_evening_start: Optional[time] = None
    weekend_morning_price: Optional[Decimal] = None
    weekend_evening_price: Optional[Decimal] = None

    @property
    def opening_minute(self) -> int:
        return time_to_minutes(self.opening_time)

    @property
    def closing_minute(self) -> int:
        return time_to_minutes(self.closing_time)


@dataclass(frozen=True)
class Reservation:
    """An active booking occupying part of a day."""

    start_time: time
    duration_minutes: Optional[int]
    id: Optional[int] = None
    status: str = "confirmed"

    def window(self, fallback_minutes: int) -> tuple[int, int]:
        """[start, end) in minutes, end clamped to midnight."""
        start = time_to_minutes(self.start_time)
        duration = self.duration_minutes or fallback_minutes
        return start, min(start + duration, MINUTES_PER_DAY)


@dataclass(frozen=True)
class AdminBlock:
    """
    Admin-imposed unavailability.

    No ranges → the whole operating day is blocked for every date in
    [start_date, end_date]; end_date=None means a single day.
    """

    start_date: date
    end_date: Optional[date] = None
    ranges: tuple[TimeRange, ...] = ()
    reason: Optional[str] = None
    id: Optional[int] = None

    @property
    def is_whole_day(self) -> bool:
        return not self.ranges

    def covers(self, target_date: date) -> bool:
        end = self.end_date or self.start_date
        return self.start_date <= target_date <= end


@dataclass(frozen=True)
class PeakHourRule:
    """Price override for a recurring weekday window or one literal date."""

    kind: PeakRuleKind
    start_minute: int
    end_minute: int
    price: Decimal
    weekdays: frozenset[int] = frozenset()  # 0 = Monday … 6 = Sunday
    specific_date: Optional[date] = None
    id: Optional[int] = None

    def contains(self, minute: int) -> bool:
        return self.start_minute <= minute < self.end_minute

    def applies_to(self, target_date: date) -> bool:
        if self.kind is PeakRuleKind.SPECIFIC_DATE:
            return self.specific_date == target_date
        return target_date.weekday() in self.weekdays


@dataclass(frozen=True)
class Slot:
    """One schedulable slot of a day."""

    start_minute: int
    end_minute: int
    status: SlotStatus = SlotStatus.BOOKABLE
    price: Optional[Decimal] = None

    @property
    def start(self) -> str:
        return minutes_to_time_str(self.start_minute)

    @property
    def end(self) -> str:
        return minutes_to_time_str(self.end_minute)

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    @property
    def is_bookable(self) -> bool:
        return self.status is SlotStatus.BOOKABLE


@dataclass(frozen=True)
class QuoteItem:
    start: str
    minutes: int
    hourly_rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class Quote:
    items: tuple[QuoteItem, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        return sum((item.amount for item in self.items), Decimal("0"))

    def as_breakup(self) -> list[dict]:
        """JSON-friendly breakdown stored on the booking row."""
        return [
            {
                "start": item.start,
                "minutes": item.minutes,
                "hourly_rate": str(item.hourly_rate),
                "amount": str(item.amount),
            }
            for item in self.items
        ]
