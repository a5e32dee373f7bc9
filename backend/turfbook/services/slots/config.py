# backend/turfbook/services/slots/config.py
"""
Slots configuration and time-of-day helpers.
"""

from dataclasses import dataclass
from datetime import time
from functools import lru_cache


MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class SlotsConfig:
    """
    Configuration for the slots/pricing system.

    Attributes:
        default_slot_minutes: Granularity used when a venue has no slot_interval
        allowed_slot_minutes: Granularities offered to admins (10..120)
        horizon_days: How many days ahead slots can be requested
        pending_hold_minutes: How long an unpaid pending booking holds its slot
        cache_ttl_seconds: Upper bound on Redis base-grid lifetime
        clamp_trailing_slot: Emit a shortened last slot instead of dropping it
        morning_start / evening_start: Day-part boundaries used when a venue
            leaves its own boundaries empty
    """
    default_slot_minutes: int = 30
    allowed_slot_minutes: tuple[int, ...] = (10, 15, 30, 45, 60, 90, 120)
    horizon_days: int = 60
    pending_hold_minutes: int = 5
    cache_ttl_seconds: int = 86400  # 24 hours
    clamp_trailing_slot: bool = False
    morning_start: time = time(6, 0)
    evening_start: time = time(18, 0)

    def __post_init__(self):
        """Validate configuration."""
        if self.default_slot_minutes <= 0:
            raise ValueError(
                f"default_slot_minutes must be positive, got {self.default_slot_minutes}"
            )
        if self.default_slot_minutes not in self.allowed_slot_minutes:
            raise ValueError(
                f"default_slot_minutes must be one of {self.allowed_slot_minutes}, "
                f"got {self.default_slot_minutes}"
            )

    def slots_per_day(self, slot_minutes: int) -> int:
        """
        Number of slots in a full 24h day for a granularity.

        - 15 min → 96 slots
        - 30 min → 48 slots
        - 60 min → 24 slots
        """
        return MINUTES_PER_DAY // slot_minutes


@lru_cache
def get_slots_config() -> SlotsConfig:
    """Get slots configuration (singleton), built from application settings."""
    from ...config import settings

    return SlotsConfig(
        default_slot_minutes=settings.slot_default_minutes,
        horizon_days=settings.booking_horizon_days,
        pending_hold_minutes=settings.pending_hold_minutes,
        cache_ttl_seconds=settings.slots_cache_ttl_seconds,
        clamp_trailing_slot=settings.slots_clamp_trailing,
    )


# ── Time helpers ─────────────────────────────────────────────────────────


def time_to_minutes(value: time) -> int:
    """Minutes since midnight for a time-of-day (seconds are ignored)."""
    return value.hour * 60 + value.minute


def minutes_to_time(total_minutes: int) -> time:
    """Convert minutes since midnight to a time; 1440 is clamped to 23:59."""
    if total_minutes >= MINUTES_PER_DAY:
        return time(23, 59)
    return time(total_minutes // 60, total_minutes % 60)


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" or "HH:MM:SS" to minutes since midnight."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 24 and 0 <= minute < 60) or (hour == 24 and minute):
        raise ValueError(f"Invalid time string: {value!r}")
    return hour * 60 + minute


def minutes_to_time_str(total_minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM" (1440 → "24:00")."""
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def parse_time(value) -> time:
    """Accept a time or an "HH:MM[:SS]" string."""
    if isinstance(value, time):
        return value
    minutes = time_str_to_minutes(str(value))
    if minutes >= MINUTES_PER_DAY:
        raise ValueError(f"Time of day out of range: {value!r}")
    return time(minutes // 60, minutes % 60)
