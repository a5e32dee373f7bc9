# backend/turfbook/services/slots/__init__.py
"""
Slots calculation module.

Core (pure, no I/O):
  resolve_slots   - ordered slot list of one venue day with statuses
  price_for_slot  - hourly rate of one slot

Around it:
  loader          - database rows → domain objects
  redis_store     - base grid cache (Redis Sorted Sets)
  availability    - loads, caches, resolves and prices a day
"""

from .config import SlotsConfig, get_slots_config
from .domain import AdminBlock, PeakHourRule, PeakRuleKind, Reservation, Slot, SlotStatus, TimeRange, Venue
from .errors import ConfigurationError
from .pricing import price_for_slot, quote_slots, scale_to_duration
from .resolver import resolve_slots
from .redis_store import SlotsRedisStore
from .invalidator import invalidate_venue_cache
from .availability import get_day_availability

__all__ = [
    "SlotsConfig",
    "get_slots_config",
    "Venue",
    "Reservation",
    "AdminBlock",
    "TimeRange",
    "PeakHourRule",
    "PeakRuleKind",
    "Slot",
    "SlotStatus",
    "ConfigurationError",
    "resolve_slots",
    "price_for_slot",
    "quote_slots",
    "scale_to_duration",
    "SlotsRedisStore",
    "invalidate_venue_cache",
    "get_day_availability",
]
