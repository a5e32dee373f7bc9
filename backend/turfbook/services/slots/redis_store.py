# backend/turfbook/services/slots/redis_store.py
"""
Redis storage for base slot grids using Sorted Sets.

Base grid = venue hours + admin blocks + events. Bookings and past-slot
suppression are NOT cached; they are overlaid on every read.

Key format: slots:day:{venue_id}:{date}:{slot_minutes}
Value: Sorted Set where member = "HH:MM|HH:MM|status", score = start minute.

Query: ZRANGEBYSCORE key -inf +inf → slots in ascending start order.
Sentinel: "__empty__" with score=-1 marks "calculated, zero slots".
"""

from datetime import date, datetime, timedelta

from redis import Redis

from .config import SlotsConfig, get_slots_config, time_str_to_minutes
from .domain import Slot, SlotStatus


EMPTY_SENTINEL = "__empty__"


class SlotsRedisStore:
    """Redis storage wrapper using Sorted Sets for base grids."""

    KEY_PREFIX = "slots:day"

    def __init__(self, redis: Redis, config: SlotsConfig | None = None):
        self.redis = redis
        self.config = config or get_slots_config()

    def _key(self, venue_id: int, dt: date, slot_minutes: int) -> str:
        return f"{self.KEY_PREFIX}:{venue_id}:{dt.isoformat()}:{slot_minutes}"

    def _expire_at(self, dt: date) -> int:
        """End of the day + 1 minute, capped by cache_ttl_seconds from now."""
        end_of_day = datetime.combine(dt + timedelta(days=1), datetime.min.time())
        ttl_cap = datetime.now() + timedelta(seconds=self.config.cache_ttl_seconds)
        return int(min(end_of_day, ttl_cap).timestamp()) + 60

    # ── Write ────────────────────────────────────────────────────────────

    def store_base_grid(
        self,
        venue_id: int,
        dt: date,
        slot_minutes: int,
        slots: list[Slot],
    ) -> None:
        """
        Store a calculated base grid.

        Args:
            venue_id: Venue ID
            dt: Target date
            slot_minutes: Granularity the grid was built with
            slots: Base grid; empty list → sentinel is stored.
        """
        key = self._key(venue_id, dt, slot_minutes)
        pipe = self.redis.pipeline()

        # Remove old data
        pipe.delete(key)

        if slots:
            pipe.zadd(key, {encode_slot(s): s.start_minute for s in slots})
        else:
            # Empty day — sentinel so EXISTS returns True
            pipe.zadd(key, {EMPTY_SENTINEL: -1})
        pipe.expireat(key, self._expire_at(dt))

        pipe.execute()

    # ── Read ─────────────────────────────────────────────────────────────

    def get_base_grid(
        self,
        venue_id: int,
        dt: date,
        slot_minutes: int,
    ) -> list[Slot] | None:
        """
        Get a cached base grid.

        Returns:
            Slots in ascending start order, or None on cache miss.
        """
        key = self._key(venue_id, dt, slot_minutes)
        if not self.redis.exists(key):
            return None

        members = self.redis.zrangebyscore(key, "-inf", "+inf")
        result = []
        for m in members:
            member = m.decode() if isinstance(m, bytes) else m
            if member == EMPTY_SENTINEL:
                continue
            result.append(decode_slot(member))
        return result

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_day_grids(
        self,
        venue_id: int,
        dates: list[date] | None = None,
    ) -> int:
        """
        Delete cached grids (all granularities).

        Args:
            venue_id: Venue ID
            dates: Specific dates, or None to delete all for venue.

        Returns:
            Number of deleted keys.
        """
        if dates:
            keys = []
            for dt in dates:
                keys.extend(self.redis.keys(f"{self.KEY_PREFIX}:{venue_id}:{dt.isoformat()}:*"))
        else:
            keys = self.redis.keys(f"{self.KEY_PREFIX}:{venue_id}:*")

        if not keys:
            return 0

        return self.redis.delete(*keys)


# ── Member encoding ──────────────────────────────────────────────────────


def encode_slot(slot: Slot) -> str:
    return f"{slot.start}|{slot.end}|{slot.status.value}"


def decode_slot(member: str) -> Slot:
    start, end, status = member.split("|")
    return Slot(
        start_minute=time_str_to_minutes(start),
        end_minute=time_str_to_minutes(end),
        status=SlotStatus(status),
    )
