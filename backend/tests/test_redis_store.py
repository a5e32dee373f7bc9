from datetime import date
from unittest.mock import Mock

import redis
from redis.exceptions import ConnectionError as RedisConnectionError

from turfbook.services.slots import Slot, SlotStatus, SlotsRedisStore, invalidate_venue_cache
from turfbook.services.slots.invalidator import get_affected_dates
from turfbook.services.slots.redis_store import EMPTY_SENTINEL, decode_slot, encode_slot

MONDAY = date(2030, 1, 7)


def make_store(config):
    client = Mock(spec=redis.Redis)
    pipe = Mock()
    client.pipeline.return_value = pipe
    return SlotsRedisStore(client, config), client, pipe


def test_slot_member_encoding():
    slot = Slot(start_minute=21 * 60, end_minute=24 * 60, status=SlotStatus.BLOCKED)

    assert encode_slot(slot) == "21:00|24:00|blocked"
    assert decode_slot("21:00|24:00|blocked") == slot


def test_store_base_grid_scores_by_start_minute(config):
    store, _, pipe = make_store(config)
    slots = [
        Slot(start_minute=360, end_minute=420),
        Slot(start_minute=420, end_minute=480, status=SlotStatus.BLOCKED),
    ]

    store.store_base_grid(3, MONDAY, 60, slots)

    key = "slots:day:3:2030-01-07:60"
    pipe.delete.assert_called_once_with(key)
    pipe.zadd.assert_called_once_with(
        key, {"06:00|07:00|bookable": 360, "07:00|08:00|blocked": 420}
    )
    pipe.expireat.assert_called_once()
    pipe.execute.assert_called_once()


def test_empty_grid_stores_sentinel(config):
    store, _, pipe = make_store(config)

    store.store_base_grid(3, MONDAY, 30, [])

    pipe.zadd.assert_called_once_with("slots:day:3:2030-01-07:30", {EMPTY_SENTINEL: -1})


def test_get_base_grid_miss_returns_none(config):
    store, client, _ = make_store(config)
    client.exists.return_value = 0

    assert store.get_base_grid(3, MONDAY, 60) is None
    client.zrangebyscore.assert_not_called()


def test_get_base_grid_decodes_members(config):
    store, client, _ = make_store(config)
    client.exists.return_value = 1
    client.zrangebyscore.return_value = [b"06:00|07:00|bookable", b"07:00|08:00|blocked"]

    slots = store.get_base_grid(3, MONDAY, 60)

    assert [(s.start, s.status) for s in slots] == [
        ("06:00", SlotStatus.BOOKABLE),
        ("07:00", SlotStatus.BLOCKED),
    ]


def test_get_base_grid_sentinel_is_empty_hit(config):
    store, client, _ = make_store(config)
    client.exists.return_value = 1
    client.zrangebyscore.return_value = [EMPTY_SENTINEL.encode()]

    assert store.get_base_grid(3, MONDAY, 60) == []


def test_delete_specific_dates_covers_all_granularities(config):
    store, client, _ = make_store(config)
    client.keys.side_effect = lambda pattern: [pattern.replace("*", "60")]
    client.delete.return_value = 2

    deleted = store.delete_day_grids(3, [MONDAY, date(2030, 1, 8)])

    assert deleted == 2
    client.delete.assert_called_once_with(
        "slots:day:3:2030-01-07:60", "slots:day:3:2030-01-08:60"
    )


def test_delete_without_keys_skips_delete(config):
    store, client, _ = make_store(config)
    client.keys.return_value = []

    assert store.delete_day_grids(3) == 0
    client.keys.assert_called_once_with("slots:day:3:*")
    client.delete.assert_not_called()


def test_invalidation_tolerates_redis_outage():
    client = Mock(spec=redis.Redis)
    client.keys.side_effect = RedisConnectionError("down")

    assert invalidate_venue_cache(client, 3) == 0


def test_affected_dates():
    assert get_affected_dates(MONDAY, None) == [MONDAY]
    assert get_affected_dates(MONDAY, date(2030, 1, 9)) == [
        MONDAY, date(2030, 1, 8), date(2030, 1, 9),
    ]
