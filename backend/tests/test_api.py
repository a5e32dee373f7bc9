from datetime import datetime, time
from decimal import Decimal

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from turfbook.models import Venues

DAY = "2030-01-07"  # Monday
NOW = "2030-01-06T10:00:00"


@pytest.fixture(autouse=True)
def fixed_clock(monkeypatch):
    monkeypatch.setattr(
        "turfbook.routers.bookings.local_now", lambda: datetime(2030, 1, 6, 10, 0)
    )


def get_day(client, venue_id, **params):
    return client.get(
        "/slots/day",
        params={"venue_id": venue_id, "date": DAY, "local_now": NOW, **params},
    )


def book(client, venue_id, start="18:00", minutes=60):
    return client.post("/bookings/", json={
        "venue_id": venue_id,
        "date": DAY,
        "start_time": start,
        "duration_minutes": minutes,
        "customer_name": "Ravi",
    })


# ── Slots ────────────────────────────────────────────────────────────────


def test_day_slots_for_open_venue(client, venue_row):
    r = get_day(client, venue_row.id)

    assert r.status_code == 200
    data = r.json()
    assert data["slot_minutes"] == 60
    assert len(data["slots"]) == 16
    assert data["slots"][0]["start"] == "06:00"
    assert data["slots"][-1]["end"] == "22:00"
    assert {s["status"] for s in data["slots"]} == {"bookable"}
    assert {Decimal(s["price_per_hour"]) for s in data["slots"]} == {Decimal("1000")}


def test_day_slots_with_requested_granularity(client, venue_row):
    r = get_day(client, venue_row.id, slot_minutes=30)

    assert r.status_code == 200
    assert len(r.json()["slots"]) == 32


def test_day_slots_show_bookings_and_blocks(client, venue_row):
    r = client.post("/blocked_dates/", json={
        "venue_id": venue_row.id,
        "start_date": DAY,
        "blocked_ranges": [{"start": "09:00", "end": "10:00"}],
        "reason": "Maintenance",
    })
    assert r.status_code == 201
    assert book(client, venue_row.id, "14:00").status_code == 201

    slots = {s["start"]: s["status"] for s in get_day(client, venue_row.id).json()["slots"]}

    assert slots["14:00"] == "booked"
    assert slots["09:00"] == "blocked"
    assert slots["10:00"] == "bookable"


def test_day_slots_mark_past_on_current_day(client, venue_row):
    r = get_day(client, venue_row.id, local_now="2030-01-07T12:15:00")

    statuses = {s["start"]: s["status"] for s in r.json()["slots"]}
    assert statuses["12:00"] == "past"
    assert statuses["13:00"] == "bookable"


def test_day_slots_use_cached_base_grid(client, venue_row, fake_redis):
    fake_redis.exists.return_value = 1
    fake_redis.zrangebyscore.return_value = [b"06:00|07:00|blocked", b"07:00|08:00|bookable"]

    slots = get_day(client, venue_row.id).json()["slots"]

    assert [(s["start"], s["status"]) for s in slots] == [
        ("06:00", "blocked"),
        ("07:00", "bookable"),
    ]


def test_day_slots_survive_redis_outage(client, venue_row, fake_redis):
    fake_redis.exists.side_effect = RedisConnectionError("down")

    r = get_day(client, venue_row.id)

    assert r.status_code == 200
    assert len(r.json()["slots"]) == 16


def test_day_slots_reject_past_and_far_dates(client, venue_row):
    assert get_day(client, venue_row.id, date="2030-01-05").status_code == 400
    assert get_day(client, venue_row.id, date="2030-06-01").status_code == 400


def test_day_slots_unknown_venue(client):
    assert get_day(client, 999).status_code == 404


def test_misconfigured_venue(client, db):
    row = Venues(
        name="Broken",
        price_per_hour=Decimal("1000"),
        opening_time=time(22, 0),
        closing_time=time(6, 0),
    )
    db.add(row)
    db.commit()

    r = get_day(client, row.id)

    assert r.status_code == 422
    assert r.json()["detail"] == "Venue is misconfigured"


def test_slot_price_is_hourly_with_scaled_amount(client, venue_row):
    r = client.post("/peak_hours/", json={
        "venue_id": venue_row.id,
        "type": "day",
        "days_of_week": ["Monday"],
        "start_time": "18:00",
        "end_time": "20:00",
        "price": "1500",
    })
    assert r.status_code == 201

    r = client.get("/slots/price", params={
        "venue_id": venue_row.id, "date": DAY, "time": "18:00", "minutes": 30,
    })

    data = r.json()
    assert Decimal(data["price_per_hour"]) == Decimal("1500")
    assert data["minutes"] == 30
    assert Decimal(data["amount"]) == Decimal("750")


def test_invalidate_endpoint(client, venue_row, fake_redis):
    r = client.post("/slots/invalidate", params={"venue_id": venue_row.id})

    assert r.status_code == 200
    assert r.json()["dates"] == "all"
    fake_redis.keys.assert_called_with(f"slots:day:{venue_row.id}:*")


# ── Bookings ─────────────────────────────────────────────────────────────


def test_booking_lifecycle(client, venue_row):
    r = book(client, venue_row.id)
    assert r.status_code == 201
    booking = r.json()
    assert booking["status"] == "pending"

    r = client.post(f"/bookings/{booking['id']}/confirm")
    assert r.json()["status"] == "confirmed"
    assert client.post(f"/bookings/{booking['id']}/confirm").status_code == 200

    r = client.post(f"/bookings/{booking['id']}/cancel", json={"reason": "rain"})
    assert r.json()["status"] == "cancelled"
    assert r.json()["cancel_reason"] == "rain"

    assert client.post(f"/bookings/{booking['id']}/confirm").status_code == 409


def test_double_booking_conflicts(client, venue_row):
    assert book(client, venue_row.id).status_code == 201
    assert book(client, venue_row.id).status_code == 409


def test_booking_validation_errors(client, venue_row):
    assert book(client, venue_row.id, "18:30").status_code == 400
    assert book(client, 999).status_code == 404
    assert book(client, venue_row.id, minutes=0).status_code == 422


def test_booking_patch_and_delete_not_allowed(client, venue_row):
    booking_id = book(client, venue_row.id).json()["id"]

    assert client.patch(f"/bookings/{booking_id}", json={}).status_code == 405
    assert client.delete(f"/bookings/{booking_id}").status_code == 405


def test_list_bookings_by_status(client, venue_row):
    book(client, venue_row.id, "08:00")
    second = book(client, venue_row.id, "09:00").json()
    client.post(f"/bookings/{second['id']}/cancel")

    r = client.get("/bookings/", params={"venue_id": venue_row.id, "status": "pending"})

    assert [b["start_time"] for b in r.json()] == ["08:00:00"]


# ── Admin resources ──────────────────────────────────────────────────────


def test_blocking_booked_date_conflicts(client, venue_row):
    book(client, venue_row.id)

    r = client.post("/blocked_dates/", json={"venue_id": venue_row.id, "start_date": DAY})

    assert r.status_code == 409


def test_blocked_date_invalidates_cache(client, venue_row, fake_redis):
    r = client.post("/blocked_dates/", json={
        "venue_id": venue_row.id,
        "start_date": DAY,
        "end_date": "2030-01-08",
    })

    assert r.status_code == 201
    patterns = [c.args[0] for c in fake_redis.keys.call_args_list]
    assert patterns == [
        f"slots:day:{venue_row.id}:2030-01-07:*",
        f"slots:day:{venue_row.id}:2030-01-08:*",
    ]
    assert client.patch(f"/blocked_dates/{r.json()['id']}", json={}).status_code == 405


def test_venue_schedule_change_invalidates_cache(client, venue_row, fake_redis):
    r = client.patch(f"/venues/{venue_row.id}", json={"price_per_hour": "1200"})
    assert r.status_code == 200
    fake_redis.keys.assert_not_called()

    r = client.patch(f"/venues/{venue_row.id}", json={"closing_time": "23:00:00"})
    assert r.status_code == 200
    fake_redis.keys.assert_called_once_with(f"slots:day:{venue_row.id}:*")


def test_venue_patch_rejects_inverted_hours(client, venue_row):
    r = client.patch(f"/venues/{venue_row.id}", json={"opening_time": "23:00:00"})

    assert r.status_code == 400


def test_venue_create_and_soft_delete(client):
    r = client.post("/venues/", json={
        "name": "Rooftop Box",
        "price_per_hour": "900",
        "opening_time": "07:00:00",
        "closing_time": "23:00:00",
        "slot_interval": 30,
    })
    assert r.status_code == 201
    venue_id = r.json()["id"]

    assert client.delete(f"/venues/{venue_id}").status_code == 204
    assert venue_id not in [v["id"] for v in client.get("/venues/").json()]
    assert client.get(f"/venues/{venue_id}").json()["is_disabled"] is True


def test_venue_rejects_unknown_interval(client):
    r = client.post("/venues/", json={
        "name": "Odd",
        "price_per_hour": "900",
        "opening_time": "07:00:00",
        "closing_time": "23:00:00",
        "slot_interval": 25,
    })

    assert r.status_code == 422


def test_event_blocks_its_window(client, venue_row):
    r = client.post("/events/", json={
        "venue_id": venue_row.id,
        "title": "Sunday League",
        "event_type": "tournament",
        "start_date": DAY,
        "end_date": DAY,
        "start_time": "18:00:00",
        "end_time": "20:00:00",
    })
    assert r.status_code == 201

    slots = {s["start"]: s["status"] for s in get_day(client, venue_row.id).json()["slots"]}
    assert slots["17:00"] == "bookable"
    assert slots["18:00"] == "blocked"
    assert slots["19:00"] == "blocked"

    client.patch(f"/events/{r.json()['id']}/status", json={"status": "cancelled"})
    slots = {s["start"]: s["status"] for s in get_day(client, venue_row.id).json()["slots"]}
    assert slots["18:00"] == "bookable"


def test_peak_hour_validation(client, venue_row):
    r = client.post("/peak_hours/", json={
        "venue_id": venue_row.id,
        "type": "day",
        "start_time": "18:00",
        "end_time": "20:00",
        "price": "1500",
    })
    assert r.status_code == 422

    r = client.post("/peak_hours/", json={
        "venue_id": venue_row.id,
        "type": "date",
        "specific_date": DAY,
        "start_time": "20:00",
        "end_time": "24:00",
        "price": "1800",
    })
    assert r.status_code == 201

    r = client.patch(f"/peak_hours/{r.json()['id']}", json={"start_time": "24:00"})
    assert r.status_code == 400


def test_health(client):
    r = client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"database": True, "redis": True}


def test_peak_hour_patch_rejects_nulls(client, venue_row):
    r = client.post("/peak_hours/", json={
        "venue_id": venue_row.id,
        "type": "day",
        "days_of_week": [0],
        "start_time": "18:00",
        "end_time": "20:00",
        "price": "1500",
    })
    rule_id = r.json()["id"]

    assert client.patch(f"/peak_hours/{rule_id}", json={"start_time": None}).status_code == 422
    assert client.patch(f"/peak_hours/{rule_id}", json={"price": None}).status_code == 422
    assert client.patch(f"/peak_hours/{rule_id}", json={"price": "1600"}).status_code == 200


def test_venue_patch_rejects_null_price(client, venue_row):
    r = client.patch(f"/venues/{venue_row.id}", json={"price_per_hour": None})

    assert r.status_code == 422
    assert client.get(f"/venues/{venue_row.id}").json()["price_per_hour"] is not None
