"""
backend/turfbook/services/events.py

Event emitter: pushes booking events to a Redis queue consumed by the
notification worker (confirmation / cancellation emails).

Queue:
- events:bookings - booking_created, booking_confirmed, booking_cancelled
"""

import json
import time
import logging

from redis.exceptions import RedisError

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

BOOKINGS_QUEUE = "events:bookings"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit a booking event.

    Pushed to Redis list `events:bookings`. Delivery failures are logged,
    never raised: the booking transition has already been committed.
    """
    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(BOOKINGS_QUEUE, json.dumps(event, default=str))
        logger.info(f"Event emitted: {event_type} → {BOOKINGS_QUEUE}")
    except RedisError as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
