# backend/turfbook/redis_client.py

from redis import Redis

from .config import settings

# Lazy connection: nothing is opened until the first command
redis_client = Redis.from_url(
    settings.redis_url,
    socket_timeout=2.0,
    socket_connect_timeout=2.0,
)


def get_redis() -> Redis:
    """FastAPI dependency, overridable in tests."""
    return redis_client
