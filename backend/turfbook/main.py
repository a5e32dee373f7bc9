import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .redis_client import get_redis
from .routers import blocked_dates, bookings, events, peak_hours, slots, venues
from .services.slots.errors import ConfigurationError

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Turf Booking API")

# ===== Routers =====
app.include_router(venues.router)
app.include_router(bookings.router)
app.include_router(blocked_dates.router)
app.include_router(peak_hours.router)
app.include_router(events.router)
app.include_router(slots.router)


# ===== Errors =====
@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Venue misconfigured (venue_id={exc.venue_id}): {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": "Venue is misconfigured", "reason": str(exc)},
    )


@app.get("/health")
def health(
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    try:
        db.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError as e:
        logger.error(f"Health check: database unavailable: {e}")
        database_ok = False

    try:
        redis_ok = bool(redis.ping())
    except RedisError as e:
        logger.warning(f"Health check: redis unavailable: {e}")
        redis_ok = False

    return {"database": database_ok, "redis": redis_ok}
