from datetime import time
from decimal import Decimal
from unittest.mock import Mock

import pytest
import redis
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from turfbook.database import get_db
from turfbook.main import app
from turfbook.models import Base, Venues
from turfbook.redis_client import get_redis
from turfbook.services.slots.config import SlotsConfig
from turfbook.services.slots.domain import Venue


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_redis():
    """Redis stand-in: empty cache, pipelines accept everything."""
    client = Mock(spec=redis.Redis)
    client.exists.return_value = 0
    client.keys.return_value = []
    client.delete.return_value = 0
    client.ping.return_value = True
    client.pipeline.return_value = Mock()
    return client


@pytest.fixture(autouse=True)
def event_queue(monkeypatch):
    """Capture booking events instead of pushing to a real Redis."""
    queue = Mock(spec=redis.Redis)
    monkeypatch.setattr("turfbook.services.events.redis_client", queue)
    return queue


@pytest.fixture
def client(db, fake_redis):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_redis] = lambda: fake_redis
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def config():
    return SlotsConfig()


@pytest.fixture
def venue():
    """06:00–22:00, hourly slots, 1000 per hour, no day-part pricing."""
    return Venue(
        id=1,
        opening_time=time(6, 0),
        closing_time=time(22, 0),
        price_per_hour=Decimal("1000"),
        slot_interval=60,
    )


@pytest.fixture
def venue_row(db):
    row = Venues(
        name="Arena 5s",
        location="Sector 21",
        price_per_hour=Decimal("1000"),
        opening_time=time(6, 0),
        closing_time=time(22, 0),
        slot_interval=60,
        min_hours=1,
        max_hours=3,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
