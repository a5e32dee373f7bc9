from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
    Time,
    false,
    func,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Venues(Base):
    __tablename__ = 'venues'

    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, server_default=text("''"))
    location = Column(Text, nullable=False, server_default=text("''"))
    type = Column(Text, nullable=False, server_default=text("'football'"))
    price_per_hour = Column(Numeric(10, 2), nullable=False)
    opening_time = Column(Time, nullable=False)
    closing_time = Column(Time, nullable=False)
    slot_interval = Column(Integer, nullable=False, server_default=text('60'))
    max_players = Column(Integer, nullable=False, server_default=text('10'))
    min_hours = Column(Integer, nullable=False, server_default=text('1'))
    max_hours = Column(Integer, nullable=False, server_default=text('4'))
    id = Column(Integer, primary_key=True)

    is_weekday_pricing_enabled = Column(Boolean, nullable=False, server_default=false())
    weekday_morning_start = Column(Time)
    weekday_evening_start = Column(Time)
    weekday_morning_price = Column(Numeric(10, 2))
    weekday_evening_price = Column(Numeric(10, 2))

    is_weekend_pricing_enabled = Column(Boolean, nullable=False, server_default=false())
    weekend_morning_start = Column(Time)
    weekend_evening_start = Column(Time)
    weekend_morning_price = Column(Numeric(10, 2))
    weekend_evening_price = Column(Numeric(10, 2))

    is_disabled = Column(Boolean, nullable=False, server_default=false())
    disabled_reason = Column(Text)
    image_url = Column(Text)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    bookings = relationship('Bookings', back_populates='venue')
    blocked_dates = relationship('BlockedDates', back_populates='venue')
    peak_hours = relationship('PeakHours', back_populates='venue')
    events = relationship('Events', back_populates='venue')


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        Index('ix_bookings_venue_date', 'venue_id', 'date'),
    )

    venue_id = Column(ForeignKey('venues.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    price_breakup = Column(JSON)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    payment_method = Column(Text, nullable=False, server_default=text("'online'"))
    id = Column(Integer, primary_key=True)
    customer_name = Column(Text)
    customer_phone = Column(Text)
    customer_email = Column(Text)
    cancel_reason = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    venue = relationship('Venues', back_populates='bookings')


class BlockedDates(Base):
    __tablename__ = 'blocked_dates'

    venue_id = Column(ForeignKey('venues.id', ondelete='CASCADE'), nullable=False)
    start_date = Column(Date, nullable=False)
    id = Column(Integer, primary_key=True)
    end_date = Column(Date)
    blocked_ranges = Column(JSON)  # [{"start": "HH:MM", "end": "HH:MM"}, ...]
    blocked_times = Column(JSON)  # legacy: ["HH:MM", ...], one hour each
    reason = Column(Text)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    venue = relationship('Venues', back_populates='blocked_dates')


class PeakHours(Base):
    __tablename__ = 'peak_hours'

    venue_id = Column(ForeignKey('venues.id', ondelete='CASCADE'), nullable=False)
    type = Column(Text, nullable=False)  # "day" | "date"
    start_time = Column(Text, nullable=False)  # "HH:MM", "24:00" allowed
    end_time = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    id = Column(Integer, primary_key=True)
    days_of_week = Column(JSON)  # [0..6] or ["Monday", ...]
    specific_date = Column(Date)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    venue = relationship('Venues', back_populates='peak_hours')


class Events(Base):
    __tablename__ = 'events'

    venue_id = Column(ForeignKey('venues.id', ondelete='CASCADE'), nullable=False)
    title = Column(Text, nullable=False)
    event_type = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, server_default=text('0'))
    max_participants = Column(Integer, nullable=False, server_default=text('0'))
    status = Column(Text, nullable=False, server_default=text("'upcoming'"))
    id = Column(Integer, primary_key=True)
    description = Column(Text)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    venue = relationship('Venues', back_populates='events')
