# backend/turfbook/schemas/venues.py

from datetime import datetime, time
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

SLOT_INTERVALS = (10, 15, 30, 45, 60, 90, 120)


def _check_interval(v: Optional[int]) -> Optional[int]:
    if v is not None and v not in SLOT_INTERVALS:
        raise ValueError(f"slot_interval must be one of {SLOT_INTERVALS}")
    return v


def _check_not_null(v):
    if v is None:
        raise ValueError("cannot be null")
    return v


class VenueCreate(BaseModel):
    name: str
    description: str = ""
    location: str = ""
    type: str = "football"

    price_per_hour: Decimal = Field(ge=0)
    opening_time: time
    closing_time: time
    slot_interval: int = 60

    max_players: int = 10
    min_hours: int = Field(1, ge=1)
    max_hours: int = Field(4, ge=1)

    is_weekday_pricing_enabled: bool = False
    weekday_morning_start: Optional[time] = None
    weekday_evening_start: Optional[time] = None
    weekday_morning_price: Optional[Decimal] = None
    weekday_evening_price: Optional[Decimal] = None

    is_weekend_pricing_enabled: bool = False
    weekend_morning_start: Optional[time] = None
    weekend_evening_start: Optional[time] = None
    weekend_morning_price: Optional[Decimal] = None
    weekend_evening_price: Optional[Decimal] = None

    image_url: Optional[str] = None

    _validate_interval = field_validator("slot_interval")(_check_interval)

    @model_validator(mode="after")
    def check_hours(self):
        if self.opening_time >= self.closing_time:
            raise ValueError("opening_time must be before closing_time")
        if self.min_hours > self.max_hours:
            raise ValueError("min_hours cannot exceed max_hours")
        return self

    model_config = {"from_attributes": True}


class VenueUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None

    price_per_hour: Optional[Decimal] = Field(None, ge=0)
    opening_time: Optional[time] = None
    closing_time: Optional[time] = None
    slot_interval: Optional[int] = None

    max_players: Optional[int] = None
    min_hours: Optional[int] = Field(None, ge=1)
    max_hours: Optional[int] = Field(None, ge=1)

    is_weekday_pricing_enabled: Optional[bool] = None
    weekday_morning_start: Optional[time] = None
    weekday_evening_start: Optional[time] = None
    weekday_morning_price: Optional[Decimal] = None
    weekday_evening_price: Optional[Decimal] = None

    is_weekend_pricing_enabled: Optional[bool] = None
    weekend_morning_start: Optional[time] = None
    weekend_evening_start: Optional[time] = None
    weekend_morning_price: Optional[Decimal] = None
    weekend_evening_price: Optional[Decimal] = None

    is_disabled: Optional[bool] = None
    disabled_reason: Optional[str] = None
    image_url: Optional[str] = None

    _validate_interval = field_validator("slot_interval")(_check_interval)
    _validate_not_null = field_validator(
        "name", "description", "location", "type",
        "price_per_hour", "opening_time", "closing_time", "slot_interval",
        "max_players", "min_hours", "max_hours",
        "is_weekday_pricing_enabled", "is_weekend_pricing_enabled", "is_disabled",
    )(_check_not_null)

    model_config = {"from_attributes": True}


class VenueRead(BaseModel):
    id: int
    name: str
    description: str
    location: str
    type: str

    price_per_hour: Decimal
    opening_time: time
    closing_time: time
    slot_interval: int

    max_players: int
    min_hours: int
    max_hours: int

    is_weekday_pricing_enabled: bool
    weekday_morning_start: Optional[time] = None
    weekday_evening_start: Optional[time] = None
    weekday_morning_price: Optional[Decimal] = None
    weekday_evening_price: Optional[Decimal] = None

    is_weekend_pricing_enabled: bool
    weekend_morning_start: Optional[time] = None
    weekend_evening_start: Optional[time] = None
    weekend_morning_price: Optional[Decimal] = None
    weekend_evening_price: Optional[Decimal] = None

    is_disabled: bool
    disabled_reason: Optional[str] = None
    image_url: Optional[str] = None

    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
