# backend/turfbook/schemas/events.py

from datetime import date, datetime, time
from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, model_validator


class EventCreate(BaseModel):
    venue_id: int
    title: str
    event_type: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    price: Decimal = Decimal("0")
    max_participants: int = 0

    @model_validator(mode="after")
    def check_window(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

    model_config = {"from_attributes": True}


class EventStatusUpdate(BaseModel):
    status: Literal["upcoming", "active", "completed", "cancelled"]


class EventRead(BaseModel):
    id: int
    venue_id: int
    title: str
    event_type: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    price: Decimal
    max_participants: int
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
