# backend/turfbook/schemas/bookings.py

import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class BookingCreate(BaseModel):
    venue_id: int
    date: date
    start_time: time
    duration_minutes: int = Field(gt=0, description="Booking length in minutes")

    payment_method: str = "online"
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None

    @field_validator("customer_phone")
    @classmethod
    def normalize_phone(cls, v: Optional[str]) -> Optional[str]:
        """Keep digits and a leading +."""
        if v is None:
            return v
        if v.startswith("+"):
            return "+" + re.sub(r"\D", "", v[1:])
        return re.sub(r"\D", "", v)

    model_config = {"from_attributes": True}


class BookingCancel(BaseModel):
    reason: Optional[str] = None


class BookingRead(BaseModel):
    id: int

    venue_id: int
    date: date
    start_time: time
    end_time: time
    duration_minutes: int

    total_price: Decimal
    price_breakup: Optional[list[dict[str, Any]]] = None
    status: str
    payment_method: str

    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    cancel_reason: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
