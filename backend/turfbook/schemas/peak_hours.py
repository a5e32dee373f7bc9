# backend/turfbook/schemas/peak_hours.py

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..services.slots.config import time_str_to_minutes


class PeakHourCreate(BaseModel):
    venue_id: int
    type: Literal["day", "date"]
    days_of_week: Optional[list[int | str]] = None
    specific_date: Optional[date] = None
    start_time: str = Field(description="HH:MM")
    end_time: str = Field(description="HH:MM, exclusive")
    price: Decimal = Field(ge=0)

    @model_validator(mode="after")
    def check_rule(self):
        if time_str_to_minutes(self.start_time) >= time_str_to_minutes(self.end_time):
            raise ValueError("start_time must be before end_time")
        if self.type == "day" and not self.days_of_week:
            raise ValueError("days_of_week is required for 'day' rules")
        if self.type == "date" and self.specific_date is None:
            raise ValueError("specific_date is required for 'date' rules")
        return self

    model_config = {"from_attributes": True}


class PeakHourUpdate(BaseModel):
    days_of_week: Optional[list[int | str]] = None
    specific_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)

    @field_validator("start_time", "end_time", "price")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v

    model_config = {"from_attributes": True}


class PeakHourRead(BaseModel):
    id: int
    venue_id: int
    type: str
    days_of_week: Optional[list[int | str]] = None
    specific_date: Optional[date] = None
    start_time: str
    end_time: str
    price: Decimal
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
