# backend/turfbook/schemas/blocked_dates.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, field_validator, model_validator

from ..services.slots.config import time_str_to_minutes


class BlockedRange(BaseModel):
    start: str  # "HH:MM"
    end: str    # "HH:MM", "24:00" allowed

    @model_validator(mode="after")
    def check_range(self):
        if time_str_to_minutes(self.start) >= time_str_to_minutes(self.end):
            raise ValueError("Blocked range start must be before its end")
        return self


class BlockedDateCreate(BaseModel):
    venue_id: int
    start_date: date
    end_date: Optional[date] = None
    blocked_ranges: Optional[list[BlockedRange]] = None
    reason: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def check_end_date(cls, v: Optional[date], info) -> Optional[date]:
        start = info.data.get("start_date")
        if v is not None and start is not None and v < start:
            raise ValueError("end_date cannot be before start_date")
        return v

    model_config = {"from_attributes": True}


class BlockedDateRead(BaseModel):
    id: int
    venue_id: int

    start_date: date
    end_date: Optional[date] = None
    blocked_ranges: Optional[list[BlockedRange]] = None
    blocked_times: Optional[list[str]] = None
    reason: Optional[str] = None

    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
