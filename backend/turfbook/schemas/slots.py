"""
Pydantic schemas for slots API.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from ..services.slots.domain import SlotStatus


class SlotInfo(BaseModel):
    """Information about a single slot."""
    start: str  # "HH:MM"
    end: str    # "HH:MM"
    status: SlotStatus
    price_per_hour: Optional[Decimal] = Field(
        None, description="Hourly rate; multiply by duration/60 for the slot amount"
    )

    model_config = {"from_attributes": True}


class SlotsDayResponse(BaseModel):
    """Response with detailed slots for a day."""
    venue_id: int
    date: date
    slot_minutes: int = Field(description="Grid step in minutes")
    slots: list[SlotInfo]

    model_config = {"from_attributes": True}


class SlotPriceResponse(BaseModel):
    """Price of one slot start."""
    venue_id: int
    date: date
    time: str  # "HH:MM"
    price_per_hour: Decimal = Field(description="Hourly rate, not scaled by duration")
    minutes: int
    amount: Decimal = Field(description="price_per_hour * minutes / 60")

    model_config = {"from_attributes": True}


class SlotsInvalidateResponse(BaseModel):
    venue_id: int
    deleted_keys: int
    dates: list[date] | str
