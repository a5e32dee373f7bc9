# backend/turfbook/services/slots/errors.py

from typing import Optional


class ConfigurationError(ValueError):
    """Venue configuration makes slot generation or pricing impossible."""

    def __init__(self, message: str, venue_id: Optional[int] = None):
        super().__init__(message)
        self.venue_id = venue_id
