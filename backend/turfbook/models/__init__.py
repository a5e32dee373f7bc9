from .generated import Base, BlockedDates, Bookings, Events, PeakHours, Venues

__all__ = [
    "Base",
    "Venues",
    "Bookings",
    "BlockedDates",
    "PeakHours",
    "Events",
]
