"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import AvailabilityAggregator
from .booking import BookingValidator
from .clock import Clock, FixedClock
from .formatting import LocaleFormatter, SlotFormatter
from .models import (
    Availability,
    BookingConfirmation,
    BookingRequest,
    BusinessDay,
    BusyWindow,
    DayAvailability,
    Slot,
    SlotTemplate,
)
from .slot_generator import SlotGenerator

__all__ = [
    "Availability",
    "AvailabilityAggregator",
    "BookingConfirmation",
    "BookingRequest",
    "BookingValidator",
    "BusinessDay",
    "BusyWindow",
    "Clock",
    "DayAvailability",
    "FixedClock",
    "LocaleFormatter",
    "Slot",
    "SlotFormatter",
    "SlotGenerator",
    "SlotTemplate",
]
