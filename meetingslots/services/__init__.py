"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_service import BookingService, CalendarClientProtocol

__all__ = ["BookingService", "CalendarClientProtocol"]
