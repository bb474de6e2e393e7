"""
Application services for listing availability and booking slots.

The service coordinates fetching busy times via a calendar client adapter
and delegates the slot computation to the domain layer. This keeps the
HTTP and CLI layers thin, and the calendar dependency can be replaced by
anything implementing ``CalendarClientProtocol``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Protocol

from pendulum import DateTime

from ..config import AppConfig
from ..domain import busy_windows
from ..domain.availability import AvailabilityAggregator
from ..domain.booking import BookingValidator
from ..domain.clock import Clock
from ..domain.exceptions import SlotUnavailable, UpstreamError, ValidationError
from ..domain.formatting import LocaleFormatter, SlotFormatter
from ..domain.models import Availability, BookingConfirmation, BookingRequest, BusyWindow
from ..domain.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)

BOOKING_CONFIRMED_MESSAGE = "The booking was created and an invitation was sent by email."


class CalendarClientProtocol(Protocol):
    """Protocol describing the calendar client behaviour needed by the service."""

    def get_busy(
        self,
        time_min: DateTime,
        time_max: DateTime,
        timezone: str,
    ) -> List[Dict[str, Any]]:
        """Return raw busy intervals overlapping the window."""

    def create_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """Create the event and return the provider's resource."""


class BookingService:
    """
    Orchestrates busy-time retrieval, slot computation and booking.

    Dependency inversion toward a protocol makes it easy to plug in the
    real Google adapter or the mock implementation in tests.
    """

    def __init__(
        self,
        calendar_client: CalendarClientProtocol,
        clock: Clock,
        aggregator: AvailabilityAggregator,
        validator: BookingValidator,
        verify_bookings: bool = False,
    ) -> None:
        self._calendar_client = calendar_client
        self._clock = clock
        self._aggregator = aggregator
        self._validator = validator
        self._verify_bookings = verify_bookings

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        calendar_client: CalendarClientProtocol,
        clock: Clock | None = None,
        formatter: SlotFormatter | None = None,
    ) -> "BookingService":
        """Wire the domain objects described by ``config``."""
        generator = SlotGenerator(
            templates=config.get_slot_templates(),
            duration_minutes=config.slot_duration_minutes,
        )
        aggregator = AvailabilityAggregator(
            slot_generator=generator,
            formatter=formatter or LocaleFormatter(locale=config.locale),
            timezone=config.timezone,
            lookahead_days=config.lookahead_days,
        )
        return cls(
            calendar_client=calendar_client,
            clock=clock or Clock(config.timezone),
            aggregator=aggregator,
            validator=BookingValidator(timezone=config.timezone),
            verify_bookings=config.verify_bookings,
        )

    @property
    def timezone(self) -> str:
        return self._aggregator.timezone

    def get_availability(self, lookahead_days: int | None = None) -> Availability:
        """
        Retrieve busy data and compute the open slots.

        Raises:
            AuthorizationMissing: If the calendar is not connected
            UpstreamError: If busy data cannot be fetched or is malformed
        """
        now = self._clock.now()
        time_min, time_max = self._aggregator.window_bounds(now, lookahead_days)
        windows = self.fetch_busy_windows(time_min, time_max)

        availability = self._aggregator.build(now, windows, lookahead_days)
        logger.debug(
            "Computed %d day(s) with %d slot(s) from %d busy window(s)",
            len(availability.days),
            sum(len(day.slots) for day in availability.days),
            len(windows),
        )
        return availability

    def fetch_busy_windows(self, time_min: DateTime, time_max: DateTime) -> List[BusyWindow]:
        """
        Fetch busy intervals and normalize them.

        Malformed busy data aborts the computation; treating it as "no
        conflicts" could double-book the calendar.
        """
        raw = self._calendar_client.get_busy(
            time_min=time_min,
            time_max=time_max,
            timezone=self.timezone,
        )

        try:
            return busy_windows.from_external(raw, self.timezone)
        except ValidationError as exc:
            logger.error("Calendar returned malformed busy data: %s", exc)
            raise UpstreamError("Calendar returned malformed busy data") from exc

    def book(self, payload: Mapping[str, Any] | None) -> BookingConfirmation:
        """
        Validate a booking submission and create the event.

        Raises:
            ValidationError: If the submission is incomplete or malformed
            SlotUnavailable: If live re-checking is enabled and the slot is busy
            AuthorizationMissing: If the calendar is not connected
            UpstreamError: If the provider fails
        """
        booking = self._validator.validate(payload)

        if self._verify_bookings:
            self._ensure_slot_is_free(booking)

        event = self._validator.build_event(booking)
        created = self._calendar_client.create_event(event)

        reference = created.get("htmlLink") or created.get("id")
        if not reference:
            raise UpstreamError("Calendar did not return a reference for the new event")

        logger.info("Booked %s - %s", booking.start.isoformat(), booking.end.isoformat())
        return BookingConfirmation(
            external_reference=reference,
            message=BOOKING_CONFIRMED_MESSAGE,
        )

    def _ensure_slot_is_free(self, booking: BookingRequest) -> None:
        windows = self.fetch_busy_windows(booking.start, booking.end)
        if busy_windows.overlaps(booking.start, booking.end, windows):
            raise SlotUnavailable("The selected slot is no longer available.")
