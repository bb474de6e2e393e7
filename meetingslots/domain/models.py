"""
Domain models for business days, slots and bookings.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, List

from pendulum import DateTime

from .exceptions import ValidationError

_TEMPLATE_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

# ISO weekdays 1-5 (Monday to Friday)
OPEN_WEEKDAYS = frozenset({1, 2, 3, 4, 5})


@dataclass(frozen=True)
class BusyWindow:
    """
    Represents an immutable interval during which booking is disallowed.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValidationError(
                f"Busy window start {self.start} must be before end {self.end}"
            )


@dataclass(frozen=True)
class BusinessDay:
    """A calendar date and whether bookings may be offered on it."""
    date: date
    is_open: bool

    @classmethod
    def for_date(cls, value: date) -> "BusinessDay":
        return cls(date=value, is_open=value.isoweekday() in OPEN_WEEKDAYS)


@dataclass(frozen=True)
class SlotTemplate:
    """
    A wall-clock time of day at which a slot may begin.

    The original ``HH:MM`` string is kept as the label shown to clients.
    """
    hour: int
    minute: int
    label: str

    @classmethod
    def parse(cls, value: str) -> "SlotTemplate":
        """
        Parse an ``HH:MM`` string.

        Raises:
            ValueError: If the value is not a valid time of day
        """
        text = value.strip()
        match = _TEMPLATE_PATTERN.match(text)
        if not match:
            raise ValueError(f"Slot time must look like HH:MM, got '{value}'")

        hour, minute = int(match.group(1)), int(match.group(2))
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {minute}")

        return cls(hour=hour, minute=minute, label=text)

    def on(self, day: DateTime) -> DateTime:
        """Place this template on the given day (same zone as ``day``)."""
        return day.set(hour=self.hour, minute=self.minute, second=0, microsecond=0)


@dataclass(frozen=True)
class Slot:
    """A bookable slot found during one availability computation."""
    start: DateTime
    end: DateTime
    label: str
    display: str = ""

    def with_display(self, display: str) -> "Slot":
        return replace(self, display=display)

    def to_dict(self) -> Dict[str, str]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "timeLabel": self.label,
            "display": self.display,
        }


@dataclass(frozen=True)
class DayAvailability:
    """All remaining slots of one business day."""
    date: date
    label: str
    slots: List[Slot]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "label": self.label,
            "slots": [slot.to_dict() for slot in self.slots],
        }


@dataclass(frozen=True)
class Availability:
    """Result of an availability query, with metadata for rendering."""
    time_zone: str
    duration_minutes: int
    days: List[DayAvailability] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeZone": self.time_zone,
            "days": [day.to_dict() for day in self.days],
            "meta": {"durationMinutes": self.duration_minutes},
        }


@dataclass(frozen=True)
class BookingRequest:
    """A validated booking, ready to be sent to the calendar provider."""
    start: DateTime
    end: DateTime
    attendee_name: str
    attendee_email: str
    notes: str | None = None


@dataclass(frozen=True)
class BookingConfirmation:
    """Outcome of a successful booking."""
    external_reference: str
    message: str
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "externalReference": self.external_reference,
            "message": self.message,
        }
