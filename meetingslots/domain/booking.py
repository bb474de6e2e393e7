"""
Validation of booking requests and construction of calendar events.
"""

from typing import Any, Dict, List, Mapping

from .busy_windows import parse_timestamp
from .exceptions import ValidationError
from .models import BookingRequest

REQUIRED_FIELDS = ("start", "end", "name", "email")

DEFAULT_SUMMARY = "Strategy meeting"
DEFAULT_DESCRIPTION_HEADER = "Strategy session booked online"


class BookingValidator:
    """
    Checks booking submissions and turns them into event payloads.

    Busy windows are not consulted here: the client is expected to pick a
    slot from a previously returned availability list. ``BookingService``
    can re-check against live busy data when configured to.
    """

    def __init__(
        self,
        timezone: str,
        summary: str = DEFAULT_SUMMARY,
        description_header: str = DEFAULT_DESCRIPTION_HEADER,
    ):
        self.timezone = timezone
        self.summary = summary
        self.description_header = description_header

    def validate(self, payload: Mapping[str, Any] | None) -> BookingRequest:
        """
        Validate a raw booking submission.

        Args:
            payload: Mapping with ``start``, ``end``, ``name``, ``email``
                and optional ``notes``

        Returns:
            BookingRequest with zoned start and end

        Raises:
            ValidationError: If the payload is not a mapping, a required
                field is missing or blank, a
                timestamp cannot be parsed, or the booking ends before it starts
        """
        if payload is not None and not isinstance(payload, Mapping):
            raise ValidationError("booking must be a JSON object")
        payload = payload or {}

        missing = [name for name in REQUIRED_FIELDS if not _text(payload.get(name))]
        if missing:
            raise ValidationError("missing required field", fields=missing)

        start = parse_timestamp(_text(payload["start"]), self.timezone)
        end = parse_timestamp(_text(payload["end"]), self.timezone)
        if start >= end:
            raise ValidationError("booking must start before it ends", fields=["start", "end"])

        return BookingRequest(
            start=start,
            end=end,
            attendee_name=_text(payload["name"]),
            attendee_email=_text(payload["email"]),
            notes=_text(payload.get("notes")) or None,
        )

    def build_event(self, booking: BookingRequest) -> Dict[str, Any]:
        """Build the event body sent to the calendar provider."""
        description_lines: List[str] = [
            self.description_header,
            f"Participant: {booking.attendee_name}",
            booking.notes or "",
        ]

        return {
            "summary": self.summary,
            "description": "\n".join(line for line in description_lines if line),
            "start": {
                "dateTime": booking.start.isoformat(),
                "timeZone": self.timezone,
            },
            "end": {
                "dateTime": booking.end.isoformat(),
                "timeZone": self.timezone,
            },
            "attendees": [
                {
                    "email": booking.attendee_email,
                    "displayName": booking.attendee_name,
                }
            ],
            "reminders": {"useDefault": True},
        }


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
