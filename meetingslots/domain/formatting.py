"""
Display formatting for days and slots.

The slot logic never formats anything itself; it receives a formatter
implementing ``SlotFormatter``.
"""

from datetime import date
from typing import Protocol

import pendulum
from pendulum import DateTime


class SlotFormatter(Protocol):
    """Protocol describing the labels attached to availability results."""

    def format_day_label(self, day: date) -> str:
        """Return the heading shown for a business day."""

    def format_slot_display(self, start: DateTime) -> str:
        """Return the human-readable text for a slot start."""


class LocaleFormatter:
    """
    Formats labels with pendulum's locale data.

    Defaults render the weekday, day of month and abbreviated month, plus
    the start time for slots (``Monday, 25 Nov, 09:00`` with ``en``).
    """

    DAY_FORMAT = "dddd, D MMM"
    SLOT_FORMAT = "dddd, D MMM, HH:mm"

    def __init__(
        self,
        locale: str = "es",
        day_format: str = DAY_FORMAT,
        slot_format: str = SLOT_FORMAT,
    ):
        self.locale = locale
        self.day_format = day_format
        self.slot_format = slot_format

    def format_day_label(self, day: date) -> str:
        return pendulum.date(day.year, day.month, day.day).format(
            self.day_format, locale=self.locale
        )

    def format_slot_display(self, start: DateTime) -> str:
        return start.format(self.slot_format, locale=self.locale)
