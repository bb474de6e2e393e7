"""
Aggregation of generated slots into per-day availability.
"""

from typing import Iterable, List, Tuple

from pendulum import DateTime

from .formatting import SlotFormatter
from .models import Availability, BusyWindow, DayAvailability
from .slot_generator import SlotGenerator


class AvailabilityAggregator:
    """
    Builds the availability list returned to clients.

    Days whose slots were all removed are dropped, so callers never see
    an empty day.
    """

    def __init__(
        self,
        slot_generator: SlotGenerator,
        formatter: SlotFormatter,
        timezone: str,
        lookahead_days: int,
    ):
        self.slot_generator = slot_generator
        self.formatter = formatter
        self.timezone = timezone
        self.lookahead_days = lookahead_days

    def build(
        self,
        now: DateTime,
        busy_windows: Iterable[BusyWindow],
        lookahead_days: int | None = None,
    ) -> Availability:
        """
        Compute availability for the lookahead window starting at ``now``.

        Args:
            now: Current instant, used both as start and as past cutoff
            busy_windows: Normalized busy windows
            lookahead_days: Override for the configured lookahead

        Returns:
            Availability with only non-empty days, in day order
        """
        now = now.in_timezone(self.timezone)
        windows = list(busy_windows)
        count = self.lookahead_days if lookahead_days is None else lookahead_days

        days: List[DayAvailability] = []

        for day in self.slot_generator.generate_days(now, count):
            slots = self.slot_generator.generate_slots_for_day(day, now, windows)
            if not slots:
                continue

            days.append(
                DayAvailability(
                    date=day.date(),
                    label=self.formatter.format_day_label(day.date()),
                    slots=[
                        slot.with_display(self.formatter.format_slot_display(slot.start))
                        for slot in slots
                    ],
                )
            )

        return Availability(
            time_zone=self.timezone,
            duration_minutes=self.slot_generator.duration_minutes,
            days=days,
        )

    def window_bounds(self, now: DateTime, lookahead_days: int | None = None) -> Tuple[DateTime, DateTime]:
        """
        Return the interval busy data must cover for ``build``.

        Runs from the start of today to the end of the last business day.
        """
        now = now.in_timezone(self.timezone)
        count = self.lookahead_days if lookahead_days is None else lookahead_days
        days = self.slot_generator.generate_days(now, count)
        if not days:
            return now.start_of("day"), now.end_of("day")
        return now.start_of("day"), days[-1].end_of("day")
