"""
Core business logic for enumerating bookable slots.

Pure domain logic without any external dependencies (no API calls, no I/O).
"""

from typing import Iterable, List, Sequence

from pendulum import DateTime

from .busy_windows import overlaps
from .models import BusinessDay, BusyWindow, Slot, SlotTemplate


class SlotGenerator:
    """
    Produces candidate slots from fixed daily start times.

    Algorithm:
    1. Walk forward from the reference day, keeping business days only
    2. Place every template on each business day, in template order
    3. Drop slots that start before "now"
    4. Drop slots that overlap a busy window
    """

    def __init__(self, templates: Sequence[SlotTemplate], duration_minutes: int):
        if duration_minutes <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        self.templates = list(templates)
        self.duration_minutes = duration_minutes

    def generate_days(self, reference_now: DateTime, lookahead_days: int) -> List[DateTime]:
        """
        Return the start of each of the next ``lookahead_days`` business days.

        Lookahead counts business days, so weekends extend the walk. The
        reference day itself is included when it is a business day.
        """
        days: List[DateTime] = []
        cursor = reference_now.start_of("day")

        while len(days) < lookahead_days:
            if BusinessDay.for_date(cursor.date()).is_open:
                days.append(cursor.start_of("day"))
            cursor = cursor.add(days=1)

        return days

    def generate_slots_for_day(
        self,
        day: DateTime,
        now: DateTime,
        busy_windows: Iterable[BusyWindow],
    ) -> List[Slot]:
        """
        Return the slots of ``day`` that are neither past nor busy.

        A slot starting exactly at ``now`` is kept. Output follows template
        order, even if the templates are not sorted by time.
        """
        windows = list(busy_windows)
        slots: List[Slot] = []

        for template in self.templates:
            slot_start = template.on(day)
            slot_end = slot_start.add(minutes=self.duration_minutes)

            if slot_start < now:
                continue

            if overlaps(slot_start, slot_end, windows):
                continue

            slots.append(Slot(start=slot_start, end=slot_end, label=template.label))

        return slots
