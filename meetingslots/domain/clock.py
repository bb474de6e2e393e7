"""
Time-zone aware clock used for all date math.
"""

import pendulum
from pendulum import DateTime


class Clock:
    """Resolves "now" in the configured time zone."""

    def __init__(self, timezone: str):
        self.timezone = timezone

    def now(self) -> DateTime:
        return pendulum.now(self.timezone)

    def start_of_day(self, moment: DateTime | None = None) -> DateTime:
        return self._localize(moment).start_of("day")

    def end_of_day(self, moment: DateTime | None = None) -> DateTime:
        return self._localize(moment).end_of("day")

    def _localize(self, moment: DateTime | None) -> DateTime:
        if moment is None:
            return self.now()
        return moment.in_timezone(self.timezone)


class FixedClock(Clock):
    """
    Clock frozen at a given instant.

    Used by tests and to preview availability as of another moment.
    """

    def __init__(self, instant: DateTime, timezone: str | None = None):
        super().__init__(timezone or instant.timezone_name)
        self._instant = instant.in_timezone(self.timezone)

    def now(self) -> DateTime:
        return self._instant
