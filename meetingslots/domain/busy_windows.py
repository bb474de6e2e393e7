"""
Normalization of externally reported busy intervals.
"""

from typing import Any, Iterable, List, Mapping

import pendulum
from pendulum import DateTime

from .exceptions import ValidationError
from .models import BusyWindow


def from_external(
    raw_intervals: Iterable[Mapping[str, Any]],
    timezone: str,
) -> List[BusyWindow]:
    """
    Convert raw ``{"start": ..., "end": ...}`` entries into busy windows.

    Zone-less timestamps are read in ``timezone``; zoned ones are converted
    to it. Malformed entries are never skipped.

    Raises:
        ValidationError: If an entry is missing a bound, cannot be parsed,
            or does not start before it ends
    """
    windows: List[BusyWindow] = []

    for index, entry in enumerate(raw_intervals):
        try:
            raw_start = entry["start"]
            raw_end = entry["end"]
        except (KeyError, TypeError):
            raise ValidationError(
                f"Busy interval #{index} is missing its start or end: {entry!r}",
                fields=["start", "end"],
            )

        start = parse_timestamp(raw_start, timezone)
        end = parse_timestamp(raw_end, timezone)
        windows.append(BusyWindow(start=start, end=end))

    return windows


def parse_timestamp(value: Any, timezone: str) -> DateTime:
    """
    Parse an ISO 8601 timestamp into a DateTime in ``timezone``.

    Raises:
        ValidationError: If the value is empty or not a date-time
    """
    if isinstance(value, DateTime):
        return value.in_timezone(timezone)

    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Expected an ISO 8601 timestamp, got {value!r}")

    try:
        parsed = pendulum.parse(value.strip(), tz=timezone)
    except ValueError as exc:
        raise ValidationError(f"Could not parse timestamp '{value}': {exc}") from exc

    if not isinstance(parsed, DateTime):
        raise ValidationError(f"Timestamp '{value}' is not a date-time")

    return parsed.in_timezone(timezone)


def overlaps(
    slot_start: DateTime,
    slot_end: DateTime,
    windows: Iterable[BusyWindow],
) -> bool:
    """
    Check whether ``[slot_start, slot_end)`` overlaps any busy window.

    Touching boundaries do not count as an overlap.
    """
    return any(
        slot_start < window.end and slot_end > window.start
        for window in windows
    )
