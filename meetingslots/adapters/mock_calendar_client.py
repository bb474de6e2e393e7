"""
Mock calendar client for running without Google authorization.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime


class MockCalendarClient:
    """
    Mock client that simulates the Google Calendar API.

    Busy intervals come from the constructor or from a JSON file with a
    list of ``{"start": ..., "end": ...}`` entries. Created events are
    recorded instead of being sent anywhere.
    """

    def __init__(self, busy: Optional[List[Dict[str, Any]]] = None):
        """
        Initialize the mock client.

        Args:
            busy: Raw busy intervals returned by every query
        """
        self.busy = list(busy or [])
        self.created_events: List[Dict[str, Any]] = []
        self.busy_queries: List[Dict[str, str]] = []

    @classmethod
    def from_json(cls, data_file: Path) -> "MockCalendarClient":
        """Load busy intervals from a JSON file (empty if it doesn't exist)."""
        if not data_file.exists():
            return cls()

        with open(data_file, "r", encoding="utf-8") as f:
            return cls(busy=json.load(f))

    def get_busy(
        self,
        time_min: DateTime,
        time_max: DateTime,
        timezone: str,
    ) -> List[Dict[str, Any]]:
        """Return the busy intervals overlapping the requested window."""
        self.busy_queries.append(
            {
                "time_min": time_min.isoformat(),
                "time_max": time_max.isoformat(),
                "timezone": timezone,
            }
        )

        result: List[Dict[str, Any]] = []
        for entry in self.busy:
            try:
                start = pendulum.parse(entry["start"], tz=timezone)
                end = pendulum.parse(entry["end"], tz=timezone)
            except (KeyError, TypeError, ValueError):
                # Leave malformed entries for the busy-window model to reject
                result.append(entry)
                continue

            if start < time_max and end > time_min:
                result.append(entry)

        return result

    def create_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """Record the event and return a fake resource for it."""
        event_id = f"mock-event-{len(self.created_events) + 1}"
        created = {
            **event,
            "id": event_id,
            "htmlLink": f"https://calendar.example.com/event?eid={event_id}",
        }
        self.created_events.append(created)
        return created
