"""
Google Calendar API client for reading busy times and creating events.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from pendulum import DateTime

from ..domain.exceptions import UpstreamError
from .google_authenticator import GoogleAuthenticator

logger = logging.getLogger(__name__)


class GoogleCalendarClient:
    """
    Client for Google Calendar API v3 operations.

    Every call first asks the authenticator for an access token, which
    renews and persists the credentials when they are about to expire.
    """

    CALENDAR_API_ENDPOINT = "https://www.googleapis.com/calendar/v3"

    def __init__(
        self,
        authenticator: GoogleAuthenticator,
        calendar_id: str = "primary",
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        """
        Initialize the Calendar API client.

        Args:
            authenticator: Source of access tokens
            calendar_id: Calendar to read from and write to
            session: Optional requests session (for connection reuse or tests)
            timeout: Timeout in seconds for API requests
        """
        self.authenticator = authenticator
        self.calendar_id = calendar_id
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_busy(
        self,
        time_min: DateTime,
        time_max: DateTime,
        timezone: str,
    ) -> List[Dict[str, Any]]:
        """
        Get busy intervals of the calendar via the freeBusy endpoint.

        Args:
            time_min: Start of the time window
            time_max: End of the time window
            timezone: IANA timezone identifier for the response

        Returns:
            List of raw ``{"start": ..., "end": ...}`` dicts

        Raises:
            AuthorizationMissing: If no credentials are stored
            UpstreamError: If the API call fails
        """
        payload = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "timeZone": timezone,
            "items": [{"id": self.calendar_id}],
        }
        data = self._request("POST", "/freeBusy", json=payload)
        return self._parse_freebusy_response(data)

    def create_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert an event and send invitations to its attendees.

        Returns:
            The created event resource

        Raises:
            AuthorizationMissing: If no credentials are stored
            UpstreamError: If the API call fails
        """
        return self._request(
            "POST",
            f"/calendars/{quote(self.calendar_id, safe='')}/events",
            json=event,
            params={"sendUpdates": "all", "conferenceDataVersion": 0},
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        access_token = self.authenticator.get_access_token()
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.request(
                method,
                f"{self.CALENDAR_API_ENDPOINT}{path}",
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as exc:
            logger.error("Google Calendar request %s %s failed: %s", method, path, exc)
            raise UpstreamError(f"Google Calendar request failed: {exc}") from exc

    def _parse_freebusy_response(self, response_data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Extract the busy list for our calendar.

        Response format:
        {
            "calendars": {
                "primary": {
                    "busy": [{"start": "...", "end": "..."}],
                    "errors": [{"domain": "...", "reason": "..."}]
                }
            }
        }
        """
        calendars = response_data.get("calendars")
        if not isinstance(calendars, dict):
            raise UpstreamError("freeBusy response has no calendars section")

        entry = calendars.get(self.calendar_id) or calendars.get("primary") or {}

        errors = entry.get("errors")
        if errors:
            reasons = ", ".join(error.get("reason", "unknown") for error in errors)
            raise UpstreamError(f"freeBusy reported errors for {self.calendar_id}: {reasons}")

        busy = entry.get("busy", [])
        if not isinstance(busy, list):
            raise UpstreamError("freeBusy busy list is malformed")

        return busy
