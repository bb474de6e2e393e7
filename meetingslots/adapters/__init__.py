"""
Adapters layer - External integrations (Google Calendar, token storage).
"""

from .credential_store import CredentialStore, FileCredentialStore, InMemoryCredentialStore
from .google_authenticator import GoogleAuthenticator
from .google_calendar_client import GoogleCalendarClient
from .mock_calendar_client import MockCalendarClient

__all__ = [
    "CredentialStore",
    "FileCredentialStore",
    "GoogleAuthenticator",
    "GoogleCalendarClient",
    "InMemoryCredentialStore",
    "MockCalendarClient",
]
