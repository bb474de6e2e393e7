"""
Google OAuth2 authentication (authorization code flow with offline access).
"""

import json
import logging
from typing import Optional

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from ..domain.exceptions import AuthorizationMissing, UpstreamError
from .credential_store import CredentialStore

logger = logging.getLogger(__name__)


class GoogleAuthenticator:
    """
    Handles authentication with the Google Calendar API.

    Flow:
    1. The operator opens the consent URL and grants calendar access
    2. Google redirects back with a code, exchanged here for credentials
    3. Credentials are saved to the credential store as ``Credentials.to_json()``
    4. Before every API call expired credentials are renewed and the renewed
       credentials are persisted
    """

    AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URI = "https://oauth2.googleapis.com/token"

    # Required scopes for calendar access
    SCOPES = ["https://www.googleapis.com/auth/calendar"]

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        store: CredentialStore,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the authenticator.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            redirect_uri: Callback URL registered for the client
            store: Where credentials are loaded from and saved to
            session: Optional requests session used when renewing tokens
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.store = store
        self.session = session or requests.Session()

    def authorization_url(self) -> str:
        """Build the consent screen URL."""
        url, _state = self._flow().authorization_url(
            access_type="offline",
            prompt="consent",
        )
        return url

    def is_authorized(self) -> bool:
        """Check whether any credentials are stored."""
        return self.store.load() is not None

    def exchange_code(self, code: str) -> Credentials:
        """
        Exchange an authorization code for credentials and store them.

        Raises:
            UpstreamError: If the token endpoint rejects the code
        """
        flow = self._flow()
        try:
            flow.fetch_token(code=code)
        except (OAuth2Error, requests.exceptions.RequestException, ValueError) as exc:
            logger.error("Authorization code exchange failed: %s", exc)
            raise UpstreamError(f"Authorization code exchange failed: {exc}") from exc

        creds = flow.credentials
        self._save(creds)
        logger.info("Stored new calendar credentials")
        return creds

    def get_access_token(self) -> str:
        """
        Get a valid access token, renewing and persisting it if needed.

        Returns:
            Access token string

        Raises:
            AuthorizationMissing: If no usable credentials have been stored
            UpstreamError: If renewing the token fails
        """
        creds = self.load_credentials()

        if not creds.valid:
            self.refresh(creds)

        return creds.token

    def load_credentials(self) -> Credentials:
        """
        Rebuild credentials from the store.

        Raises:
            AuthorizationMissing: If nothing is stored or the stored data is unusable
        """
        info = self.store.load()
        if not info:
            raise AuthorizationMissing(
                "The calendar is not connected. Open the authorization URL, "
                "grant access and try again."
            )

        try:
            return Credentials.from_authorized_user_info(info, self.SCOPES)
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("Stored calendar credentials are unusable: %s", exc)
            raise AuthorizationMissing(
                "Stored credentials cannot be used. Authorize the calendar again."
            ) from exc

    def refresh(self, creds: Credentials) -> Credentials:
        """
        Renew the access token, then persist the renewed credentials.

        Raises:
            AuthorizationMissing: If there is no refresh token to renew with
            UpstreamError: If the token endpoint fails
        """
        if not creds.refresh_token:
            raise AuthorizationMissing(
                "Stored credentials cannot be renewed. Authorize the calendar again."
            )

        try:
            creds.refresh(Request(session=self.session))
        except GoogleAuthError as exc:
            logger.error("Token renewal failed: %s", exc)
            raise UpstreamError(f"Token renewal failed: {exc}") from exc

        self._save(creds)
        logger.info("Renewed calendar access token")
        return creds

    def clear(self) -> None:
        """Forget stored credentials (force re-authorization next time)."""
        self.store.clear()

    def _flow(self) -> Flow:
        client_config = {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.AUTH_URI,
                "token_uri": self.TOKEN_URI,
                "redirect_uris": [self.redirect_uri],
            }
        }
        # The consent and callback requests build separate flows, so no PKCE verifier
        return Flow.from_client_config(
            client_config,
            scopes=self.SCOPES,
            redirect_uri=self.redirect_uri,
            autogenerate_code_verifier=False,
        )

    def _save(self, creds: Credentials) -> None:
        self.store.save(json.loads(creds.to_json()))
