"""
HTTP API used by the booking front-end (Flask).
"""

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..adapters.credential_store import FileCredentialStore
from ..adapters.google_authenticator import GoogleAuthenticator
from ..adapters.google_calendar_client import GoogleCalendarClient
from ..config import AppConfig
from ..domain.exceptions import (
    AuthorizationMissing,
    SlotUnavailable,
    UpstreamError,
    ValidationError,
)
from ..services.booking_service import BookingService

logger = logging.getLogger(__name__)

AUTHORIZATION_HINT = (
    "The calendar is not connected. Visit /api/google/auth-url, "
    "authorize the account and reload."
)
UPSTREAM_APOLOGY = "Sorry, the calendar could not be reached. Please try again later."
UNEXPECTED_ERROR = "An unexpected error occurred."


def create_app(
    config: AppConfig,
    service: BookingService | None = None,
    authenticator: GoogleAuthenticator | None = None,
) -> Flask:
    """
    Build the Flask application.

    Args:
        config: Application configuration
        service: Optional prebuilt booking service (tests, mock mode)
        authenticator: Optional prebuilt authenticator

    Returns:
        Configured Flask app
    """
    if authenticator is None:
        authenticator = GoogleAuthenticator(
            client_id=config.google.client_id,
            client_secret=config.google.client_secret,
            redirect_uri=config.google.redirect_uri,
            store=FileCredentialStore(config.token_path),
        )

    if service is None:
        client = GoogleCalendarClient(authenticator=authenticator, calendar_id=config.calendar_id)
        service = BookingService.from_config(config, calendar_client=client)

    app = Flask(__name__)
    app.config["MEETINGSLOTS"] = config

    @app.get("/api/google/status")
    def status():
        return jsonify({"authorized": authenticator.is_authorized()})

    @app.get("/api/google/auth-url")
    def auth_url():
        return jsonify({"url": authenticator.authorization_url()})

    @app.get("/api/google/oauth2callback")
    def oauth2callback():
        code = request.args.get("code")
        if not code:
            return "Missing OAuth code.", 400

        try:
            authenticator.exchange_code(code)
        except UpstreamError:
            logger.exception("Could not store calendar credentials")
            return "There was an error storing the credentials.", 500

        return (
            "Authorization complete. You can close this window and return "
            "to the site to finish your booking."
        )

    @app.get("/api/google/availability")
    def availability():
        result = service.get_availability()
        return jsonify(result.to_dict())

    @app.post("/api/google/event")
    def create_event():
        payload = request.get_json(silent=True)
        confirmation = service.book(payload)
        return jsonify(confirmation.to_dict())

    @app.get("/api/health")
    def health():
        return jsonify({"ok": True})

    @app.errorhandler(AuthorizationMissing)
    def handle_authorization_missing(exc: AuthorizationMissing):
        logger.info("Rejected request without calendar authorization: %s", exc)
        return jsonify({"error": AUTHORIZATION_HINT}), 403

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        body = {"error": exc.message}
        if exc.fields:
            body["fields"] = exc.fields
        return jsonify(body), 400

    @app.errorhandler(SlotUnavailable)
    def handle_slot_unavailable(exc: SlotUnavailable):
        return jsonify({"error": str(exc)}), 409

    @app.errorhandler(UpstreamError)
    def handle_upstream_error(exc: UpstreamError):
        logger.error("Calendar provider failed: %s", exc, exc_info=exc)
        return jsonify({"error": UPSTREAM_APOLOGY}), 502

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("Unhandled error")
        return jsonify({"error": UNEXPECTED_ERROR}), 500

    return app
