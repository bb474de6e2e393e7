"""
Storage for OAuth credentials.

The authenticator only talks to a ``CredentialStore``; the file-backed
store is used in production and the in-memory one in tests.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    """Protocol describing where OAuth tokens are kept."""

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored tokens, or None if nothing is stored."""

    def save(self, tokens: Dict[str, Any]) -> None:
        """Persist the given tokens, replacing what was stored."""

    def clear(self) -> None:
        """Forget the stored tokens."""


class FileCredentialStore:
    """
    Keeps tokens in a JSON file readable only by the owner.

    Concurrent saves are not coordinated; the last writer wins.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not load token file %s: %s", self.path, exc)
            return None

        if not isinstance(data, dict) or not data:
            logger.warning("Ignoring token file %s without stored tokens", self.path)
            return None

        return data

    def save(self, tokens: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(tokens, f, indent=2)
        # Set restrictive permissions (owner only)
        self.path.chmod(0o600)
        logger.debug("Saved tokens to %s", self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class InMemoryCredentialStore:
    """Keeps tokens in process memory."""

    def __init__(self, tokens: Optional[Dict[str, Any]] = None):
        self._tokens = dict(tokens) if tokens else None
        self.save_count = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return dict(self._tokens) if self._tokens else None

    def save(self, tokens: Dict[str, Any]) -> None:
        self._tokens = dict(tokens)
        self.save_count += 1

    def clear(self) -> None:
        self._tokens = None
