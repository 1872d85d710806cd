"""
Opaque bearer-token sessions.

A session is nothing more than a random hex string stored on the user
record.  Issuing a new token for a user overwrites the old one, which is
the only way a token ever stops working: there is no expiry and no
explicit logout on the server.
"""

from __future__ import annotations

import logging
import secrets

from .models import User, parse_record
from .record_store import RecordStore

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
DEFAULT_TOKEN_BYTES = 16


class SessionIssuer:
    """Generate bearer tokens and map them back to users."""

    def __init__(self, store: RecordStore, token_bytes: int = DEFAULT_TOKEN_BYTES) -> None:
        self._store = store
        self.token_bytes = token_bytes

    def generate_token(self) -> str:
        """Return a fresh cryptographically random, hex-encoded token."""
        return secrets.token_hex(self.token_bytes)

    def resolve(self, token: str | None) -> User | None:
        """
        Return the user currently holding *token*.

        Args:
            token: The bearer credential presented by the client.

        Returns:
            The matching :class:`User`, or ``None`` when the token is empty
            or no user holds it (never issued, or overwritten by a later
            login).
        """
        if not token:
            return None

        candidate = token.encode("utf-8")
        for record in self._store.load(USERS_COLLECTION):
            stored = record.get("token")
            if not isinstance(stored, str) or not stored:
                continue
            if secrets.compare_digest(stored.encode("utf-8"), candidate):
                return parse_record(User, record)

        logger.debug("Bearer token did not resolve to any user")
        return None
