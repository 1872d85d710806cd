"""
User registration and login.

The credential manager owns the ``users`` collection: it enforces email
uniqueness, hashes passwords, checks them at login, and asks the session
issuer for a fresh token on every successful login.

Key Concepts Demonstrated:
- Werkzeug password hashing (salted, method configurable)
- Uniqueness check and append under one collection lock
- Distinct errors for unknown email (404) and wrong password (401)
"""

from __future__ import annotations

import hashlib
import logging
import re
import secrets
from typing import NamedTuple

from werkzeug.security import check_password_hash, generate_password_hash

from .errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .models import User, parse_record
from .record_store import RecordStore
from .sessions import USERS_COLLECTION, SessionIssuer

logger = logging.getLogger(__name__)

DEFAULT_HASH_METHOD = "pbkdf2:sha256"

# Unsalted SHA-256 hex digests found in older users.json files
_LEGACY_DIGEST = re.compile(r"[0-9a-f]{64}")


class LoginResult(NamedTuple):
    """What a successful login hands back to the client."""

    token: str
    name: str


def hash_password(password: str, method: str = DEFAULT_HASH_METHOD) -> str:
    """
    Hash a plain-text password.

    Werkzeug salts every hash, so two users with the same password get
    different ``password_hash`` values.

    Args:
        password: The plain-text password.
        method: Werkzeug method string, e.g. ``"pbkdf2:sha256"``.

    Returns:
        The encoded hash, including method and salt.
    """
    return generate_password_hash(password, method=method)


def is_legacy_hash(password_hash: str) -> bool:
    """Return ``True`` for a bare unsalted SHA-256 hex digest."""
    return bool(_LEGACY_DIGEST.fullmatch(password_hash))


def verify_password(password_hash: str, password: str) -> bool:
    """
    Return ``True`` if *password* matches *password_hash*.

    Accepts both Werkzeug hashes and the unsalted SHA-256 hex digests of
    older data files.
    """
    if is_legacy_hash(password_hash):
        digest = hashlib.sha256(password.encode("utf-8")).hexdigest()
        return secrets.compare_digest(digest, password_hash)
    return check_password_hash(password_hash, password)


def _require(**fields: str) -> None:
    for field, value in fields.items():
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"'{field}' is required")


class CredentialManager:
    """
    Register users and authenticate them.

    Args:
        store: Record store holding the ``users`` collection.
        sessions: Issuer used to mint a token at login.
        hash_method: Werkzeug hashing method for new passwords.
    """

    def __init__(
        self,
        store: RecordStore,
        sessions: SessionIssuer,
        hash_method: str = DEFAULT_HASH_METHOD,
    ) -> None:
        self._store = store
        self._sessions = sessions
        self.hash_method = hash_method

    def register(self, name: str, email: str, password: str) -> None:
        """
        Create a new user.

        Raises:
            ValidationError: If any field is empty or whitespace-only.
            ConflictError: If the email is already registered.
        """
        _require(name=name, email=email, password=password)
        name = name.strip()
        email = email.strip()

        with self._store.transaction(USERS_COLLECTION) as users:
            if any(record.get("email") == email for record in users):
                logger.warning("Registration rejected: email already registered")
                raise ConflictError("User already exists")

            user = User(
                name=name,
                email=email,
                password_hash=hash_password(password, self.hash_method),
            )
            users.append(user.model_dump())

        logger.info("Registered user %s", user.id)

    def login(self, email: str, password: str) -> LoginResult:
        """
        Check credentials and issue a new bearer token.

        The new token replaces any token the user already had.  A legacy
        unsalted digest is replaced by a salted hash on the way.

        Returns:
            The token and the user's display name.

        Raises:
            ValidationError: If either field is empty.
            NotFoundError: If no user has this email.
            AuthenticationError: If the password is wrong.  No token is
                issued in that case.
        """
        _require(email=email, password=password)
        email = email.strip()

        with self._store.transaction(USERS_COLLECTION) as users:
            index = next(
                (i for i, record in enumerate(users) if record.get("email") == email),
                None,
            )
            if index is None:
                logger.warning("Login failed: unknown email")
                raise NotFoundError("User not found")

            user = parse_record(User, users[index])
            if not verify_password(user.password_hash, password):
                logger.warning("Login failed for user %s: bad password", user.id)
                raise AuthenticationError("Invalid credentials")

            if is_legacy_hash(user.password_hash):
                user.password_hash = hash_password(password, self.hash_method)
                logger.info("Rehashed legacy password for user %s", user.id)

            user.token = self._sessions.generate_token()
            users[index] = user.model_dump()

        logger.info("User %s logged in", user.id)
        return LoginResult(token=user.token, name=user.name)
