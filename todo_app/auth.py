"""
Bearer-token authentication for protected endpoints.

Provides a decorator that resolves the ``Authorization: Bearer <token>``
header to a stored user before the view runs.  Tokens are opaque strings
looked up in the ``users`` collection; nothing is decoded or verified
cryptographically.

Key Concepts Demonstrated:
- Decorator pattern for endpoint authentication (``require_auth``)
- Using ``flask.g`` to store request-scoped user identity
- Raising domain errors and letting the blueprint render them
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import Response, current_app, g, request

from .errors import AuthenticationError
from .models import User
from .sessions import SessionIssuer


def extract_bearer_token() -> str | None:
    """
    Return the token from the current request's Authorization header.

    Returns ``None`` if the header is absent, does not use the Bearer
    scheme, or is empty after stripping whitespace.

    The scheme must be spelled exactly ``Bearer`` followed by a space.
    Lower-case ``bearer`` and a bare token without any scheme are both
    rejected, so clients must send the standard form.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header[7:].strip()
    return token or None


def current_user() -> User:
    """Return the user resolved by :func:`require_auth` for this request."""
    return g.user


def require_auth(view_func: Callable[..., tuple[Response, int] | Response]):
    """
    Decorator that enforces bearer-token authentication on API endpoints.

    On success the resolved :class:`User` is stored on ``flask.g.user`` so
    route handlers can scope their queries to ``g.user.id``.  On failure an
    :class:`AuthenticationError` is raised before the wrapped view runs,
    which the API blueprint turns into a ``401`` response.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = extract_bearer_token()
        if token is None:
            raise AuthenticationError("Unauthorized")

        sessions: SessionIssuer = current_app.extensions["sessions"]
        user = sessions.resolve(token)
        if user is None:
            raise AuthenticationError("Unauthorized")

        g.user = user
        return view_func(*args, **kwargs)

    return wrapper
