"""Test helper functions shared by the test suites."""

from __future__ import annotations

DEFAULT_PASSWORD = "StrongPass123!"


def auth_headers(token: str) -> dict[str, str]:
    """Build common JSON API headers with bearer token auth."""
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
