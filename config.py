"""
Application configuration module.

This module defines configuration classes for different environments
(development, testing, production). Configuration values are loaded
from environment variables with sensible defaults.

The service keeps its state in flat JSON files, so the most important
setting is ``DATA_DIR``: the directory holding ``users.json`` and
``todos.json``.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """
    Base configuration with default settings.

    Every value can be overridden by an environment variable so the same
    code can be deployed anywhere by changing only the environment.
    """

    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")

    # Directory holding the JSON collections (users.json, todos.json)
    DATA_DIR: str = os.environ.get("DATA_DIR", str(BASE_DIR / "instance" / "data"))

    # Number of random bytes behind each bearer token (hex-encoded on the wire)
    TOKEN_BYTES: int = int(os.environ.get("TOKEN_BYTES", "16"))

    # Werkzeug hashing method, e.g. "pbkdf2:sha256" or "scrypt"
    PASSWORD_HASH_METHOD: str = os.environ.get("PASSWORD_HASH_METHOD", "pbkdf2:sha256")

    CORS_ALLOW_ORIGIN: str = os.environ.get("CORS_ALLOW_ORIGIN", "*")

    PORT: int = int(os.environ.get("PORT", "8000"))


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Testing environment configuration.

    Uses a separate data directory so test runs never touch development
    data, and a cheap hashing round count so the suite stays fast.
    """

    DEBUG: bool = True
    TESTING: bool = True

    DATA_DIR: str = os.environ.get(
        "TEST_DATA_DIR", str(BASE_DIR / "instance" / "test_data")
    )
    PASSWORD_HASH_METHOD: str = os.environ.get(
        "TEST_PASSWORD_HASH_METHOD", "pbkdf2:sha256:1000"
    )


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG: bool = False
    TESTING: bool = False


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, production).
             If None, uses FLASK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
