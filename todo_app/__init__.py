"""
Flask application factory for the todo service.

This module creates and configures the Flask application using the
factory pattern, allowing for different configurations (development,
testing, production).  The service keeps its state in two JSON files
(``users.json`` and ``todos.json``) managed by a
:class:`~todo_app.record_store.RecordStore` that belongs to the app.

Key Concepts Demonstrated:
- Application factory pattern (create_app)
- Extension-style initialisation of the record store (``init_app``)
- Core services registered on ``app.extensions`` for the routes to use
- CORS for a browser client via Flask-CORS
"""

from __future__ import annotations

import logging

from flask import Flask, Response, request
from flask_cors import CORS

from config import get_config

from .credentials import CredentialManager
from .record_store import RecordStore
from .sessions import USERS_COLLECTION, SessionIssuer
from .task_store import TASKS_COLLECTION, TaskStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization"]


def _answer_preflight() -> Response | None:
    """Answer OPTIONS on any path with an empty 204; Flask-CORS adds the headers."""
    if request.method == "OPTIONS":
        return Response(status=204)
    return None


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     If None, uses FLASK_ENV environment variable.

    Returns:
        Configured Flask application instance with both collections
        initialised on disk.
    """
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    logger.info("Creating app with config: %s", config_class.__name__)

    # Each app gets its own record store bound to its own DATA_DIR
    records = RecordStore()
    records.init_app(app)
    sessions = SessionIssuer(records, token_bytes=app.config["TOKEN_BYTES"])
    app.extensions["sessions"] = sessions
    app.extensions["credentials"] = CredentialManager(
        records, sessions, hash_method=app.config["PASSWORD_HASH_METHOD"]
    )
    app.extensions["tasks"] = TaskStore(records)

    CORS(
        app,
        origins=app.config["CORS_ALLOW_ORIGIN"],
        methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
        send_wildcard=True,
    )
    app.before_request(_answer_preflight)

    # Register blueprints
    from .routes.api import api_bp

    app.register_blueprint(api_bp)

    # Loading creates any missing collection file, so a broken data
    # directory fails at startup rather than on the first request.
    for collection in (USERS_COLLECTION, TASKS_COLLECTION):
        records.load(collection)
    logger.info("Data files ready in %s", records.data_dir)

    return app
