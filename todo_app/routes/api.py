"""
REST API endpoints for the todo service.

This module decodes each HTTP request into a typed request model, calls
the matching core operation, and serialises the result.  All business
rules live in the core services; the handlers here only translate.

Endpoints:
    GET    /health        - Health check
    POST   /register      - Create a user account
    POST   /login         - Authenticate and receive a bearer token
    GET    /todos         - List the caller's todos
    GET    /todos/<id>    - Get one of the caller's todos
    POST   /todos         - Create a todo
    PUT    /todos/<id>    - Update text and/or completed of a todo
    DELETE /todos/<id>    - Delete a todo

Every error is rendered as ``{"error": <code>, "message": <text>}``.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from flask import Blueprint, Response, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..auth import require_auth
from ..credentials import CredentialManager
from ..errors import TodoAppError, ValidationError
from ..schemas import (
    LoginRequest,
    RegisterRequest,
    TaskCreateRequest,
    TaskUpdateRequest,
    parse_request,
)
from ..task_store import TaskStore

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def _json_error(code: str, message: str, status_code: int) -> tuple[Response, int]:
    """Build the standard JSON error response."""
    return jsonify({"error": code, "message": message}), status_code


def _json_body() -> Any:
    """
    Decode the request body as JSON regardless of Content-Type.

    Raises:
        ValidationError: If the body is empty or not valid JSON.
    """
    data = request.get_json(force=True, silent=True)
    if data is None:
        if not request.get_data():
            raise ValidationError("Request body must be JSON")
        raise ValidationError("Invalid JSON in request body")
    return data


def _credentials() -> CredentialManager:
    return current_app.extensions["credentials"]


def _tasks() -> TaskStore:
    return current_app.extensions["tasks"]


# -----------------------------------------------------------------------------
# API Endpoints
# -----------------------------------------------------------------------------

@api_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """Health check endpoint for deployment verification."""
    return jsonify({
        "status": "healthy",
        "service": "todos",
        "environment": os.getenv("ENVIRONMENT", "unknown"),
    }), 200


@api_bp.route("/register", methods=["POST"])
def register() -> tuple[Response, int]:
    """
    Register a new user account.

    Request Body (JSON):
        name: Display name (required)
        email: Login email, unique across users (required)
        password: Plain-text password (required)

    Returns:
        201 with a confirmation message, or 400 if a field is missing or
        the email is already registered.
    """
    logger.info("POST /register - Registering user")

    body = parse_request(RegisterRequest, _json_body())
    _credentials().register(body.name, body.email, body.password)

    return jsonify({"message": "User registered successfully"}), 201


@api_bp.route("/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """
    Authenticate a user and issue a bearer token.

    Returns:
        200 with ``token`` and ``name``; 400 if a field is missing; 404 if
        the email is unknown; 401 if the password is wrong.
    """
    logger.info("POST /login - Authenticating user")

    body = parse_request(LoginRequest, _json_body())
    result = _credentials().login(body.email, body.password)

    return jsonify({
        "message": "Login successful",
        "token": result.token,
        "name": result.name,
    }), 200


@api_bp.route("/todos", methods=["GET"])
@require_auth
def get_todos() -> tuple[Response, int]:
    """List the caller's todos in the order they were created."""
    logger.info("GET /todos - Fetching todos for user %s", g.user.id)

    todos = _tasks().list(g.user.id)
    logger.info("Found %d todos", len(todos))

    return jsonify([todo.to_dict() for todo in todos]), 200


@api_bp.route("/todos/<todo_id>", methods=["GET"])
@require_auth
def get_todo(todo_id: str) -> tuple[Response, int]:
    """
    Get a single todo by ID.

    Returns:
        200 with the todo, or 404 if it does not exist or belongs to
        another user.
    """
    logger.info("GET /todos/%s - Fetching todo", todo_id)

    todo = _tasks().get(g.user.id, todo_id)
    return jsonify(todo.to_dict()), 200


@api_bp.route("/todos", methods=["POST"])
@require_auth
def create_todo() -> tuple[Response, int]:
    """
    Create a new todo for the caller.

    Request Body (JSON):
        text: What needs doing (required, non-blank)

    Returns:
        201 with the created todo, or 400 if ``text`` is missing.
    """
    logger.info("POST /todos - Creating todo")

    body = parse_request(TaskCreateRequest, _json_body())
    todo = _tasks().create(g.user.id, body.text)

    return jsonify(todo.to_dict()), 201


@api_bp.route("/todos/<todo_id>", methods=["PUT"])
@require_auth
def update_todo(todo_id: str) -> tuple[Response, int]:
    """
    Update an existing todo.

    Only the fields present in the body are changed.

    Request Body (JSON):
        text: New text (optional)
        completed: New completion flag (optional, boolean)

    Returns:
        200 with the updated todo; 404 if not found or not owned; 400 on
        invalid field values.
    """
    logger.info("PUT /todos/%s - Updating todo", todo_id)

    body = parse_request(TaskUpdateRequest, _json_body())
    todo = _tasks().update(g.user.id, todo_id, **body.changes())

    return jsonify(todo.to_dict()), 200


@api_bp.route("/todos/<todo_id>", methods=["DELETE"])
@require_auth
def delete_todo(todo_id: str) -> tuple[str, int]:
    """Delete a todo; 204 with no body, or 404 if not found or not owned."""
    logger.info("DELETE /todos/%s - Deleting todo", todo_id)

    _tasks().delete(g.user.id, todo_id)
    return "", 204


# -----------------------------------------------------------------------------
# Error Handlers
# -----------------------------------------------------------------------------

@api_bp.errorhandler(TodoAppError)
def handle_app_error(error: TodoAppError) -> tuple[Response, int]:
    """Render any domain error with its own status code."""
    if error.status_code >= 500:
        logger.error("%s: %s", type(error).__name__, error.message, exc_info=error)
    else:
        logger.warning("%s: %s", type(error).__name__, error.message)
    return jsonify(error.to_dict()), error.status_code


@api_bp.app_errorhandler(404)
def not_found(error: HTTPException) -> tuple[Response, int]:
    """Handle unknown routes."""
    return _json_error("not_found", "Route not found", 404)


@api_bp.app_errorhandler(405)
def method_not_allowed(error: HTTPException) -> tuple[Response, int]:
    """Handle a known route called with the wrong method."""
    return _json_error("method_not_allowed", "Method not allowed", 405)


@api_bp.app_errorhandler(500)
def internal_error(error: Exception) -> tuple[Response, int]:
    """Handle 500 Internal Server errors."""
    logger.error("Internal server error: %s", error)
    return _json_error("server_error", "Server error", 500)
