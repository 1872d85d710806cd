"""
Shared pytest fixtures for the todo service test suite.

This module contains fixtures that are shared across all test modules.
Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure test
isolation by emptying both JSON collections around every test.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Fixture dependencies
- Test data factories backed by the real core services
- Data-directory setup/teardown
- Test client creation
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable

import pytest
from faker import Faker

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"
os.environ.setdefault("TEST_DATA_DIR", tempfile.mkdtemp(prefix="todo-test-data-"))

from todo_app import create_app
from todo_app.credentials import CredentialManager
from todo_app.models import Task, User
from todo_app.record_store import RecordStore
from todo_app.sessions import USERS_COLLECTION, SessionIssuer
from todo_app.task_store import TASKS_COLLECTION, TaskStore

from tests.helpers import DEFAULT_PASSWORD, auth_headers

# Initialize Faker for generating test data
fake = Faker()

FAST_HASH_METHOD = "pbkdf2:sha256:1000"


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app():
    """
    Create application instance for the test session.

    The 'session' scope means the same app instance is reused for all
    tests; per-test isolation comes from the ``data_store`` fixture.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """Create a test client for making HTTP requests without a server."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def data_store(app):
    """
    Provide the app's record store with both collections emptied.

    Collections are reset before the test runs and again afterwards, so
    no user, token or todo survives into the next test.
    """
    records: RecordStore = app.extensions["record_store"]
    for collection in (USERS_COLLECTION, TASKS_COLLECTION):
        records.save(collection, [])
    yield records
    for collection in (USERS_COLLECTION, TASKS_COLLECTION):
        records.save(collection, [])


# -----------------------------------------------------------------------------
# Stand-alone Core Fixtures (no Flask app)
# -----------------------------------------------------------------------------

@pytest.fixture
def record_store(tmp_path) -> RecordStore:
    """Provide a record store rooted in a per-test temporary directory."""
    return RecordStore(tmp_path / "data")


@pytest.fixture
def session_issuer(record_store) -> SessionIssuer:
    return SessionIssuer(record_store)


@pytest.fixture
def credential_manager(record_store, session_issuer) -> CredentialManager:
    return CredentialManager(record_store, session_issuer, hash_method=FAST_HASH_METHOD)


@pytest.fixture
def task_store(record_store) -> TaskStore:
    return TaskStore(record_store)


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def user_factory(app, data_store) -> Callable[..., User]:
    """
    Factory fixture that registers users through the credential manager.

    Example:
        def test_something(user_factory):
            user = user_factory(name="Alice")
            assert user.token is None
    """

    def _create_user(
        name: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        email = email or fake.unique.email()
        app.extensions["credentials"].register(name or fake.name(), email, password)
        record = next(r for r in data_store.load(USERS_COLLECTION) if r["email"] == email)
        return User.model_validate(record)

    return _create_user


@pytest.fixture
def token_for_user(app, user_factory) -> Callable[..., tuple[str, User]]:
    """
    Factory fixture that registers a user and logs them in.

    Returns:
        A callable producing ``(token, user)`` pairs.
    """

    def _token_for_user(**kwargs) -> tuple[str, User]:
        password = kwargs.pop("password", DEFAULT_PASSWORD)
        user = user_factory(password=password, **kwargs)
        result = app.extensions["credentials"].login(user.email, password)
        return result.token, user

    return _token_for_user


@pytest.fixture
def logged_in_user(token_for_user) -> tuple[str, User]:
    """The default authenticated user for API tests."""
    return token_for_user(name="User One", email="user.one@example.com")


@pytest.fixture
def second_user(token_for_user) -> tuple[str, User]:
    """A second authenticated user, used for ownership-isolation tests."""
    return token_for_user(name="User Two", email="user.two@example.com")


@pytest.fixture
def api_headers(logged_in_user) -> dict[str, str]:
    """Bearer headers for the default user."""
    token, _ = logged_in_user
    return auth_headers(token)


@pytest.fixture
def second_user_headers(second_user) -> dict[str, str]:
    """Bearer headers for the second user."""
    token, _ = second_user
    return auth_headers(token)


@pytest.fixture
def task_factory(app, data_store) -> Callable[..., Task]:
    """
    Factory fixture that creates todos directly through the task store.

    Example:
        def test_something(task_factory, logged_in_user):
            _, user = logged_in_user
            task = task_factory(user_id=user.id, text="Water plants")
    """

    def _create_task(
        *,
        user_id: str,
        text: str | None = None,
        completed: bool = False,
    ) -> Task:
        tasks: TaskStore = app.extensions["tasks"]
        task = tasks.create(user_id, text or fake.sentence(nb_words=4))
        if completed:
            task = tasks.update(user_id, task.id, completed=True)
        return task

    return _create_task


@pytest.fixture
def sample_task(task_factory, logged_in_user) -> Task:
    """Create a single todo owned by the default user."""
    _, user = logged_in_user
    return task_factory(user_id=user.id, text="Sample todo")
