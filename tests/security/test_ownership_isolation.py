"""
Security tests for per-user todo isolation.

Creates todos for one user and verifies that a second, fully
authenticated user can neither see nor change them, and that the
responses are identical to those for a todo that does not exist at all
(OWASP A01 – Broken Access Control).
"""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.security


def test_list_only_shows_own_todos(
    client, data_store, task_factory, logged_in_user, second_user,
    api_headers, second_user_headers,
):
    # Arrange
    _, owner = logged_in_user
    _, other = second_user
    mine = task_factory(user_id=owner.id, text="mine")
    theirs = task_factory(user_id=other.id, text="theirs")

    # Act
    my_list = client.get("/todos", headers=api_headers).get_json()
    their_list = client.get("/todos", headers=second_user_headers).get_json()

    # Assert
    assert my_list == [mine.to_dict()]
    assert their_list == [theirs.to_dict()]


@pytest.mark.parametrize(
    "method, json_body",
    [
        ("get", None),
        ("put", {"completed": True}),
        ("delete", None),
    ],
)
def test_foreign_todo_is_indistinguishable_from_missing(
    client, data_store, sample_task, second_user_headers, method, json_body
):
    """Test that another user's todo yields the same 404 as a missing id."""
    # Act
    foreign = getattr(client, method)(
        f"/todos/{sample_task.id}", json=json_body, headers=second_user_headers
    )
    missing = getattr(client, method)(
        "/todos/no-such-todo", json=json_body, headers=second_user_headers
    )

    # Assert
    assert foreign.status_code == 404
    assert foreign.get_json() == missing.get_json()


def test_foreign_update_and_delete_leave_todo_untouched(
    client, data_store, sample_task, api_headers, second_user_headers
):
    # Act
    client.put(
        f"/todos/{sample_task.id}",
        json={"text": "hijacked", "completed": True},
        headers=second_user_headers,
    )
    client.delete(f"/todos/{sample_task.id}", headers=second_user_headers)

    # Assert
    response = client.get(f"/todos/{sample_task.id}", headers=api_headers)
    assert response.status_code == 200
    assert response.get_json() == sample_task.to_dict()
