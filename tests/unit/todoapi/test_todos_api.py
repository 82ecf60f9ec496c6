"""Unit tests for the todo endpoints, served over in-memory stores."""

import pytest
from bson import ObjectId


@pytest.fixture
def alice(signup):
    body, token = signup("alice@mail.com")
    return body["_id"], {"x-auth": token}


@pytest.fixture
def bob(signup):
    body, token = signup("bob@mail.com")
    return body["_id"], {"x-auth": token}


def _create(client, headers, text="buy milk"):
    response = client.post("/todos", json={"text": text}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTodo:
    def test_create_returns_todo(self, client, alice):
        user_id, headers = alice

        todo = _create(client, headers, text="  buy milk  ")

        assert todo["text"] == "buy milk"
        assert todo["completed"] is False
        assert todo["completedAt"] is None
        assert todo["_creator"] == user_id
        assert ObjectId.is_valid(todo["_id"])

    @pytest.mark.parametrize("body", [{"text": ""}, {"text": "   "}])
    def test_blank_text_is_rejected(self, client, alice, todos, body):
        response = client.post("/todos", json=body, headers=alice[1])

        assert response.status_code == 400
        assert todos.todos == {}

    @pytest.mark.parametrize("body", [{}, {"text": 42}, {"completed": True}])
    def test_malformed_body_is_rejected(self, client, alice, body):
        response = client.post("/todos", json=body, headers=alice[1])

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid JSON Format"

    def test_creator_cannot_be_chosen(self, client, alice, bob):
        todo = client.post("/todos", json={"text": "x", "_creator": bob[0]}, headers=alice[1]).json()

        assert todo["_creator"] == alice[0]

    def test_requires_authentication(self, client, todos):
        response = client.post("/todos", json={"text": "buy milk"})

        assert response.status_code == 401
        assert todos.todos == {}


class TestListTodos:
    def test_list_is_scoped_to_caller(self, client, alice, bob):
        mine = _create(client, alice[1], "alice todo")
        _create(client, bob[1], "bob todo")

        response = client.get("/todos", headers=alice[1])

        assert response.status_code == 200
        assert response.json() == {"results": [mine], "code": 200}

    def test_empty_list(self, client, alice):
        assert client.get("/todos", headers=alice[1]).json() == {"results": [], "code": 200}

    def test_requires_authentication(self, client):
        assert client.get("/todos").status_code == 401


class TestGetTodo:
    def test_get_own_todo(self, client, alice):
        todo = _create(client, alice[1])

        response = client.get(f"/todos/{todo['_id']}", headers=alice[1])

        assert response.status_code == 200
        assert response.json() == todo

    def test_other_users_todo_is_not_found(self, client, alice, bob):
        todo = _create(client, alice[1])

        assert client.get(f"/todos/{todo['_id']}", headers=bob[1]).status_code == 404

    @pytest.mark.parametrize("todo_id", ["123", "not-an-id", str(ObjectId())])
    def test_malformed_or_unknown_id_is_not_found(self, client, alice, todo_id):
        assert client.get(f"/todos/{todo_id}", headers=alice[1]).status_code == 404


class TestUpdateTodo:
    def test_complete_then_edit_text(self, client, alice):
        todo = _create(client, alice[1])
        url = f"/todos/{todo['_id']}"

        completed = client.patch(url, json={"completed": True}, headers=alice[1])

        assert completed.status_code == 201
        body = completed.json()
        assert body["completed"] is True
        assert isinstance(body["completedAt"], int)
        assert body["text"] == "buy milk"

        edited = client.patch(url, json={"text": "buy oat milk"}, headers=alice[1])

        assert edited.status_code == 201
        assert edited.json()["text"] == "buy oat milk"
        assert edited.json()["completed"] is False
        assert edited.json()["completedAt"] is None

    @pytest.mark.parametrize("completed", [False, "true", 1, None])
    def test_only_literal_true_completes(self, client, alice, completed):
        todo = _create(client, alice[1])

        body = client.patch(f"/todos/{todo['_id']}", json={"completed": completed}, headers=alice[1]).json()

        assert body["completed"] is False
        assert body["completedAt"] is None

    def test_other_fields_are_ignored(self, client, alice, bob):
        todo = _create(client, alice[1])

        body = client.patch(
            f"/todos/{todo['_id']}",
            json={"completed": True, "_creator": bob[0], "completedAt": 1, "_id": str(ObjectId())},
            headers=alice[1],
        ).json()

        assert body["_id"] == todo["_id"]
        assert body["_creator"] == alice[0]
        assert body["completedAt"] != 1

    def test_blank_text_is_rejected(self, client, alice, todos):
        todo = _create(client, alice[1])

        response = client.patch(f"/todos/{todo['_id']}", json={"text": "  "}, headers=alice[1])

        assert response.status_code == 400
        assert todos.todos[todo["_id"]].text == "buy milk"

    def test_other_users_todo_is_not_found(self, client, alice, bob, todos):
        todo = _create(client, alice[1])

        response = client.patch(f"/todos/{todo['_id']}", json={"completed": True}, headers=bob[1])

        assert response.status_code == 404
        assert todos.todos[todo["_id"]].completed is False

    def test_malformed_id_is_not_found(self, client, alice):
        assert client.patch("/todos/123", json={"completed": True}, headers=alice[1]).status_code == 404

    @pytest.mark.parametrize("kwargs", [{}, {"json": {"text": 5}}, {"json": {"completed": True, "text": ["x"]}}])
    def test_malformed_id_wins_over_bad_body(self, client, alice, kwargs):
        response = client.patch("/todos/123", headers=alice[1], **kwargs)

        assert response.status_code == 404

    def test_bad_body_on_valid_id_is_rejected(self, client, alice):
        todo = _create(client, alice[1])

        response = client.patch(f"/todos/{todo['_id']}", json={"text": 5}, headers=alice[1])

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid JSON Format"

    def test_bodyless_patch_resets_completion(self, client, alice, todos):
        todo = _create(client, alice[1])
        url = f"/todos/{todo['_id']}"
        client.patch(url, json={"completed": True}, headers=alice[1])

        response = client.patch(url, headers=alice[1])

        assert response.status_code == 201
        assert response.json()["completed"] is False
        assert response.json()["completedAt"] is None
        assert response.json()["text"] == "buy milk"
        assert todos.todos[todo["_id"]].completed is False

    def test_marking_not_completed_is_idempotent(self, client, alice, todos):
        todo = _create(client, alice[1])
        url = f"/todos/{todo['_id']}"
        client.patch(url, json={"completed": True}, headers=alice[1])

        first = client.patch(url, json={"completed": False}, headers=alice[1])
        stored_after_first = todos.todos[todo["_id"]]
        second = client.patch(url, json={"completed": False}, headers=alice[1])

        assert first.status_code == second.status_code == 201
        assert first.json() == second.json()
        assert first.json()["completedAt"] is None
        assert todos.todos[todo["_id"]] == stored_after_first


class TestDeleteTodo:
    def test_delete_own_todo(self, client, alice, todos):
        todo = _create(client, alice[1])

        response = client.delete(f"/todos/{todo['_id']}", headers=alice[1])

        assert response.status_code == 204
        assert response.content == b""
        assert todos.todos == {}
        assert client.get(f"/todos/{todo['_id']}", headers=alice[1]).status_code == 404

    def test_other_users_todo_is_not_found(self, client, alice, bob, todos):
        todo = _create(client, alice[1])

        assert client.delete(f"/todos/{todo['_id']}", headers=bob[1]).status_code == 404
        assert todo["_id"] in todos.todos

    @pytest.mark.parametrize("todo_id", ["123", str(ObjectId())])
    def test_malformed_or_unknown_id_is_not_found(self, client, alice, todo_id):
        assert client.delete(f"/todos/{todo_id}", headers=alice[1]).status_code == 404
