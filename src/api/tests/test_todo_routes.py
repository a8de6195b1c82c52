"""Tests for the todo endpoints, including per-user isolation."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from adapter.factory import Storage
from adapter.fake.todo_repository import FakeTodoRepository
from adapter.fake.user_repository import FakeUserRepository
from api.config import Settings
from api.main import create_app
from domain.model.errors import StorageError


class TestTodoRoutes(unittest.TestCase):

    def setUp(self):
        self.todo_repo = FakeTodoRepository()
        storage = Storage(
            backend="memory",
            user_repo=FakeUserRepository(),
            todo_repo=self.todo_repo,
            prepare=lambda: True,
        )
        self.client = TestClient(create_app(Settings(jwt_secret_key="test-secret", bcrypt_rounds=4), storage))
        self.alice = self._register("alice")
        self.bob = self._register("bob")

    def _register(self, username):
        response = self.client.post("/auth/register", json={
            "username": username, "email": f"{username}@example.com", "password": "pw123",
        })
        return {"Authorization": f"Bearer {response.json()['token']}"}

    def _create(self, headers, **body):
        body.setdefault("text", "Buy milk")
        response = self.client.post("/todos", json=body, headers=headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    # ── create / read ─────────────────────────────────────────

    def test_create_todo(self):
        todo = self._create(
            self.alice,
            text="Buy milk",
            category="home",
            tags=["errand"],
            priority="high",
            due_date="2026-03-01T09:00:00Z",
        )

        self.assertEqual(todo["text"], "Buy milk")
        self.assertFalse(todo["completed"])
        self.assertEqual(todo["category"], "home")
        self.assertEqual(todo["tags"], ["errand"])
        self.assertEqual(todo["priority"], "high")
        self.assertTrue(todo["due_date"].startswith("2026-03-01T09:00:00"))
        self.assertTrue(todo["id"])

    def test_create_requires_text(self):
        self.assertEqual(self.client.post("/todos", json={}, headers=self.alice).status_code, 422)
        self.assertEqual(self.client.post("/todos", json={"text": ""}, headers=self.alice).status_code, 422)
        self.assertEqual(self.client.post("/todos", json={"text": "   "}, headers=self.alice).status_code, 400)

    def test_create_rejects_unknown_priority(self):
        response = self.client.post("/todos", json={"text": "a", "priority": "urgent"}, headers=self.alice)
        self.assertEqual(response.status_code, 422)

    def test_list_is_scoped_to_caller(self):
        mine = self._create(self.alice, text="mine")
        self._create(self.bob, text="theirs")

        response = self.client.get("/todos", headers=self.alice)

        self.assertEqual(response.status_code, 200)
        self.assertEqual([t["id"] for t in response.json()], [mine["id"]])

    def test_list_filters(self):
        self._create(self.alice, text="a", category="work")
        done = self._create(self.alice, text="b", category="home")
        self.client.post(f"/todos/{done['id']}/toggle", headers=self.alice)

        by_category = self.client.get("/todos", params={"category": "work"}, headers=self.alice).json()
        completed = self.client.get("/todos", params={"completed": "true"}, headers=self.alice).json()

        self.assertEqual([t["text"] for t in by_category], ["a"])
        self.assertEqual([t["text"] for t in completed], ["b"])

    def test_get_single_todo(self):
        todo = self._create(self.alice)

        response = self.client.get(f"/todos/{todo['id']}", headers=self.alice)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], todo["id"])

    def test_missing_todo_returns_404(self):
        self.assertEqual(self.client.get("/todos/missing", headers=self.alice).status_code, 404)
        self.assertEqual(self.client.post("/todos/missing/toggle", headers=self.alice).status_code, 404)
        self.assertEqual(self.client.delete("/todos/missing", headers=self.alice).status_code, 404)

    # ── ownership ─────────────────────────────────────────────

    def test_other_users_todo_is_forbidden(self):
        todo = self._create(self.bob)
        todo_id = todo["id"]

        self.assertEqual(self.client.get(f"/todos/{todo_id}", headers=self.alice).status_code, 403)
        self.assertEqual(self.client.put(f"/todos/{todo_id}", json={"text": "x"}, headers=self.alice).status_code, 403)
        self.assertEqual(self.client.post(f"/todos/{todo_id}/toggle", headers=self.alice).status_code, 403)
        self.assertEqual(self.client.delete(f"/todos/{todo_id}", headers=self.alice).status_code, 403)

        stored = self.todo_repo.store[todo_id]
        self.assertEqual(stored.text, "Buy milk")
        self.assertFalse(stored.completed)

    # ── update / toggle / delete ──────────────────────────────

    def test_update_todo(self):
        todo = self._create(self.alice, category="home")

        response = self.client.put(
            f"/todos/{todo['id']}",
            json={"text": "Buy oat milk", "tags": ["a", "b"], "priority": "low"},
            headers=self.alice,
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["text"], "Buy oat milk")
        self.assertIsNone(data["category"])
        self.assertEqual(data["tags"], ["a", "b"])
        self.assertEqual(data["priority"], "low")
        self.assertEqual(data["created_at"], todo["created_at"])

    def test_toggle_and_legacy_toggle_path(self):
        todo = self._create(self.alice)

        first = self.client.post(f"/todos/{todo['id']}/toggle", headers=self.alice)
        second = self.client.post(f"/toggle/{todo['id']}", headers=self.alice)

        self.assertEqual(first.status_code, 200)
        self.assertTrue(first.json()["completed"])
        self.assertEqual(second.status_code, 200)
        self.assertFalse(second.json()["completed"])

    def test_delete_todo(self):
        todo = self._create(self.alice)

        response = self.client.delete(f"/todos/{todo['id']}", headers=self.alice)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Todo deleted successfully"})
        self.assertEqual(self.client.get(f"/todos/{todo['id']}", headers=self.alice).status_code, 404)

    def test_categories(self):
        self._create(self.alice, text="a", category="work")
        self._create(self.alice, text="b", category="home")
        self._create(self.alice, text="c", category="work")
        self._create(self.bob, text="d", category="garden")

        response = self.client.get("/categories", headers=self.alice)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), ["home", "work"])

    # ── errors ────────────────────────────────────────────────

    def test_storage_failure_returns_generic_500(self):
        with patch.object(self.todo_repo, "list_for_user", side_effect=StorageError("disk I/O error")):
            response = self.client.get("/todos", headers=self.alice)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "Internal server error"})
        self.assertNotIn("disk", response.text)

    def test_endpoints_require_token(self):
        for method, path in [
            ("get", "/todos"),
            ("post", "/todos"),
            ("get", "/todos/x"),
            ("put", "/todos/x"),
            ("delete", "/todos/x"),
            ("post", "/todos/x/toggle"),
            ("post", "/toggle/x"),
            ("get", "/categories"),
        ]:
            with self.subTest(method=method, path=path):
                response = self.client.request(method.upper(), path)
                self.assertEqual(response.status_code, 401)


if __name__ == '__main__':
    unittest.main()
