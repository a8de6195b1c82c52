"""Tests for the bearer token session gate (api.security)."""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from fastapi import Depends, Request
from fastapi.testclient import TestClient

from adapter.factory import Storage
from adapter.fake.todo_repository import FakeTodoRepository
from adapter.fake.user_repository import FakeUserRepository
from api.config import Settings
from api.main import create_app
from api.security import get_current_user_id
from services.auth_service import AuthService

SECRET = "test-secret"


class TestSessionGate(unittest.TestCase):

    def setUp(self):
        self.user_repo = FakeUserRepository()
        self.todo_repo = FakeTodoRepository()
        storage = Storage(
            backend="memory",
            user_repo=self.user_repo,
            todo_repo=self.todo_repo,
            prepare=lambda: True,
        )
        app = create_app(Settings(jwt_secret_key=SECRET, bcrypt_rounds=4), storage)

        @app.get("/whoami")
        def whoami(request: Request, user_id: str = Depends(get_current_user_id)):
            return {"dependency": user_id, "state": request.state.user_id}

        self.client = TestClient(app)
        self.auth = app.state.auth_service
        self.user = self.auth.register("alice", "alice@example.com", "pw123")

    def _assert_rejected(self, headers):
        response = self.client.get("/todos", headers=headers)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"detail": "Not authenticated"})
        self.assertEqual(response.headers["www-authenticate"], "Bearer")

    def test_valid_token_admits_request(self):
        response = self.client.get("/todos", headers={"Authorization": f"Bearer {self.user.token}"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_user_id_attached_to_request(self):
        response = self.client.get("/whoami", headers={"Authorization": f"Bearer {self.user.token}"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"dependency": self.user.user.id, "state": self.user.user.id})

    def test_missing_header_rejected(self):
        self._assert_rejected({})

    def test_wrong_scheme_rejected(self):
        self._assert_rejected({"Authorization": f"Basic {self.user.token}"})
        self._assert_rejected({"Authorization": self.user.token})

    def test_empty_bearer_rejected(self):
        self._assert_rejected({"Authorization": "Bearer "})

    def test_garbage_token_rejected(self):
        self._assert_rejected({"Authorization": "Bearer not-a-token"})

    def test_token_signed_with_other_secret_rejected(self):
        forged = AuthService(self.user_repo, "other-secret").issue_token(self.user.user.id)
        self._assert_rejected({"Authorization": f"Bearer {forged}"})

    def test_expired_token_rejected(self):
        two_days_ago = datetime.now(timezone.utc) - timedelta(days=2)
        stale = AuthService(self.user_repo, SECRET, clock=lambda: two_days_ago).issue_token(self.user.user.id)
        self._assert_rejected({"Authorization": f"Bearer {stale}"})

    def test_handler_not_invoked_when_rejected(self):
        with patch.object(self.todo_repo, "list_for_user") as mock_list:
            self._assert_rejected({"Authorization": "Bearer not-a-token"})
        mock_list.assert_not_called()

    def test_deleted_user_cannot_fetch_profile(self):
        del self.user_repo.store[self.user.user.id]

        response = self.client.get("/auth/me", headers={"Authorization": f"Bearer {self.user.token}"})
        self.assertEqual(response.status_code, 401)


if __name__ == '__main__':
    unittest.main()
