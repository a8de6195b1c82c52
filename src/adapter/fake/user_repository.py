"""In-memory implementation of UserRepository for testing."""

import threading
from dataclasses import replace

from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> User:
        # Check and insert under one lock, like a UNIQUE constraint would.
        with self._lock:
            for existing in self.store.values():
                if existing.username == user.username or existing.email == user.email:
                    raise DuplicateError("Username or email already registered")
            self.store[user.id] = replace(user)
        return user

    # ── read operations ──────────────────────────────────────

    def _snapshot(self) -> list[User]:
        with self._lock:
            return list(self.store.values())

    def find_by_username_or_email(self, username: str, email: str) -> User | None:
        for user in self._snapshot():
            if user.username == username or user.email == email:
                return user
        return None

    def get_by_username(self, username: str) -> User | None:
        for user in self._snapshot():
            if user.username == username:
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)

    def ping(self) -> bool:
        return True
