"""In-memory implementation of TodoRepository for testing."""

import threading
from dataclasses import replace

from domain.model.todo import Todo


class FakeTodoRepository:
    def __init__(self):
        self.store: dict[str, Todo] = {}
        self._lock = threading.Lock()

    # ── CRUD ──────────────────────────────────────────────────

    def create(self, todo: Todo) -> Todo:
        with self._lock:
            self.store[todo.id] = replace(todo, tags=list(todo.tags))
        return todo

    def get_by_id(self, todo_id: str) -> Todo | None:
        todo = self.store.get(todo_id)
        return replace(todo, tags=list(todo.tags)) if todo else None

    def _snapshot(self) -> list[Todo]:
        with self._lock:
            return list(self.store.values())

    def list_for_user(
        self,
        user_id: str,
        category: str | None = None,
        completed: bool | None = None,
    ) -> list[Todo]:
        results = [t for t in self._snapshot() if t.user_id == user_id]
        if category is not None:
            results = [t for t in results if t.category == category]
        if completed is not None:
            results = [t for t in results if t.completed == completed]
        results.sort(key=lambda t: t.created_at, reverse=True)
        return [replace(t, tags=list(t.tags)) for t in results]

    def update(self, todo: Todo) -> Todo | None:
        with self._lock:
            if todo.id not in self.store:
                return None
            self.store[todo.id] = replace(todo, tags=list(todo.tags))
        return todo

    def delete(self, todo_id: str) -> bool:
        with self._lock:
            return self.store.pop(todo_id, None) is not None

    # ── queries ───────────────────────────────────────────────

    def categories_for_user(self, user_id: str) -> list[str]:
        return sorted({
            t.category for t in self._snapshot()
            if t.user_id == user_id and t.category is not None
        })
