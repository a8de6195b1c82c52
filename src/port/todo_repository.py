"""Port for todo data access."""

from typing import Protocol

from domain.model.todo import Todo


class TodoRepository(Protocol):
    """Protocol for todo item data access (CRUD + per-user queries).

    Backend failures surface as StorageError.
    """

    def create(self, todo: Todo) -> Todo:
        """Persist a new todo and return it."""
        ...

    def get_by_id(self, todo_id: str) -> Todo | None:
        """Get a single todo by ID, regardless of owner."""
        ...

    def list_for_user(
        self,
        user_id: str,
        category: str | None = None,
        completed: bool | None = None,
    ) -> list[Todo]:
        """Get the user's todos, newest first, optionally filtered."""
        ...

    def update(self, todo: Todo) -> Todo | None:
        """Overwrite a stored todo. Returns None if it no longer exists."""
        ...

    def delete(self, todo_id: str) -> bool:
        """Delete a todo. Returns True if deleted, False if not found."""
        ...

    def categories_for_user(self, user_id: str) -> list[str]:
        """Distinct non-null categories of the user's todos, sorted."""
        ...
