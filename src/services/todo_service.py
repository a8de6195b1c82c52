"""Todo service: per-user todo CRUD.

Every operation takes the caller's user id (as resolved by the session gate)
and only ever touches that user's todos.
"""

import logging

from domain.model.errors import NotFoundError
from domain.model.todo import Todo, TodoDraft
from port.todo_repository import TodoRepository

logger = logging.getLogger(__name__)


def create_todo(repo: TodoRepository, user_id: str, draft: TodoDraft) -> Todo:
    """Create a todo owned by user_id.

    Raises ValidationError for blank text or an unknown priority.
    """
    todo = Todo.create(draft.normalized(), user_id)
    repo.create(todo)
    logger.info("Todo added", extra={"todoId": todo.id, "userId": user_id})
    return todo


def list_todos(
    repo: TodoRepository,
    user_id: str,
    category: str | None = None,
    completed: bool | None = None,
) -> list[Todo]:
    return repo.list_for_user(user_id, category=category, completed=completed)


def get_todo(repo: TodoRepository, user_id: str, todo_id: str) -> Todo:
    """Return the todo if user_id owns it.

    Raises:
        NotFoundError: no todo with this id
        PermissionDeniedError: todo belongs to another user
    """
    todo = repo.get_by_id(todo_id)
    if todo is None:
        raise NotFoundError("Todo not found")
    todo.check_ownership(user_id)
    return todo


def update_todo(repo: TodoRepository, user_id: str, todo_id: str, draft: TodoDraft) -> Todo:
    """Replace the editable fields of a todo. Completion state is kept."""
    clean = draft.normalized()
    todo = get_todo(repo, user_id, todo_id).with_draft(clean)
    return _save(repo, todo)


def toggle_todo(repo: TodoRepository, user_id: str, todo_id: str) -> Todo:
    todo = get_todo(repo, user_id, todo_id).toggled()
    todo = _save(repo, todo)
    logger.info("Todo toggled", extra={"todoId": todo_id, "completed": todo.completed, "userId": user_id})
    return todo


def delete_todo(repo: TodoRepository, user_id: str, todo_id: str) -> None:
    get_todo(repo, user_id, todo_id)
    if not repo.delete(todo_id):
        raise NotFoundError("Todo not found")
    logger.info("Todo deleted", extra={"todoId": todo_id, "userId": user_id})


def list_categories(repo: TodoRepository, user_id: str) -> list[str]:
    return repo.categories_for_user(user_id)


def _save(repo: TodoRepository, todo: Todo) -> Todo:
    saved = repo.update(todo)
    if saved is None:
        # Deleted between the ownership check and the write.
        raise NotFoundError("Todo not found")
    return saved
