"""Todo API routes.

Endpoints:
- GET /todos: List the caller's todos (optional category / completed filters)
- POST /todos: Create a todo
- GET /todos/{id}: Get one todo
- PUT /todos/{id}: Replace text, category, tags, priority and due date
- POST /todos/{id}/toggle: Flip completion (also served at POST /toggle/{id})
- DELETE /todos/{id}: Delete a todo
- GET /categories: Distinct categories of the caller's todos

All endpoints require a bearer token. Another user's todo answers 403.
"""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_todo_repo
from api.models import TodoRequest, TodoResponse
from api.security import get_current_user_id
from domain.model.todo import Todo, TodoDraft
from port.todo_repository import TodoRepository
from services import todo_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["todos"])


def _to_response(todo: Todo) -> TodoResponse:
    return TodoResponse(
        id=todo.id,
        text=todo.text,
        completed=todo.completed,
        category=todo.category,
        tags=todo.tags,
        priority=todo.priority,
        due_date=todo.due_date,
        user_id=todo.user_id,
        created_at=todo.created_at,
        updated_at=todo.updated_at,
    )


def _to_draft(request: TodoRequest) -> TodoDraft:
    return TodoDraft(
        text=request.text,
        category=request.category,
        tags=request.tags,
        priority=request.priority,
        due_date=request.due_date,
    )


@router.get("/todos", response_model=list[TodoResponse])
def get_todos(
    category: str | None = None,
    completed: bool | None = None,
    user_id: str = Depends(get_current_user_id),
    repo: TodoRepository = Depends(get_todo_repo),
):
    """List the caller's todos, newest first."""
    todos = todo_service.list_todos(repo, user_id, category=category, completed=completed)
    return [_to_response(t) for t in todos]


@router.post("/todos", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
def add_todo(
    request: TodoRequest,
    user_id: str = Depends(get_current_user_id),
    repo: TodoRepository = Depends(get_todo_repo),
):
    """Create a todo owned by the caller."""
    todo = todo_service.create_todo(repo, user_id, _to_draft(request))
    return _to_response(todo)


@router.get("/todos/{todo_id}", response_model=TodoResponse)
def get_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: TodoRepository = Depends(get_todo_repo),
):
    return _to_response(todo_service.get_todo(repo, user_id, todo_id))


@router.put("/todos/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: str,
    request: TodoRequest,
    user_id: str = Depends(get_current_user_id),
    repo: TodoRepository = Depends(get_todo_repo),
):
    """Replace the editable fields of a todo."""
    todo = todo_service.update_todo(repo, user_id, todo_id, _to_draft(request))
    return _to_response(todo)


@router.post("/todos/{todo_id}/toggle", response_model=TodoResponse)
@router.post("/toggle/{todo_id}", response_model=TodoResponse, include_in_schema=False)
def toggle_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: TodoRepository = Depends(get_todo_repo),
):
    """Flip a todo between open and completed."""
    return _to_response(todo_service.toggle_todo(repo, user_id, todo_id))


@router.delete("/todos/{todo_id}")
def delete_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: TodoRepository = Depends(get_todo_repo),
):
    todo_service.delete_todo(repo, user_id, todo_id)
    return {"message": "Todo deleted successfully"}


@router.get("/categories", response_model=list[str])
def get_categories(
    user_id: str = Depends(get_current_user_id),
    repo: TodoRepository = Depends(get_todo_repo),
):
    """Distinct categories used by the caller's todos."""
    return todo_service.list_categories(repo, user_id)
