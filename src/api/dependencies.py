"""FastAPI dependencies resolving the handles stored on app.state by create_app()."""

from fastapi import Request

from port.todo_repository import TodoRepository
from port.user_repository import UserRepository
from services.auth_service import AuthService


def get_user_repo(request: Request) -> UserRepository:
    return request.app.state.storage.user_repo


def get_todo_repo(request: Request) -> TodoRepository:
    return request.app.state.storage.todo_repo


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service
