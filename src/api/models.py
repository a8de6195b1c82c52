"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field


PriorityLevel = Literal["high", "medium", "low"]


# ── Auth ─────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Request model for user login."""
    username: str
    password: str


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""
    id: str = Field(..., description="User ID")
    username: str
    email: str
    created_at: datetime


class AuthResponse(BaseModel):
    """Response model for authentication."""
    token: str = Field(..., description="Bearer token for the Authorization header")
    user: UserResponse


# ── Todos ────────────────────────────────────────────────


class TodoRequest(BaseModel):
    """Request model for creating or replacing a todo."""
    text: str = Field(..., min_length=1, max_length=2000)
    category: Optional[str] = Field(None, max_length=255)
    tags: Optional[list[str]] = None
    priority: Optional[PriorityLevel] = None
    due_date: Optional[datetime] = None


class TodoResponse(BaseModel):
    """Response model for a todo."""
    id: str = Field(..., description="Todo ID")
    text: str
    completed: bool
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    priority: Optional[PriorityLevel] = None
    due_date: Optional[datetime] = None
    user_id: str
    created_at: datetime
    updated_at: datetime
