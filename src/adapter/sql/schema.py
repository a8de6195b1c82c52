"""Relational schema for users and todos.

UNIQUE username and email on users, a priority CHECK on todos and the
secondary indexes used by the list queries.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.engine import Engine

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

todos = Table(
    "todos",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("text", Text, nullable=False),
    Column("completed", Boolean, nullable=False, default=False),
    Column("category", String(255)),
    Column("tags", JSON),
    Column("priority", String(16)),
    Column("due_date", DateTime(timezone=True)),
    Column("user_id", String(64), ForeignKey("users.id")),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("priority IN ('high', 'medium', 'low')", name="ck_todos_priority"),
    Index("idx_todos_completed", "completed"),
    Index("idx_todos_category", "category"),
    Index("idx_todos_priority", "priority"),
    Index("idx_todos_due_date", "due_date"),
    Index("idx_todos_created_at", "created_at"),
    Index("idx_todos_user_id", "user_id"),
)


def ensure_schema(engine: Engine) -> None:
    """Create missing tables and indexes. Existing ones are left untouched."""
    metadata.create_all(engine)
