# domain/model/todo.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from domain.model.errors import PermissionDeniedError, ValidationError
from utils.time import as_utc, utcnow


class Priority(str, Enum):
    """Allowed todo priorities."""
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'

    @classmethod
    def parse(cls, value: str | None) -> Priority | None:
        """Accept None, an empty string, or one of the enum values."""
        if value is None or value == '':
            return None
        try:
            return cls(value)
        except ValueError:
            allowed = ', '.join(p.value for p in cls)
            raise ValidationError(f"Priority must be one of: {allowed}") from None


@dataclass(frozen=True)
class TodoDraft:
    """User-editable fields of a todo, as submitted on create or update."""
    text: str
    category: str | None = None
    tags: list[str] | None = None
    priority: str | None = None
    due_date: datetime | None = None

    def normalized(self) -> TodoDraft:
        """Return a cleaned copy. Raises ValidationError for unusable input."""
        text = (self.text or '').strip()
        if not text:
            raise ValidationError("Todo text must not be empty")

        category = (self.category or '').strip() or None
        tags = [t.strip() for t in (self.tags or []) if t and t.strip()]
        priority = Priority.parse(self.priority)

        return TodoDraft(
            text=text,
            category=category,
            tags=tags,
            priority=priority.value if priority else None,
            due_date=as_utc(self.due_date),
        )


# ── Todo Domain Model ────────────────────────────────────


@dataclass
class Todo:
    """A single to-do item owned by one user."""
    id: str
    text: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    completed: bool = False
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    priority: str | None = None
    due_date: datetime | None = None

    @staticmethod
    def create(draft: TodoDraft, user_id: str) -> Todo:
        """Factory method. Expects an already normalized draft."""
        now = utcnow()
        return Todo(
            id=str(uuid.uuid4()),
            text=draft.text,
            user_id=user_id,
            created_at=now,
            updated_at=now,
            completed=False,
            category=draft.category,
            tags=list(draft.tags or []),
            priority=draft.priority,
            due_date=draft.due_date,
        )

    def check_ownership(self, user_id: str) -> None:
        """Verify ownership. Raises PermissionDeniedError on mismatch."""
        if self.user_id != user_id:
            raise PermissionDeniedError("Not authorized to access this todo")

    def with_draft(self, draft: TodoDraft) -> Todo:
        """Copy with the editable fields replaced and updated_at bumped."""
        return replace(
            self,
            text=draft.text,
            category=draft.category,
            tags=list(draft.tags or []),
            priority=draft.priority,
            due_date=draft.due_date,
            updated_at=utcnow(),
        )

    def toggled(self) -> Todo:
        """Copy with completion flipped and updated_at bumped."""
        return replace(
            self,
            completed=not self.completed,
            updated_at=utcnow(),
        )
