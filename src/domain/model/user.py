import uuid
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class User:
    """Domain model representing a registered user."""
    id: str
    username: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def create(username: str, email: str, password_hash: str, now: datetime | None = None) -> 'User':
        """Build a new user with a fresh id and both timestamps set to now."""
        now = now or datetime.now(timezone.utc)
        return User(
            id=uuid.uuid4().hex,
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
