from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations must enforce uniqueness of username and email atomically;
    the service-level pre-check is only an optimization.
    """
    def create(self, user: User) -> User:
        """Persist a new user and return it.

        Raises DuplicateError if the username or email is taken,
        StorageError on any other backend failure.
        """
        ...

    def find_by_username_or_email(self, username: str, email: str) -> User | None:
        """Return any user whose username or email matches, else None."""
        ...

    def get_by_username(self, username: str) -> User | None:
        """Find a user by username. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def ping(self) -> bool:
        """Return True if the backend is reachable."""
        ...
