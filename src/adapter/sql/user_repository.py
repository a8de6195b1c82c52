"""SQLAlchemy implementation of UserRepository."""

from logging import getLogger

from sqlalchemy import or_, select, text
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from adapter.sql.schema import users
from domain.model.errors import DuplicateError, StorageError
from domain.model.user import User
from utils.time import as_utc

logger = getLogger(__name__)


class SqlUserRepository:
    def __init__(self, engine: Engine):
        self.engine = engine

    def _to_domain(self, row: Row) -> User:
        """Convert a users row to the User domain model."""
        return User(
            id=row.id,
            username=row.username,
            email=row.email,
            password_hash=row.password_hash,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )

    def _fetch_one(self, stmt, context: dict) -> User | None:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as e:
            logger.error("Failed to query users", extra={**context, "error": str(e)})
            raise StorageError("Failed to query users") from e
        return self._to_domain(row) if row else None

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> User:
        """Insert a new user row. The UNIQUE constraints decide races."""
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    users.insert().values(
                        id=user.id,
                        username=user.username,
                        email=user.email,
                        password_hash=user.password_hash,
                        created_at=user.created_at,
                        updated_at=user.updated_at,
                    )
                )
        except IntegrityError as e:
            logger.warning("User creation failed: username or email already exists",
                           extra={"username": user.username})
            raise DuplicateError("Username or email already registered") from e
        except SQLAlchemyError as e:
            logger.error("Failed to create user", extra={"username": user.username, "error": str(e)})
            raise StorageError("Failed to create user") from e

        logger.info("User created", extra={"userId": user.id, "username": user.username})
        return user

    # ── read operations ──────────────────────────────────────

    def find_by_username_or_email(self, username: str, email: str) -> User | None:
        stmt = (
            select(users)
            .where(or_(users.c.username == username, users.c.email == email))
            .limit(1)
        )
        return self._fetch_one(stmt, {"username": username})

    def get_by_username(self, username: str) -> User | None:
        stmt = select(users).where(users.c.username == username)
        return self._fetch_one(stmt, {"username": username})

    def get_by_id(self, user_id: str) -> User | None:
        stmt = select(users).where(users.c.id == user_id)
        return self._fetch_one(stmt, {"userId": user_id})

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database ping failed", extra={"error": str(e)[:200]})
            return False
