"""Storage backend selection from DATABASE_URL."""

import logging
from dataclasses import dataclass
from typing import Callable

from adapter.mongodb.connection import create_mongodb_client, is_mongodb_url
from adapter.mongodb.indexes import ensure_all_indexes
from adapter.mongodb.todo_repository import MongoTodoRepository
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.sql.connection import create_db_engine
from adapter.sql.schema import ensure_schema
from adapter.sql.todo_repository import SqlTodoRepository
from adapter.sql.user_repository import SqlUserRepository
from port.todo_repository import TodoRepository
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class Storage:
    """Repositories for one backend plus its startup hook."""
    backend: str
    user_repo: UserRepository
    todo_repo: TodoRepository
    prepare: Callable[[], bool]


def build_storage(database_url: str, mongodb_database: str) -> Storage:
    """Build repositories for the backend named by database_url.

    mongodb:// and mongodb+srv:// URLs select MongoDB; anything else is a
    SQLAlchemy URL.
    """
    if is_mongodb_url(database_url):
        db = create_mongodb_client(database_url)[mongodb_database]
        return Storage(
            backend="mongodb",
            user_repo=MongoUserRepository(db),
            todo_repo=MongoTodoRepository(db),
            prepare=lambda: ensure_all_indexes(db),
        )

    engine = create_db_engine(database_url)

    def prepare() -> bool:
        ensure_schema(engine)
        return True

    return Storage(
        backend=engine.dialect.name,
        user_repo=SqlUserRepository(engine),
        todo_repo=SqlTodoRepository(engine),
        prepare=prepare,
    )
