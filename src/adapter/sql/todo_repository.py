"""SQLAlchemy implementation of TodoRepository."""

from logging import getLogger

from sqlalchemy import select
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import SQLAlchemyError

from adapter.sql.schema import todos
from domain.model.errors import StorageError
from domain.model.todo import Todo
from utils.time import as_utc

logger = getLogger(__name__)


class SqlTodoRepository:
    def __init__(self, engine: Engine):
        self.engine = engine

    # ── mapping ───────────────────────────────────────────────

    def _to_domain(self, row: Row) -> Todo:
        """Convert a todos row to the Todo domain model."""
        return Todo(
            id=row.id,
            text=row.text,
            user_id=row.user_id,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
            completed=bool(row.completed),
            category=row.category,
            tags=list(row.tags or []),
            priority=row.priority,
            due_date=as_utc(row.due_date),
        )

    def _to_row(self, todo: Todo) -> dict:
        return {
            'text': todo.text,
            'completed': todo.completed,
            'category': todo.category,
            'tags': list(todo.tags),
            'priority': todo.priority,
            'due_date': todo.due_date,
            'updated_at': todo.updated_at,
        }

    # ── CRUD ──────────────────────────────────────────────────

    def create(self, todo: Todo) -> Todo:
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    todos.insert().values(
                        id=todo.id,
                        user_id=todo.user_id,
                        created_at=todo.created_at,
                        **self._to_row(todo),
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Failed to create todo", extra={"userId": todo.user_id, "error": str(e)})
            raise StorageError("Failed to create todo") from e

        logger.info("Todo created", extra={"todoId": todo.id, "userId": todo.user_id})
        return todo

    def get_by_id(self, todo_id: str) -> Todo | None:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(select(todos).where(todos.c.id == todo_id)).first()
        except SQLAlchemyError as e:
            logger.error("Failed to get todo", extra={"todoId": todo_id, "error": str(e)})
            raise StorageError("Failed to get todo") from e
        return self._to_domain(row) if row else None

    def list_for_user(
        self,
        user_id: str,
        category: str | None = None,
        completed: bool | None = None,
    ) -> list[Todo]:
        stmt = select(todos).where(todos.c.user_id == user_id)
        if category is not None:
            stmt = stmt.where(todos.c.category == category)
        if completed is not None:
            stmt = stmt.where(todos.c.completed == completed)
        stmt = stmt.order_by(todos.c.created_at.desc())

        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).all()
        except SQLAlchemyError as e:
            logger.error("Failed to list todos", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to list todos") from e
        return [self._to_domain(row) for row in rows]

    def update(self, todo: Todo) -> Todo | None:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    todos.update().where(todos.c.id == todo.id).values(**self._to_row(todo))
                )
        except SQLAlchemyError as e:
            logger.error("Failed to update todo", extra={"todoId": todo.id, "error": str(e)})
            raise StorageError("Failed to update todo") from e

        if result.rowcount == 0:
            return None
        logger.debug("Todo updated", extra={"todoId": todo.id})
        return todo

    def delete(self, todo_id: str) -> bool:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(todos.delete().where(todos.c.id == todo_id))
        except SQLAlchemyError as e:
            logger.error("Failed to delete todo", extra={"todoId": todo_id, "error": str(e)})
            raise StorageError("Failed to delete todo") from e
        return result.rowcount > 0

    # ── queries ───────────────────────────────────────────────

    def categories_for_user(self, user_id: str) -> list[str]:
        stmt = (
            select(todos.c.category)
            .where(todos.c.user_id == user_id, todos.c.category.is_not(None))
            .distinct()
            .order_by(todos.c.category)
        )
        try:
            with self.engine.connect() as conn:
                return list(conn.execute(stmt).scalars())
        except SQLAlchemyError as e:
            logger.error("Failed to list categories", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to list categories") from e
