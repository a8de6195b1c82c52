"""MongoDB implementation of TodoRepository."""

from logging import getLogger

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb.connection import TODOS_COLLECTION_NAME
from domain.model.errors import StorageError
from domain.model.todo import Todo
from utils.time import as_utc

logger = getLogger(__name__)


class MongoTodoRepository:
    def __init__(self, db: Database):
        self.collection = db[TODOS_COLLECTION_NAME]

    # ── indexes ────────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for todos collection."""
        from adapter.mongodb.indexes import ensure_index

        try:
            ensure_index(self.collection, [('user_id', 1), ('created_at', -1)], 'idx_todos_user_created')
            ensure_index(self.collection, [('user_id', 1), ('category', 1)], 'idx_todos_user_category')
            ensure_index(self.collection, [('completed', 1)], 'idx_todos_completed')
            ensure_index(self.collection, [('due_date', 1)], 'idx_todos_due_date', sparse=True)
            return True
        except PyMongoError as e:
            logger.error("Failed to create todos indexes", extra={"error": str(e)})
            return False

    # ── mapping ───────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Todo:
        """Convert a MongoDB document to a Todo domain model."""
        return Todo(
            id=doc['_id'],
            text=doc['text'],
            user_id=doc['user_id'],
            created_at=as_utc(doc['created_at']),
            updated_at=as_utc(doc['updated_at']),
            completed=bool(doc.get('completed', False)),
            category=doc.get('category'),
            tags=list(doc.get('tags') or []),
            priority=doc.get('priority'),
            due_date=as_utc(doc.get('due_date')),
        )

    def _editable_fields(self, todo: Todo) -> dict:
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
        doc = {
            '_id': todo.id,
            'user_id': todo.user_id,
            'created_at': todo.created_at,
            **self._editable_fields(todo),
        }
        try:
            self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("Failed to create todo", extra={"userId": todo.user_id, "error": str(e)})
            raise StorageError("Failed to create todo") from e

        logger.info("Todo created", extra={"todoId": todo.id, "userId": todo.user_id})
        return todo

    def get_by_id(self, todo_id: str) -> Todo | None:
        try:
            doc = self.collection.find_one({'_id': todo_id})
        except PyMongoError as e:
            logger.error("Failed to get todo", extra={"todoId": todo_id, "error": str(e)})
            raise StorageError("Failed to get todo") from e
        return self._to_domain(doc) if doc else None

    def list_for_user(
        self,
        user_id: str,
        category: str | None = None,
        completed: bool | None = None,
    ) -> list[Todo]:
        query: dict = {'user_id': user_id}
        if category is not None:
            query['category'] = category
        if completed is not None:
            query['completed'] = completed

        try:
            docs = list(self.collection.find(query).sort('created_at', DESCENDING))
        except PyMongoError as e:
            logger.error("Failed to list todos", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to list todos") from e
        return [self._to_domain(doc) for doc in docs]

    def update(self, todo: Todo) -> Todo | None:
        try:
            result = self.collection.update_one(
                {'_id': todo.id},
                {'$set': self._editable_fields(todo)},
            )
        except PyMongoError as e:
            logger.error("Failed to update todo", extra={"todoId": todo.id, "error": str(e)})
            raise StorageError("Failed to update todo") from e

        if result.matched_count == 0:
            return None
        return todo

    def delete(self, todo_id: str) -> bool:
        try:
            result = self.collection.delete_one({'_id': todo_id})
        except PyMongoError as e:
            logger.error("Failed to delete todo", extra={"todoId": todo_id, "error": str(e)})
            raise StorageError("Failed to delete todo") from e
        return result.deleted_count > 0

    # ── queries ───────────────────────────────────────────────

    def categories_for_user(self, user_id: str) -> list[str]:
        try:
            values = self.collection.distinct('category', {'user_id': user_id, 'category': {'$ne': None}})
        except PyMongoError as e:
            logger.error("Failed to list categories", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to list categories") from e
        return sorted(v for v in values if v is not None)
