"""MongoDB implementation of UserRepository."""

from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb.connection import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, StorageError
from domain.model.user import User
from utils.time import as_utc

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.db = db
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection.

        The unique indexes on username and email are what make registration
        race-free; the service pre-check alone is not atomic.
        """
        from adapter.mongodb.indexes import ensure_index

        try:
            ensure_index(self.collection, [('username', 1)], 'idx_users_username', unique=True)
            ensure_index(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            username=doc['username'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            created_at=as_utc(doc['created_at']),
            updated_at=as_utc(doc['updated_at']),
        )

    def _find_one(self, query: dict, context: dict) -> User | None:
        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error("Failed to query users", extra={**context, "error": str(e)})
            raise StorageError("Failed to query users") from e
        return self._to_domain(doc) if doc else None

    def create(self, user: User) -> User:
        """Insert a new user document."""
        user_doc = {
            '_id': user.id,
            'username': user.username,
            'email': user.email,
            'password_hash': user.password_hash,
            'created_at': user.created_at,
            'updated_at': user.updated_at,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            logger.warning("User creation failed: username or email already exists",
                           extra={"username": user.username})
            raise DuplicateError("Username or email already registered") from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"username": user.username, "error": str(e)})
            raise StorageError("Failed to create user") from e

        logger.info("User created", extra={"userId": user.id, "username": user.username})
        return user

    def find_by_username_or_email(self, username: str, email: str) -> User | None:
        query = {'$or': [{'username': username}, {'email': email}]}
        return self._find_one(query, {"username": username})

    def get_by_username(self, username: str) -> User | None:
        return self._find_one({'username': username}, {"username": username})

    def get_by_id(self, user_id: str) -> User | None:
        return self._find_one({'_id': user_id}, {"userId": user_id})

    def ping(self) -> bool:
        try:
            self.db.client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.warning("MongoDB ping failed", extra={"error": str(e)[:200]})
            return False
