import logging
from pymongo import MongoClient

logger = logging.getLogger(__name__)

# Suppress verbose PyMongo logs
# Set pymongo logger to WARNING to reduce noise from driver-level logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

DEFAULT_DATABASE_NAME = 'todo_tracker'
USERS_COLLECTION_NAME = 'users'
TODOS_COLLECTION_NAME = 'todos'


def is_mongodb_url(url: str | None) -> bool:
    return bool(url) and url.startswith(('mongodb://', 'mongodb+srv://'))


def create_mongodb_client(url: str) -> MongoClient:
    """Create a MongoDB client.

    The driver connects lazily; reachability is checked by the health
    endpoint and by index creation at startup, not here.
    """
    client = MongoClient(
        url,
        serverSelectionTimeoutMS=5000,  # 5s timeout for server selection
        connectTimeoutMS=5000,  # 5s timeout for initial connection
        socketTimeoutMS=30000,  # 30s timeout for operations
        maxPoolSize=10,
        minPoolSize=0,   # Don't maintain idle connections
        maxIdleTimeMS=30000,
        waitQueueTimeoutMS=10000,  # Wait up to 10s for available connection
        retryWrites=True,
        retryReads=True,
        tz_aware=True,
    )
    logger.info("[MONGODB] Client created")
    return client
