"""MongoDB index management utilities.

Each MongoXxxRepository declares its indexes through ensure_index(), which
reconciles them with whatever is already on the collection.
"""

from logging import getLogger

logger = getLogger(__name__)


def ensure_index(collection, keys: list, name: str, **kwargs) -> None:
    """Create an index, first dropping any index that conflicts with it.

    A conflict is an existing index with the same name or the same keys that
    differs in name, keys or the unique/sparse options. Raises PyMongoError
    if the server rejects the final create_index call.
    """
    wanted = dict(keys)
    wanted_options = (bool(kwargs.get('unique')), bool(kwargs.get('sparse')))

    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        same_name = idx_name == name
        same_keys = dict(idx_info.get('key', [])) == wanted
        same_options = (bool(idx_info.get('unique')), bool(idx_info.get('sparse'))) == wanted_options
        if (same_name or same_keys) and not (same_name and same_keys and same_options):
            logger.warning("Dropping conflicting index", extra={"index": idx_name, "wanted": name})
            collection.drop_index(idx_name)

    collection.create_index(keys, name=name, **kwargs)


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.todo_repository import MongoTodoRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoTodoRepository(db).ensure_indexes(),
    ]
    return all(results)
