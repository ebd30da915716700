"""Read and register the declared message type of warehouse collections."""

from pymongo.errors import PyMongoError

from mongo_ros.repositories.mongodb.base import (
    NotFoundError,
    _translate_pymongo_error,
    message_collections_collection,
    name_filter,
)
from mongo_ros.resources.mongo.client import MongoConnection


def message_type(conn: MongoConnection, db: str, collection: str) -> str:
    """
    Return the message type stored for `collection` in `<db>.ros_message_collections`.
    Raises NotFoundError if there is no entry or the entry has no string `type` field.
    """
    try:
        coll = message_collections_collection(conn, db)
        doc = coll.find_one(name_filter(collection))
    except PyMongoError as e:
        raise _translate_pymongo_error(e, "read message type") from e
    if doc is None:
        raise NotFoundError(f"No message collection {collection!r} registered in database {db!r}")
    type_name = doc.get("type")
    if not isinstance(type_name, str):
        raise NotFoundError(f"Message collection {collection!r} in database {db!r} has no type")
    return type_name


def register_message_collection(conn: MongoConnection, db: str, collection: str, type_name: str) -> None:
    """Record `type_name` as the message type of `collection`. Replaces any previous entry."""
    try:
        coll = message_collections_collection(conn, db)
        coll.update_one(name_filter(collection), {"$set": {"type": type_name}}, upsert=True)
    except PyMongoError as e:
        raise _translate_pymongo_error(e, "register message collection") from e


def list_message_collections(conn: MongoConnection, db: str) -> dict[str, str]:
    """Return collection name → message type for every entry in the metadata collection."""
    try:
        coll = message_collections_collection(conn, db)
        out: dict[str, str] = {}
        for doc in coll.find({}, {"name": 1, "type": 1}):
            name = doc.get("name")
            type_name = doc.get("type")
            if isinstance(name, str) and isinstance(type_name, str):
                out[name] = type_name
        return out
    except PyMongoError as e:
        raise _translate_pymongo_error(e, "list message collections") from e
