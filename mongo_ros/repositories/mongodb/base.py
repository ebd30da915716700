"""Shared MongoDB access patterns for warehouse metadata, and common error handling."""

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from mongo_ros.config.logging import get_logger
from mongo_ros.resources.mongo.client import MongoConnection

logger = get_logger(__name__)

# Reserved collection recording the declared message type of each data collection
MESSAGE_COLLECTIONS_COLLECTION = "ros_message_collections"


class RepositoryError(Exception):
    """Raised when a repository operation fails after handling PyMongo errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class NotFoundError(RepositoryError):
    """Raised when a lookup matches no document."""


def _translate_pymongo_error(e: PyMongoError, context: str) -> RepositoryError:
    """Wrap PyMongo errors into a RepositoryError."""
    logger.warning(
        "MongoDB operation failed",
        extra={"context": context, "error_type": type(e).__name__},
    )
    return RepositoryError(f"MongoDB operation failed: {context}", cause=e)


def message_collections_collection(conn: MongoConnection, db: str) -> Collection:
    """Metadata collection `<db>.ros_message_collections`."""
    return conn.database(db)[MESSAGE_COLLECTIONS_COLLECTION]


def name_filter(collection: str) -> dict[str, str]:
    return {"name": collection}
