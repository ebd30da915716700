"""Database-level operations: drop and list."""

from typing import Any

from pymongo.errors import PyMongoError

from mongo_ros.config.logging import get_logger
from mongo_ros.repositories.mongodb.base import _translate_pymongo_error
from mongo_ros.resources.mongo.client import MongoConnection
from mongo_ros.resources.mongo.connect import make_db_connection

logger = get_logger(__name__)

DEFAULT_DROP_TIMEOUT = 60.0


def drop_database(
    name: str,
    host: str | None = None,
    port: int | None = None,
    timeout: float = DEFAULT_DROP_TIMEOUT,
    **connect_kwargs: Any,
) -> None:
    """
    Drop database `name` over a fresh connection. Irreversible; there is no confirmation.
    Extra keyword arguments go to make_db_connection. Raises DbConnectError if the server
    cannot be reached within `timeout`.
    """
    with make_db_connection(host=host, port=port, timeout=timeout, **connect_kwargs) as conn:
        try:
            conn.drop_database(name)
        except PyMongoError as e:
            raise _translate_pymongo_error(e, "drop database") from e
    logger.info("Dropped database", extra={"database": name})


def list_database_names(conn: MongoConnection) -> list[str]:
    """Return the names of all databases visible to the connection."""
    try:
        return conn.list_database_names()
    except PyMongoError as e:
        raise _translate_pymongo_error(e, "list databases") from e
