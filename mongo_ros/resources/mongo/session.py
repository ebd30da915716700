"""MongoDB ping used for connection and liveness checks."""

from typing import Any

import pymongo
from pymongo import MongoClient
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from mongo_ros.config.logging import get_logger

logger = get_logger(__name__)


def ping_mongo(client: MongoClient, timeout_ms: int | None = None) -> dict[str, Any]:
    """
    Ping MongoDB. Returns dict with 'ok' bool and optional 'error' string.
    `timeout_ms` bounds the whole round trip, including server selection on an existing client.
    Does not raise for driver errors.
    """
    seconds = None if timeout_ms is None else timeout_ms / 1000
    try:
        with pymongo.timeout(seconds):
            client.admin.command("ping")
        return {"ok": True}
    except ServerSelectionTimeoutError as e:
        logger.debug("MongoDB ping timeout", extra={"error": type(e).__name__})
        return {"ok": False, "error": "connection_timeout", "detail": str(e)}
    except PyMongoError as e:
        logger.debug("MongoDB ping failed", extra={"error": type(e).__name__})
        return {"ok": False, "error": "connection_failed", "detail": str(e)}
