"""Single MongoDB connection handle wrapping a pymongo client, with explicit connection state."""

from datetime import datetime
from enum import Enum
from typing import Any, Callable

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import OperationFailure, PyMongoError

from mongo_ros.config.logging import get_logger
from mongo_ros.resources.mongo.errors import DbConnectError, TransportError
from mongo_ros.resources.mongo.session import ping_mongo
from mongo_ros.utils.time import utc_now

logger = get_logger(__name__)

ClientFactory = Callable[..., MongoClient]

DEFAULT_AUTH_SOURCE = "admin"


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    TRANSPORT_CONNECTED = "transport_connected"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class MongoConnection:
    """
    One blocking connection to a MongoDB server.

    The handle is owned by whoever receives it and must be closed by them. It is
    not safe to share between threads without external locking.
    """

    def __init__(
        self,
        *,
        server_selection_timeout_ms: int = 2000,
        budget_ms: Callable[[], int] | None = None,
        client_factory: ClientFactory = MongoClient,
    ):
        self._client_factory = client_factory
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._budget_ms = budget_ms
        self._client: MongoClient | None = None
        self._host: str | None = None
        self._port: int | None = None
        self.state = ConnectionState.DISCONNECTED
        self.connected_at: datetime | None = None

    def __enter__(self) -> "MongoConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MongoConnection(address={self.address!r}, state={self.state.value!r})"

    @property
    def address(self) -> str | None:
        if self._host is None:
            return None
        return f"{self._host}:{self._port}"

    @property
    def client(self) -> MongoClient:
        """Return the underlying pymongo client. Raises DbConnectError if not connected."""
        if self._client is None:
            raise DbConnectError("MongoDB connection is not open")
        return self._client

    def _timeout_ms(self) -> int:
        """Timeout for the next round trip: the configured value, capped by the caller's remaining budget."""
        if self._budget_ms is None:
            return self._server_selection_timeout_ms
        return max(1, min(self._server_selection_timeout_ms, self._budget_ms()))

    def _options(self) -> dict[str, Any]:
        timeout_ms = self._timeout_ms()
        return {"serverSelectionTimeoutMS": timeout_ms, "connectTimeoutMS": timeout_ms}

    def connect(self, host: str, port: int) -> None:
        """Open the transport to host:port. Raises TransportError if the server cannot be reached."""
        self.close()
        self._host, self._port = host, port
        client = self._client_factory(host=host, port=port, **self._options())
        result = ping_mongo(client)
        if not result["ok"]:
            client.close()
            self.state = ConnectionState.FAILED
            raise TransportError(
                f"Could not reach MongoDB at {self.address}: {result['error']} ({result.get('detail', '')})"
            )
        self._client = client
        self.state = ConnectionState.TRANSPORT_CONNECTED
        self.connected_at = utc_now()

    def auth(self, db: str, user: str, pwd: str) -> tuple[bool, str]:
        """
        Authenticate against `db` (the admin database when empty).
        Returns (success, error message). On success the handle switches to the authenticated client;
        on rejected credentials the unauthenticated transport is left untouched.
        Raises TransportError if the server cannot be reached during the handshake.
        """
        if self._client is None or self.state == ConnectionState.FAILED:
            return False, "not connected"
        authed = self._client_factory(
            host=self._host,
            port=self._port,
            username=user,
            password=pwd,
            authSource=db or DEFAULT_AUTH_SOURCE,
            **self._options(),
        )
        try:
            authed.admin.command("ping")
        except OperationFailure as e:
            authed.close()
            return False, str(e)
        except PyMongoError as e:
            authed.close()
            self.mark_failed()
            raise TransportError(f"Lost MongoDB at {self.address} while authenticating: {e}", cause=e) from e
        self._client.close()
        self._client = authed
        self.state = ConnectionState.AUTHENTICATED
        return True, ""

    def is_failed(self) -> bool:
        """Liveness check: True unless the connection is open and answers a ping."""
        if self._client is None or self.state in (ConnectionState.DISCONNECTED, ConnectionState.FAILED):
            return True
        if not ping_mongo(self._client, timeout_ms=self._timeout_ms())["ok"]:
            self.mark_failed()
            return True
        return False

    def mark_failed(self) -> None:
        self.state = ConnectionState.FAILED

    def database(self, name: str) -> Database:
        return self.client[name]

    def drop_database(self, name: str) -> None:
        self.client.drop_database(name)

    def list_database_names(self) -> list[str]:
        return self.client.list_database_names()

    def close(self) -> None:
        """Close the underlying client. Safe to call more than once."""
        if self._client is not None:
            try:
                self._client.close()
            except PyMongoError as e:
                logger.warning("Error closing MongoDB client", extra={"error": str(e)})
            self._client = None
        if self.state != ConnectionState.FAILED:
            self.state = ConnectionState.DISCONNECTED
