"""Bounded-retry MongoDB connection establishment.

Parameters resolve through config/storage/mongo. Each attempt uses a fresh
MongoConnection; a failed one is closed and never reused. Attempt timeouts and
retry waits are clamped to the remaining budget, so a call returns or raises
within roughly `timeout` seconds.
"""

from typing import Any, Callable

from pymongo import MongoClient

from mongo_ros.config.logging import get_logger, log_extra
from mongo_ros.config.storage.mongo import get_param, resolve_connection_params
from mongo_ros.config.storage.store import ParameterStore, get_parameter_store
from mongo_ros.resources.mongo.client import ClientFactory, MongoConnection
from mongo_ros.resources.mongo.errors import AuthError, DbConnectError, TransportError
from mongo_ros.utils.lifecycle import CancelToken
from mongo_ros.utils.time import wall_time

logger = get_logger(__name__)

RETRY_INTERVAL_KEY = "warehouse_retry_interval"
ATTEMPT_TIMEOUT_KEY = "warehouse_attempt_timeout_ms"
DEFAULT_RETRY_INTERVAL = 1.0
DEFAULT_ATTEMPT_TIMEOUT_MS = 2000


def make_db_connection(
    host: str | None = None,
    port: int | None = None,
    timeout: float | None = None,
    name: str | None = None,
    authenticate: bool | None = None,
    user: str | None = None,
    pwd: str | None = None,
    *,
    strict_auth: bool | None = None,
    store: ParameterStore | None = None,
    cancel: CancelToken | None = None,
    clock: Callable[[], float] = wall_time,
    sleep_fn: Callable[[float], Any] | None = None,
    client_factory: ClientFactory = MongoClient,
) -> MongoConnection:
    """
    Connect to the warehouse database, retrying until `timeout` seconds have passed.

    Arguments left as None are read from the parameter store, then from defaults.
    Raises DbConnectError when no live connection is obtained in time or `cancel` fires,
    and AuthError when strict authentication is on and the credentials are rejected.
    """
    store = store or get_parameter_store()
    params = resolve_connection_params(
        host=host,
        port=port,
        timeout=timeout,
        name=name,
        authenticate=authenticate,
        user=user,
        pwd=pwd,
        strict_auth=strict_auth,
        store=store,
    )
    retry_interval = get_param(store, RETRY_INTERVAL_KEY, DEFAULT_RETRY_INTERVAL)
    attempt_timeout_ms = get_param(store, ATTEMPT_TIMEOUT_KEY, DEFAULT_ATTEMPT_TIMEOUT_MS)
    cancel = cancel or CancelToken()
    wait = sleep_fn or cancel.wait

    logger.info(
        "Connecting to MongoDB at %s",
        params.address,
        **log_extra(
            {
                "timeout": params.timeout,
                "database": params.name,
                "user": params.user,
                "authenticate": params.authenticate,
            }
        ),
    )

    deadline = clock() + params.timeout

    def _pause() -> None:
        wait(min(retry_interval, max(0.0, deadline - clock())))

    def _remaining_ms() -> int:
        return int((deadline - clock()) * 1000)

    conn: MongoConnection | None = None
    connected = False
    attempt = 0
    while not cancel.cancelled and clock() < deadline:
        attempt += 1
        if conn is not None:
            conn.close()
        # every round trip of the attempt is capped by the time left at the moment it is sent
        conn = MongoConnection(
            server_selection_timeout_ms=attempt_timeout_ms,
            budget_ms=_remaining_ms,
            client_factory=client_factory,
        )
        try:
            logger.debug("Connecting to db at %s (attempt %d)", params.address, attempt)
            conn.connect(params.host, params.port)

            if params.authenticate:
                if clock() >= deadline:
                    break
                logger.info("Authenticating as %r against %r", params.user, params.name or "admin")
                ok, err = conn.auth(params.name, params.user, params.pwd)
                if not ok:
                    logger.error("Mongo authentication failed %s", err)
                    if params.strict_auth:
                        conn.mark_failed()
                        conn.close()
                        raise AuthError(f"MongoDB authentication failed for user {params.user!r}: {err}")
        except TransportError as e:
            logger.debug("Connection attempt %d failed: %s", attempt, e)
            _pause()
            continue

        if clock() >= deadline:
            break
        if not conn.is_failed():
            connected = True
            logger.info(
                "connected",
                extra={
                    "address": params.address,
                    "attempts": attempt,
                    "connected_at": conn.connected_at.isoformat() if conn.connected_at else None,
                },
            )
            break
        _pause()

    if not connected or clock() > deadline:
        if conn is not None:
            conn.close()
        reason = "cancelled" if cancel.cancelled and not connected else f"timed out after {params.timeout}s"
        raise DbConnectError(f"Could not connect to MongoDB at {params.address}: {reason}")

    logger.debug("Successfully connected to db")
    return conn
