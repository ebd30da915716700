"""MongoDB connection parameter resolution.

Each parameter resolves as: explicit caller value, else the named entry in the
parameter store, else the hardcoded default. ``None`` is the only "unset"
marker, so explicit ``""`` and ``False`` are honoured as given.
"""

from typing import Any, TypeVar

from mongo_ros.config.logging import get_logger
from mongo_ros.config.storage.models import ConnectionParams
from mongo_ros.config.storage.store import ParameterStore, get_parameter_store

logger = get_logger(__name__)

T = TypeVar("T")

# Store keys and defaults shared with the other warehouse tools
HOST_KEY = "warehouse_host"
PORT_KEY = "warehouse_port"
NAME_KEY = "warehouse_database_name"
USER_KEY = "warehouse_user"
PWD_KEY = "warehouse_pwd"
AUTHENTICATE_KEY = "warehouse_authenticate"
STRICT_AUTH_KEY = "warehouse_strict_auth"
TIMEOUT_KEY = "warehouse_connect_timeout"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 27017
DEFAULT_NAME = ""
DEFAULT_USER = ""
DEFAULT_PWD = ""
DEFAULT_AUTHENTICATE = False
DEFAULT_STRICT_AUTH = True
DEFAULT_TIMEOUT = 300.0

_MASK = "***"


def _shown(value: Any, secret: bool) -> Any:
    return _MASK if secret and value else value


def get_param(store: ParameterStore, key: str, default: T, *, secret: bool = False) -> T:
    """Read `key` from the store, falling back to `default`, and log the outcome."""
    value = store.get(key, default)
    logger.debug(
        "Initialized %s to %s (default was %s)", key, _shown(value, secret), _shown(default, secret)
    )
    return value


def resolve(
    explicit: T | None,
    key: str,
    default: T,
    *,
    store: ParameterStore | None = None,
    secret: bool = False,
) -> T:
    """Return `explicit` when given, otherwise the store value for `key` or `default`."""
    if explicit is None:
        return get_param(store or get_parameter_store(), key, default, secret=secret)
    logger.debug(
        "Initialized %s to %s from caller (default was %s)",
        key,
        _shown(explicit, secret),
        _shown(default, secret),
    )
    return explicit


def get_host(host: str | None = None, store: ParameterStore | None = None) -> str:
    return resolve(host, HOST_KEY, DEFAULT_HOST, store=store)


def get_port(port: int | None = None, store: ParameterStore | None = None) -> int:
    return resolve(port, PORT_KEY, DEFAULT_PORT, store=store)


def get_name(name: str | None = None, store: ParameterStore | None = None) -> str:
    return resolve(name, NAME_KEY, DEFAULT_NAME, store=store)


def get_user(user: str | None = None, store: ParameterStore | None = None) -> str:
    return resolve(user, USER_KEY, DEFAULT_USER, store=store)


def get_pwd(pwd: str | None = None, store: ParameterStore | None = None) -> str:
    return resolve(pwd, PWD_KEY, DEFAULT_PWD, store=store, secret=True)


def get_authenticate(authenticate: bool | None = None, store: ParameterStore | None = None) -> bool:
    return resolve(authenticate, AUTHENTICATE_KEY, DEFAULT_AUTHENTICATE, store=store)


def get_strict_auth(strict_auth: bool | None = None, store: ParameterStore | None = None) -> bool:
    return resolve(strict_auth, STRICT_AUTH_KEY, DEFAULT_STRICT_AUTH, store=store)


def get_timeout(timeout: float | None = None, store: ParameterStore | None = None) -> float:
    return resolve(timeout, TIMEOUT_KEY, DEFAULT_TIMEOUT, store=store)


def resolve_connection_params(
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
) -> ConnectionParams:
    """
    Resolve every connection parameter and validate the result.
    Raises pydantic.ValidationError for out-of-range values (e.g. port 0 or a negative timeout).
    """
    store = store or get_parameter_store()
    return ConnectionParams(
        host=get_host(host, store),
        port=get_port(port, store),
        timeout=get_timeout(timeout, store),
        name=get_name(name, store),
        authenticate=get_authenticate(authenticate, store),
        user=get_user(user, store),
        pwd=get_pwd(pwd, store),
        strict_auth=get_strict_auth(strict_auth, store),
    )
