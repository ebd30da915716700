"""Connection error taxonomy."""


class MongoRosError(Exception):
    """Base error for warehouse connection failures."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class TransportError(MongoRosError):
    """A single connection attempt could not reach the server. Retried by the establisher."""


class DbConnectError(MongoRosError):
    """No live connection was obtained before the deadline, or the attempt was cancelled."""


class AuthError(DbConnectError):
    """The server rejected the configured credentials."""
