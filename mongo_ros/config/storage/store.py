"""Named-parameter stores read by the connection resolver. Read-only; no business logic."""

from typing import Any, Mapping, Protocol, runtime_checkable

from mongo_ros.config.settings import Settings, get_settings


@runtime_checkable
class ParameterStore(Protocol):
    """Read-only key/value lookup owned by the host process."""

    def get(self, key: str, default: Any) -> Any:
        """Return the value stored under `key`, or `default` when absent."""


class SettingsParameterStore:
    """Parameter store backed by environment settings. A `None` setting counts as absent."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()

    def get(self, key: str, default: Any) -> Any:
        value = getattr(self._settings, key, None)
        return default if value is None else value


class MappingParameterStore:
    """Parameter store over a plain mapping, for nodes that own their own parameter server."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = dict(values or {})

    def get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)


def get_parameter_store() -> ParameterStore:
    """Return the default store: process settings."""
    return SettingsParameterStore()
