"""Cooperative cancellation for blocking connection loops."""

import signal
import threading
from typing import Iterable

from mongo_ros.config.logging import get_logger

logger = get_logger(__name__)


class CancelToken:
    """Thread-safe flag polled by retry loops. Waiting on it doubles as an interruptible sleep."""

    def __init__(self):
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def wait(self, timeout: float) -> bool:
        """Block up to `timeout` seconds. Returns True if cancelled meanwhile."""
        return self._event.wait(timeout)


def install_signal_handlers(
    token: CancelToken,
    signals: Iterable[signal.Signals] = (signal.SIGINT, signal.SIGTERM),
) -> CancelToken:
    """
    Cancel `token` when the process receives any of `signals`.
    Must be called from the main thread (a restriction of the signal module).
    """

    def _handle(signum, _frame) -> None:
        logger.info("Shutdown signal received", extra={"signal": signal.Signals(signum).name})
        token.cancel()

    for sig in signals:
        signal.signal(sig, _handle)
    return token
