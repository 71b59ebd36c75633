"""Registry of status listeners owned by a security service instance."""

import threading
from typing import Callable, List, Set

from ..models.security import AlarmStatus
from .interfaces import StatusListener
from ..logging_config import get_logger

logger = get_logger("listeners")


class StatusListenerRegistry:
    """A set of listeners with fan-out notification.

    Adding an existing listener or removing an unknown one is a no-op.
    Notification order is unspecified.
    """

    def __init__(self):
        self._listeners: Set[StatusListener] = set()
        self._lock = threading.Lock()

    def add(self, listener: StatusListener) -> None:
        with self._lock:
            self._listeners.add(listener)

    def remove(self, listener: StatusListener) -> None:
        with self._lock:
            self._listeners.discard(listener)

    def __contains__(self, listener: StatusListener) -> bool:
        with self._lock:
            return listener in self._listeners

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def notify_status_changed(self, alarm_status: AlarmStatus) -> None:
        self._broadcast("on_status_changed", lambda listener: listener.on_status_changed(alarm_status))

    def notify_cat_detected(self, cat_present: bool) -> None:
        self._broadcast("on_cat_detected", lambda listener: listener.on_cat_detected(cat_present))

    def notify_sensor_status_changed(self) -> None:
        self._broadcast("on_sensor_status_changed", lambda listener: listener.on_sensor_status_changed())

    def _snapshot(self) -> List[StatusListener]:
        with self._lock:
            return list(self._listeners)

    def _broadcast(self, event_name: str, deliver: Callable[[StatusListener], None]) -> None:
        # A failing listener must not stop delivery to the others
        for listener in self._snapshot():
            try:
                deliver(listener)
            except Exception as e:
                logger.error(f"Listener {listener!r} failed on {event_name}: {e}", exc_info=True)
