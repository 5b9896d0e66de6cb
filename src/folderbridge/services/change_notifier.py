"""Change Notifier - publish/subscribe channel for filesystem changes.

One instance is created by the composition root and shared for the life of
the process; emitters and subscribers receive it explicitly. Dispatch is
synchronous, in subscription order. Events emitted with no subscribers are
dropped.
"""

from __future__ import annotations

import threading
from typing import Callable, List, Tuple, Union

import structlog

from folderbridge.domain.events import ChangeEvent, ChangeKind

logger = structlog.get_logger()

ChangeListener = Callable[[ChangeEvent], None]


class ChangeNotifier:
    def __init__(self) -> None:
        self._subscribers: List[Tuple[object, ChangeListener]] = []
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, callback: ChangeListener) -> Callable[[], None]:
        """Register ``callback``; the returned function unsubscribes it."""
        token = object()
        with self._lock:
            self._subscribers.append((token, callback))

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers = [item for item in self._subscribers if item[0] is not token]

        return unsubscribe

    def emit(self, kind: Union[ChangeKind, str], path: str) -> ChangeEvent:
        event = ChangeEvent(kind=ChangeKind(kind), path=path)
        with self._lock:
            subscribers = list(self._subscribers)

        for _token, callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("change_subscriber_failed", kind=event.kind.value, path=path)
        return event


__all__ = ["ChangeListener", "ChangeNotifier"]
