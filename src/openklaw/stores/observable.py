"""
Observable value container with synchronous subscriber notification.
"""

import threading
from typing import Callable, Generic, TypeVar

from openklaw.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Subscriber = Callable[[T], None]


class ObservableStore(Generic[T]):
    """
    Holds one value and notifies subscribers on every change.

    Subscribers are called synchronously, in subscription order, right
    after the value is replaced, and once immediately on ``subscribe``.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._lock = threading.Lock()
        self._subscribers: list[Subscriber[T]] = []

    def get(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value
            subscribers = list(self._subscribers)
        self._notify(subscribers, value)

    def update(self, fn: Callable[[T], T]) -> T:
        """Replace the value with ``fn(current)`` and return the new value."""
        with self._lock:
            value = fn(self._value)
            self._value = value
            subscribers = list(self._subscribers)
        self._notify(subscribers, value)
        return value

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        """
        Register a subscriber.

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)
            current = self._value
        callback(current)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _notify(self, subscribers: list[Subscriber[T]], value: T) -> None:
        for callback in subscribers:
            try:
                callback(value)
            except Exception as e:
                logger.error("Subscriber callback failed", error=str(e))
