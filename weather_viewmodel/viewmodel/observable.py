"""Observable state holders used by view models."""

import asyncio
from typing import Callable, Generic, List, Optional, TypeVar

from weather_viewmodel.logging_config import logger

T = TypeVar("T")

Observer = Callable[[T], None]


class ObservableField(Generic[T]):
    """A value that notifies subscribers on every write.

    The write side is not public; view models publish through
    MutableObservableField and hand this type to the UI.
    """

    def __init__(self, name: str, initial: T):
        self.name = name
        self._value = initial
        self._observers: List[Observer] = []

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, observer: Observer, emit_current: bool = True) -> Callable[[], None]:
        """Register an observer.

        Args:
            observer: Called with the new value after every write.
            emit_current: Also call the observer right away with the current value.

        Returns:
            A callable that removes the observer.
        """
        self._observers.append(observer)
        if emit_current:
            self._notify_one(observer, self._value)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _set(self, value: T) -> None:
        self._value = value
        for observer in list(self._observers):
            self._notify_one(observer, value)

    def _notify_one(self, observer: Observer, value: T) -> None:
        try:
            observer(value)
        except Exception as exc:
            logger.error(
                "OBSERVER_FAILED",
                field=self.name,
                error=str(exc),
                error_type=type(exc).__name__,
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name}={self._value!r})"


class MutableObservableField(ObservableField[T]):
    """ObservableField whose value may be written by its holder."""

    @ObservableField.value.setter
    def value(self, value: T) -> None:
        self._set(value)

    def set(self, value: T) -> None:
        self._set(value)


class EventChannel(Generic[T]):
    """Single-consumer queue of one-shot events.

    Each item sent is handed out exactly once, either by poll() or receive().
    An item stays queued until a receiver actually takes it, so a receiver
    cancelled while waiting does not lose it.
    """

    def __init__(self, name: str):
        self.name = name
        self._items: "asyncio.Queue[T]" = asyncio.Queue()

    def send(self, item: T) -> None:
        self._items.put_nowait(item)

    def poll(self) -> Optional[T]:
        """Return the next pending item, or None when the channel is empty."""
        try:
            return self._items.get_nowait()
        except asyncio.QueueEmpty:
            return None

    async def receive(self) -> T:
        """Wait for and return the next item."""
        return await self._items.get()

    def __len__(self) -> int:
        return self._items.qsize()
