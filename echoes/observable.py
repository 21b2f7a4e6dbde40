"""Read-only observable values for surrounding UI."""

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class ReadOnlyObservable(Generic[T]):
    """Consumer side of an Observable: read the value and subscribe, nothing else."""

    def __init__(self, source: "Observable[T]") -> None:
        self._source = source

    @property
    def value(self) -> T:
        return self._source.value

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        return self._source.subscribe(listener)


class Observable(Generic[T]):
    """A value that notifies listeners when it changes.

    Only the owner holds this object and calls `set`; consumers get
    `readonly()`.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._listeners: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        for listener in list(self._listeners):
            listener(value)

    def readonly(self) -> ReadOnlyObservable[T]:
        return ReadOnlyObservable(self)
