"""
Observable Values
=================

Small push-based dependency graph used by the solution model.

Writing a source value synchronously notifies every listener before set()
returns. Derived values are recomputed by their owner (a pure function of
declared inputs) and published through DerivedValue._publish(), which
callers outside the owner cannot reach through the public API.

Listeners receive (new_value, old_value). subscribe() fires on the next
change only; link() also fires immediately with the current value.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from typing import Any, Callable, Generic, List, TypeVar

T = TypeVar("T")

Listener = Callable[[Any, Any], None]


class ObservableValue(Generic[T]):
    """
    A mutable value that notifies listeners when it changes.

    Args:
        initial_value: Value restored by reset()
        name: Label used in repr() and log messages
    """

    def __init__(self, initial_value: T, name: str = ""):
        self.name = name
        self._initial_value = initial_value
        self._value = initial_value
        self._listeners: List[Listener] = []

    @property
    def value(self) -> T:
        return self._value

    @property
    def initial_value(self) -> T:
        return self._initial_value

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._set(value)

    def reset(self) -> None:
        self._set(self._initial_value)

    def subscribe(self, listener: Listener) -> Listener:
        """Call listener(new, old) on every subsequent change."""
        self._listeners.append(listener)
        return listener

    def link(self, listener: Listener) -> Listener:
        """Like subscribe(), but also calls listener(value, None) right away."""
        self.subscribe(listener)
        listener(self._value, None)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _assign(self, value: T) -> bool:
        """Store value without notifying. Returns True if it changed."""
        if value is self._value or value == self._value:
            return False
        self._value = value
        return True

    def _notify(self, value: T, old_value: T) -> None:
        # Copy, listeners may unsubscribe themselves
        for listener in list(self._listeners):
            listener(value, old_value)

    def _set(self, value: T) -> None:
        old_value = self._value
        if self._assign(value):
            self._notify(value, old_value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self._value!r})"


class DerivedValue(ObservableValue[T]):
    """Read-only observable whose value is published by its owner."""

    def set(self, value: T) -> None:
        raise AttributeError(f"{self.name or 'derived value'} is read-only")

    def reset(self) -> None:
        raise AttributeError(f"{self.name or 'derived value'} is read-only")

    def _publish(self, value: T) -> None:
        self._set(value)


def publish_all(*updates) -> None:
    """
    Publish several derived values as one update.

    All values are stored before any listener runs, so a listener on one
    value never reads another value that is still stale.

    Args:
        updates: (DerivedValue, new_value) pairs
    """
    changed = []
    for derived, value in updates:
        old_value = derived.value
        if derived._assign(value):
            changed.append((derived, value, old_value))
    for derived, value, old_value in changed:
        derived._notify(value, old_value)
