"""
Notification bus for decoupled listeners (audio, HUD, other UI).

Unlike a static bus, an EventBus is an ordinary object handed to whoever
needs it. The tech tree controller only ever emits through it.
"""

from typing import Any, Callable, List


class Signal:
    """A list of callbacks fired in subscription order."""

    def __init__(self, name: str = ""):
        self.name = name
        self._listeners: List[Callable[..., Any]] = []

    def connect(self, listener: Callable[..., Any]) -> Callable[..., Any]:
        """Subscribe; returns the listener so it can be used as a decorator."""
        if listener not in self._listeners:
            self._listeners.append(listener)
        return listener

    def disconnect(self, listener: Callable[..., Any]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, *args: Any) -> None:
        for listener in list(self._listeners):
            listener(*args)

    __call__ = emit

    def __len__(self) -> int:
        return len(self._listeners)


class EventBus:
    """Game-wide signals."""

    def __init__(self):
        # Fired whenever the cell balance changes, with the new balance
        self.cell_count_changed = Signal("cell_count_changed")
        # Fired after a tech node unlock or a restore pass
        self.tech_tree_changed = Signal("tech_tree_changed")
