"""Listener registrations and the fire-once adapter."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import inspect
from typing import Any

Listener = Callable[..., Any]


class OnceListener:
    """Callable adapter that delivers to ``callback`` at most one time.

    The first call runs ``on_fire`` (which deregisters the adapter from the
    bus) before invoking ``callback``. Later calls, including nested calls made
    while ``callback`` is running, do not invoke it again. They return the
    first result when it was a plain value, and ``None`` when it was an
    awaitable, which cannot be awaited twice.
    """

    __slots__ = ("callback", "fired", "_on_fire", "_result")

    def __init__(
        self,
        callback: Listener,
        on_fire: Callable[[OnceListener], None] | None = None,
    ) -> None:
        self.callback = callback
        self.fired = False
        self._on_fire = on_fire
        self._result: Any = None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if self.fired:
            return self._result
        self.fired = True
        if self._on_fire is not None:
            self._on_fire(self)
        result = self.callback(*args, **kwargs)
        if not inspect.isawaitable(result):
            self._result = result
        return result

    def __repr__(self) -> str:
        state = "fired" if self.fired else "pending"
        return f"<OnceListener {self.callback!r} ({state})>"


@dataclass(eq=False)
class ListenerRegistration:
    """One listener bound to one event name.

    ``original`` is the callable the caller passed in; it differs from
    ``callback`` only when the callback was wrapped for fire-once delivery.
    """

    callback: Listener
    original: Listener
    context: Any = None
    once: bool = False

    def matches(self, listener: Listener) -> bool:
        """Return True when ``listener`` identifies this registration."""
        return listener is self.original or listener is self.callback

    def invoke(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        """Call the registered callback, passing the bound context first."""
        if self.context is not None:
            return self.callback(self.context, *args, **kwargs)
        return self.callback(*args, **kwargs)
