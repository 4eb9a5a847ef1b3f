"""Event capability for domain objects.

Domain types either hold an :class:`Events` instance as a field or extend
:class:`Evented`, which keeps one and forwards the event API to it while
returning the domain object for chaining.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .bus import Events
from .names import NameInput
from .registration import Listener


@runtime_checkable
class EventSource(Protocol):
    """Anything that can subscribe, unsubscribe and fire named events."""

    def subscribe(
        self, name_or_names: NameInput, handler: Listener, context: Any = None
    ) -> Any: ...

    def unsubscribe(
        self, name_or_names: NameInput = None, listener: Listener | None = None
    ) -> Any: ...

    def fire(self, names: NameInput, *args: Any, **kwargs: Any) -> Any: ...

    async def fire_and_collect(
        self, name_or_names: NameInput, *args: Any, **kwargs: Any
    ) -> list[Any]: ...


class Evented:
    """Base for domain objects that publish their own events."""

    _events: Events | None = None

    @property
    def events(self) -> Events:
        if self._events is None:
            self._events = Events()
        return self._events

    @events.setter
    def events(self, value: Events) -> None:
        self._events = value

    def on(
        self, name_or_names: NameInput, handler: Listener, context: Any = None
    ) -> Evented:
        self.events.on(name_or_names, handler, context)
        return self

    def once(
        self, name_or_names: NameInput, callback: Listener, context: Any = None
    ) -> Evented:
        self.events.once(name_or_names, callback, context)
        return self

    def off(
        self, name_or_names: NameInput = None, listener: Listener | None = None
    ) -> Evented:
        self.events.off(name_or_names, listener)
        return self

    def trigger(self, names: NameInput, *args: Any, **kwargs: Any) -> Evented:
        self.events.trigger(names, *args, **kwargs)
        return self

    async def trigger_then(
        self, name_or_names: NameInput, *args: Any, **kwargs: Any
    ) -> list[Any]:
        return await self.events.trigger_then(name_or_names, *args, **kwargs)

    subscribe = on
    unsubscribe = off
    fire = trigger
    fire_and_collect = trigger_then
