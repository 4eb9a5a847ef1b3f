"""Event bus with multi-name registration, fire-once and collected triggers.

Usage:
    events = Events()

    def on_saved(model):
        print(f"saved {model}")

    events.on("saving saved", on_saved)
    events.once("destroyed", on_saved)
    events.trigger(["saved"], model)

    # Await every listener, including async ones
    results = await events.trigger_then("saving", model)
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
import inspect
import logging
from typing import Any

from ..exceptions import InvalidListenerError
from .names import NameInput, split_names
from .registration import Listener, ListenerRegistration, OnceListener

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_LISTENERS = 10


class Events:
    """Per-instance registry of named listeners with dispatch operations.

    Every public method accepts an event name or a whitespace-separated list
    of names. The registration table itself is keyed by single names only.
    """

    def __init__(self, max_listeners: int = DEFAULT_MAX_LISTENERS) -> None:
        self._table: dict[str, list[ListenerRegistration]] = {}
        self._warned: set[str] = set()
        self._max_listeners = 0
        self.max_listeners = max_listeners

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> Events:
        """Build a bus from a loaded configuration mapping."""
        events_config = config.get("events", {})
        return cls(
            max_listeners=int(
                events_config.get("max_listeners", DEFAULT_MAX_LISTENERS)
            )
        )

    @property
    def max_listeners(self) -> int:
        """Registrations per name above which a leak warning is logged (0 disables)."""
        return self._max_listeners

    @max_listeners.setter
    def max_listeners(self, value: int) -> None:
        if value < 0:
            raise ValueError("max_listeners must be a non-negative integer.")
        self._max_listeners = value

    def on(
        self, name_or_names: NameInput, handler: Listener, context: Any = None
    ) -> Events:
        """Register ``handler`` for each named event.

        Args:
            name_or_names: Event name or whitespace-separated list of names
            handler: Callable invoked with the trigger arguments
            context: Optional object passed as the first positional argument
        """
        _ensure_callable(handler)
        for name in split_names(name_or_names):
            self._add(
                name,
                ListenerRegistration(
                    callback=handler, original=handler, context=context
                ),
            )
        return self

    def once(
        self, name_or_names: NameInput, callback: Listener, context: Any = None
    ) -> Events:
        """Register ``callback`` to run at most once across all named events.

        A single adapter is shared by every parsed name. Its first invocation
        removes it from all of them before ``callback`` runs. Passing the
        original ``callback`` to :meth:`off` cancels it before it fires.
        """
        _ensure_callable(callback)
        names = split_names(name_or_names)
        adapter = OnceListener(
            callback, on_fire=lambda fired: self.off(names, fired)
        )
        for name in names:
            self._add(
                name,
                ListenerRegistration(
                    callback=adapter, context=context, once=True, original=callback
                ),
            )
        return self

    def off(
        self, name_or_names: NameInput = None, listener: Listener | None = None
    ) -> Events:
        """Remove listeners.

        With no names every event is affected; with no listener every
        registration under the affected names is dropped. Otherwise only
        registrations whose original callback (or adapter) is ``listener``
        are removed. Unknown names and listeners are ignored.
        """
        if name_or_names is None:
            names: Iterable[str] = list(self._table)
        else:
            names = split_names(name_or_names)
        for name in names:
            self._remove(name, listener)
        return self

    def remove_all_listeners(self, name_or_names: NameInput = None) -> Events:
        """Remove every registration for the given names, or for all names."""
        return self.off(name_or_names)

    def trigger(self, names: NameInput, *args: Any, **kwargs: Any) -> Events:
        """Synchronously invoke the listeners of each name, left to right.

        Each name's registrations are copied before delivery, so listeners
        that register or remove listeners only affect later triggers.
        Listener exceptions propagate and stop the remaining delivery.
        """
        for name in split_names(names):
            for registration in list(self._table.get(name, ())):
                registration.invoke(args, kwargs)
        return self

    async def trigger_then(
        self, name_or_names: NameInput, *args: Any, **kwargs: Any
    ) -> list[Any]:
        """Invoke every listener of the named events and collect their results.

        Plain return values are treated as settled; awaitables are scheduled
        as soon as they are returned. The returned list follows invocation
        order. The first listener failure, raised synchronously or by an
        awaitable, is re-raised; results still in flight are left running.
        """
        snapshot = [
            registration
            for name in split_names(name_or_names)
            for registration in list(self._table.get(name, ()))
        ]
        loop = asyncio.get_running_loop()
        pending: list[asyncio.Future[Any]] = []
        for registration in snapshot:
            try:
                result = registration.invoke(args, kwargs)
            except Exception as exc:
                failed: asyncio.Future[Any] = loop.create_future()
                failed.set_exception(exc)
                pending.append(failed)
                break
            pending.append(_as_future(result, loop))
        return list(await asyncio.gather(*pending))

    def listeners(self, name: str) -> list[Listener]:
        """Return the callbacks registered under ``name`` in delivery order."""
        return [
            registration.original for registration in self._table.get(name, ())
        ]

    def listener_count(self, name: str) -> int:
        """Return how many registrations ``name`` currently has."""
        return len(self._table.get(name, ()))

    def event_names(self) -> list[str]:
        """Return every name that has at least one registration."""
        return list(self._table)

    # Capability interface for domain objects that hold a bus as a field.
    subscribe = on
    unsubscribe = off
    fire = trigger
    fire_and_collect = trigger_then

    def _add(self, name: str, registration: ListenerRegistration) -> None:
        registrations = self._table.setdefault(name, [])
        registrations.append(registration)
        LOGGER.debug(
            "events.subscribed",
            extra={
                "event": "events.subscribed",
                "event_name": name,
                "once": registration.once,
            },
        )
        if (
            self._max_listeners > 0
            and len(registrations) > self._max_listeners
            and name not in self._warned
        ):
            self._warned.add(name)
            LOGGER.warning(
                "events.max_listeners.exceeded",
                extra={
                    "event": "events.max_listeners.exceeded",
                    "event_name": name,
                    "count": len(registrations),
                    "max_listeners": self._max_listeners,
                },
            )

    def _remove(self, name: str, listener: Listener | None) -> None:
        registrations = self._table.get(name)
        if not registrations:
            return
        if listener is None:
            kept: list[ListenerRegistration] = []
        else:
            kept = [r for r in registrations if not r.matches(listener)]
        removed = len(registrations) - len(kept)
        if kept:
            self._table[name] = kept
        else:
            del self._table[name]
            self._warned.discard(name)
        if removed:
            LOGGER.debug(
                "events.unsubscribed",
                extra={
                    "event": "events.unsubscribed",
                    "event_name": name,
                    "removed": removed,
                },
            )


def _ensure_callable(listener: Any) -> None:
    if not callable(listener):
        raise InvalidListenerError(
            f"Listener must be callable, got {type(listener).__name__}."
        )


def _as_future(result: Any, loop: asyncio.AbstractEventLoop) -> asyncio.Future[Any]:
    if inspect.isawaitable(result):
        return asyncio.ensure_future(result)
    settled: asyncio.Future[Any] = loop.create_future()
    settled.set_result(result)
    return settled
