"""Event bus with multi-name registration and collected triggers."""

from .bus import DEFAULT_MAX_LISTENERS, Events
from .domain import Evented, EventSource
from .names import split_names
from .registration import ListenerRegistration, OnceListener

__all__ = [
    "DEFAULT_MAX_LISTENERS",
    "EventSource",
    "Evented",
    "Events",
    "ListenerRegistration",
    "OnceListener",
    "split_names",
]
