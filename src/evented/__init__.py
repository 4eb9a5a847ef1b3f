"""Top-level package for evented."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import ensure_config_dir, load_config
    from .events import Evented, Events, EventSource
    from .exceptions import ConfigValidationError, EventedError, InvalidListenerError
    from .logging_utils import configure_logging

__all__ = [
    "ConfigValidationError",
    "EventSource",
    "Evented",
    "EventedError",
    "Events",
    "InvalidListenerError",
    "configure_logging",
    "ensure_config_dir",
    "load_config",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols so the bus does not pull in config dependencies."""
    if name in {"Events", "Evented", "EventSource"}:
        from .events import Evented, Events, EventSource

        return {"Events": Events, "Evented": Evented, "EventSource": EventSource}[name]
    if name in {"ensure_config_dir", "load_config"}:
        from .config import ensure_config_dir, load_config

        return {"ensure_config_dir": ensure_config_dir, "load_config": load_config}[name]
    if name in {"ConfigValidationError", "EventedError", "InvalidListenerError"}:
        from .exceptions import (
            ConfigValidationError,
            EventedError,
            InvalidListenerError,
        )

        return {
            "ConfigValidationError": ConfigValidationError,
            "EventedError": EventedError,
            "InvalidListenerError": InvalidListenerError,
        }[name]
    if name == "configure_logging":
        from .logging_utils import configure_logging

        return configure_logging
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
