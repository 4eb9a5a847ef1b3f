"""Domain exception hierarchy for the evented package."""

from __future__ import annotations


class EventedError(RuntimeError):
    """Base class for all errors raised by the event bus itself."""


class InvalidListenerError(EventedError, TypeError):
    """Raised when a non-callable listener is registered."""


class ConfigValidationError(EventedError):
    """Raised when configuration cannot be validated safely."""
