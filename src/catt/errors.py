"""
Exception hierarchy for the catt bridge.

Conversions raise CoercionError, bus and binding implementations raise
BusError and BindingError. The bridge loops catch and log all of them.
"""

from typing import Any, Optional


class CattError(Exception):
    """Base class for all catt errors."""


class CoercionError(CattError, ValueError):
    """
    A value (or meta text) could not be converted to the requested form.

    Args:
        source: Source kind (ValueKind or "meta"), or None when parsing text
        target: Name of the requested target (e.g. 'bool', 'color')
        reason: Optional detail (parser message, offending input)
    """

    def __init__(self, source: Any, target: str, reason: Optional[str] = None):
        self.source = source
        self.target = target
        self.reason = reason
        source_name = getattr(source, "value", source)
        message = f"cannot convert {source_name} value to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StreamClosed(CattError):
    """An event was put on a stream that has already been closed."""


class BusError(CattError):
    """A bus operation (publish/subscribe/unsubscribe) failed."""


class BindingError(CattError):
    """A binding or one of its items failed to talk to the device side."""
