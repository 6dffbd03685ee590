"""
catt - Client-agnostic bridge core.

Typed item values, the bus/binding contracts and the bridge that forwards
events between them.
"""

from .binding import Binding, Notification, NotificationKind
from .bridge import Bridge
from .bus import Bus, Message, MessageKind, SubType
from .errors import BindingError, BusError, CattError, CoercionError, StreamClosed
from .item import Item
from .meta import Meta
from .stream import EventStream
from .value import Color, RawEncoding, Value, ValueKind

__version__ = "0.3.0"
__all__ = [
    "Binding",
    "BindingError",
    "Bridge",
    "Bus",
    "BusError",
    "CattError",
    "CoercionError",
    "Color",
    "EventStream",
    "Item",
    "Message",
    "MessageKind",
    "Meta",
    "Notification",
    "NotificationKind",
    "RawEncoding",
    "StreamClosed",
    "SubType",
    "Value",
    "ValueKind",
]
