"""
Binding contract and the notifications it emits.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .item import Item
from .stream import EventStream


class NotificationKind(Enum):
    CHANGED = "changed"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class Notification:
    """
    Item lifecycle or state change reported by a binding.

    The item stays owned by the binding; consumers only read it.
    """

    kind: NotificationKind
    item: Item

    @classmethod
    def added(cls, item: Item) -> "Notification":
        return cls(NotificationKind.ADDED, item)

    @classmethod
    def changed(cls, item: Item) -> "Notification":
        return cls(NotificationKind.CHANGED, item)

    @classmethod
    def removed(cls, item: Item) -> "Notification":
        return cls(NotificationKind.REMOVED, item)


class Binding(ABC):
    """
    Device abstraction layer.

    Implementations must keep the notification stream monotonic per item:
    exactly one ADDED before any CHANGED/REMOVED, nothing after REMOVED.
    The stream is closed only on permanent shutdown.
    """

    @abstractmethod
    def get_value(self, name: str) -> Optional[Item]:
        """
        Look up an item by name.

        Args:
            name: Item name

        Returns:
            Item instance or None if the binding has no such item
        """
        pass

    @abstractmethod
    def notifications(self) -> EventStream[Notification]:
        """Return the stream of item notifications."""
        pass
