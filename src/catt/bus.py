"""
Bus contract and the messages exchanged over it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .meta import Meta
from .stream import EventStream
from .value import Value


class MessageKind(Enum):
    UPDATE = "update"
    COMMAND = "command"
    META = "meta"


class SubType(Enum):
    """Which of an item's topics a subscription covers."""

    UPDATE = "update"
    COMMAND = "command"
    META = "meta"
    ALL = "all"


@dataclass(frozen=True)
class Message:
    """
    Item state, command or metadata travelling over the bus.

    UPDATE and COMMAND messages carry a value, META messages carry a meta.
    """

    kind: MessageKind
    item_name: str
    value: Optional[Value] = None
    meta: Optional[Meta] = None

    def __post_init__(self):
        if self.kind is MessageKind.META:
            if self.meta is None or self.value is not None:
                raise ValueError("meta message needs a meta and no value")
        elif self.kind in (MessageKind.UPDATE, MessageKind.COMMAND):
            if self.value is None or self.meta is not None:
                raise ValueError(f"{self.kind.value} message needs a value and no meta")

    @classmethod
    def update(cls, item_name: str, value: Value) -> "Message":
        return cls(MessageKind.UPDATE, item_name, value=value)

    @classmethod
    def command(cls, item_name: str, value: Value) -> "Message":
        return cls(MessageKind.COMMAND, item_name, value=value)

    @classmethod
    def meta_of(cls, item_name: str, meta: Meta) -> "Message":
        return cls(MessageKind.META, item_name, meta=meta)


class Bus(ABC):
    """
    Publish/subscribe transport.

    Implementations must preserve message order within one item's command
    topic and close the message stream only on permanent shutdown.
    """

    @abstractmethod
    def publish(self, message: Message) -> None:
        """
        Publish a message.

        Raises:
            BusError: If the message cannot be sent
        """
        pass

    @abstractmethod
    def subscribe(self, item_name: str, sub_type: SubType) -> None:
        """
        Start receiving messages of the given type for an item.

        Raises:
            BusError: If the subscription fails
        """
        pass

    @abstractmethod
    def unsubscribe(self, item_name: str, sub_type: SubType) -> None:
        """
        Stop receiving messages of the given type for an item.

        Raises:
            BusError: If the unsubscription fails
        """
        pass

    @abstractmethod
    def messages(self) -> EventStream[Message]:
        """Return the stream of received messages."""
        pass
