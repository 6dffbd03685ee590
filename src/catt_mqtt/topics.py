"""
MQTT topic layout for items.

    <item_base>/<item_name>/state     UPDATE messages
    <item_base>/<item_name>/command   COMMAND messages
    <item_base>/<item_name>/meta      META messages
"""

from typing import Optional, Tuple

from catt.bus import MessageKind, SubType

DEFAULT_ITEM_BASE = "catt/items"

_SUFFIX_BY_KIND = {
    MessageKind.UPDATE: "state",
    MessageKind.COMMAND: "command",
    MessageKind.META: "meta",
}
_KIND_BY_SUFFIX = {suffix: kind for kind, suffix in _SUFFIX_BY_KIND.items()}

_SUFFIX_BY_SUB = {
    SubType.UPDATE: "state",
    SubType.COMMAND: "command",
    SubType.META: "meta",
    SubType.ALL: "#",
}


def _join(*parts: str) -> str:
    return "/".join(part.strip("/") for part in parts if part.strip("/"))


def message_topic(item_base: str, item_name: str, kind: MessageKind) -> str:
    """
    Topic a message of the given kind is published on.

    Raises:
        KeyError: If kind is not a MessageKind
    """
    return _join(item_base or DEFAULT_ITEM_BASE, item_name, _SUFFIX_BY_KIND[kind])


def subscription_topic(item_base: str, item_name: str, sub_type: SubType) -> str:
    """
    Topic filter for a subscription type.

    Raises:
        KeyError: If sub_type is not a SubType
    """
    return _join(item_base or DEFAULT_ITEM_BASE, item_name, _SUFFIX_BY_SUB[sub_type])


def parse_topic(topic: str) -> Optional[Tuple[str, Optional[MessageKind]]]:
    """
    Split a received topic into item name and message kind.

    Args:
        topic: Full MQTT topic

    Returns:
        (item_name, kind) where kind is None for an unknown suffix,
        or None if the topic has fewer than two segments
    """
    parts = topic.split("/")
    if len(parts) < 2:
        return None
    return parts[-2], _KIND_BY_SUFFIX.get(parts[-1])
