"""
Items for Hue lights.

Every light yields a '<Name>_Switch' item (bool) and, when it supports
color, a '<Name>_Color' item (HSV color).
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, Optional

from catt.errors import BindingError
from catt.item import Item
from catt.meta import Meta
from catt.value import Color, Value

from .client import HueClient

BACKEND = "hue"

HUE_MAX = 65535
LEVEL_MAX = 254


class HueItemType(Enum):
    """Item flavour; the value is the Meta value_type."""

    SWITCH = "bool"
    COLOR = "color"

    @property
    def suffix(self) -> str:
        return "Switch" if self is HueItemType.SWITCH else "Color"

    @property
    def state_keys(self):
        """Light state fields this item type reflects."""
        if self is HueItemType.SWITCH:
            return ("on",)
        return ("hue", "sat", "bri")


def _clamp(number: float, upper: int) -> int:
    return max(0, min(upper, int(round(number))))


def color_from_state(state: Dict[str, Any]) -> Color:
    """Convert Hue hue/sat/bri to an HSV color (degrees, 0..1, 0..1)."""
    return Color(
        h=state.get("hue", 0) * 360.0 / HUE_MAX,
        s=state.get("sat", 0) / LEVEL_MAX,
        v=state.get("bri", 0) / LEVEL_MAX,
    )


def state_from_color(color: Color) -> Dict[str, int]:
    """Convert an HSV color to Hue hue/sat/bri, clamped to the API ranges."""
    return {
        "hue": _clamp(color.h * HUE_MAX / 360.0, HUE_MAX),
        "sat": _clamp(color.s * LEVEL_MAX, LEVEL_MAX),
        "bri": _clamp(color.v * LEVEL_MAX, LEVEL_MAX),
    }


class HueItem(Item):
    """
    One facet (switch or color) of a Hue light.

    The item caches the last known light state. It is refreshed by the
    binding's poll loop and after every successful set_value().
    """

    def __init__(
        self,
        light_id: str,
        light_name: str,
        item_type: HueItemType,
        state: Dict[str, Any],
        client: HueClient,
        on_change: Callable[["HueItem"], None],
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize item.

        Args:
            light_id: Hue light id
            light_name: Light name as configured on the bridge
            item_type: SWITCH or COLOR
            state: Light state record from the bridge
            client: Client used to send state changes
            on_change: Called with the item after a successful set_value()
            logger: Optional logger
        """
        self.light_id = light_id
        self.light_name = light_name
        self.item_type = item_type
        self.client = client
        self._on_change = on_change
        self._lock = threading.Lock()
        self._state = self._relevant(state)
        self.logger = logger or logging.getLogger(f"{__name__}.{self.name}")

    @property
    def name(self) -> str:
        return f"{self.light_name}_{self.item_type.suffix}"

    @property
    def meta(self) -> Meta:
        return Meta(backend=BACKEND, value_type=self.item_type.value)

    def get_value(self) -> Value:
        with self._lock:
            state = dict(self._state)
        if self.item_type is HueItemType.SWITCH:
            return Value.boolean(bool(state.get("on", False)))
        return Value.color(color_from_state(state))

    def set_value(self, value: Value) -> None:
        """
        Send a new switch state or color to the light.

        Args:
            value: Anything coercible to bool (switch) or color (color)

        Raises:
            CoercionError: If the value cannot be coerced
            BindingError: If the bridge rejects the change
        """
        if self.item_type is HueItemType.SWITCH:
            body: Dict[str, Any] = {"on": value.as_bool()}
        elif self.item_type is HueItemType.COLOR:
            body = state_from_color(value.as_color())
        else:
            raise BindingError(f"Invalid item type: {self.item_type!r}")

        self.client.set_state(self.light_id, body)
        with self._lock:
            self._state.update(body)
        self.logger.info(f"Set {self.name} to {body}")
        self._on_change(self)

    def update_state(self, state: Dict[str, Any]) -> bool:
        """
        Refresh the cached state from a poll.

        Args:
            state: Light state record from the bridge

        Returns:
            True if any field this item reflects changed
        """
        relevant = self._relevant(state)
        with self._lock:
            if relevant == self._state:
                return False
            self._state = relevant
        return True

    def _relevant(self, state: Dict[str, Any]) -> Dict[str, Any]:
        return {key: state[key] for key in self.item_type.state_keys if key in state}
