"""
Hue binding: polls a Hue bridge and reports its lights as catt items.
"""

import logging
import threading
from typing import Any, Dict, Optional, Tuple

from catt.binding import Binding, Notification
from catt.errors import BindingError, StreamClosed
from catt.stream import EventStream

from .client import HueClient
from .item import HueItem, HueItemType


class HueBinding(Binding):
    """
    Binding over the lights of one Hue bridge.

    Each poll compares the bridge's lights with the known items:
    - new item names are announced with ADDED
    - known items whose state changed are announced with CHANGED
    - vanished items are announced with REMOVED and forgotten
    """

    def __init__(
        self,
        client: HueClient,
        poll_interval: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize binding.

        Args:
            client: Hue REST client
            poll_interval: Seconds between polls
            logger: Optional logger instance
        """
        self.client = client
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)

        self._items: Dict[str, HueItem] = {}
        self._lock = threading.Lock()
        self._notifications: EventStream[Notification] = EventStream()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def get_value(self, name: str) -> Optional[HueItem]:
        with self._lock:
            return self._items.get(name)

    def notifications(self) -> EventStream[Notification]:
        return self._notifications

    def start(self) -> None:
        """Start polling in a background thread."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch, name="catt-hue-poll", daemon=True
        )
        self._thread.start()
        self.logger.info(f"Hue polling started (interval={self.poll_interval}s)")

    def stop(self) -> None:
        """Stop polling and close the notification stream."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=self.poll_interval + 1.0)
            self._thread = None
        self._notifications.close()
        self.logger.info("Hue polling stopped")

    def _watch(self) -> None:
        while not self._stop_event.is_set():
            self.poll()
            self._stop_event.wait(self.poll_interval)

    def poll(self) -> None:
        """Run one synchronization cycle against the bridge."""
        try:
            lights = self.client.get_lights()
        except BindingError as e:
            self.logger.error(f"Failed to fetch Hue lights: {e}")
            return

        discovered = self._discover(lights)

        with self._lock:
            for name, (light_id, light_name, item_type, state) in discovered.items():
                item = self._items.get(name)
                if item is None:
                    item = HueItem(
                        light_id=light_id,
                        light_name=light_name,
                        item_type=item_type,
                        state=state,
                        client=self.client,
                        on_change=self._on_item_change,
                    )
                    self._items[name] = item
                    self.logger.info(f"Discovered item {name} (light {light_id})")
                    self._emit(Notification.added(item))
                elif item.update_state(state):
                    self._emit(Notification.changed(item))

            for name in [name for name in self._items if name not in discovered]:
                item = self._items.pop(name)
                self.logger.info(f"Item {name} disappeared")
                self._emit(Notification.removed(item))

    def _discover(
        self, lights: Dict[str, Dict[str, Any]]
    ) -> Dict[str, Tuple[str, str, HueItemType, Dict[str, Any]]]:
        discovered = {}
        for light_id, light in sorted(lights.items()):
            if not isinstance(light, dict) or not light.get("name"):
                self.logger.warning(f"Skipping malformed light record {light_id}")
                continue
            light_name = str(light["name"])
            state = light.get("state") or {}

            item_types = [HueItemType.SWITCH]
            if "hue" in state:
                item_types.append(HueItemType.COLOR)

            for item_type in item_types:
                name = f"{light_name}_{item_type.suffix}"
                if name in discovered:
                    self.logger.warning(
                        f"Duplicate light name '{light_name}', ignoring light {light_id}"
                    )
                    continue
                discovered[name] = (str(light_id), light_name, item_type, state)
        return discovered

    def _on_item_change(self, item: HueItem) -> None:
        # Only items still in the inventory may report changes
        with self._lock:
            if self._items.get(item.name) is item:
                self._emit(Notification.changed(item))

    def _emit(self, notification: Notification) -> None:
        try:
            self._notifications.put(notification)
        except StreamClosed:
            self.logger.debug(f"Binding stopped, dropping {notification.kind.value} notification")
