"""
Bidirectional bridge between a bus and a binding.

Runs two independent forwarding loops:
- bus -> binding: applies COMMAND messages to items
- binding -> bus: publishes item metadata and state, keeps command
  subscriptions in sync with the binding's inventory

Neither loop stops on bad input or failed calls; each ends only when its
input stream is closed.
"""

import logging
import threading
from typing import List, Optional

from .binding import Binding, Notification, NotificationKind
from .bus import Bus, Message, MessageKind, SubType


class Bridge:
    """
    Forwards events between a bus and a binding.

    The bus must already be connected and the binding populated (or
    populating). The bridge holds no per-item state; it reacts to the two
    event streams only.
    """

    def __init__(
        self,
        bus: Bus,
        binding: Binding,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize bridge.

        Args:
            bus: Bus implementation
            binding: Binding implementation
            logger: Optional logger instance
        """
        self.bus = bus
        self.binding = binding
        self.logger = logger or logging.getLogger(__name__)

        self._messages = bus.messages()
        self._notifications = binding.notifications()

        self._threads: List[threading.Thread] = []
        self._start_lock = threading.Lock()

    @property
    def running(self) -> bool:
        """True while at least one loop is still alive."""
        return any(thread.is_alive() for thread in self._threads)

    def start(self) -> None:
        """Start both forwarding loops. Calling it again does nothing."""
        with self._start_lock:
            if self._threads:
                return
            self._threads = [
                threading.Thread(
                    target=self._bus_to_binding,
                    name="catt-bus-to-binding",
                    daemon=True,
                ),
                threading.Thread(
                    target=self._binding_to_bus,
                    name="catt-binding-to-bus",
                    daemon=True,
                ),
            ]
            for thread in self._threads:
                thread.start()
        self.logger.info("Bridge started")

    def run(self) -> None:
        """Start if needed and block until both loops have stopped."""
        self.start()
        for thread in self._threads:
            thread.join()
        self.logger.info("Bridge stopped")

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for both loops to stop.

        Args:
            timeout: Seconds to wait per loop, None to wait forever

        Returns:
            True if both loops have stopped
        """
        for thread in self._threads:
            thread.join(timeout)
        return not self.running

    def _bus_to_binding(self) -> None:
        for message in self._messages:
            self.handle_message(message)
        self.logger.info("Bus message stream closed, bus -> binding loop exiting")

    def _binding_to_bus(self) -> None:
        for notification in self._notifications:
            self.handle_notification(notification)
        self.logger.info(
            "Binding notification stream closed, binding -> bus loop exiting"
        )

    def handle_message(self, message: Message) -> None:
        """
        Apply one bus message to the binding.

        Only COMMAND messages are applied; everything else is dropped with a
        warning. Unknown items and set_value failures are logged and dropped.

        Args:
            message: Message received from the bus
        """
        if message.kind is not MessageKind.COMMAND:
            self.logger.warning(f"Received non-command message: message={message!r}")
            return

        name = message.item_name
        try:
            item = self.binding.get_value(name)
        except Exception as e:
            self.logger.warning(f"Error looking up item: item_name={name}, error={e}")
            return

        if item is None:
            self.logger.warning(
                f"Received message for non-existent item: item_name={name}"
            )
            return

        try:
            item.set_value(message.value)
        except Exception as e:
            self.logger.warning(
                f"Error setting item value: item={item!r}, "
                f"value={message.value!r}, error={e}"
            )
            return

        self.logger.debug(f"Applied command: item_name={name}, value={message.value!r}")

    def handle_notification(self, notification: Notification) -> None:
        """
        Forward one binding notification to the bus.

        ADDED publishes the item's meta and subscribes its command topic,
        CHANGED publishes the current value, REMOVED unsubscribes the command
        topic. Failures are logged and the notification is dropped.

        Args:
            notification: Notification received from the binding
        """
        kind = notification.kind
        if kind is NotificationKind.ADDED:
            self._on_added(notification)
        elif kind is NotificationKind.CHANGED:
            self._on_changed(notification)
        elif kind is NotificationKind.REMOVED:
            self._on_removed(notification)
        else:
            self.logger.warning(
                f"Invalid notification type: notification={notification!r}"
            )

    def _on_added(self, notification: Notification) -> None:
        item = notification.item
        name = item.name

        try:
            meta = item.meta
        except Exception as e:
            self.logger.warning(f"Error computing item meta: item={item!r}, error={e}")
        else:
            try:
                self.bus.publish(Message.meta_of(name, meta))
            except Exception as e:
                self.logger.warning(f"Meta publish error: item_name={name}, error={e}")

        try:
            self.bus.subscribe(name, SubType.COMMAND)
        except Exception as e:
            self.logger.warning(f"Subscribe error: item_name={name}, error={e}")
            return

        self.logger.debug(f"Item added: item_name={name}")

    def _on_changed(self, notification: Notification) -> None:
        item = notification.item

        try:
            value = item.get_value()
        except Exception as e:
            self.logger.warning(f"Error getting item value: item={item!r}, error={e}")
            return

        try:
            self.bus.publish(Message.update(item.name, value))
        except Exception as e:
            self.logger.warning(
                f"State publish error: item_name={item.name}, error={e}"
            )

    def _on_removed(self, notification: Notification) -> None:
        name = notification.item.name

        try:
            self.bus.unsubscribe(name, SubType.COMMAND)
        except Exception as e:
            self.logger.warning(f"Unsubscribe error: item_name={name}, error={e}")
            return

        self.logger.debug(f"Item removed: item_name={name}")
