"""
MQTT implementation of the catt bus.

Publishes item state, commands and metadata under
<item_base>/<item_name>/{state,command,meta} and turns received MQTT
messages into catt Messages on an EventStream.
"""

import logging
import threading
from typing import Optional, Set

import paho.mqtt.client as mqtt

from catt.bus import Bus, Message, MessageKind, SubType
from catt.errors import BusError, CoercionError, StreamClosed
from catt.meta import Meta
from catt.stream import EventStream
from catt.value import Value

from .config_loader import MqttConfig
from .topics import message_topic, parse_topic, subscription_topic

KEEPALIVE = 5
RECONNECT_MIN_DELAY = 1
RECONNECT_MAX_DELAY = 3


class MqttBus(Bus):
    """
    Bus backed by a paho MQTT client.

    Features:
    - Automatic reconnection with re-subscription of active topics
    - Optional TLS and credentials
    - Configurable raw value encoding (base64 or utf8)
    """

    def __init__(
        self,
        config: MqttConfig,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Connect to the broker and start the network loop.

        Args:
            config: MQTT settings
            logger: Optional logger instance

        Raises:
            ValueError: If the broker address is invalid
            Exception: If the broker connection fails
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.item_base = config.item_base
        self.encoding = config.value_encoding

        self._messages: EventStream[Message] = EventStream()
        self._subscriptions: Set[str] = set()
        self._lock = threading.Lock()

        host, port = config.host_port()

        self.mqtt_client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2, client_id=config.client_id
        )
        if config.username:
            self.mqtt_client.username_pw_set(config.username, config.password)
        if config.tls:
            self.mqtt_client.tls_set()

        self.mqtt_client.on_connect = self._on_mqtt_connect
        self.mqtt_client.on_disconnect = self._on_mqtt_disconnect
        self.mqtt_client.on_message = self._on_mqtt_message
        self.mqtt_client.reconnect_delay_set(RECONNECT_MIN_DELAY, RECONNECT_MAX_DELAY)

        self.logger.info(f"Connecting to MQTT broker {host}:{port} (tls={config.tls})...")
        try:
            self.mqtt_client.connect(host, port, KEEPALIVE)
            self.mqtt_client.loop_start()
        except Exception as e:
            self.logger.error(f"Failed to connect to MQTT broker: {e}")
            raise

    def publish(self, message: Message) -> None:
        """
        Publish a message on its item topic.

        Raises:
            BusError: If the kind is unknown or paho rejects the publish
            CoercionError: If the value has no text form in this encoding
        """
        kind = message.kind
        if kind in (MessageKind.UPDATE, MessageKind.COMMAND):
            payload = message.value.as_string(self.encoding)
        elif kind is MessageKind.META:
            payload = message.meta.as_string()
        else:
            raise BusError(f"Invalid message type: {kind!r}")

        topic = message_topic(self.item_base, message.item_name, kind)
        info = self.mqtt_client.publish(topic, payload.encode("utf-8"), qos=0)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise BusError(f"Failed to publish to {topic}: {mqtt.error_string(info.rc)}")
        self.logger.debug(f"Published {topic} = {payload!r}")

    def subscribe(self, item_name: str, sub_type: SubType) -> None:
        """
        Subscribe to an item topic.

        The topic is remembered and re-subscribed after a reconnect, even if
        this call fails because the client is currently disconnected.

        Raises:
            BusError: If sub_type is invalid or paho rejects the subscription
        """
        topic = self._subscription_topic(item_name, sub_type)
        with self._lock:
            self._subscriptions.add(topic)

        result, _mid = self.mqtt_client.subscribe(topic, qos=0)
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise BusError(f"Failed to subscribe to {topic}: {mqtt.error_string(result)}")
        self.logger.debug(f"Subscribed to {topic}")

    def unsubscribe(self, item_name: str, sub_type: SubType) -> None:
        """
        Unsubscribe from an item topic.

        Raises:
            BusError: If sub_type is invalid or paho rejects the request
        """
        topic = self._subscription_topic(item_name, sub_type)
        with self._lock:
            self._subscriptions.discard(topic)

        result, _mid = self.mqtt_client.unsubscribe(topic)
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise BusError(
                f"Failed to unsubscribe from {topic}: {mqtt.error_string(result)}"
            )
        self.logger.debug(f"Unsubscribed from {topic}")

    def messages(self) -> EventStream[Message]:
        return self._messages

    def close(self) -> None:
        """Disconnect from the broker and close the message stream."""
        self.logger.info("Closing MQTT bus...")
        self.mqtt_client.loop_stop()
        self.mqtt_client.disconnect()
        self._messages.close()

    def _subscription_topic(self, item_name: str, sub_type: SubType) -> str:
        try:
            return subscription_topic(self.item_base, item_name, sub_type)
        except KeyError:
            raise BusError(f"Invalid sub type: {sub_type!r}")

    def _on_mqtt_connect(self, client, userdata, flags, reason_code, properties):
        """Handle (re)connection: restore all active subscriptions."""
        if reason_code != 0:
            self.logger.error(f"Failed to connect to MQTT broker: {reason_code}")
            return

        self.logger.info("Connected to MQTT broker")
        with self._lock:
            topics = sorted(self._subscriptions)
        for topic in topics:
            client.subscribe(topic, qos=0)
            self.logger.debug(f"Resubscribed to {topic}")

    def _on_mqtt_disconnect(self, client, userdata, disconnect_flags, reason_code, properties):
        if reason_code != 0:
            self.logger.warning(
                f"Disconnected from MQTT broker ({reason_code}), reconnecting..."
            )
        else:
            self.logger.info("Disconnected from MQTT broker")

    def _on_mqtt_message(self, client, userdata, msg):
        """
        Convert an incoming MQTT message and queue it.

        Args:
            client: MQTT client
            userdata: User data
            msg: MQTT message
        """
        topic = msg.topic
        parsed = parse_topic(topic)
        if parsed is None:
            self.logger.warning(f"Ignoring message on short topic: {topic}")
            return

        item_name, kind = parsed
        if kind is None:
            self.logger.warning(f"Ignoring message with unknown topic suffix: {topic}")
            return

        if kind is MessageKind.META:
            try:
                meta = Meta.from_string(msg.payload.decode("utf-8"))
            except (CoercionError, UnicodeDecodeError) as e:
                self.logger.warning(f"Ignoring malformed meta on {topic}: {e}")
                return
            message = Message.meta_of(item_name, meta)
        else:
            message = Message(kind, item_name, value=Value.from_raw(msg.payload))

        self.logger.debug(f"MQTT message: {topic} -> {message!r}")
        try:
            self._messages.put(message)
        except StreamClosed:
            self.logger.debug(f"Bus closed, dropping message on {topic}")
