"""
Shared fixtures for catt_mqtt tests.
"""

import time
from unittest.mock import MagicMock, patch

import pytest

from catt.value import RawEncoding
from catt_mqtt.config_loader import MqttConfig


@pytest.fixture
def mock_mqtt_client():
    """Mock paho MQTT client."""
    client = MagicMock()
    client.connect.return_value = 0
    client.subscribe.return_value = (0, 1)
    client.unsubscribe.return_value = (0, 2)
    client.publish.return_value = MagicMock(rc=0)
    return client


@pytest.fixture
def patched_client(mock_mqtt_client):
    """Patch paho's Client class to return mock_mqtt_client."""
    with patch("catt_mqtt.bus.mqtt.Client") as client_class:
        client_class.return_value = mock_mqtt_client
        yield client_class


@pytest.fixture
def mqtt_config():
    return MqttConfig(broker="broker.local:1883", item_base="catt/items")


@pytest.fixture
def utf8_config():
    return MqttConfig(
        broker="broker.local:1883",
        item_base="home",
        value_encoding=RawEncoding.UTF8,
    )


@pytest.fixture
def make_mqtt_message():
    """Factory for mock MQTT messages."""

    def _create(topic: str, payload: bytes, retained: bool = False):
        msg = MagicMock()
        msg.topic = topic
        msg.payload = payload
        msg.retain = retained
        msg.timestamp = time.time()
        return msg

    return _create


@pytest.fixture
def temp_config_file(tmp_path):
    """Create temporary config file."""
    config = tmp_path / "config.yaml"
    config.write_text(
        """
bus:
  broker: mqtt.example.com:8883
  item_base: house/items
  client_id: catt-test
  tls: true
  username: user
  password: secret
  value_encoding: utf8
hue:
  host: 10.0.0.2
  username: abcdef
  poll_interval: 2
log_level: debug
"""
    )
    return str(config)
