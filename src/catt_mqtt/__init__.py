"""
catt_mqtt - MQTT bus for the catt bridge.

Maps item state, commands and metadata onto MQTT topics and provides the
process entry point that wires the bus to a Hue binding.
"""

from .bus import MqttBus
from .config_loader import CattConfig, HueConfig, MqttConfig, load_config

__all__ = ["CattConfig", "HueConfig", "MqttBus", "MqttConfig", "load_config"]
