#!/usr/bin/env python3
"""
Configuration loader for the catt MQTT bridge.

Loads and validates the YAML configuration file:

    bus:
      broker: 127.0.0.1:1883
      item_base: catt/items
      client_id: ""
      tls: false
      username: null
      password: null
      value_encoding: base64
    hue:
      host: 192.168.1.10
      username: <api key>
      poll_interval: 5.0
    log_level: info
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from catt.value import RawEncoding

from .topics import DEFAULT_ITEM_BASE

logger = logging.getLogger(__name__)

DEFAULT_BROKER = "127.0.0.1:1883"
LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class MqttConfig:
    """Connection and topic settings for the MQTT bus."""

    broker: str = DEFAULT_BROKER
    item_base: str = DEFAULT_ITEM_BASE
    client_id: str = ""
    tls: bool = False
    username: Optional[str] = None
    password: Optional[str] = None
    value_encoding: RawEncoding = RawEncoding.BASE64

    def host_port(self) -> Tuple[str, int]:
        """
        Split the broker address.

        Returns:
            (host, port); port defaults to 8883 with TLS, 1883 otherwise

        Raises:
            ValueError: If the port is not a valid number
        """
        broker = self.broker or DEFAULT_BROKER
        default_port = 8883 if self.tls else 1883
        host, sep, port_text = broker.rpartition(":")
        if not sep:
            return broker, default_port
        try:
            port = int(port_text)
        except ValueError:
            raise ValueError(f"Invalid broker port in '{broker}'")
        if not 0 < port < 65536:
            raise ValueError(f"Invalid broker port in '{broker}'")
        return host, port


@dataclass
class HueConfig:
    """Hue bridge address and credentials (pairing is done beforehand)."""

    host: str
    username: str
    poll_interval: float = 5.0


@dataclass
class CattConfig:
    """Complete process configuration."""

    hue: HueConfig
    bus: MqttConfig = field(default_factory=MqttConfig)
    log_level: str = "info"


def load_config(config_path: str) -> CattConfig:
    """
    Load and validate configuration file.

    Args:
        config_path: Path to configuration file

    Returns:
        CattConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If configuration is invalid
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, "r") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse configuration: {e}")

    if not isinstance(raw_config, dict):
        raise ValueError(f"Configuration must be a mapping: {config_path}")

    config = parse_config(raw_config)
    logger.info(f"Loaded configuration from: {config_path}")
    return config


def parse_config(raw_config: Dict[str, Any]) -> CattConfig:
    """
    Build a CattConfig from an already parsed mapping.

    Raises:
        ValueError: If configuration is invalid
    """
    bus = _parse_bus(raw_config.get("bus") or {})
    hue = _parse_hue(raw_config.get("hue") or {})

    log_level = str(raw_config.get("log_level", "info")).lower()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log_level '{log_level}', expected one of {', '.join(LOG_LEVELS)}"
        )

    return CattConfig(hue=hue, bus=bus, log_level=log_level)


def _parse_bus(section: Dict[str, Any]) -> MqttConfig:
    if not isinstance(section, dict):
        raise ValueError("'bus' section must be a mapping")

    encoding_name = str(section.get("value_encoding", RawEncoding.BASE64.value))
    try:
        encoding = RawEncoding(encoding_name.lower())
    except ValueError:
        raise ValueError(
            f"Invalid value_encoding '{encoding_name}', expected base64 or utf8"
        )

    tls = section.get("tls")
    if tls is None:
        tls = False
    if not isinstance(tls, bool):
        raise ValueError(f"Invalid bus.tls '{tls}', expected true or false")

    bus = MqttConfig(
        broker=str(section.get("broker") or DEFAULT_BROKER),
        item_base=str(section.get("item_base") or DEFAULT_ITEM_BASE),
        client_id=str(section.get("client_id") or ""),
        tls=tls,
        username=section.get("username"),
        password=section.get("password"),
        value_encoding=encoding,
    )
    # Validate the broker address early
    bus.host_port()
    return bus


def _parse_hue(section: Dict[str, Any]) -> HueConfig:
    if not isinstance(section, dict):
        raise ValueError("'hue' section must be a mapping")

    host = section.get("host")
    username = section.get("username")
    if not host:
        raise ValueError("Missing required field 'hue.host'")
    if not username:
        raise ValueError("Missing required field 'hue.username'")

    try:
        poll_interval = float(section.get("poll_interval", 5.0))
    except (TypeError, ValueError):
        raise ValueError(f"Invalid hue.poll_interval: {section.get('poll_interval')}")
    if poll_interval <= 0:
        raise ValueError(f"hue.poll_interval must be positive, got {poll_interval}")

    return HueConfig(host=str(host), username=str(username), poll_interval=poll_interval)
