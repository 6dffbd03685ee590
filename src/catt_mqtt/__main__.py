"""
Main entry point for the catt Hue <-> MQTT bridge.

Usage:
    python -m catt_mqtt -c config.yaml [--log-level debug]
"""

import argparse
import logging
import signal
import sys

from catt import __version__
from catt.bridge import Bridge
from catt_hue import HueBinding, HueClient

from .bus import MqttBus
from .config_loader import LOG_LEVELS, load_config


def setup_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="[%(levelname)s] %(asctime)s - %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="catt bridge - Connect Philips Hue lights to an MQTT broker"
    )
    parser.add_argument(
        "-c",
        "--config",
        default="./config.yaml",
        help="Path to config file (default: ./config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Logging level (overrides log_level from the config file)",
    )
    return parser


def main(argv=None):
    """Main entry point for the bridge process."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        setup_logging(args.log_level or "info")
        logging.getLogger(__name__).error(f"Invalid configuration: {e}")
        return 1

    setup_logging(args.log_level or config.log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting catt bridge v{__version__}")
    logger.info(f"MQTT Broker: {config.bus.broker}")
    logger.info(f"Item base: {config.bus.item_base}")
    logger.info(f"Hue bridge: {config.hue.host}")

    try:
        bus = MqttBus(config.bus, logger=logging.getLogger("catt.mqtt"))
    except Exception as e:
        logger.error(f"Error starting mqtt connection: {e}")
        return 1

    try:
        client = HueClient(
            config.hue.host,
            config.hue.username,
            logger=logging.getLogger("catt.hue.client"),
        )
        binding = HueBinding(
            client,
            poll_interval=config.hue.poll_interval,
            logger=logging.getLogger("catt.hue"),
        )
    except Exception as e:
        logger.error(f"Error starting hue connection: {e}")
        bus.close()
        return 1

    bridge = Bridge(bus, binding, logger=logging.getLogger("catt.bridge"))

    # Closing both streams lets bridge.run() return
    def signal_handler(sig, frame):
        logger.info("Shutting down...")
        binding.stop()
        bus.close()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    binding.start()
    logger.info("Bridge running... (Press Ctrl+C to stop)")
    bridge.run()

    return 0


if __name__ == "__main__":
    sys.exit(main())
