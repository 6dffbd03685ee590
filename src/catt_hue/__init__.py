"""
catt_hue - Philips Hue binding for the catt bridge.
"""

from .binding import HueBinding
from .client import HueClient
from .item import HueItem, HueItemType

__all__ = ["HueBinding", "HueClient", "HueItem", "HueItemType"]
