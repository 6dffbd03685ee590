"""Pytest fixtures for catt core tests."""

import logging
from unittest.mock import MagicMock, Mock

import pytest

from catt.meta import Meta
from catt.stream import EventStream
from catt.value import Value


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    return Mock(spec=logging.Logger)


@pytest.fixture
def mock_item():
    """Mock item named Lamp_Switch holding ON."""
    item = MagicMock()
    item.name = "Lamp_Switch"
    item.meta = Meta(backend="hue", value_type="bool")
    item.get_value.return_value = Value.boolean(True)
    return item


@pytest.fixture
def mock_bus():
    """Mock bus with a real (open) message stream."""
    bus = MagicMock()
    bus.messages.return_value = EventStream()
    return bus


@pytest.fixture
def mock_binding():
    """Mock binding with a real (open) notification stream and no items."""
    binding = MagicMock()
    binding.notifications.return_value = EventStream()
    binding.get_value.return_value = None
    return binding
