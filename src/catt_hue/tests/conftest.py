"""Pytest fixtures for catt_hue tests."""

import copy
import logging
from unittest.mock import Mock

import pytest

from catt_hue.client import HueClient

LIGHTS = {
    "1": {
        "name": "Table",
        "type": "Extended color light",
        "state": {"on": True, "bri": 254, "hue": 0, "sat": 254, "reachable": True},
    },
    "2": {
        "name": "Hall",
        "type": "Dimmable light",
        "state": {"on": False, "bri": 127, "reachable": True},
    },
}


@pytest.fixture
def lights():
    """Fresh copy of the sample bridge light records."""
    return copy.deepcopy(LIGHTS)


@pytest.fixture
def mock_logger():
    return Mock(spec=logging.Logger)


@pytest.fixture
def mock_client(lights):
    """Mock HueClient returning the sample lights."""
    client = Mock(spec=HueClient)
    client.get_lights.return_value = lights
    return client
