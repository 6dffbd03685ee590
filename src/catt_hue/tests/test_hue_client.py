"""Tests for HueClient with a mocked requests session."""

from unittest.mock import MagicMock

import pytest
import requests

from catt.errors import BindingError
from catt_hue.client import HueClient


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.json.return_value = {}
    session.request.return_value = response
    return session


@pytest.fixture
def client(session):
    return HueClient("10.0.0.2", "abcdef", timeout=3.0, session=session)


class TestHueClient:
    def test_get_lights(self, client, session):
        session.request.return_value.json.return_value = {"1": {"name": "Table"}}

        assert client.get_lights() == {"1": {"name": "Table"}}
        session.request.assert_called_once_with(
            "GET", "http://10.0.0.2/api/abcdef/lights", timeout=3.0
        )

    def test_set_state(self, client, session):
        session.request.return_value.json.return_value = [
            {"success": {"/lights/1/state/on": True}}
        ]

        client.set_state("1", {"on": True})

        session.request.assert_called_once_with(
            "PUT",
            "http://10.0.0.2/api/abcdef/lights/1/state",
            timeout=3.0,
            json={"on": True},
        )

    def test_error_payload_raises(self, client, session):
        session.request.return_value.json.return_value = [
            {"error": {"type": 1, "address": "/lights", "description": "unauthorized user"}}
        ]

        with pytest.raises(BindingError, match="unauthorized user"):
            client.get_lights()

    def test_http_error_raises(self, client, session):
        session.request.return_value.raise_for_status.side_effect = requests.HTTPError(
            "503 Server Error"
        )

        with pytest.raises(BindingError):
            client.set_state("1", {"on": False})

    def test_connection_error_raises(self, client, session):
        session.request.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(BindingError):
            client.get_lights()

    def test_invalid_json_raises(self, client, session):
        session.request.return_value.json.side_effect = ValueError("no json")

        with pytest.raises(BindingError):
            client.get_lights()

    def test_unexpected_lights_payload(self, client, session):
        session.request.return_value.json.return_value = ["not", "a", "mapping"]

        with pytest.raises(BindingError):
            client.get_lights()
