"""Tests for the process entry point."""

from unittest.mock import MagicMock, patch

import pytest

from catt_mqtt.__main__ import build_parser, main


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.config == "./config.yaml"
        assert args.log_level is None

    def test_options(self):
        args = build_parser().parse_args(["-c", "/etc/catt.yaml", "--log-level", "debug"])
        assert args.config == "/etc/catt.yaml"
        assert args.log_level == "debug"


class TestMain:
    def test_missing_config_exits_with_error(self, tmp_path):
        assert main(["-c", str(tmp_path / "missing.yaml")]) == 1

    @patch("catt_mqtt.__main__.signal")
    @patch("catt_mqtt.__main__.Bridge")
    @patch("catt_mqtt.__main__.HueBinding")
    @patch("catt_mqtt.__main__.HueClient")
    @patch("catt_mqtt.__main__.MqttBus")
    def test_wires_bus_binding_and_bridge(
        self,
        mock_bus_class,
        mock_client_class,
        mock_binding_class,
        mock_bridge_class,
        mock_signal,
        temp_config_file,
    ):
        bus = mock_bus_class.return_value
        binding = mock_binding_class.return_value
        bridge = mock_bridge_class.return_value

        assert main(["-c", temp_config_file]) == 0

        config = mock_bus_class.call_args.args[0]
        assert config.broker == "mqtt.example.com:8883"
        assert mock_client_class.call_args.args == ("10.0.0.2", "abcdef")
        assert mock_binding_class.call_args.kwargs["poll_interval"] == 2.0
        assert mock_bridge_class.call_args.args == (bus, binding)
        binding.start.assert_called_once()
        bridge.run.assert_called_once()
        assert mock_signal.signal.call_count == 2

    @patch("catt_mqtt.__main__.signal")
    @patch("catt_mqtt.__main__.Bridge")
    @patch("catt_mqtt.__main__.HueBinding")
    @patch("catt_mqtt.__main__.HueClient")
    @patch("catt_mqtt.__main__.MqttBus")
    def test_signal_handler_closes_streams(
        self,
        mock_bus_class,
        mock_client_class,
        mock_binding_class,
        mock_bridge_class,
        mock_signal,
        temp_config_file,
    ):
        main(["-c", temp_config_file])

        handler = mock_signal.signal.call_args.args[1]
        handler(15, None)

        mock_binding_class.return_value.stop.assert_called_once()
        mock_bus_class.return_value.close.assert_called_once()

    @patch("catt_mqtt.__main__.MqttBus")
    def test_bus_failure_exits_with_error(self, mock_bus_class, temp_config_file):
        mock_bus_class.side_effect = ConnectionRefusedError("refused")

        assert main(["-c", temp_config_file]) == 1

    @patch("catt_mqtt.__main__.HueClient")
    @patch("catt_mqtt.__main__.MqttBus")
    def test_binding_failure_closes_bus(
        self, mock_bus_class, mock_client_class, temp_config_file
    ):
        mock_client_class.side_effect = RuntimeError("bad host")

        assert main(["-c", temp_config_file]) == 1
        mock_bus_class.return_value.close.assert_called_once()
