"""Tests for HueItem."""

from unittest.mock import Mock

import pytest

from catt.errors import BindingError, CoercionError
from catt.meta import Meta
from catt.value import Color, Value, ValueKind
from catt_hue.item import HueItem, HueItemType, color_from_state, state_from_color


def make_item(client, item_type, state, on_change=None):
    return HueItem(
        light_id="1",
        light_name="Table",
        item_type=item_type,
        state=state,
        client=client,
        on_change=on_change or Mock(),
    )


class TestColorScaling:
    def test_color_from_state(self):
        color = color_from_state({"hue": 65535, "sat": 127, "bri": 254})
        assert color.h == pytest.approx(360.0)
        assert color.s == pytest.approx(0.5)
        assert color.v == pytest.approx(1.0)

    def test_state_from_color(self):
        assert state_from_color(Color(180.0, 0.5, 1.0)) == {
            "hue": 32768,
            "sat": 127,
            "bri": 254,
        }

    def test_state_from_color_clamps(self):
        assert state_from_color(Color(400.0, 2.0, -1.0)) == {
            "hue": 65535,
            "sat": 254,
            "bri": 0,
        }


class TestSwitchItem:
    def test_name_and_meta(self, mock_client):
        item = make_item(mock_client, HueItemType.SWITCH, {"on": True})

        assert item.name == "Table_Switch"
        assert item.meta == Meta(backend="hue", value_type="bool")

    def test_get_value(self, mock_client):
        item = make_item(mock_client, HueItemType.SWITCH, {"on": True, "bri": 10})
        assert item.get_value() == Value.boolean(True)

    def test_set_value_coerces_and_notifies(self, mock_client):
        on_change = Mock()
        item = make_item(mock_client, HueItemType.SWITCH, {"on": True}, on_change)

        item.set_value(Value.string("off"))

        mock_client.set_state.assert_called_once_with("1", {"on": False})
        on_change.assert_called_once_with(item)
        assert item.get_value() == Value.boolean(False)

    def test_set_value_rejects_bad_value(self, mock_client):
        on_change = Mock()
        item = make_item(mock_client, HueItemType.SWITCH, {"on": True}, on_change)

        with pytest.raises(CoercionError):
            item.set_value(Value.string("maybe"))

        mock_client.set_state.assert_not_called()
        on_change.assert_not_called()

    def test_set_value_bridge_failure(self, mock_client):
        on_change = Mock()
        mock_client.set_state.side_effect = BindingError("unreachable")
        item = make_item(mock_client, HueItemType.SWITCH, {"on": True}, on_change)

        with pytest.raises(BindingError):
            item.set_value(Value.boolean(False))

        on_change.assert_not_called()
        assert item.get_value() == Value.boolean(True)


class TestColorItem:
    def test_name_and_meta(self, mock_client):
        item = make_item(mock_client, HueItemType.COLOR, {"hue": 0, "sat": 0, "bri": 0})

        assert item.name == "Table_Color"
        assert item.meta.value_type == "color"

    def test_get_value(self, mock_client):
        item = make_item(
            mock_client, HueItemType.COLOR, {"on": True, "hue": 0, "sat": 254, "bri": 127}
        )

        value = item.get_value()

        assert value.kind is ValueKind.COLOR
        assert value.as_color() == Color(0.0, 1.0, 0.5)

    def test_set_value_from_text(self, mock_client):
        item = make_item(mock_client, HueItemType.COLOR, {"hue": 0, "sat": 0, "bri": 0})

        item.set_value(Value.string("H = 180.0\nS = 0.5\nV = 1.0\n"))

        mock_client.set_state.assert_called_once_with(
            "1", {"hue": 32768, "sat": 127, "bri": 254}
        )

    def test_bool_is_not_a_color(self, mock_client):
        item = make_item(mock_client, HueItemType.COLOR, {"hue": 0, "sat": 0, "bri": 0})

        with pytest.raises(CoercionError):
            item.set_value(Value.boolean(True))


class TestUpdateState:
    def test_only_relevant_fields_count(self, mock_client):
        item = make_item(mock_client, HueItemType.SWITCH, {"on": True, "bri": 10})

        assert item.update_state({"on": True, "bri": 200}) is False
        assert item.update_state({"on": False, "bri": 200}) is True
        assert item.get_value() == Value.boolean(False)

    def test_color_fields(self, mock_client):
        item = make_item(mock_client, HueItemType.COLOR, {"hue": 0, "sat": 0, "bri": 0})

        assert item.update_state({"on": False, "hue": 0, "sat": 0, "bri": 0}) is False
        assert item.update_state({"hue": 100, "sat": 0, "bri": 0}) is True
