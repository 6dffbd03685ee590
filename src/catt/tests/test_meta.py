"""Tests for Meta text encoding."""

import pytest

from catt.errors import CoercionError
from catt.meta import Meta


class TestMeta:
    def test_round_trip(self):
        meta = Meta(backend="hue", value_type="color", ext={"room": "living", "id": "3"})
        assert Meta.from_string(meta.as_string()) == meta

    def test_empty_fields_omitted(self):
        text = Meta(ext={"a": "b"}).as_string()
        assert "backend" not in text
        assert "value_type" not in text
        assert "[ext]" in text

    def test_round_trip_empty(self):
        assert Meta.from_string(Meta().as_string()) == Meta()

    def test_missing_keys_default(self):
        assert Meta.from_string('backend = "zwave"\n') == Meta(backend="zwave")

    def test_malformed_text_fails(self):
        with pytest.raises(CoercionError):
            Meta.from_string("this is not toml")

    def test_wrong_types_fail(self):
        with pytest.raises(CoercionError):
            Meta.from_string("backend = 3\n")
        with pytest.raises(CoercionError):
            Meta.from_string('ext = "flat"\n')

    @pytest.mark.parametrize(
        "text",
        [
            "\\x41",
            "C:\\xdata",
            "back\\slash",
            'quote "inside"',
            "a\x7fb",
            "\x01\x1f",
            "tab\tnew\nline",
            "ünïcödé",
        ],
    )
    def test_round_trip_special_characters(self, text):
        meta = Meta(backend="hue", ext={"k": text, "key with spaces": text})
        assert Meta.from_string(meta.as_string()) == meta

    def test_non_string_ext_values_fail(self):
        with pytest.raises(CoercionError):
            Meta.from_string("[ext]\nn = 1\n")
        with pytest.raises(CoercionError):
            Meta.from_string("[ext.nested]\na = \"b\"\n")
