"""
Self-describing item values.

A Value holds exactly one of raw bytes, a string, a number, a boolean or an
HSV color. Conversions between the variants are pure: each one returns a new
value or raises CoercionError.

Textual forms:
- Bool is "ON" / "OFF"
- Number uses the shortest round-tripping digits ("1", "42.5", "1e+21")
- Color is a TOML record "H = 120.0\\nS = 0.5\\nV = 1.0\\n"
- Raw is base64 text, or plain UTF-8 with RawEncoding.UTF8
"""

import base64
import binascii
import math
import struct
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

import tomli
import tomli_w

from .errors import CoercionError

_TRUE_WORDS = frozenset({"on", "open", "true"})
_FALSE_WORDS = frozenset({"off", "closed", "false"})

_DOUBLE = struct.Struct(">d")


class ValueKind(Enum):
    """Variant tag of a Value."""

    RAW = "raw"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    COLOR = "color"


class RawEncoding(Enum):
    """
    How raw bytes map to and from text.

    BASE64: raw bytes are carried as base64 text (default)
    UTF8: raw bytes are the UTF-8 encoding of the text
    """

    BASE64 = "base64"
    UTF8 = "utf8"


@dataclass(frozen=True)
class Color:
    """
    HSV color.

    Args:
        h: Hue in degrees [0, 360)
        s: Saturation [0, 1]
        v: Value/brightness [0, 1]
    """

    h: float
    s: float
    v: float

    def to_text(self) -> str:
        """Encode as a TOML record with keys H, S and V."""
        return tomli_w.dumps({"H": float(self.h), "S": float(self.s), "V": float(self.v)})

    @classmethod
    def from_text(cls, text: str) -> "Color":
        """
        Parse the TOML record produced by to_text().

        Raises:
            CoercionError: If the text is not TOML or lacks a numeric H, S or V
        """
        try:
            record = tomli.loads(text)
        except tomli.TOMLDecodeError as e:
            raise CoercionError(ValueKind.STRING, "color", str(e)) from e

        components = []
        for key in ("H", "S", "V"):
            component = record.get(key)
            if isinstance(component, bool) or not isinstance(component, (int, float)):
                raise CoercionError(
                    ValueKind.STRING, "color", f"missing or non-numeric {key}"
                )
            components.append(float(component))
        return cls(*components)


def format_number(number: float) -> str:
    """
    Render a float with the shortest digits that round-trip.

    Fixed notation is used while the decimal exponent is in [-4, 21),
    scientific notation with a signed two-digit exponent otherwise.
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"

    normalized = Decimal(repr(number)).normalize()
    sign, digits, exponent = normalized.as_tuple()
    point = len(digits) + exponent - 1

    if -4 <= point < 21:
        return format(normalized, "f")

    mantissa = "".join(str(d) for d in digits)
    if len(mantissa) > 1:
        mantissa = f"{mantissa[0]}.{mantissa[1:]}"
    exp_sign = "+" if point >= 0 else "-"
    return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(point):02d}"


def parse_number(text: str) -> float:
    """
    Parse a floating point literal.

    Raises:
        CoercionError: On malformed input, including surrounding whitespace
    """
    if not text or text != text.strip() or "_" in text:
        raise CoercionError(ValueKind.STRING, "number", f"invalid literal {text!r}")
    try:
        return float(text)
    except ValueError as e:
        raise CoercionError(ValueKind.STRING, "number", f"invalid literal {text!r}") from e


def _check_payload(kind: ValueKind, payload: Any) -> Any:
    if kind is ValueKind.RAW:
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise TypeError(f"raw value needs bytes, got {type(payload).__name__}")
        return bytes(payload)
    if kind is ValueKind.STRING:
        if not isinstance(payload, str):
            raise TypeError(f"string value needs str, got {type(payload).__name__}")
        return payload
    if kind is ValueKind.NUMBER:
        if isinstance(payload, bool) or not isinstance(payload, (int, float)):
            raise TypeError(f"number value needs float, got {type(payload).__name__}")
        return float(payload)
    if kind is ValueKind.BOOL:
        if not isinstance(payload, bool):
            raise TypeError(f"bool value needs bool, got {type(payload).__name__}")
        return payload
    if kind is ValueKind.COLOR:
        if not isinstance(payload, Color):
            raise TypeError(f"color value needs Color, got {type(payload).__name__}")
        return payload
    raise TypeError(f"invalid value kind: {kind!r}")


class Value:
    """
    Immutable tagged value.

    Build instances with the variant constructors (Value.string("ON"),
    Value.number(42.5), ...) or with Value.from_raw() for untyped payloads.
    """

    __slots__ = ("_kind", "_payload")

    def __init__(self, kind: ValueKind, payload: Any):
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_payload", _check_payload(kind, payload))

    def __setattr__(self, name, value):
        raise AttributeError("Value is immutable")

    def __delattr__(self, name):
        raise AttributeError("Value is immutable")

    @classmethod
    def raw(cls, data: bytes) -> "Value":
        return cls(ValueKind.RAW, data)

    @classmethod
    def string(cls, text: str) -> "Value":
        return cls(ValueKind.STRING, text)

    @classmethod
    def number(cls, number: float) -> "Value":
        return cls(ValueKind.NUMBER, number)

    @classmethod
    def boolean(cls, flag: bool) -> "Value":
        return cls(ValueKind.BOOL, flag)

    @classmethod
    def color(cls, color: Color) -> "Value":
        return cls(ValueKind.COLOR, color)

    @classmethod
    def from_raw(cls, data: bytes) -> "Value":
        """
        Classify an untyped payload.

        Bytes that are valid UTF-8 become a string, which is then reinterpreted
        as a color, a bool or a number, keeping the first that parses.
        Anything else stays raw.

        Args:
            data: Payload bytes (e.g. an MQTT message body)

        Returns:
            Detected Value
        """
        data = bytes(data)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            return cls.raw(data)

        value = cls.string(text)
        for convert in (value.as_color_value, value.as_bool_value, value.as_number_value):
            try:
                return convert()
            except CoercionError:
                continue
        return value

    @property
    def kind(self) -> ValueKind:
        return self._kind

    def as_string(self, encoding: RawEncoding = RawEncoding.BASE64) -> str:
        """
        Textual form of the value.

        Args:
            encoding: How raw bytes are turned into text

        Raises:
            CoercionError: If raw bytes are not UTF-8 under RawEncoding.UTF8
        """
        kind, payload = self._kind, self._payload
        if kind is ValueKind.RAW:
            if encoding is RawEncoding.UTF8:
                try:
                    return payload.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise CoercionError(kind, "string", str(e)) from e
            return base64.b64encode(payload).decode("ascii")
        if kind is ValueKind.STRING:
            return payload
        if kind is ValueKind.NUMBER:
            return format_number(payload)
        if kind is ValueKind.BOOL:
            return "ON" if payload else "OFF"
        return payload.to_text()

    def as_bool(self) -> bool:
        """
        Boolean form of the value.

        Strings match on/open/true and off/closed/false, ignoring case.
        Numbers and color brightness are truncated to an integer first.
        """
        kind, payload = self._kind, self._payload
        if kind is ValueKind.RAW:
            return len(payload) > 0 and payload[0] != 0
        if kind is ValueKind.STRING:
            word = payload.lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
            raise CoercionError(kind, "bool", f"invalid bool string {payload!r}")
        if kind is ValueKind.BOOL:
            return payload

        number = payload if kind is ValueKind.NUMBER else payload.v
        if not math.isfinite(number):
            raise CoercionError(kind, "bool", f"non-finite number {number}")
        return int(number) != 0

    def as_number(self) -> float:
        """
        Numeric form of the value.

        Raw bytes must be exactly one big-endian IEEE-754 double.
        """
        kind, payload = self._kind, self._payload
        if kind is ValueKind.RAW:
            if len(payload) != _DOUBLE.size:
                raise CoercionError(
                    kind, "number", f"need {_DOUBLE.size} bytes, got {len(payload)}"
                )
            return _DOUBLE.unpack(payload)[0]
        if kind is ValueKind.STRING:
            return parse_number(payload)
        if kind is ValueKind.NUMBER:
            return payload
        if kind is ValueKind.BOOL:
            return 1.0 if payload else 0.0
        return payload.v

    def as_raw(self, encoding: RawEncoding = RawEncoding.BASE64) -> bytes:
        """
        Byte form of the value.

        Under RawEncoding.BASE64 a bool becomes a single byte, 0 for True and
        1 for False. Under RawEncoding.UTF8 it becomes b"ON" / b"OFF".
        Colors have no byte form.
        """
        kind, payload = self._kind, self._payload
        if kind is ValueKind.RAW:
            return payload
        if kind is ValueKind.STRING:
            if encoding is RawEncoding.UTF8:
                return payload.encode("utf-8")
            try:
                return base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError) as e:
                raise CoercionError(kind, "raw", f"invalid base64: {e}") from e
        if kind is ValueKind.NUMBER:
            return _DOUBLE.pack(payload)
        if kind is ValueKind.BOOL:
            if encoding is RawEncoding.UTF8:
                return b"ON" if payload else b"OFF"
            return b"\x00" if payload else b"\x01"
        raise CoercionError(kind, "raw")

    def as_color(self) -> Color:
        kind, payload = self._kind, self._payload
        if kind is ValueKind.COLOR:
            return payload
        if kind is ValueKind.STRING:
            return Color.from_text(payload)
        raise CoercionError(kind, "color")

    def as_string_value(self, encoding: RawEncoding = RawEncoding.BASE64) -> "Value":
        return Value.string(self.as_string(encoding))

    def as_bool_value(self) -> "Value":
        return Value.boolean(self.as_bool())

    def as_number_value(self) -> "Value":
        return Value.number(self.as_number())

    def as_raw_value(self, encoding: RawEncoding = RawEncoding.BASE64) -> "Value":
        return Value.raw(self.as_raw(encoding))

    def as_color_value(self) -> "Value":
        return Value.color(self.as_color())

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._kind is other._kind and self._payload == other._payload

    def __hash__(self):
        return hash((self._kind, self._payload))

    def __repr__(self) -> str:
        return f"Value({self._kind.value}={self._payload!r})"
