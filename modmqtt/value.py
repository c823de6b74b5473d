"""A value published to or received from MQTT."""

from __future__ import annotations

import enum
import math
import struct

from .convtools import _parse_c_double, _parse_c_long
from .exceptions import ConvError

NO_PRECISION = -1


def _wrap(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def _clamp(value: int, bits: int) -> int:
    limit = 1 << (bits - 1)
    return max(-limit, min(limit - 1, value))


class SourceType(enum.IntEnum):
    """The kind of data an MqttValue holds."""

    INT = 0
    DOUBLE = 1
    BINARY = 2
    INT64 = 3


class MqttValue:
    """An integer, a float or raw bytes, convertible to the other kinds."""

    NO_PRECISION = NO_PRECISION

    __slots__ = ("_value", "_type", "_precision")

    def __init__(self, value=0, source_type: SourceType | None = None, precision: int = NO_PRECISION) -> None:
        if source_type is None:
            source_type = self._infer_type(value)
        source_type = SourceType(source_type)
        if source_type is SourceType.BINARY:
            if isinstance(value, str):
                value = value.split("\0", 1)[0].encode("utf-8", "surrogateescape")
            else:
                value = bytes(value)
        elif source_type is SourceType.DOUBLE:
            value = float(value)
        elif source_type is SourceType.INT:
            value = _wrap(int(value), 32)
        else:
            value = _wrap(int(value), 64)
        self._value = value
        self._type = source_type
        self._precision = precision if source_type is SourceType.DOUBLE else NO_PRECISION

    @staticmethod
    def _infer_type(value) -> SourceType:
        if isinstance(value, (str, bytes, bytearray, memoryview)):
            return SourceType.BINARY
        if isinstance(value, float):
            return SourceType.DOUBLE
        if isinstance(value, int):
            return SourceType.INT if -(2**31) <= value < 2**31 else SourceType.INT64
        raise TypeError(f"Cannot hold {type(value).__name__} in MqttValue")

    @classmethod
    def from_int(cls, value: int) -> MqttValue:
        return cls(value, SourceType.INT)

    @classmethod
    def from_int64(cls, value: int) -> MqttValue:
        return cls(value, SourceType.INT64)

    @classmethod
    def from_double(cls, value: float, precision: int = NO_PRECISION) -> MqttValue:
        return cls(value, SourceType.DOUBLE, precision)

    @classmethod
    def from_binary(cls, data: bytes) -> MqttValue:
        return cls(bytes(data), SourceType.BINARY)

    @classmethod
    def from_string(cls, text: str) -> MqttValue:
        """Hold text as bytes; text after an embedded NUL character is dropped."""
        return cls(text, SourceType.BINARY)

    @property
    def source_type(self) -> SourceType:
        return self._type

    @property
    def precision(self) -> int:
        return self._precision

    def __repr__(self) -> str:
        return f"MqttValue({self._value!r}, {self._type.name})"

    def _format_double(self) -> str:
        value = self._value
        if self._precision == NO_PRECISION and math.isfinite(value) and value.is_integer():
            return str(int(value))
        digits = self._precision if self._precision >= 0 else 6
        return f"{value:.{digits}f}"

    def as_string(self) -> str:
        if self._type is SourceType.BINARY:
            return self._value.decode("utf-8", "surrogateescape")
        if self._type is SourceType.DOUBLE:
            return self._format_double()
        return str(self._value)

    def as_double(self) -> float:
        if self._type is SourceType.BINARY:
            text = self.as_string()
            if text == "":
                return 0.0
            try:
                return _parse_c_double(text)
            except ValueError:
                raise ConvError(f"Cannot convert {text} to double") from None
        return float(self._value)

    def _truncated(self) -> int:
        if not math.isfinite(self._value):
            raise ConvError(f"Cannot convert {self._value} to int")
        return math.trunc(self._value)

    def as_int(self) -> int:
        if self._type is SourceType.BINARY:
            text = self.as_string()
            if text == "":
                return 0
            try:
                parsed = _parse_c_long(text, 0)
            except ValueError:
                raise ConvError(f"Cannot convert {text} to int") from None
            return _wrap(_clamp(parsed, 64), 32)
        if self._type is SourceType.DOUBLE:
            return _wrap(self._truncated(), 32)
        return _wrap(self._value, 32)

    def as_uint16(self) -> int:
        value = self.as_int()
        if not 0 <= value <= 0xFFFF:
            raise ConvError(f"Conversion failed, value {value} out of range")
        return value

    def as_int64(self) -> int:
        if self._type is SourceType.BINARY:
            text = self.as_string()
            if text == "":
                return 0
            try:
                return _clamp(_parse_c_long(text, 10), 64)
            except ValueError:
                raise ConvError(f"Cannot convert {text} to int64") from None
        if self._type is SourceType.DOUBLE:
            return _wrap(self._truncated(), 64)
        return self._value

    def as_bytes(self) -> bytes:
        """Return the raw bytes; numbers are packed in host byte order."""
        if self._type is SourceType.BINARY:
            return self._value
        if self._type is SourceType.INT:
            return struct.pack("=i", self._value)
        if self._type is SourceType.DOUBLE:
            return struct.pack("=d", self._value)
        return struct.pack("=q", self._value)

    def binary_size(self) -> int:
        if self._type is SourceType.BINARY:
            return len(self._value)
        return 4 if self._type is SourceType.INT else 8