"""Helpers shared by data converters: number parsing and register packing."""

from __future__ import annotations

import math
import re
import struct
import sys
from collections.abc import Sequence

_C_SPACE = " \t\n\v\f\r"
_DIGIT_CHARS = "0123456789abcdefghijklmnopqrstuvwxyz"
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_FLOAT_RE = re.compile(
    r"[+-]?(?:"
    r"0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?\d+)?"
    r"|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?"
    r"|inf(?:inity)?"
    r"|nan"
    r")",
    re.IGNORECASE,
)


def _wrap_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _parse_c_double(text: str) -> float:
    """Parse a whole string the way strtod reads a number; raise ValueError otherwise."""
    body = text.lstrip(_C_SPACE)
    if not _FLOAT_RE.fullmatch(body):
        raise ValueError(f"{text!r} is not a floating point number")
    if "x" in body.lower():
        return float.fromhex(body)
    return float(body)


def _parse_c_long(text: str, base: int) -> int:
    """Parse a whole string the way strtol reads an integer; base 0 detects the prefix."""
    body = text.lstrip(_C_SPACE)
    negative = body[:1] == "-"
    if body[:1] in ("+", "-"):
        body = body[1:]
    has_hex_prefix = body[:2] in ("0x", "0X") and len(body) > 2
    if base == 0:
        if has_hex_prefix:
            base = 16
        elif body.startswith("0"):
            base = 8
        else:
            base = 10
    if base == 16 and has_hex_prefix:
        body = body[2:]
    allowed = _DIGIT_CHARS[:base]
    if not body or any(ch.lower() not in allowed for ch in body):
        raise ValueError(f"{text!r} is not a base {base} integer")
    value = int(body, base)
    return -value if negative else value


def to_double(arg: str) -> float:
    """Convert a whole string to float; raise ValueError on trailing text or overflow."""
    try:
        value = _parse_c_double(arg)
    except ValueError:
        raise ValueError(f"{arg} has unparsable chars when converting to double") from None
    if math.isinf(value) and "inf" not in arg.lower():
        raise ValueError(f"{arg} is out of range for double")
    return value


def to_int(arg: str, base: int = 10) -> int:
    """Convert a whole string to a 32-bit int; raise ValueError on bad text or range."""
    try:
        value = _parse_c_long(arg, base)
    except ValueError:
        raise ValueError(f"{arg} has unparsable chars when converting to int") from None
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"{arg} is out of range for int")
    return value


def set_byte_order(value: int, swap: bool = False) -> int:
    """Return a 16-bit register value, with its two bytes swapped if asked."""
    value &= 0xFFFF
    if not swap:
        return value
    return ((value & 0x00FF) << 8) | ((value & 0xFF00) >> 8)


def swap_byte_order(registers: Sequence[int]) -> list[int]:
    """Return the registers with the bytes of each one swapped."""
    return [set_byte_order(value, True) for value in registers]


def adapt_to_network_byte_order(registers: Sequence[int]) -> list[int]:
    """Return the registers converted from host to network byte order."""
    swap = sys.byteorder == "little"
    return [set_byte_order(value, swap) for value in registers]


def registers_to_int32(data: Sequence[int], low_first: bool, swap_bytes: bool) -> int:
    """Combine one or two registers into a signed 32-bit number."""
    high, low = 0, 1
    if low_first and len(data) > 1:
        high, low = 1, 0
    value = set_byte_order(data[high], swap_bytes)
    if len(data) > 1:
        value = (value << 16) + set_byte_order(data[low], swap_bytes)
    return _wrap_int32(value)


def int32_to_registers(value: int, low_first: bool, swap_bytes: bool, register_count: int) -> list[int]:
    """Split a 32-bit number into one register, or two when register_count is 2."""
    registers = [set_byte_order(value, swap_bytes)]
    if register_count == 2:
        high = set_byte_order(value >> 16, swap_bytes)
        if low_first:
            registers.append(high)
        else:
            registers.insert(0, high)
    return registers


def registers_to_float(high: int, low: int, swap_bytes: bool = False) -> float:
    """Read an IEEE-754 single precision number from a high and a low register."""
    bits = registers_to_int32([high, low], False, swap_bytes)
    return struct.unpack("<f", struct.pack("<i", bits))[0]