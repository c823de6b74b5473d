"""Parsing of configuration scalars: durations, number ranges and string lists."""

from __future__ import annotations

import re
from datetime import timedelta

from .exceptions import ModMqttError

_C_SPACE = " \t\n\v\f\r"
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_DURATION_RE = re.compile(r"([0-9]+)(ms|s|min)")
_RANGE_RE = re.compile(r"\s*([0-9]+)-([0-9]+)\s*", re.ASCII)
_STOI_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

_UNIT_MS = {"ms": 1, "s": 1000, "min": 60 * 1000}


class ConfigValueError(ModMqttError, ValueError):
    """A configuration value has an invalid format."""


def _segments(text: str) -> list[str]:
    """Split on commas; a trailing empty segment is not produced."""
    parts = text.split(",")
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def _to_number(text: str) -> int:
    match = _STOI_RE.match(text)
    if match is None:
        raise ConfigValueError(f"Conversion to number or number list failed for [{text}]")
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ConfigValueError(
            "Conversion to number or number list contains number that is out of range"
        )
    end = match.end()
    if end != len(text):
        raise ConfigValueError(
            f"Conversion to number failed, unknown char at {end} position in {text}"
        )
    return value


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as '500ms', '5s' or '2min'."""
    match = _DURATION_RE.fullmatch(text)
    if match is None:
        raise ConfigValueError("Invalid time specification")
    amount = int(match.group(1))
    if amount > _INT32_MAX:
        raise ConfigValueError("Invalid time specification")
    return timedelta(milliseconds=amount * _UNIT_MS[match.group(2)])


def parse_number_ranges(text: str) -> list[tuple[int, int]]:
    """Parse '1,2,4-5' into (first, last) pairs; a single number gives (n, n)."""
    result: list[tuple[int, int]] = []
    for segment in _segments(text):
        match = _RANGE_RE.fullmatch(segment)
        if match is not None:
            result.append((_to_number(match.group(1)), _to_number(match.group(2))))
        else:
            number = _to_number(segment)
            result.append((number, number))
    return result


def parse_string_list(text: str) -> list[str]:
    """Split comma separated text into items with surrounding whitespace removed."""
    return [segment.strip(_C_SPACE) for segment in _segments(text)]