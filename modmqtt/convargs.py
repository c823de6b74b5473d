"""Named arguments that a converter takes from the configuration."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import ClassVar

from .convtools import to_double, to_int
from .exceptions import ConvError


class ArgType(enum.IntEnum):
    """Declared type of a converter argument."""

    INVALID = 0
    INT = 1
    STRING = 2
    DOUBLE = 3
    BOOL = 4


def _default_text(value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return f"{value:f}"
    return str(int(value))


@dataclass(frozen=True)
class ConverterArg:
    """An argument a converter accepts, with its default as text."""

    PRECISION: ClassVar[str] = "precision"
    SWAP_BYTES: ClassVar[str] = "swap_bytes"
    LOW_FIRST: ClassVar[str] = "low_first"

    name: str
    arg_type: ArgType
    default: str = field(default="")

    def __post_init__(self) -> None:
        object.__setattr__(self, "default", _default_text(self.default))


@dataclass
class ConverterArgValue:
    """The configured text of one argument, with typed accessors."""

    NO_PRECISION: ClassVar[int] = -1

    name: str
    arg_type: ArgType
    value: str

    def as_str(self) -> str:
        return self.value

    def as_int(self) -> int:
        base = 16 if self.value.startswith("0x") else 10
        try:
            return to_int(self.value, base)
        except ValueError as ex:
            raise ConvError(f"Invalid{self.name} int value:{ex}") from None

    def as_double(self) -> float:
        try:
            return to_double(self.value)
        except ValueError as ex:
            raise ConvError(f"Invalid{self.name} double value:{ex}") from None

    def as_uint16(self) -> int:
        """Read the value as hexadecimal and check that it fits in 16 bits."""
        try:
            number = to_int(self.value, 16)
            if not 0 <= number <= 0xFFFF:
                raise ValueError("value out of range")
        except ValueError as ex:
            raise ConvError(f"Invalid{self.name} uint16 value:{ex}") from None
        return number

    def as_bool(self) -> bool:
        if self.value in ("true", "TRUE", "1"):
            return True
        if self.value in ("false", "FALSE", "0"):
            return False
        raise ConvError(f"{self.name} value cannot be converted to bool")


class ConverterArgValues:
    """Values for a converter's arguments, starting from their defaults."""

    def __init__(self, args: Iterable[ConverterArg]) -> None:
        self._values = {
            arg.name: ConverterArgValue(arg.name, arg.arg_type, arg.default) for arg in args
        }

    def __getitem__(self, name: str) -> ConverterArgValue:
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"no value for {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def set(self, name: str, value: str) -> None:
        """Replace the text of a known argument."""
        try:
            self._values[name].value = value
        except KeyError:
            raise KeyError(f"Wrong parameter name {name}") from None