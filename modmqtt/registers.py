"""A sequence of 16-bit modbus register values."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

_MASK = 0xFFFF


class ModbusRegisters:
    """Ordered 16-bit register values; stored values are truncated to 16 bits."""

    __slots__ = ("_values",)

    def __init__(self, values: int | Iterable[int] = ()) -> None:
        if isinstance(values, int):
            values = (values,)
        self._values = [value & _MASK for value in values]

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> int:
        return self._values[index]

    def __setitem__(self, index: int, value: int) -> None:
        self._values[index] = value & _MASK

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ModbusRegisters):
            return self._values == other._values
        if isinstance(other, (list, tuple)):
            return self._values == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ModbusRegisters({self._values!r})"

    def append(self, value: int) -> None:
        """Add a value after the last register."""
        self._values.append(value & _MASK)

    def prepend(self, value: int) -> None:
        """Add a value before the first register."""
        self._values.insert(0, value & _MASK)

    def values(self) -> list[int]:
        """Return a copy of the register values."""
        return list(self._values)