"""Converter that maps register values to configured MQTT values and back."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from ..convargs import ArgType, ConverterArg, ConverterArgValues
from ..converter import DataConverter
from ..exceptions import ConvError
from ..registers import ModbusRegisters
from ..value import MqttValue
from .integers import Int16Converter

_DIGITS = frozenset("0123456789")
_ATOI_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _atoi(text: str) -> int:
    match = _ATOI_RE.match(text)
    if match is None:
        return 0
    value = int(match.group(1)) & 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass(frozen=True)
class Mapping:
    """A register value and the MQTT value (int or text) it stands for."""

    register_value: int
    mqtt_value: int | str

    @property
    def is_int(self) -> bool:
        return isinstance(self.mqtt_value, int)


class _State(enum.Enum):
    SCAN = enum.auto()
    KEY = enum.auto()
    ESCAPE = enum.auto()
    VALUE = enum.auto()


class _ValueType(enum.Enum):
    NONE = enum.auto()
    INT = enum.auto()
    STRING = enum.auto()


class MapParser:
    """Parses map specifications such as '{1: "on", 0: "off"}' or '{1: 10, 2: 20}'."""

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._states: list[_State] = [_State.SCAN]
        self._key = ""
        self._value = ""
        self._value_type = _ValueType.NONE
        self._mappings: list[Mapping] = []

    def parse(self, data: str) -> list[Mapping]:
        """Return the mappings in the order they appear; raise ConvError on bad input."""
        self._reset()
        handlers = {
            "{": self._on_open_brace,
            "}": self._on_close_brace,
            "\\": self._on_backslash,
            '"': self._on_quote,
            " ": self._on_space,
            ":": self._on_colon,
            ",": self._on_comma,
        }
        for char in data:
            handlers.get(char, self._on_other)(char)
        return self._mappings

    def _top(self) -> _State:
        if not self._states:
            raise ConvError("Internal parser error: unexpected data after end of map")
        return self._states[-1]

    def _on_open_brace(self, char: str) -> None:
        state = self._top()
        if state is _State.KEY:
            raise ConvError("{ in map key is not allowed, must be an uint16_value")
        if state is _State.VALUE:
            self._value += char
        elif state is _State.ESCAPE:
            self._add_escaped(char)

    def _on_close_brace(self, char: str) -> None:
        state = self._top()
        if state is _State.SCAN:
            if self._value_type is _ValueType.INT:
                self._add_mapping()
        elif state is _State.KEY:
            raise ConvError("} in map key is not allowed, must be an uint16_value")
        elif state is _State.VALUE:
            if self._value_type is _ValueType.INT:
                self._add_mapping()
            else:
                raise ConvError("Internal parser error: unknown value type on closing brace")
        else:
            self._add_escaped(char)

    def _on_backslash(self, char: str) -> None:
        state = self._top()
        if state in (_State.SCAN, _State.KEY):
            raise ConvError("\\ in map key is not allowed, must be an uint16_value")
        if state is _State.VALUE:
            self._states.append(_State.ESCAPE)
        else:
            self._add_escaped(char)

    def _on_quote(self, char: str) -> None:
        state = self._top()
        if state is _State.SCAN:
            if not self._key:
                self._states.append(_State.KEY)
            else:
                self._states.append(_State.VALUE)
                self._value_type = _ValueType.STRING
        elif state is _State.KEY:
            raise ConvError('" in map key is not allowed, must be an uint16_value')
        elif state is _State.ESCAPE:
            self._add_escaped(char)
        elif self._value_type is _ValueType.NONE:
            self._value_type = _ValueType.STRING
        elif self._value_type is _ValueType.STRING:
            self._add_mapping()
        else:
            raise ConvError('" in int value is not allowed')

    def _on_space(self, char: str) -> None:
        state = self._top()
        if state is _State.KEY:
            self._states.pop()
        elif state is _State.VALUE:
            if self._value_type is _ValueType.INT:
                self._states.pop()
            elif self._value_type is _ValueType.STRING:
                self._value += char
        elif state is _State.ESCAPE:
            self._add_escaped(char)

    def _on_colon(self, char: str) -> None:
        state = self._top()
        if state is _State.SCAN:
            if not self._key:
                raise ConvError(f"Key {len(self._mappings) + 1} is empty")
        elif state is _State.KEY:
            self._states.pop()
        elif state is _State.ESCAPE:
            self._add_escaped(char)
        else:
            self._value += char

    def _on_comma(self, char: str) -> None:
        state = self._top()
        if state is _State.KEY:
            raise ConvError(", in map key is not allowed, must be an uint16_value")
        if state is _State.VALUE:
            if self._value_type is _ValueType.INT:
                self._add_mapping()
            else:
                self._value += char
        elif state is _State.ESCAPE:
            self._add_escaped(char)

    def _on_other(self, char: str) -> None:
        state = self._top()
        is_digit = char in _DIGITS
        if state is _State.SCAN:
            if not self._key:
                if not is_digit:
                    raise ConvError('string key should start with "')
                self._states.append(_State.KEY)
                self._key += char
            else:
                if self._value_type is _ValueType.NONE and is_digit:
                    self._value_type = _ValueType.INT
                self._states.append(_State.VALUE)
                self._value += char
        elif state is _State.KEY:
            if not is_digit and char != "x":
                raise ConvError(f"Invalid char {ord(char)} in int key")
            self._key += char
        elif state is _State.VALUE:
            if self._value_type is _ValueType.NONE and is_digit:
                self._value_type = _ValueType.INT
            self._value += char
        else:
            self._add_escaped(char)

    def _add_escaped(self, char: str) -> None:
        self._states.pop()
        state = self._top()
        if state is _State.KEY:
            self._key += char
        elif state is _State.VALUE:
            self._value += char
        else:
            raise ConvError(
                f"Internal parser error: invalid state {state.name} when adding escaped char {char}"
            )

    def _add_mapping(self) -> None:
        if not self._key:
            raise ConvError("Internal parser error: register value cannot be empty")
        register = MqttValue.from_string(self._key).as_uint16()
        if any(m.register_value == register for m in self._mappings):
            raise ConvError(f"Register value {self._key} already mapped")

        if self._value_type is _ValueType.INT:
            mapping = Mapping(register, _atoi(self._value))
        else:
            mapping = Mapping(register, self._value)

        if any(
            m.is_int == mapping.is_int and m.mqtt_value == mapping.mqtt_value
            for m in self._mappings
        ):
            raise ConvError(f"Mqtt value {self._value} already mapped")

        self._mappings.append(mapping)
        self._value_type = _ValueType.NONE
        self._key = ""
        self._value = ""
        if self._states:
            self._states.pop()


class MapConverter(DataConverter):
    """Translates single register values through a configured map."""

    def __init__(self) -> None:
        self._mappings: list[Mapping] = []

    @property
    def mappings(self) -> tuple[Mapping, ...]:
        return tuple(self._mappings)

    def args(self) -> list[ConverterArg]:
        return [ConverterArg("map", ArgType.STRING, "")]

    def set_args(self, values: ConverterArgValues) -> None:
        self._mappings = MapParser().parse(values["map"].as_str())

    def _find_register(self, register: int) -> Mapping | None:
        return next((m for m in self._mappings if m.register_value == register), None)

    def _find_mqtt_value(self, value: MqttValue) -> Mapping | None:
        for mapping in self._mappings:
            if mapping.is_int:
                if mapping.mqtt_value == value.as_int():
                    return mapping
            elif mapping.mqtt_value == value.as_string():
                return mapping
        return None

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        if len(data) != 1:
            raise ConvError("Cannot map multiple registers")
        mapping = self._find_register(data[0])
        if mapping is None:
            return MqttValue.from_int(data[0])
        if mapping.is_int:
            return MqttValue.from_int(mapping.mqtt_value)
        return MqttValue.from_string(mapping.mqtt_value)

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        if register_count != 1:
            raise ConvError("Cannot map multiple registers")
        mapping = self._find_mqtt_value(value)
        if mapping is None:
            return Int16Converter().to_modbus(value, register_count)
        return ModbusRegisters(mapping.register_value)