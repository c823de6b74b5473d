"""Converters producing floating point values: float32, scale, divide and multiply."""

from __future__ import annotations

import math
import struct

from ..convargs import ArgType, ConverterArg, ConverterArgValues
from ..converter import DataConverter
from ..convtools import int32_to_registers, registers_to_float, registers_to_int32
from ..exceptions import ConvError
from ..registers import ModbusRegisters
from ..value import NO_PRECISION, MqttValue
from .argtools import get_low_first, get_swap_bytes


def _divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics for a zero denominator."""
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(1.0, numerator) * math.copysign(math.inf, denominator)


def _float_bits(number: float) -> int:
    try:
        packed = struct.pack("<f", number)
    except OverflowError:
        packed = struct.pack("<f", math.copysign(math.inf, number))
    return struct.unpack("<i", packed)[0]


def _to_int32(number: float) -> int:
    if not math.isfinite(number):
        raise ConvError(f"Cannot convert {number} to int")
    value = math.trunc(number) & 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


class FloatConverter(DataConverter):
    """IEEE-754 single precision number in two registers."""

    def __init__(self) -> None:
        self._precision = NO_PRECISION
        self._low_first = False
        self._swap_bytes = False

    def args(self) -> list[ConverterArg]:
        return [
            ConverterArg(ConverterArg.PRECISION, ArgType.INT, NO_PRECISION),
            ConverterArg(ConverterArg.LOW_FIRST, ArgType.BOOL, False),
            ConverterArg(ConverterArg.SWAP_BYTES, ArgType.BOOL, False),
        ]

    def set_args(self, values: ConverterArgValues) -> None:
        self._swap_bytes = get_swap_bytes(values)
        self._low_first = get_low_first(values)
        self._precision = values[ConverterArg.PRECISION].as_int()

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        if len(data) < 2:
            raise ConvError("Cannot read 32-bit float from single register")
        high, low = (1, 0) if self._low_first else (0, 1)
        number = registers_to_float(data[high], data[low], self._swap_bytes)
        return MqttValue.from_double(number, self._precision)

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        if register_count < 2:
            raise ConvError("Cannot store float in single register")
        bits = _float_bits(value.as_double())
        return ModbusRegisters(
            int32_to_registers(bits, self._low_first, self._swap_bytes, register_count)
        )


class ScaleConverter(DataConverter):
    """Maps the first register linearly from a source range to a target range."""

    def __init__(self) -> None:
        self._src_from = 0.0
        self._src_to = 1.0
        self._tgt_from = 0.0
        self._tgt_to = 1.0
        self._precision = NO_PRECISION

    def args(self) -> list[ConverterArg]:
        return [
            ConverterArg("src_from", ArgType.DOUBLE, ""),
            ConverterArg("src_to", ArgType.DOUBLE, ""),
            ConverterArg("tgt_from", ArgType.DOUBLE, ""),
            ConverterArg("tgt_to", ArgType.DOUBLE, ""),
            ConverterArg(ConverterArg.PRECISION, ArgType.INT, NO_PRECISION),
        ]

    def set_args(self, values: ConverterArgValues) -> None:
        self._src_from = values["src_from"].as_double()
        self._src_to = values["src_to"].as_double()
        self._tgt_from = values["tgt_from"].as_double()
        self._tgt_to = values["tgt_to"].as_double()
        self._precision = values[ConverterArg.PRECISION].as_int()

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        source = float(data[0])
        target = (
            _divide(
                (self._tgt_to - self._tgt_from) * (source - self._src_from),
                self._src_to - self._src_from,
            )
            + self._tgt_from
        )
        return MqttValue.from_double(target, self._precision)


class _SingleArgMath:
    """Shared state and logic of converters applying an operation with one argument."""

    def __init__(self, arg_name: str, default_precision: int) -> None:
        self._arg_name = arg_name
        self._operand = 1.0
        self._low_first = False
        self._swap_bytes = False
        self._precision = default_precision

    def _math_args(self) -> list[ConverterArg]:
        return [
            ConverterArg(self._arg_name, ArgType.DOUBLE, ""),
            ConverterArg(ConverterArg.PRECISION, ArgType.INT, NO_PRECISION),
            ConverterArg(ConverterArg.LOW_FIRST, ArgType.BOOL, False),
            ConverterArg(ConverterArg.SWAP_BYTES, ArgType.BOOL, False),
        ]

    def _math_set_args(self, values: ConverterArgValues) -> None:
        self._operand = values[self._arg_name].as_double()
        self._swap_bytes = get_swap_bytes(values)
        self._low_first = get_low_first(values)
        self._precision = values[ConverterArg.PRECISION].as_int()

    def _apply(self, number: float) -> float:
        raise NotImplementedError

    def _math_to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        if len(data) == 1:
            number = float(data[0])
        else:
            number = float(registers_to_int32(data.values(), self._low_first, self._swap_bytes))
        return MqttValue.from_double(self._apply(number), self._precision)

    def _math_to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        number = _to_int32(self._apply(value.as_double()))
        return ModbusRegisters(
            int32_to_registers(number, self._low_first, self._swap_bytes, register_count)
        )


class DivideConverter(_SingleArgMath, DataConverter):
    """Divides by the 'divisor' argument."""

    def __init__(self) -> None:
        super().__init__("divisor", NO_PRECISION)

    def _apply(self, number: float) -> float:
        return _divide(number, self._operand)

    def args(self) -> list[ConverterArg]:
        return self._math_args()

    def set_args(self, values: ConverterArgValues) -> None:
        self._math_set_args(values)

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        return self._math_to_mqtt(data)

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        return self._math_to_modbus(value, register_count)


class MultiplyConverter(_SingleArgMath, DataConverter):
    """Multiplies by the 'multipler' argument."""

    def __init__(self) -> None:
        super().__init__("multipler", 0)

    def _apply(self, number: float) -> float:
        return number * self._operand

    def args(self) -> list[ConverterArg]:
        return self._math_args()

    def set_args(self, values: ConverterArgValues) -> None:
        self._math_set_args(values)

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        return self._math_to_mqtt(data)

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        return self._math_to_modbus(value, register_count)