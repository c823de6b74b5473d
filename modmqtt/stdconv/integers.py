"""Converters for 8, 16 and 32 bit integers held in registers."""

from __future__ import annotations

from ..convargs import ArgType, ConverterArg, ConverterArgValues
from ..converter import DataConverter
from ..convtools import int32_to_registers, registers_to_int32, set_byte_order
from ..exceptions import ConvError
from ..registers import ModbusRegisters
from ..value import MqttValue
from .argtools import get_low_first, get_swap_bytes

import logging

_log = logging.getLogger(__name__)


def _to_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def _out_of_range(value: int) -> ConvError:
    return ConvError(f"Conversion failed, value {value} out of range")


class Int8Converter(DataConverter):
    """Publishes the low byte (or the high byte with first=true) as a signed 8-bit value."""

    def __init__(self) -> None:
        self._first = False

    def args(self) -> list[ConverterArg]:
        return [ConverterArg("first", ArgType.BOOL, False)]

    def set_args(self, values: ConverterArgValues) -> None:
        arg = values["first"]
        try:
            self._first = arg.as_bool()
            return
        except ConvError:
            old = arg.as_str()
            if old == "":
                self._first = False
            elif old == "first":
                self._first = True
            else:
                raise
        _log.warning("first param changed to bool, please update to 'first=true'")

    def _byte(self, data: ModbusRegisters) -> int:
        value = data[0]
        if self._first:
            value >>= 8
        return value & 0xFF

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        return MqttValue.from_int(_to_signed(self._byte(data), 8))


class UInt8Converter(Int8Converter):
    """Publishes the low byte (or the high byte with first=true) as an unsigned value."""

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        return MqttValue.from_int(self._byte(data))


class Int16Converter(DataConverter):
    """Signed 16-bit value in a single register."""

    _MIN = -0x8000
    _MAX = 0x7FFF

    def __init__(self) -> None:
        self._swap_bytes = False

    def args(self) -> list[ConverterArg]:
        return [ConverterArg(ConverterArg.SWAP_BYTES, ArgType.BOOL, False)]

    def set_args(self, values: ConverterArgValues) -> None:
        self._swap_bytes = get_swap_bytes(values)

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        value = set_byte_order(data[0], self._swap_bytes)
        return MqttValue.from_int(_to_signed(value, 16))

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        number = value.as_int()
        if not self._MIN <= number <= self._MAX:
            raise _out_of_range(number)
        register = set_byte_order(number, self._swap_bytes)
        return ModbusRegisters([register] * register_count)


class UInt16Converter(Int16Converter):
    """Unsigned 16-bit value in a single register."""

    _MIN = 0
    _MAX = 0xFFFF

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        return MqttValue.from_int(set_byte_order(data[0], self._swap_bytes))

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        return super().to_modbus(value, register_count)


class Int32Converter(DataConverter):
    """Signed 32-bit value in one or two registers."""

    def __init__(self) -> None:
        self._low_first = False
        self._swap_bytes = False

    def args(self) -> list[ConverterArg]:
        return [
            ConverterArg(ConverterArg.LOW_FIRST, ArgType.BOOL, False),
            ConverterArg(ConverterArg.SWAP_BYTES, ArgType.BOOL, False),
        ]

    def set_args(self, values: ConverterArgValues) -> None:
        self._swap_bytes = get_swap_bytes(values)
        self._low_first = get_low_first(values)

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        return MqttValue.from_int(
            registers_to_int32(data.values(), self._low_first, self._swap_bytes)
        )

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        return ModbusRegisters(
            int32_to_registers(value.as_int(), self._low_first, self._swap_bytes, register_count)
        )


class UInt32Converter(DataConverter):
    """Unsigned 32-bit value in one or two registers."""

    def __init__(self) -> None:
        self._high = 0
        self._low = 1

    def args(self) -> list[ConverterArg]:
        return [ConverterArg(ConverterArg.LOW_FIRST, ArgType.BOOL, False)]

    def set_args(self, values: ConverterArgValues) -> None:
        if get_low_first(values):
            self._high, self._low = 1, 0

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        if len(data) > 1:
            value = (data[self._high] << 16) + data[self._low]
        else:
            value = data[0]
        return MqttValue.from_int64(value & 0xFFFFFFFF)

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        number = value.as_int64() & 0xFFFFFFFF
        registers = ModbusRegisters(number)
        if register_count == 2:
            if self._high == 0:
                registers.prepend(number >> 16)
            else:
                registers.append(number >> 16)
        return registers