"""Converters that extract bits from a register."""

from __future__ import annotations

from ..convargs import ArgType, ConverterArg, ConverterArgValues
from ..converter import DataConverter
from ..exceptions import ConvError
from ..registers import ModbusRegisters
from ..value import MqttValue


class BitmaskConverter(DataConverter):
    """Publishes the first register ANDed with a hexadecimal mask."""

    def __init__(self) -> None:
        self._mask = 0xFFFF

    def args(self) -> list[ConverterArg]:
        return [ConverterArg("mask", ArgType.INT, 0xFFFF)]

    def set_args(self, values: ConverterArgValues) -> None:
        self._mask = values["mask"].as_uint16()

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        return MqttValue.from_int(data[0] & self._mask)


class BitConverter(DataConverter):
    """Publishes a single bit (numbered from 1) of the first register."""

    def __init__(self) -> None:
        self._bit = 1

    def args(self) -> list[ConverterArg]:
        return [ConverterArg("bit", ArgType.INT, -1)]

    def set_args(self, values: ConverterArgValues) -> None:
        number = values["bit"].as_int()
        if number > 16 or number < 0:
            raise ConvError("Please provide a valid bit number [1-16]")
        self._bit = number

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        if self._bit == 0:
            return MqttValue.from_int(0)
        return MqttValue.from_int((data[0] >> (self._bit - 1)) & 0x1)