"""Converter for C-style strings stored byte after byte in registers."""

from __future__ import annotations

from ..converter import DataConverter
from ..convtools import adapt_to_network_byte_order
from ..registers import ModbusRegisters
from ..value import MqttValue


class StringConverter(DataConverter):
    """Reads and writes text held in consecutive registers.

    Reading stops at the first zero byte. Writing copies every payload byte
    that fits and fills the remaining register bytes with zeros.
    """

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        # Each register carries its high byte first on the wire.
        raw = b"".join(register.to_bytes(2, "big") for register in data)
        end = raw.find(b"\0")
        if end >= 0:
            raw = raw[:end]
        return MqttValue.from_binary(raw)

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        size = 2 * max(register_count, 0)
        raw = value.as_bytes()[:size].ljust(size, b"\0")
        registers = [(high << 8) | low for high, low in zip(raw[::2], raw[1::2])]
        return ModbusRegisters(adapt_to_network_byte_order(registers))