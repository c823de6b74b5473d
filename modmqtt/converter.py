"""Base classes for data converters and converter plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .convargs import ConverterArg, ConverterArgValues
from .registers import ModbusRegisters
from .value import MqttValue


class DataConverter:
    """Converts register values to MQTT values and back.

    Subclasses override the directions they support.
    """

    def args(self) -> list[ConverterArg]:
        """Return the arguments this converter accepts."""
        return []

    def set_args(self, values: ConverterArgValues) -> None:
        """Take the configured argument values; raise ConvError if they are invalid."""

    def to_mqtt(self, data: ModbusRegisters) -> MqttValue:
        raise TypeError(f"{type(self).__name__} cannot convert register values to an mqtt value")

    def to_modbus(self, value: MqttValue, register_count: int) -> ModbusRegisters:
        raise TypeError(f"{type(self).__name__} cannot convert an mqtt value to register values")


class ConverterPlugin(ABC):
    """A named collection of converters."""

    @abstractmethod
    def name(self) -> str:
        """Return the plugin name used as prefix in converter specifications."""

    @abstractmethod
    def get_converter(self, name: str) -> DataConverter | None:
        """Return a new converter for the name, or None if the plugin has none."""