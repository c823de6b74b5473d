"""MQTT objects whose state and availability are built from modbus registers."""

from __future__ import annotations

import enum
import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol

from .converter import DataConverter
from .registers import ModbusRegisters
from .value import MqttValue


class PublishMode(enum.IntEnum):
    """When the state of an object is published."""

    ON_CHANGE = 1
    EVERY_POLL = 2
    ONCE = 3


class AvailableFlag(enum.IntEnum):
    """Whether an object is available, unavailable or not yet known."""

    NOT_SET = -1
    FALSE = 0
    TRUE = 1


class SlaveAddressRange(Protocol):
    """A range of registers on one modbus slave."""

    slave_id: int
    register_type: Any
    register: int
    count: int


class SlaveRegisterValues(SlaveAddressRange, Protocol):
    """A range of registers on one slave together with the values read."""

    registers: Sequence[int]


@dataclass(frozen=True, order=True)
class RegisterIdent:
    """Identifies a single register; ordered by network, slave, number and type."""

    network_name: str
    slave_id: int
    register_number: int
    register_type: Any

    @classmethod
    def from_range(cls, network_name: str, slave_range: SlaveAddressRange) -> RegisterIdent:
        """Identify the first register of a slave range."""
        return cls(network_name, slave_range.slave_id, slave_range.register, slave_range.register_type)


class RegisterValue:
    """The last value read from a register and whether reading it works."""

    __slots__ = ("value", "has_value", "read_ok")

    def __init__(self) -> None:
        self.value = 0
        self.has_value = False
        self.read_ok = True

    def set_value(self, value: int) -> bool:
        """Store a value; return True if it differs or is the first one."""
        had_value = self.has_value
        self.has_value = True
        if self.value != value:
            self.value = value
            return True
        return not had_value

    def clear_value(self) -> None:
        self.has_value = False

    def set_read_error(self, flag: bool) -> None:
        self.read_ok = not flag


class DataNodeList(list):
    """A list of data nodes that remembers whether it is published as a JSON list."""

    def __init__(self, *args: Any) -> None:
        super().__init__(*args)
        self.output_as_list = False


class DataNode:
    """A scalar register value, or a composite of child nodes.

    A composite node with a converter is published as the single value the
    converter makes from its children's raw values.
    """

    def __init__(self, name: str = "", converter: DataConverter | None = None) -> None:
        self.name = name
        self.converter = converter
        self.children = DataNodeList()
        self.ident: RegisterIdent | None = None
        self.value = RegisterValue()

    @property
    def is_unnamed(self) -> bool:
        return not self.name

    @property
    def is_scalar(self) -> bool:
        return len(self.children) == 0

    @property
    def has_converter(self) -> bool:
        return self.converter is not None

    def _scalar_ident(self) -> RegisterIdent:
        if self.ident is None:
            raise ValueError("Scalar data node has no register assigned")
        return self.ident

    def _matches(self, network_name: str, slave_range: SlaveAddressRange) -> bool:
        ident = self._scalar_ident()
        return (
            slave_range.slave_id == ident.slave_id
            and slave_range.register_type == ident.register_type
            and network_name == ident.network_name
        )

    def update_register_values(self, network_name: str, slave_data: SlaveRegisterValues) -> bool:
        """Take values read from a slave; return True if any value of this node changed."""
        if not self.is_scalar:
            results = [child.update_register_values(network_name, slave_data) for child in self.children]
            return any(results)
        if not self._matches(network_name, slave_data):
            return False
        number = self._scalar_ident().register_number
        last = slave_data.register + slave_data.count - 1
        if not slave_data.register <= number <= last:
            return False
        changed = self.value.set_value(slave_data.registers[number - slave_data.register])
        self.value.set_read_error(False)
        return changed

    def update_registers_read_failed(self, network_name: str, slave_data: SlaveAddressRange) -> bool:
        """Mark registers in a failed range as unreadable; return True if any was."""
        if not self.is_scalar:
            results = [child.update_registers_read_failed(network_name, slave_data) for child in self.children]
            return any(results)
        if not self._matches(network_name, slave_data):
            return False
        distance = abs(self._scalar_ident().register_number - slave_data.register) & 0xFFFF
        if distance < slave_data.count:
            self.value.set_read_error(True)
            return True
        return False

    def set_modbus_network_state(self, network_name: str, is_up: bool) -> bool:
        """Follow a network going up or down; return True if polling state changed."""
        if not self.is_scalar:
            results = [child.set_modbus_network_state(network_name, is_up) for child in self.children]
            return any(results)
        if network_name == self._scalar_ident().network_name and self.value.read_ok != is_up:
            self.value.set_read_error(not is_up)
            return True
        return False

    def has_all_values(self) -> bool:
        if self.is_scalar:
            self._scalar_ident()
            return self.value.has_value
        return all(child.has_all_values() for child in self.children)

    def is_polling(self) -> bool:
        if self.is_scalar:
            return self.value.read_ok
        return all(child.is_polling() for child in self.children)

    def add_child(self, node: DataNode, force_list: bool = False) -> None:
        self.children.append(node)
        self.children.output_as_list = force_list or len(self.children) > 1

    def set_scalar(self, ident: RegisterIdent) -> None:
        self.ident = ident

    def converted_value(self) -> MqttValue:
        """Return the node value, passed through the converter if there is one."""
        if self.converter is None:
            return MqttValue.from_int(self.value.value)
        if self.is_scalar:
            data = ModbusRegisters([self.raw_value()])
        else:
            data = ModbusRegisters([child.raw_value() for child in self.children])
        return self.converter.to_mqtt(data)

    def raw_value(self) -> int:
        if not self.is_scalar:
            raise ValueError("Composite data node has no raw value")
        return self.value.value


class ObjectState:
    """The data nodes that make up the state of an object."""

    def __init__(self) -> None:
        self.nodes = DataNodeList()

    def update_register_values(self, network_name: str, slave_data: SlaveRegisterValues) -> bool:
        results = [node.update_register_values(network_name, slave_data) for node in self.nodes]
        return any(results)

    def update_registers_read_failed(self, network_name: str, slave_data: SlaveAddressRange) -> bool:
        results = [node.update_registers_read_failed(network_name, slave_data) for node in self.nodes]
        return any(results)

    def set_modbus_network_state(self, network_name: str, is_up: bool) -> bool:
        results = [node.set_modbus_network_state(network_name, is_up) for node in self.nodes]
        return any(results)

    def has_all_values(self) -> bool:
        return all(node.has_all_values() for node in self.nodes)

    def is_polling(self) -> bool:
        return all(node.is_polling() for node in self.nodes)

    def add_node(self, node: DataNode, force_list: bool = False) -> None:
        self.nodes.append(node)
        self.nodes.output_as_list = force_list or len(self.nodes) > 1


class ObjectAvailability(ObjectState):
    """Data nodes whose value tells whether an object is available."""

    def __init__(self) -> None:
        super().__init__()
        self.available_value = MqttValue.from_int(1)

    def available_flag(self) -> AvailableFlag:
        if not self.nodes:
            return AvailableFlag.TRUE
        if not self.has_all_values() or not self.is_polling():
            return AvailableFlag.NOT_SET
        if self.nodes[0].converted_value().as_int() != self.available_value.as_int():
            return AvailableFlag.FALSE
        return AvailableFlag.TRUE


class MqttObject:
    """An MQTT topic with state and availability fed from modbus registers."""

    def __init__(self, topic: str) -> None:
        self.topic = topic
        self.state_topic = topic + "/state"
        self.availability_topic = topic + "/availability"
        self.state = ObjectState()
        self._availability = ObjectAvailability()
        self._available = AvailableFlag.NOT_SET
        self.retain = True
        self.publish_mode = PublishMode.ON_CHANGE
        self.every_poll_period = 0.0
        self.last_published_payload = ""
        self.last_publish_time: float | None = None

    @property
    def available_flag(self) -> AvailableFlag:
        return self._available

    def update_register_values(self, network_name: str, slave_data: SlaveRegisterValues) -> None:
        state_changed = self.state.update_register_values(network_name, slave_data)
        avail_changed = self._availability.update_register_values(network_name, slave_data)
        if state_changed or avail_changed or self._available is AvailableFlag.FALSE:
            self._update_available_flag()

    def update_registers_read_failed(self, network_name: str, slave_data: SlaveAddressRange) -> None:
        state_changed = self.state.update_registers_read_failed(network_name, slave_data)
        avail_changed = self._availability.update_registers_read_failed(network_name, slave_data)
        if state_changed or avail_changed:
            self._update_available_flag()

    def set_modbus_network_state(self, network_name: str, is_up: bool) -> bool:
        """Follow a network going up or down; return True if anything changed."""
        state_changed = self.state.set_modbus_network_state(network_name, is_up)
        avail_changed = self._availability.set_modbus_network_state(network_name, is_up)
        if state_changed or avail_changed:
            self._update_available_flag()
            return True
        return False

    def add_availability_node(self, node: DataNode) -> None:
        self._availability.add_node(node)

    def set_available_value(self, value: MqttValue) -> None:
        self._availability.available_value = value

    def set_publish_mode(self, mode: PublishMode, every_poll_period: float | timedelta = 0.0) -> None:
        """Set the publish mode; the period is in seconds or a timedelta."""
        if isinstance(every_poll_period, timedelta):
            every_poll_period = every_poll_period.total_seconds()
        self.publish_mode = PublishMode(mode)
        self.every_poll_period = float(every_poll_period)

    def _update_available_flag(self) -> None:
        if not self._availability.is_polling() or not self.state.is_polling():
            self._available = AvailableFlag.FALSE
        elif not self._availability.has_all_values() or not self.state.has_all_values():
            self._available = AvailableFlag.NOT_SET
        else:
            self._available = self._availability.available_flag()

    def need_state_republish(self) -> bool:
        """Return True if the state should be published even without a change."""
        if self.publish_mode in (PublishMode.ON_CHANGE, PublishMode.ONCE):
            return False
        # Composite state may arrive in parts, so wait for the period to pass.
        if self.last_publish_time is None:
            return True
        return self.last_publish_time + self.every_poll_period <= time.monotonic()