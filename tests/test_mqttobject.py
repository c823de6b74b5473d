import time
from dataclasses import dataclass, field

import pytest

from modmqtt.mqttobject import (
    AvailableFlag,
    DataNode,
    MqttObject,
    ObjectAvailability,
    PublishMode,
    RegisterIdent,
    RegisterValue,
)
from modmqtt.stdconv.integers import Int32Converter
from modmqtt.value import MqttValue, SourceType

HOLDING = 3


@dataclass
class SlaveData:
    slave_id: int
    register_type: int
    register: int
    registers: list = field(default_factory=list)
    count: int = 0

    def __post_init__(self):
        if not self.count:
            self.count = len(self.registers)


def scalar(network="net", slave=1, reg=2, name=""):
    node = DataNode(name)
    node.set_scalar(RegisterIdent(network, slave, reg, HOLDING))
    return node


def test_register_value_reports_changes():
    rv = RegisterValue()
    assert rv.set_value(5) is True
    assert rv.set_value(5) is False
    assert rv.set_value(6) is True
    assert rv.value == 6 and rv.has_value


def test_register_value_first_value_counts_as_change():
    rv = RegisterValue()
    assert rv.set_value(0) is True
    rv.clear_value()
    assert rv.has_value is False


def test_scalar_node_takes_value_from_matching_range():
    node = scalar(reg=2)
    assert node.update_register_values("net", SlaveData(1, HOLDING, 1, [10, 20, 30])) is True
    assert node.raw_value() == 20
    assert node.has_all_values()


@pytest.mark.parametrize(
    "network, data",
    [
        ("other", SlaveData(1, HOLDING, 2, [7])),
        ("net", SlaveData(9, HOLDING, 2, [7])),
        ("net", SlaveData(1, 4, 2, [7])),
        ("net", SlaveData(1, HOLDING, 3, [7, 8])),
    ],
)
def test_scalar_node_ignores_unrelated_data(network, data):
    node = scalar(reg=2)
    assert node.update_register_values(network, data) is False
    assert node.has_all_values() is False


def test_read_failure_stops_polling_until_next_value():
    node = scalar(reg=2)
    assert node.update_registers_read_failed("net", SlaveData(1, HOLDING, 2, count=1)) is True
    assert node.is_polling() is False
    node.update_register_values("net", SlaveData(1, HOLDING, 2, [4]))
    assert node.is_polling() is True


def test_read_failure_outside_range_is_ignored():
    node = scalar(reg=2)
    assert node.update_registers_read_failed("net", SlaveData(1, HOLDING, 10, count=2)) is False
    assert node.is_polling() is True


def test_network_state_changes_are_reported_once():
    node = scalar()
    assert node.set_modbus_network_state("net", False) is True
    assert node.is_polling() is False
    assert node.set_modbus_network_state("net", False) is False
    assert node.set_modbus_network_state("net", True) is True
    assert node.is_polling() is True


def test_composite_node_uses_converter_on_child_values():
    parent = DataNode("v", Int32Converter())
    parent.add_child(scalar(reg=2))
    parent.add_child(scalar(reg=3))
    parent.update_register_values("net", SlaveData(1, HOLDING, 2, [1, 0]))
    assert parent.has_all_values()
    assert parent.converted_value().as_int() == 65536


def test_scalar_without_converter_gives_int_value():
    node = scalar()
    node.update_register_values("net", SlaveData(1, HOLDING, 2, [77]))
    value = node.converted_value()
    assert value.source_type is SourceType.INT
    assert value.as_int() == 77


def test_raw_value_of_composite_raises():
    parent = DataNode()
    parent.add_child(scalar())
    with pytest.raises(ValueError):
        parent.raw_value()


def test_add_child_sets_list_output():
    parent = DataNode()
    parent.add_child(scalar(reg=1))
    assert parent.children.output_as_list is False
    parent.add_child(scalar(reg=2))
    assert parent.children.output_as_list is True
    forced = DataNode()
    forced.add_child(scalar(), force_list=True)
    assert forced.children.output_as_list is True


def test_register_ident_orders_by_network_then_slave():
    idents = [
        RegisterIdent("b", 1, 1, HOLDING),
        RegisterIdent("a", 2, 1, HOLDING),
        RegisterIdent("a", 1, 5, HOLDING),
    ]
    assert sorted(idents) == [idents[2], idents[1], idents[0]]


def test_register_ident_from_range():
    ident = RegisterIdent.from_range("net", SlaveData(4, HOLDING, 9, [1]))
    assert ident == RegisterIdent("net", 4, 9, HOLDING)


def test_object_topics():
    obj = MqttObject("sensor")
    assert obj.state_topic == "sensor/state"
    assert obj.availability_topic == "sensor/availability"


def test_object_availability_follows_reads():
    obj = MqttObject("sensor")
    obj.state.add_node(scalar(reg=2))
    assert obj.available_flag is AvailableFlag.NOT_SET
    obj.update_register_values("net", SlaveData(1, HOLDING, 2, [1]))
    assert obj.available_flag is AvailableFlag.TRUE
    obj.update_registers_read_failed("net", SlaveData(1, HOLDING, 2, count=1))
    assert obj.available_flag is AvailableFlag.FALSE
    obj.update_register_values("net", SlaveData(1, HOLDING, 2, [1]))
    assert obj.available_flag is AvailableFlag.TRUE


@pytest.mark.parametrize("avail_raw, expected", [(0, AvailableFlag.FALSE), (1, AvailableFlag.TRUE)])
def test_object_availability_register(avail_raw, expected):
    obj = MqttObject("sensor")
    obj.state.add_node(scalar(reg=2))
    obj.add_availability_node(scalar(reg=5))
    obj.update_register_values("net", SlaveData(1, HOLDING, 2, [9]))
    assert obj.available_flag is AvailableFlag.NOT_SET
    obj.update_register_values("net", SlaveData(1, HOLDING, 5, [avail_raw]))
    assert obj.available_flag is expected


def test_availability_without_nodes_is_true():
    assert ObjectAvailability().available_flag() is AvailableFlag.TRUE


def test_network_down_makes_object_unavailable():
    obj = MqttObject("sensor")
    obj.state.add_node(scalar())
    obj.update_register_values("net", SlaveData(1, HOLDING, 2, [3]))
    assert obj.set_modbus_network_state("net", False) is True
    assert obj.available_flag is AvailableFlag.FALSE
    assert obj.set_modbus_network_state("other", False) is False


def test_need_state_republish_by_mode():
    obj = MqttObject("sensor")
    obj.set_publish_mode(PublishMode.ON_CHANGE, 0)
    assert obj.need_state_republish() is False
    obj.set_publish_mode(PublishMode.ONCE, 0)
    assert obj.need_state_republish() is False
    obj.set_publish_mode(PublishMode.EVERY_POLL, 60)
    assert obj.need_state_republish() is True
    obj.last_publish_time = time.monotonic()
    assert obj.need_state_republish() is False
    obj.last_publish_time = time.monotonic() - 120
    assert obj.need_state_republish() is True