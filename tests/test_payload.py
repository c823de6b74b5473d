import json
from dataclasses import dataclass, field

import pytest

from modmqtt.converter import DataConverter
from modmqtt.exceptions import ModMqttProgramError, MqttPayloadConversionError
from modmqtt.mqttobject import DataNode, MqttObject, RegisterIdent
from modmqtt.payload import generate
from modmqtt.stdconv.integers import Int32Converter
from modmqtt.value import MqttValue

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


class Fixed(DataConverter):
    def __init__(self, value):
        self._value = value

    def to_mqtt(self, data):
        return self._value


def scalar(reg, name="", converter=None):
    node = DataNode(name, converter)
    node.set_scalar(RegisterIdent("net", 1, reg, HOLDING))
    return node


def make_object(*nodes, force_list=False):
    obj = MqttObject("obj")
    for node in nodes:
        obj.state.add_node(node, force_list)
    return obj


def feed(obj, start, values):
    obj.update_register_values("net", SlaveData(1, HOLDING, start, values))


def test_single_unnamed_scalar_is_plain_value():
    obj = make_object(scalar(1))
    feed(obj, 1, [42])
    assert generate(obj) == "42"


def test_named_scalar_is_json_object():
    obj = make_object(scalar(1, "temp"))
    feed(obj, 1, [42])
    assert json.loads(generate(obj)) == {"temp": 42}


def test_unnamed_nodes_form_list():
    obj = make_object(scalar(1), scalar(2))
    feed(obj, 1, [1, 2])
    assert json.loads(generate(obj)) == [1, 2]


def test_forced_single_element_list():
    obj = make_object(scalar(1), force_list=True)
    feed(obj, 1, [7])
    assert json.loads(generate(obj)) == [7]


def test_nested_map():
    outer = DataNode("outer")
    outer.add_child(scalar(1, "a"))
    outer.add_child(scalar(2, "b"))
    obj = make_object(outer)
    feed(obj, 1, [1, 2])
    assert json.loads(generate(obj)) == {"outer": {"a": 1, "b": 2}}


def test_composite_with_converter_is_single_value():
    node = DataNode("v", Int32Converter())
    node.add_child(scalar(2))
    node.add_child(scalar(3))
    obj = make_object(node)
    feed(obj, 2, [1, 0])
    assert json.loads(generate(obj)) == {"v": 65536}


def test_unnamed_converted_double_uses_value_string():
    value = MqttValue.from_double(1.5)
    obj = make_object(scalar(1, converter=Fixed(value)))
    feed(obj, 1, [0])
    assert generate(obj) == value.as_string()


def test_integral_double_keeps_decimal_point():
    obj = make_object(scalar(1, "x", Fixed(MqttValue.from_double(2.0))))
    feed(obj, 1, [0])
    assert generate(obj) == '{"x":2.0}'


def test_double_precision_truncates_decimals():
    obj = make_object(scalar(1, "x", Fixed(MqttValue.from_double(1.23456, 2))))
    feed(obj, 1, [0])
    assert generate(obj) == '{"x":1.23}'


def test_large_double_uses_exponent():
    obj = make_object(scalar(1, "x", Fixed(MqttValue.from_double(1e30))))
    feed(obj, 1, [0])
    assert generate(obj) == '{"x":1e30}'
    assert json.loads(generate(obj))["x"] == 1e30


def test_zero_precision_writes_integer():
    obj = make_object(scalar(1, "x", Fixed(MqttValue.from_double(2.7, 0))))
    feed(obj, 1, [0])
    assert json.loads(generate(obj)) == {"x": 2}


def test_string_values_are_escaped():
    text = 'say "hi"\n\\'
    obj = make_object(scalar(1, "s", Fixed(MqttValue.from_string(text))))
    feed(obj, 1, [0])
    assert json.loads(generate(obj)) == {"s": text}


def test_non_finite_double_cannot_be_written():
    obj = make_object(scalar(1, "x", Fixed(MqttValue.from_double(float("nan")))))
    feed(obj, 1, [0])
    with pytest.raises(MqttPayloadConversionError):
        generate(obj)


def test_object_without_state_nodes_raises():
    with pytest.raises(ModMqttProgramError):
        generate(MqttObject("empty"))