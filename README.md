# modmqtt

Building blocks for a Modbus to MQTT gateway. The package turns raw 16-bit
Modbus register values into MQTT values and payloads, and MQTT values back
into register values. It has no dependencies outside the standard library.

## Contents

- `modmqtt.registers.ModbusRegisters`: an ordered list of register values,
  each truncated to 16 bits, with `append`, `prepend` and `values()`.
- `modmqtt.value.MqttValue`: an MQTT value held as a 32-bit int, a 64-bit
  int, a double (with an optional precision) or raw bytes. Build one with
  `from_int`, `from_int64`, `from_double`, `from_binary` or `from_string`
  and read it with `as_string`, `as_int`, `as_int64`, `as_uint16`,
  `as_double` or `as_bytes`.
- `modmqtt.convtools`: number parsing (`to_int`, `to_double`) and register
  packing (`registers_to_int32`, `int32_to_registers`,
  `registers_to_float`, `set_byte_order`, `swap_byte_order`,
  `adapt_to_network_byte_order`).
- `modmqtt.convargs`: converter arguments (`ConverterArg`, `ArgType`) and
  their configured values (`ConverterArgValues`, `ConverterArgValue` with
  `as_str`, `as_int`, `as_double`, `as_uint16` and `as_bool`).
- `modmqtt.converter`: the `DataConverter` base class (`args`, `set_args`,
  `to_mqtt`, `to_modbus`) and the abstract `ConverterPlugin` (`name`,
  `get_converter`).
- `modmqtt.stdconv`: the standard converters. `StdConvPlugin` in
  `modmqtt.stdconv.plugin` is named `std` and returns a new converter for
  each of these names, or `None` for any other: `bit`, `bitmask`, `divide`,
  `multiply`, `int8`, `uint8`, `int16`, `uint16`, `int32`, `uint32`,
  `float32`, `scale`, `string` and `map`.
- `modmqtt.mqttobject`: `MqttObject` tracks the state and availability of
  one MQTT topic from incoming register values, read failures and network
  up/down changes, built from `DataNode` trees. `PublishMode` and
  `AvailableFlag` describe when state is published and whether the object
  is available.
- `modmqtt.payload.generate`: renders an object's state as a plain value
  (a single unnamed node) or as compact JSON (named nodes become an object,
  several unnamed nodes a list).
- `modmqtt.yamlconv`: parses configuration values: `parse_duration`
  (`500ms`, `5s`, `1min`, returned as a `timedelta`),
  `parse_number_ranges` (`1,2,4-6` gives `[(1, 1), (2, 2), (4, 6)]`) and
  `parse_string_list` (comma separated, whitespace trimmed). Bad input
  raises `ConfigValueError`.
- `modmqtt.exceptions`: `ConvError` for converter failures and the
  `ModMqttError` family for the rest.

## Example

```python
from modmqtt.convargs import ConverterArgValues
from modmqtt.registers import ModbusRegisters
from modmqtt.stdconv.plugin import StdConvPlugin
from modmqtt.value import MqttValue

conv = StdConvPlugin().get_converter("int32")
values = ConverterArgValues(conv.args())
values.set("low_first", "true")
conv.set_args(values)

print(conv.to_mqtt(ModbusRegisters([0, 1])).as_string())      # 65536
print(conv.to_modbus(MqttValue.from_int(65536), 2).values())  # [0, 1]
```

Converters raise `modmqtt.exceptions.ConvError` when a value cannot be
converted or an argument is invalid.

## What it does not do

The package does not talk to Modbus devices or MQTT brokers, does not load
configuration files, does not load converter plugins from other libraries,
and has no command line program. It provides the conversion, state
tracking and payload logic for code that does those things.

## Tests

```
pip install -e ".[test]"
pytest
```