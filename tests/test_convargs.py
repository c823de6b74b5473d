import pytest

from modmqtt.convargs import ArgType, ConverterArg, ConverterArgValue, ConverterArgValues
from modmqtt.exceptions import ConvError


def test_default_text():
    assert ConverterArg("a", ArgType.INT, 5).default == "5"
    assert ConverterArg("a", ArgType.INT, -1).default == "-1"
    assert ConverterArg("a", ArgType.BOOL, False).default == "0"
    assert ConverterArg("a", ArgType.DOUBLE, 1.5).default == "1.500000"
    assert ConverterArg("a", ArgType.STRING, "text").default == "text"


def test_as_int():
    assert ConverterArgValue("foo", ArgType.INT, "0x10").as_int() == int("10", 16)
    assert ConverterArgValue("foo", ArgType.INT, "12").as_int() == 12


def test_as_int_error():
    with pytest.raises(ConvError, match="Invalidfoo int value"):
        ConverterArgValue("foo", ArgType.INT, "abc").as_int()


def test_as_uint16():
    assert ConverterArgValue("mask", ArgType.INT, "ff").as_uint16() == int("ff", 16)


@pytest.mark.parametrize("text", ["10000", "-1", "zz"])
def test_as_uint16_errors(text):
    with pytest.raises(ConvError, match="Invalidmask uint16 value"):
        ConverterArgValue("mask", ArgType.INT, text).as_uint16()


def test_decimal_default_is_read_as_hex_for_uint16():
    values = ConverterArgValues([ConverterArg("mask", ArgType.INT, 0xFFFF)])
    with pytest.raises(ConvError):
        values["mask"].as_uint16()


def test_as_double():
    assert ConverterArgValue("d", ArgType.DOUBLE, "2.25").as_double() == 2.25
    with pytest.raises(ConvError, match="Invalidd double value"):
        ConverterArgValue("d", ArgType.DOUBLE, "x").as_double()


@pytest.mark.parametrize("text, expected", [
    ("true", True), ("TRUE", True), ("1", True),
    ("false", False), ("FALSE", False), ("0", False),
])
def test_as_bool(text, expected):
    assert ConverterArgValue("b", ArgType.BOOL, text).as_bool() is expected


def test_as_bool_error():
    with pytest.raises(ConvError, match="cannot be converted to bool"):
        ConverterArgValue("b", ArgType.BOOL, "yes").as_bool()


def test_values_start_with_defaults():
    values = ConverterArgValues([
        ConverterArg(ConverterArg.PRECISION, ArgType.INT, ConverterArgValue.NO_PRECISION),
        ConverterArg(ConverterArg.LOW_FIRST, ArgType.BOOL, False),
    ])
    assert len(values) == 2
    assert values[ConverterArg.PRECISION].as_int() == ConverterArgValue.NO_PRECISION
    assert values[ConverterArg.LOW_FIRST].as_bool() is False
    assert ConverterArg.LOW_FIRST in values
    assert "nope" not in values


def test_set_value():
    values = ConverterArgValues([ConverterArg(ConverterArg.SWAP_BYTES, ArgType.BOOL, False)])
    values.set(ConverterArg.SWAP_BYTES, "true")
    assert values[ConverterArg.SWAP_BYTES].as_str() == "true"
    assert values[ConverterArg.SWAP_BYTES].as_bool() is True


def test_unknown_names():
    values = ConverterArgValues([])
    with pytest.raises(KeyError, match="Wrong parameter name x"):
        values.set("x", "1")
    with pytest.raises(KeyError, match="no value for x"):
        values["x"]