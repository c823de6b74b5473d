import pytest

from modmqtt.exceptions import (
    ConvError,
    ConvNameParserError,
    ConvPluginNotFoundError,
    ModMqttError,
    ModMqttProgramError,
    MosquittoError,
    MqttPayloadConversionError,
    ObjectCommandNotFoundError,
)


def test_default_message():
    assert str(ModMqttError()) == "Unknown error"


def test_command_not_found_message():
    err = ObjectCommandNotFoundError("room/switch/set")
    assert str(err) == "Command for topic room/switch/set not found"
    assert err.topic == "room/switch/set"


@pytest.mark.parametrize(
    "cls",
    [
        ModMqttProgramError,
        MosquittoError,
        MqttPayloadConversionError,
        ConvNameParserError,
        ConvPluginNotFoundError,
    ],
)
def test_subclasses_are_caught_as_base(cls):
    err = cls("boom")
    assert str(err) == "boom"
    assert isinstance(err, ModMqttError)


def test_command_not_found_is_base_error():
    err = ObjectCommandNotFoundError("x")
    assert str(err) == "Command for topic x not found"
    assert isinstance(err, ModMqttError)


def test_conv_error_is_separate_from_core_errors():
    err = ConvError("bad value")
    assert str(err) == "bad value"
    assert not isinstance(err, ModMqttError)