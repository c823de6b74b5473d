"""Exceptions raised by converters and by the gateway core."""

from __future__ import annotations


class ConvError(Exception):
    """A converter could not convert a value or accept its arguments."""


class ModMqttError(Exception):
    """Base class of the gateway's own errors."""

    def __init__(self, message: str = "Unknown error") -> None:
        super().__init__(message)


class ModMqttProgramError(ModMqttError):
    """An internal invariant of the program was broken."""


class MosquittoError(ModMqttError):
    """The MQTT client library reported a failure."""


class ObjectCommandNotFoundError(ModMqttError):
    """No command is registered for an MQTT topic."""

    def __init__(self, topic: str) -> None:
        self.topic = topic
        super().__init__(f"Command for topic {topic} not found")


class MqttPayloadConversionError(ModMqttError):
    """An MQTT payload could not be turned into register values."""


class ConvNameParserError(ModMqttError):
    """A converter specification in the configuration is malformed."""


class ConvPluginNotFoundError(ModMqttError):
    """A converter plugin could not be found or loaded."""