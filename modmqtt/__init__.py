"""Modbus register and MQTT value conversion, object state tracking and payload generation."""

__version__ = "0.1.0"