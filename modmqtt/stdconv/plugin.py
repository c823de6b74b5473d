"""The standard converter plugin."""

from __future__ import annotations

from collections.abc import Callable

from ..converter import ConverterPlugin, DataConverter
from .bits import BitConverter, BitmaskConverter
from .floats import DivideConverter, FloatConverter, MultiplyConverter, ScaleConverter
from .integers import (
    Int8Converter,
    Int16Converter,
    Int32Converter,
    UInt8Converter,
    UInt16Converter,
    UInt32Converter,
)
from .mapping import MapConverter
from .text import StringConverter

_CONVERTERS: dict[str, Callable[[], DataConverter]] = {
    "bit": BitConverter,
    "bitmask": BitmaskConverter,
    "divide": DivideConverter,
    "multiply": MultiplyConverter,
    "int32": Int32Converter,
    "scale": ScaleConverter,
    "string": StringConverter,
    "int16": Int16Converter,
    "uint16": UInt16Converter,
    "uint32": UInt32Converter,
    "float32": FloatConverter,
    "int8": Int8Converter,
    "uint8": UInt8Converter,
    "map": MapConverter,
}


class StdConvPlugin(ConverterPlugin):
    """Provides the built-in converters under the name 'std'."""

    def name(self) -> str:
        return "std"

    def get_converter(self, name: str) -> DataConverter | None:
        factory = _CONVERTERS.get(name)
        return factory() if factory is not None else None