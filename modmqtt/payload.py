"""Building the MQTT state payload of an object."""

from __future__ import annotations

import math
from decimal import Decimal

from .exceptions import ModMqttProgramError, MqttPayloadConversionError
from .mqttobject import DataNode, DataNodeList, MqttObject
from .value import NO_PRECISION, MqttValue, SourceType

_DEFAULT_MAX_DECIMAL_PLACES = 324
_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _json_string(text: str) -> str:
    parts = []
    for char in text:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif char < " ":
            parts.append(f"\\u{ord(char):04X}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


def _trim_fraction(fraction: str, max_places: int) -> str:
    return fraction[:max_places].rstrip("0") or "0"


def _format_double(value: float, max_places: int) -> str:
    """Format a float as shortest digits, cut to at most max_places decimals."""
    if not math.isfinite(value):
        raise MqttPayloadConversionError(f"Cannot write {value} as JSON number")
    if value == 0:
        return "-0.0" if math.copysign(1.0, value) < 0 else "0.0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, k = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    length = len(digits)
    kk = length + k

    if k >= 0 and kk <= 21:
        text = digits + "0" * k + ".0"
    elif 0 < kk <= 21:
        fraction = digits[kk:]
        if k + max_places < 0:
            fraction = _trim_fraction(fraction, max_places)
        text = digits[:kk] + "." + fraction
    elif -6 < kk <= 0:
        fraction = "0" * -kk + digits
        if len(fraction) > max_places:
            fraction = _trim_fraction(fraction, max_places)
        text = "0." + fraction
    elif kk < -max_places:
        text = "0.0"
    elif length == 1:
        text = f"{digits}e{kk - 1}"
    else:
        text = f"{digits[0]}.{digits[1:]}e{kk - 1}"
    return sign + text


class _JsonWriter:
    """Writes values as compact JSON, keeping the decimal places setting between values."""

    def __init__(self) -> None:
        self._max_places = _DEFAULT_MAX_DECIMAL_PLACES

    def value(self, value: MqttValue) -> str:
        source = value.source_type
        if source is SourceType.INT:
            return str(value.as_int())
        if source is SourceType.INT64:
            return str(value.as_int64())
        if source is SourceType.BINARY:
            return _json_string(value.as_string())
        precision = value.precision
        if precision > 0:
            self._max_places = precision
        elif precision == NO_PRECISION:
            self._max_places = 6
        if precision == 0:
            return str(value.as_int64())
        return _format_double(value.as_double(), self._max_places)

    def node(self, node: DataNode) -> str:
        if node.is_scalar or node.has_converter:
            return self.value(node.converted_value())
        return self.nodes(node.children)

    def nodes(self, nodes: DataNodeList) -> str:
        if not nodes:
            raise ModMqttProgramError("Cannot generate payload without data nodes")
        if not nodes[0].is_unnamed:
            items = [f"{_json_string(node.name)}:{self.node(node)}" for node in nodes]
            return "{" + ",".join(items) + "}"
        if nodes.output_as_list or len(nodes) > 1:
            return "[" + ",".join(self.node(node) for node in nodes) + "]"
        return self.value(nodes[0].converted_value())


def generate(obj: MqttObject) -> str:
    """Return the state payload: a plain value for a single unnamed node, JSON otherwise."""
    nodes = obj.state.nodes
    if not nodes:
        raise ModMqttProgramError("Cannot generate payload without data nodes")
    if not nodes.output_as_list:
        single = nodes[0]
        if single.is_unnamed and (single.is_scalar or single.has_converter):
            return single.converted_value().as_string()
    return _JsonWriter().nodes(nodes)