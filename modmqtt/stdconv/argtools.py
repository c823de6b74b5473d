"""Reading byte and register order arguments shared by several converters."""

from __future__ import annotations

import logging

from ..convargs import ConverterArg, ConverterArgValues
from ..exceptions import ConvError

_log = logging.getLogger(__name__)


def get_swap_bytes(values: ConverterArgValues) -> bool:
    """Return the swap_bytes flag, accepting the older 'swap_bytes' spelling."""
    arg = values[ConverterArg.SWAP_BYTES]
    try:
        return arg.as_bool()
    except ConvError:
        old = arg.as_str()
        if old == "":
            result = False
        elif old == "swap_bytes":
            result = True
        else:
            raise
    _log.warning("swap_bytes param changed to bool, please update to 'swap_bytes=true'")
    return result


def get_low_first(values: ConverterArgValues) -> bool:
    """Return the low_first flag, accepting the older 'low_first'/'high_first' spelling."""
    arg = values[ConverterArg.LOW_FIRST]
    try:
        return arg.as_bool()
    except ConvError:
        old = arg.as_str()
        if old in ("", "high_first"):
            result = False
        elif old == "low_first":
            result = True
        else:
            raise
    _log.warning(
        "low_first/high_first param changed to bool, please update to 'low_first=true|false'"
    )
    return result