from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union


class FetchStyle(str, Enum):
    """Shape of the rows returned by the fetch helpers."""

    ASSOC = "assoc"  # dict keyed by column name
    NUM = "num"  # tuple indexed by column position


class ParamType(str, Enum):
    """Explicit value type used when quoting a literal into SQL text."""

    STR = "str"
    INT = "int"
    BOOL = "bool"
    NULL = "null"


def coerce_value(value: Any, param_type: Optional[Union[ParamType, str]] = None) -> Any:
    if param_type is None:
        return value
    kind = ParamType(param_type)
    if kind is ParamType.NULL:
        return None
    if kind is ParamType.INT:
        return int(value)
    if kind is ParamType.BOOL:
        return bool(value)
    return "" if value is None else str(value)
