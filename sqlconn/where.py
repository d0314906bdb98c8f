"""WHERE-clause fragments for the ``count`` helper.

The caller picks the shape explicitly:

* ``RawWhere("status = 'x'")``: text used as-is, ``WHERE`` added if missing.
* ``OrWhere(["a=1", "b=2"])``: conditions joined with ``OR``.
* ``ColumnWhere({"col": Condition(value, type, combinator)})``: one
  ``(col=value)`` per column, values quoted through the driver.

Column names are written into the SQL text verbatim and must be trusted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from sqlconn.types import ParamType, coerce_value

Quoter = Callable[[Any, Optional[ParamType]], str]

_COMBINATORS = {"AND", "OR"}


@dataclass(frozen=True)
class RawWhere:
    text: str


@dataclass(frozen=True)
class OrWhere:
    conditions: Sequence[str]


@dataclass(frozen=True)
class Condition:
    value: Any
    type: Optional[Union[ParamType, str]] = None
    combinator: Optional[str] = None


@dataclass(frozen=True)
class ColumnWhere:
    columns: Mapping[str, Any]


WhereSpec = Union[RawWhere, OrWhere, ColumnWhere]


def quote_literal(value: Any, param_type: Optional[ParamType] = None) -> str:
    """Render *value* as a standard SQL literal (single quotes doubled)."""
    value = coerce_value(value, param_type)
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"X'{bytes(value).hex()}'"
    return "'" + str(value).replace("'", "''") + "'"


def as_condition(entry: Any) -> Condition:
    if isinstance(entry, Condition):
        return entry
    if isinstance(entry, (list, tuple)):
        if not 1 <= len(entry) <= 3:
            raise ValueError(f"Column condition must have 1 to 3 items, got {len(entry)}")
        return Condition(*entry)
    return Condition(entry)


def _combinator(condition: Condition) -> str:
    if condition.combinator is None:
        return "OR"
    keyword = condition.combinator.strip().upper()
    if keyword not in _COMBINATORS:
        raise ValueError(f"Unsupported WHERE combinator: {condition.combinator!r}")
    return keyword


def _render_value(condition: Condition, quote: Quoter, placeholders: Iterable[str]) -> str:
    value = condition.value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    # equality check against the bind marker, the marker itself stays unquoted
    if isinstance(value, str) and value in placeholders:
        return value
    param_type = ParamType(condition.type) if condition.type is not None else None
    return quote(value, param_type)


def _format_columns(columns: Mapping[str, Any], quote: Quoter, placeholders: Sequence[str]) -> str:
    parts = []
    for index, (column, entry) in enumerate(columns.items()):
        condition = as_condition(entry)
        combinator = _combinator(condition)
        if index > 0:
            parts.append(f" {combinator} ")
        parts.append(f"({column}={_render_value(condition, quote, placeholders)})")
    return "".join(parts)


def format_where(
    spec: Optional[WhereSpec],
    quote: Quoter = quote_literal,
    placeholders: Sequence[str] = ("?",),
) -> str:
    if spec is None:
        return ""
    if isinstance(spec, RawWhere):
        text = spec.text.strip()
        if not text:
            return ""
        if text[:6].lower() == "where ":
            return f" {text}"
        return f" WHERE {text}"
    if isinstance(spec, OrWhere):
        conditions = list(spec.conditions)
        if not conditions:
            return ""
        return " WHERE " + " OR ".join(conditions)
    if isinstance(spec, ColumnWhere):
        if not spec.columns:
            return ""
        return " WHERE " + _format_columns(spec.columns, quote, tuple(placeholders))
    raise TypeError(f"Unsupported WHERE spec: {type(spec).__name__}")
