"""Query-Vars: named placeholders resolved in SQL text before it reaches the driver.

Query-Vars cover the query parts bind parameters cannot, such as a dynamic
sort direction or table suffix. A placeholder is written as::

    {$NAME}            value required
    {$NAME=}           value required
    {$NAME=DEFAULT}    DEFAULT used when no value is supplied

Example::

    SELECT foo, bar FROM my_table WHERE foo > ? ORDER BY foo {$ORDER_DIRECTION=ASC}

Supplied values must be strings made of ``A-Za-z0-9 \\t?_:.<=>-`` and must not
contain ``--``. They are inserted verbatim, without quoting.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from sqlconn.errors import ConnectionInfo, InvalidQueryVarValue, MissingQueryVarValue

_VALUE_CHARS = r"A-Za-z0-9 \t?_:.<=>-"
PLACEHOLDER_PATTERN = re.compile(r"\{\$([A-Za-z0-9_.-]+)((\s*=)([" + _VALUE_CHARS + r"]+)?)?\}")
VALUE_PATTERN = re.compile(r"[" + _VALUE_CHARS + r"]+")


@dataclass(frozen=True)
class Placeholder:
    name: str
    raw_default: Optional[str]
    has_equals: bool

    @property
    def default(self) -> Optional[str]:
        if self.raw_default is None:
            return None
        return self.raw_default.strip()


def is_valid_value(value: Any) -> bool:
    return isinstance(value, str) and "--" not in value and VALUE_PATTERN.fullmatch(value) is not None


def _placeholder_from_match(match: "re.Match[str]") -> Placeholder:
    return Placeholder(
        name=match.group(1),
        raw_default=match.group(4) or None,
        has_equals=match.group(3) is not None,
    )


def find_placeholders(template: str) -> List[Placeholder]:
    return [_placeholder_from_match(m) for m in PLACEHOLDER_PATTERN.finditer(template)]


def substitute_query_vars(
    template: str,
    query_vars: Optional[Mapping[str, Any]] = None,
    info: Optional[ConnectionInfo] = None,
) -> str:
    """Replace every placeholder in *template*.

    A supplied value wins over the template default. A placeholder with
    neither raises ``MissingQueryVarValue``. A supplied value outside the
    allowed grammar raises ``InvalidQueryVarValue``.
    """
    values = query_vars or {}

    def _replace(match: "re.Match[str]") -> str:
        placeholder = _placeholder_from_match(match)
        if placeholder.name in values:
            value = values[placeholder.name]
            if not is_valid_value(value):
                raise InvalidQueryVarValue(placeholder.name, template, info)
            return value
        if placeholder.default is None:
            raise MissingQueryVarValue(placeholder.name, template, info)
        return placeholder.default

    return PLACEHOLDER_PATTERN.sub(_replace, template)


@dataclass(frozen=True)
class QueryTemplate:
    sql: str

    @property
    def placeholders(self) -> List[Placeholder]:
        return find_placeholders(self.sql)

    def render(self, query_vars: Optional[Mapping[str, Any]] = None, info: Optional[ConnectionInfo] = None) -> str:
        return substitute_query_vars(self.sql, query_vars, info)

    def __str__(self) -> str:
        return self.sql
