from __future__ import annotations

from enum import Enum
from typing import Dict


class Engine(str, Enum):
    MYSQL = "mysql"
    PGSQL = "pgsql"
    SQLITE = "sqlite"

    @classmethod
    def parse(cls, value: "Engine | str") -> "Engine":
        if isinstance(value, Engine):
            return value
        normalized = (value or "").strip().lower()
        if normalized in {"postgres", "postgresql"}:
            return cls.PGSQL
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unsupported db engine: {value!r}") from None


KNOWN_ENGINES = tuple(Engine)

DEFAULT_PORTS: Dict[Engine, int] = {
    Engine.PGSQL: 5432,
    Engine.MYSQL: 3306,
    Engine.SQLITE: 0,
}
