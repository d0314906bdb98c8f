from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from sqlconn.engine import Engine

_CHARSET_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

Query = Tuple[str, Tuple[Any, ...]]


@dataclass(frozen=True)
class SQLDialect:
    engine: Engine
    placeholder: str

    def render_set_charset(self, charset: str) -> Optional[str]:
        if self.engine is Engine.SQLITE:
            return None
        if not _CHARSET_PATTERN.fullmatch(charset or ""):
            raise ValueError(f"Invalid charset name: {charset!r}")
        if self.engine is Engine.PGSQL:
            return f"set client_encoding to {charset}"
        return f"SET NAMES {charset}"

    def render_database_exists(self, name: str) -> Optional[Query]:
        p = self.placeholder
        if self.engine is Engine.PGSQL:
            return f"SELECT EXISTS (SELECT true FROM pg_database WHERE datname = {p})", (name,)
        if self.engine is Engine.MYSQL:
            return f"SELECT SCHEMA_NAME FROM information_schema.SCHEMATA WHERE SCHEMA_NAME = {p}", (name,)
        return None

    def render_table_exists(self, table: str, database: str) -> Query:
        p = self.placeholder
        if self.engine is Engine.PGSQL:
            return (
                f"""
                SELECT EXISTS (
                    SELECT true
                    FROM information_schema.tables
                    WHERE table_name = {p}
                      AND table_catalog = {p}
                )
                """,
                (table, database),
            )
        if self.engine is Engine.MYSQL:
            return (
                f"""
                SELECT COUNT(*)
                FROM information_schema.TABLES
                WHERE TABLE_SCHEMA = {p}
                  AND TABLE_NAME = {p}
                """,
                (database, table),
            )
        return (
            f"""
            SELECT COUNT(*)
            FROM sqlite_master
            WHERE type = 'table'
              AND name = {p}
            """,
            (table,),
        )


def get_sql_dialect(db_engine: "Engine | str") -> SQLDialect:
    engine = Engine.parse(db_engine)
    if engine is Engine.SQLITE:
        return SQLDialect(engine=engine, placeholder="?")
    return SQLDialect(engine=engine, placeholder="%s")
