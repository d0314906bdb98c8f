from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ConnectionInfo:
    """Non-secret connection settings attached to every error.

    Credentials are reduced to presence flags so messages can be logged safely.
    """

    engine: str
    host: str = ""
    dbname: str = ""
    port: Optional[int] = None
    charset: str = ""
    has_username: bool = False
    has_password: bool = False

    def describe(self) -> str:
        port = f"; port={self.port}" if self.port else ""
        charset = f"; charset={self.charset}" if self.charset else ""
        return (
            f"{self.engine.capitalize()} connection error "
            f"(host={self.host}{port}; dbname={self.dbname}; "
            f"user={_flag(self.has_username)}; password={_flag(self.has_password)}{charset})"
        )


def _flag(defined: bool) -> str:
    return "[defined]" if defined else "[undefined]"


class DatabaseError(RuntimeError):
    def __init__(self, info: Optional[ConnectionInfo], message: Optional[str] = None):
        self.info = info
        self.detail = message
        parts = []
        if info is not None:
            parts.append(info.describe())
        if message:
            parts.append(message)
        super().__init__(": ".join(parts) or "database error")


class DBConnectionError(DatabaseError):
    """Opening the driver connection or applying its charset failed."""


class QueryError(DBConnectionError):
    def __init__(self, info: Optional[ConnectionInfo], sql: str, message: Optional[str] = None):
        self.sql = sql
        detail = f"ERROR-QUERY: {sql}"
        if message:
            detail = f"{detail}: {message}"
        super().__init__(info, detail)


class InvalidQueryVarValue(QueryError):
    def __init__(self, name: str, sql: str, info: Optional[ConnectionInfo] = None):
        self.name = name
        super().__init__(info, sql, f'The query variable "{name}" defines a value with invalid format')


class MissingQueryVarValue(QueryError):
    def __init__(self, name: str, sql: str, info: Optional[ConnectionInfo] = None):
        self.name = name
        super().__init__(
            info,
            sql,
            f'The query declares the query variable placeholder "{name}" '
            "without default value and without an assigned replacement value",
        )
