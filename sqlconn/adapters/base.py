from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlconn.adapters.sql_renderer import SQLDialect, get_sql_dialect
from sqlconn.config import ConnectionSettings
from sqlconn.engine import Engine
from sqlconn.types import ParamType


class AdapterError(RuntimeError):
    pass


def server_dsn(prefix: str, settings: ConnectionSettings) -> str:
    dsn = f"{prefix}:host={settings.host}"
    if settings.dbname:
        dsn += f";dbname={settings.dbname}"
    if isinstance(settings.port, int) and settings.port:
        dsn += f";port={settings.port}"
    return dsn


class DatabaseAdapter(ABC):
    engine: Engine

    def __init__(self, settings: ConnectionSettings):
        self.settings = settings

    @property
    def dialect(self) -> SQLDialect:
        return get_sql_dialect(self.engine)

    @abstractmethod
    def build_dsn(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def connect(self) -> Any:
        """Open an autocommit DB-API connection for the configured settings."""
        raise NotImplementedError

    def apply_charset(self, conn: Any, charset: str) -> None:
        statement = self.dialect.render_set_charset(charset) if charset else None
        if statement is None:
            return
        cur = conn.cursor()
        try:
            cur.execute(statement)
        finally:
            cur.close()

    @abstractmethod
    def quote(self, conn: Any, value: Any, param_type: Optional[ParamType] = None) -> str:
        raise NotImplementedError
