from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional

from sqlconn.adapters.base import DatabaseAdapter
from sqlconn.engine import Engine
from sqlconn.types import ParamType
from sqlconn.where import quote_literal

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class SQLiteAdapter(DatabaseAdapter):
    engine = Engine.SQLITE

    def _db_path(self) -> str:
        return self.settings.dbname or MEMORY_PATH

    def build_dsn(self) -> str:
        return "sqlite:" + (self.settings.dbname or "memory:")

    def connect(self) -> sqlite3.Connection:
        path = self._db_path()
        logger.debug("Opening SQLite database %s", path)
        return sqlite3.connect(path, isolation_level=None)

    def quote(self, conn: Any, value: Any, param_type: Optional[ParamType] = None) -> str:
        return quote_literal(value, param_type)
