from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlconn.adapters.base import DatabaseAdapter, server_dsn
from sqlconn.engine import Engine
from sqlconn.types import ParamType, coerce_value

logger = logging.getLogger(__name__)


class MySQLAdapter(DatabaseAdapter):
    engine = Engine.MYSQL

    def build_dsn(self) -> str:
        return server_dsn("mysql", self.settings)

    def _db_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "host": self.settings.host,
            "port": self.settings.effective_port,
            "user": self.settings.username,
            "password": self.settings.password,
            "autocommit": True,
        }
        if self.settings.dbname:
            params["database"] = self.settings.dbname
        statement = self.dialect.render_set_charset(self.settings.charset) if self.settings.charset else None
        if statement:
            params["init_command"] = statement
        return params

    def connect(self):
        params = self._db_params()
        try:
            import pymysql  # type: ignore
        except ImportError as exc:
            raise ImportError("No MySQL driver found. Install it with `python -m pip install pymysql`.") from exc
        logger.debug("Opening MySQL connection via pymysql to %s", params["host"])
        return pymysql.connect(**params)

    def apply_charset(self, conn: Any, charset: str) -> None:
        # sent as init_command on connect
        return None

    def quote(self, conn: Any, value: Any, param_type: Optional[ParamType] = None) -> str:
        return conn.escape(coerce_value(value, param_type))
