from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlconn.adapters.base import DatabaseAdapter, server_dsn
from sqlconn.engine import Engine
from sqlconn.types import ParamType, coerce_value

logger = logging.getLogger(__name__)


def _is_psycopg2(conn: Any) -> bool:
    return type(conn).__module__.startswith("psycopg2")


class PostgresAdapter(DatabaseAdapter):
    engine = Engine.PGSQL

    def build_dsn(self) -> str:
        return server_dsn("pgsql", self.settings)

    def _db_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "host": self.settings.host,
            "port": self.settings.effective_port,
        }
        if self.settings.dbname:
            params["dbname"] = self.settings.dbname
        if self.settings.username:
            params["user"] = self.settings.username
        if self.settings.password:
            params["password"] = self.settings.password
        return params

    def connect(self):
        params = self._db_params()
        try:
            import psycopg  # type: ignore

            logger.debug("Opening PostgreSQL connection via psycopg to %s", params["host"])
            return psycopg.connect(autocommit=True, **params)
        except ImportError:
            try:
                import psycopg2  # type: ignore
            except ImportError as exc:
                raise ImportError(
                    "No PostgreSQL driver found. Install one of: "
                    '`python -m pip install "psycopg[binary]"` or `python -m pip install psycopg2-binary`.'
                ) from exc
            logger.debug("Opening PostgreSQL connection via psycopg2 to %s", params["host"])
            conn = psycopg2.connect(**params)
            conn.autocommit = True
            return conn

    def quote(self, conn: Any, value: Any, param_type: Optional[ParamType] = None) -> str:
        value = coerce_value(value, param_type)
        if _is_psycopg2(conn):
            from psycopg2.extensions import adapt  # type: ignore

            adapted = adapt(value)
            if hasattr(adapted, "prepare"):
                adapted.prepare(conn)
            quoted = adapted.getquoted()
            return quoted.decode("utf-8") if isinstance(quoted, bytes) else quoted
        from psycopg import sql  # type: ignore

        return sql.Literal(value).as_string(conn)

