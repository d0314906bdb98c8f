from __future__ import annotations

from sqlconn.adapters.base import AdapterError, DatabaseAdapter
from sqlconn.adapters.mysql import MySQLAdapter
from sqlconn.adapters.postgres import PostgresAdapter
from sqlconn.adapters.sqlite import SQLiteAdapter
from sqlconn.config import ConnectionSettings
from sqlconn.engine import Engine

_ADAPTERS = {
    Engine.PGSQL: PostgresAdapter,
    Engine.MYSQL: MySQLAdapter,
    Engine.SQLITE: SQLiteAdapter,
}


def get_adapter(settings: ConnectionSettings) -> DatabaseAdapter:
    adapter_cls = _ADAPTERS.get(settings.engine)
    if adapter_cls is None:
        raise AdapterError(f"Unsupported db_engine: {settings.engine}")
    return adapter_cls(settings)
