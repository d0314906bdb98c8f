"""Process-wide default connection, initialised and torn down explicitly.

Components should receive their ``Connection`` as an argument. The registry
exists for applications that want one shared default, and it has to be
initialised before use::

    registry.init_default(Connection.from_env())
    ...
    registry.clear_default(close=True)
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlconn.connection import Connection

_default: Optional[Connection] = None
_lock = threading.Lock()


class RegistryError(RuntimeError):
    pass


def init_default(connection: Connection, replace: bool = False) -> Connection:
    global _default
    with _lock:
        if _default is not None and not replace:
            raise RegistryError("A default connection is already registered")
        _default = connection
    return connection


def has_default() -> bool:
    return _default is not None


def get_default() -> Connection:
    connection = _default
    if connection is None:
        raise RegistryError("No default connection registered; call init_default() first")
    return connection


def clear_default(close: bool = False) -> Optional[Connection]:
    global _default
    with _lock:
        connection, _default = _default, None
    if connection is not None and close:
        connection.close()
    return connection


@contextmanager
def default_connection(connection: Connection) -> Iterator[Connection]:
    init_default(connection)
    try:
        yield connection
    finally:
        clear_default()


def database_exists(name: str) -> bool:
    connection = _default
    return connection is not None and connection.database_exists(name)


def table_exists(table: str, db: Optional[str] = None) -> bool:
    connection = _default
    return connection is not None and connection.table_exists(table, db)
