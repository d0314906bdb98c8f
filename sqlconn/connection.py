"""PostgreSQL, MySQL or SQLite connection with Query-Vars and fetch helpers.

The connection wraps a DB-API driver connection opened through the matching
adapter. Every helper takes SQL, optional bind parameters and optional
Query-Vars::

    with Connection.create_sqlite() as conn:
        rows = conn.fetch_all(
            "SELECT foo, bar FROM my_table WHERE foo > ? ORDER BY foo {$ORDER_DIRECTION=ASC}",
            [0],
            query_vars={"ORDER_DIRECTION": "DESC"},
        )

Bind parameters use the driver's paramstyle: ``?`` for SQLite and ``%s`` for
PostgreSQL and MySQL.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any, List, Mapping, Optional, Sequence, Union

from sqlconn.adapters.base import AdapterError
from sqlconn.adapters.factory import get_adapter
from sqlconn.config import ConnectionSettings, settings_from_env
from sqlconn.engine import Engine
from sqlconn.errors import ConnectionInfo, DBConnectionError, QueryError
from sqlconn.query_vars import substitute_query_vars
from sqlconn.types import FetchStyle, ParamType
from sqlconn.where import WhereSpec, format_where

logger = logging.getLogger(__name__)

BindParams = Optional[Union[Sequence[Any], Mapping[str, Any]]]
QueryVars = Optional[Mapping[str, str]]
Row = Union[dict, tuple]

_LIMIT_PATTERN = re.compile(r"\s+LIMIT\s\d+", re.IGNORECASE)
_DATABASE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z_0-9]*")
_TABLE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z_0-9.-]*")


def _shape_rows(rows: Sequence[Any], columns: List[str], fetch_style: FetchStyle) -> List[Row]:
    if FetchStyle(fetch_style) is FetchStyle.NUM:
        return [tuple(row) for row in rows]
    return [{columns[i]: row[i] for i in range(len(columns))} for row in rows]


def _limit_one(sql: str) -> str:
    if _LIMIT_PATTERN.search(sql):
        return sql
    return sql.rstrip().rstrip(";").rstrip() + " LIMIT 1"


class Connection:
    """A single driver connection. Not safe for concurrent use across threads."""

    def __init__(
        self,
        engine: Union[Engine, str],
        host: str = "",
        dbname: str = "",
        username: str = "",
        password: str = "",
        charset: str = "UTF8",
        port: Optional[int] = None,
        *,
        always_parse_query_vars: bool = True,
        driver: Any = None,
    ):
        try:
            parsed_engine = Engine.parse(engine)
        except ValueError as exc:
            info = ConnectionInfo(
                engine=str(engine),
                host=host,
                dbname=dbname,
                port=port,
                charset=charset,
                has_username=bool(username),
                has_password=bool(password),
            )
            raise DBConnectionError(info, "Connection init fails!") from exc

        self._settings = ConnectionSettings(
            engine=parsed_engine,
            host=host,
            dbname=dbname,
            username=username,
            password=password,
            charset=charset,
            port=port,
            always_parse_query_vars=always_parse_query_vars,
        )
        try:
            self._adapter = get_adapter(self._settings)
        except AdapterError as exc:
            raise DBConnectionError(self.info, "Connection init fails!") from exc
        self._driver = driver if driver is not None else self._open()

    def _open(self) -> Any:
        try:
            driver = self._adapter.connect()
        except Exception as exc:
            raise DBConnectionError(self.info, "Connection init fails!") from exc
        try:
            self._adapter.apply_charset(driver, self._settings.charset)
        except Exception as exc:
            driver.close()
            raise DBConnectionError(self.info, "Setting the connection charset fails!") from exc
        logger.info("Opened %s connection %s", self._settings.engine.value, self.dsn)
        return driver

    @classmethod
    def from_settings(cls, settings: ConnectionSettings, driver: Any = None) -> "Connection":
        return cls(
            settings.engine,
            settings.host,
            settings.dbname,
            settings.username,
            settings.password,
            settings.charset,
            settings.port,
            always_parse_query_vars=settings.always_parse_query_vars,
            driver=driver,
        )

    @classmethod
    def from_env(cls, env_path: str = ".env") -> "Connection":
        return cls.from_settings(settings_from_env(env_path))

    @classmethod
    def create_pgsql(
        cls,
        host: str,
        dbname: str,
        username: str,
        password: str,
        charset: str = "UTF8",
        port: Optional[int] = 5432,
    ) -> "Connection":
        return cls(Engine.PGSQL, host, dbname, username, password, charset, port)

    @classmethod
    def create_mysql(
        cls,
        host: str,
        dbname: str,
        username: str,
        password: str,
        charset: str = "UTF8",
        port: Optional[int] = 3306,
    ) -> "Connection":
        return cls(Engine.MYSQL, host, dbname, username, password, charset, port)

    @classmethod
    def create_sqlite(cls, path: str = "") -> "Connection":
        """Open a SQLite database file, or an in-memory database when *path* is empty."""
        return cls(Engine.SQLITE, "", path, "", "")

    # --- settings -------------------------------------------------------

    @property
    def settings(self) -> ConnectionSettings:
        return self._settings

    @property
    def info(self) -> ConnectionInfo:
        return self._settings.info()

    @property
    def engine(self) -> Engine:
        return self._settings.engine

    @property
    def host(self) -> str:
        return self._settings.host

    @property
    def database_name(self) -> str:
        return self._settings.dbname

    @property
    def username(self) -> str:
        return self._settings.username

    @property
    def charset(self) -> str:
        return self._settings.charset

    @property
    def dsn(self) -> str:
        return self._adapter.build_dsn()

    @property
    def driver(self) -> Any:
        return self._driver

    def get_port(self) -> int:
        """Configured port, or the engine default (pgsql 5432, mysql 3306, sqlite 0)."""
        return self._settings.effective_port

    def set_connection_charset(self, charset: str = "utf8") -> bool:
        current = self._settings
        if current.engine is Engine.SQLITE or current.charset.lower() == charset.lower():
            return True
        cur = self._live_driver().cursor()
        try:
            cur.execute(self._adapter.dialect.render_set_charset(charset))
        except Exception:
            logger.warning("Changing %s connection charset to %s failed", current.engine.value, charset, exc_info=True)
            return False
        finally:
            cur.close()
        self._settings = replace(current, charset=charset)
        return True

    # --- query helpers --------------------------------------------------

    def _live_driver(self) -> Any:
        if self._driver is None:
            raise DBConnectionError(self.info, "Connection is closed")
        return self._driver

    def _rewrite(self, sql: str, query_vars: QueryVars) -> str:
        if not query_vars and not self._settings.always_parse_query_vars:
            return sql
        rewritten = substitute_query_vars(sql, query_vars, self.info)
        if rewritten != sql:
            logger.debug("Query-Vars rewrote SQL to: %s", rewritten)
        return rewritten

    def _run(self, cur: Any, sql: str, bind_params: BindParams) -> None:
        logger.debug("Executing SQL: %s", sql)
        if bind_params:
            cur.execute(sql, bind_params)
        else:
            cur.execute(sql)

    def _fetch_rows(self, sql: str, bind_params: BindParams, fetch_style: FetchStyle) -> List[Row]:
        cur = self._live_driver().cursor()
        try:
            self._run(cur, sql, bind_params)
            rows = cur.fetchall()
            columns = [desc[0] for desc in cur.description or ()]
        except Exception as exc:
            raise QueryError(self.info, sql, str(exc)) from exc
        finally:
            cur.close()
        return _shape_rows(rows, columns, fetch_style)

    def fetch_all(
        self,
        sql: str,
        bind_params: BindParams = None,
        fetch_style: FetchStyle = FetchStyle.ASSOC,
        query_vars: QueryVars = None,
    ) -> Optional[List[Row]]:
        """Return every row, or ``None`` if the query found nothing."""
        rows = self._fetch_rows(self._rewrite(sql, query_vars), bind_params, fetch_style)
        return rows or None

    def fetch_record(
        self,
        sql: str,
        bind_params: BindParams = None,
        fetch_style: FetchStyle = FetchStyle.ASSOC,
        query_vars: QueryVars = None,
    ) -> Optional[Row]:
        """Return the first row, or ``None``. Adds ``LIMIT 1`` unless a LIMIT is present."""
        rows = self._fetch_rows(_limit_one(self._rewrite(sql, query_vars)), bind_params, fetch_style)
        return rows[0] if rows else None

    def fetch_scalar(
        self,
        sql: str,
        bind_params: BindParams = None,
        default: Any = None,
        query_vars: QueryVars = None,
    ) -> Any:
        row = self.fetch_record(sql, bind_params, FetchStyle.NUM, query_vars)
        if not row:
            return default
        return row[0]

    def execute(self, sql: str, bind_params: BindParams = None, query_vars: QueryVars = None) -> int:
        """Run a statement and return the driver row count."""
        rewritten = self._rewrite(sql, query_vars)
        cur = self._live_driver().cursor()
        try:
            self._run(cur, rewritten, bind_params)
            return cur.rowcount
        except Exception as exc:
            raise QueryError(self.info, rewritten, str(exc)) from exc
        finally:
            cur.close()

    def quote(self, value: Any, param_type: Optional[ParamType] = None) -> str:
        return self._adapter.quote(self._live_driver(), value, param_type)

    def format_where(self, where: Optional[WhereSpec]) -> str:
        placeholders = tuple(dict.fromkeys(("?", self._adapter.dialect.placeholder)))
        return format_where(where, self.quote, placeholders)

    def count(self, table: str, where: Optional[WhereSpec] = None, bindings: BindParams = None) -> int:
        # the WHERE text holds quoted caller data, so Query-Vars are not applied
        sql = f"SELECT COUNT(*) AS cnt FROM {table}" + self.format_where(where)
        rows = self._fetch_rows(_limit_one(sql), bindings, FetchStyle.NUM)
        return int(rows[0][0] or 0) if rows else 0

    # --- existence checks -----------------------------------------------

    def database_exists(self, name: str) -> bool:
        if self._settings.engine is Engine.SQLITE or not _DATABASE_NAME_PATTERN.fullmatch(name):
            return False
        sql, params = self._adapter.dialect.render_database_exists(name)
        if self._settings.engine is Engine.PGSQL:
            return bool(self.fetch_scalar(sql, params, False))
        return self.fetch_scalar(sql, params) is not None

    def table_exists(self, table: str, db: Optional[str] = None) -> bool:
        if not _TABLE_NAME_PATTERN.fullmatch(table):
            return False
        sql, params = self._adapter.dialect.render_table_exists(table, db or self._settings.dbname)
        if self._settings.engine is Engine.PGSQL:
            return bool(self.fetch_scalar(sql, params, False))
        return int(self.fetch_scalar(sql, params, 0) or 0) > 0

    # --- lifecycle ------------------------------------------------------

    def close(self) -> None:
        if self._driver is None:
            return
        self._driver.close()
        self._driver = None
        logger.info("Closed %s connection %s", self._settings.engine.value, self.dsn)

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Connection({self.dsn})"
