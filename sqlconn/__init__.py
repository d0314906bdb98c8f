"""sqlconn: DB-API connections for PostgreSQL, MySQL and SQLite with Query-Vars templating."""

from sqlconn.config import ConnectionSettings, settings_from_env
from sqlconn.connection import Connection
from sqlconn.engine import DEFAULT_PORTS, KNOWN_ENGINES, Engine
from sqlconn.errors import (
    ConnectionInfo,
    DatabaseError,
    DBConnectionError,
    InvalidQueryVarValue,
    MissingQueryVarValue,
    QueryError,
)
from sqlconn.query_vars import Placeholder, QueryTemplate, find_placeholders, substitute_query_vars
from sqlconn.types import FetchStyle, ParamType
from sqlconn.where import ColumnWhere, Condition, OrWhere, RawWhere, format_where

__version__ = "0.1.1"

__all__ = [
    "ColumnWhere",
    "Condition",
    "Connection",
    "ConnectionInfo",
    "ConnectionSettings",
    "DBConnectionError",
    "DEFAULT_PORTS",
    "DatabaseError",
    "Engine",
    "FetchStyle",
    "InvalidQueryVarValue",
    "KNOWN_ENGINES",
    "MissingQueryVarValue",
    "OrWhere",
    "ParamType",
    "Placeholder",
    "QueryError",
    "QueryTemplate",
    "RawWhere",
    "find_placeholders",
    "format_where",
    "settings_from_env",
    "substitute_query_vars",
]
