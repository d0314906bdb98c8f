from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from sqlconn.engine import DEFAULT_PORTS, Engine
from sqlconn.errors import ConnectionInfo
from sqlconn.utils.env_loader import env_flag, env_int, load_environments


@dataclass(frozen=True)
class ConnectionSettings:
    engine: Engine
    host: str = ""
    dbname: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    charset: str = "UTF8"
    port: Optional[int] = None
    always_parse_query_vars: bool = True

    @property
    def effective_port(self) -> int:
        return self.port or DEFAULT_PORTS[self.engine]

    def info(self) -> ConnectionInfo:
        return ConnectionInfo(
            engine=self.engine.value,
            host=self.host,
            dbname=self.dbname,
            port=self.port,
            charset=self.charset,
            has_username=bool(self.username),
            has_password=bool(self.password),
        )


def settings_from_env(env_path: str = ".env") -> ConnectionSettings:
    load_environments(env_path)
    engine = Engine.parse(os.getenv("DB_ENGINE", "pgsql"))
    charset = os.getenv("DB_CHARSET", "UTF8")
    always_parse = env_flag("DB_ALWAYS_PARSE_QUERY_VARS", True)

    if engine is Engine.SQLITE:
        return ConnectionSettings(
            engine=engine,
            dbname=os.getenv("SQLITE_DB_PATH") or os.getenv("DB_NAME", ""),
            charset=charset,
            always_parse_query_vars=always_parse,
        )

    host = os.getenv("DB_HOST")
    dbname = os.getenv("DB_NAME")
    if not host:
        raise ValueError("DB_HOST is required")
    if not dbname:
        raise ValueError("DB_NAME is required")
    return ConnectionSettings(
        engine=engine,
        host=host,
        dbname=dbname,
        username=os.getenv("DB_USER", ""),
        password=os.getenv("DB_PASSWORD", ""),
        charset=charset,
        port=env_int("DB_PORT"),
        always_parse_query_vars=always_parse,
    )
