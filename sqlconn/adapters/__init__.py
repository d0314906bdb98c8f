"""Per-engine driver adapters: DSN text, driver connect, charset and literal quoting."""

from sqlconn.adapters.factory import get_adapter

__all__ = ["get_adapter"]
