from __future__ import annotations

from .engine import build_db_url, get_engine
from .repositories import SqlTariffRepository, ensure_tariffs_schema
from .session import connection_scope

__all__ = [
    "SqlTariffRepository",
    "build_db_url",
    "connection_scope",
    "ensure_tariffs_schema",
    "get_engine",
]
