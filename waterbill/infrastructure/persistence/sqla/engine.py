from __future__ import annotations

import atexit
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

_ENGINE_CACHE: dict[str, Engine] = {}


def build_db_url(target: Path | str) -> str:
    """Accept either a full SQLAlchemy URL or a filesystem path to a SQLite file."""
    if isinstance(target, str) and "://" in target:
        return target
    return f"sqlite+pysqlite:///{Path(target)}"


def _cache_key(target: Path | str) -> str:
    if isinstance(target, str) and "://" in target:
        return target
    return str(Path(target).resolve())


def get_engine(target: Path | str) -> Engine:
    key = _cache_key(target)
    engine = _ENGINE_CACHE.get(key)
    if engine is not None:
        return engine

    url = build_db_url(target)
    if url.startswith("sqlite"):
        if url != target:
            Path(target).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(url, future=True, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(url, future=True, pool_pre_ping=True)
    _ENGINE_CACHE[key] = engine
    return engine


def dispose_engine(target: Path | str) -> None:
    engine = _ENGINE_CACHE.pop(_cache_key(target), None)
    if engine is not None:
        engine.dispose()


def dispose_all_engines() -> None:
    for key, engine in list(_ENGINE_CACHE.items()):
        engine.dispose()
        _ENGINE_CACHE.pop(key, None)


atexit.register(dispose_all_engines)
