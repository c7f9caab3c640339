from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env(key: str, default: str | None = None, *, legacy: tuple[str, ...] = ()) -> str | None:
    """
    Read an env var with optional legacy fallbacks.

    Empty strings count as "unset" so an exported-but-blank variable does not
    override the default.
    """
    for k in (key, *legacy):
        v = os.environ.get(k)
        if v is not None and str(v).strip() != "":
            return v
    return default


def _parse_bool(v: str | None, default: bool) -> bool:
    if v is None:
        return default
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_int(v: str | None, default: int) -> int:
    if v is None:
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    log_level: str
    log_json: bool
    log_path: str | None
    log_rotation_mb: int
    log_retention_days: int
    db_path: Path
    due_days: int


def load_settings() -> Settings:
    host = _env("WATERBILL_HOST", "127.0.0.1", legacy=("BILLING_HOST",)) or "127.0.0.1"
    port = _parse_int(_env("WATERBILL_PORT", "8000", legacy=("BILLING_PORT",)), 8000)

    log_level = (_env("WATERBILL_LOG_LEVEL", "INFO", legacy=("BILLING_LOG_LEVEL",)) or "INFO").upper()
    log_json = _parse_bool(_env("WATERBILL_LOG_JSON", None), False)
    log_path = _env("WATERBILL_LOG_PATH", None)
    log_rotation_mb = max(1, _parse_int(_env("WATERBILL_LOG_ROTATION_MB", "20"), 20))
    log_retention_days = max(1, _parse_int(_env("WATERBILL_LOG_RETENTION_DAYS", "14"), 14))

    db_path = Path(_env("WATERBILL_DB_PATH", "data/waterbill.sqlite3") or "data/waterbill.sqlite3")

    due_days = _parse_int(_env("WATERBILL_DUE_DAYS", "15"), 15)
    if due_days < 0:
        # A negative offset would put the due date inside the billing period.
        due_days = 15

    return Settings(
        host=host,
        port=port,
        log_level=log_level,
        log_json=log_json,
        log_path=log_path,
        log_rotation_mb=log_rotation_mb,
        log_retention_days=log_retention_days,
        db_path=db_path,
        due_days=due_days,
    )
