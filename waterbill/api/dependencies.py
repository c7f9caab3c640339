from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import Request

from waterbill.infrastructure.persistence.sqla import SqlTariffRepository, get_engine
from waterbill.logger import get_logger
from waterbill.settings import Settings, load_settings


@dataclass(slots=True)
class ApiContext:
    settings: Settings
    logger: Any
    tariffs: SqlTariffRepository


def build_context(settings: Settings | None = None, *, tariffs: SqlTariffRepository | None = None) -> ApiContext:
    settings = settings or load_settings()
    logger = get_logger()
    if tariffs is None:
        tariffs = SqlTariffRepository(get_engine(settings.db_path))
    return ApiContext(settings=settings, logger=logger, tariffs=tariffs)


def get_ctx(request: Request) -> ApiContext:
    return request.app.state.ctx
