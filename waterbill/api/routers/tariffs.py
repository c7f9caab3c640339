from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from waterbill.api.dependencies import ApiContext, get_ctx
from waterbill.api.schemas.common import ok
from waterbill.api.schemas.tariffs import UpsertTariffPayload
from waterbill.application.services.tariff_service import (
    get_tariff_payload,
    list_tariffs_payload,
    upsert_tariff_payload,
)
from waterbill.domain.enums import CustomerType
from waterbill.logger import current_request_id

router = APIRouter(tags=["tariffs"])

Year = Annotated[int, Path(ge=1900, le=2200)]


@router.get("/tariffs")
def get_tariffs(ctx: Annotated[ApiContext, Depends(get_ctx)]) -> dict:
    return ok(list_tariffs_payload(ctx.tariffs), request_id=current_request_id())


@router.get("/tariffs/{customer_type}/{year}")
def get_tariff(
    customer_type: CustomerType,
    year: Year,
    ctx: Annotated[ApiContext, Depends(get_ctx)],
) -> dict:
    payload = get_tariff_payload(ctx.tariffs, str(customer_type), year)
    return ok(payload, request_id=current_request_id())


@router.put("/tariffs/{customer_type}/{year}")
def put_tariff(
    customer_type: CustomerType,
    year: Year,
    payload: UpsertTariffPayload,
    ctx: Annotated[ApiContext, Depends(get_ctx)],
) -> dict:
    stored = upsert_tariff_payload(ctx.tariffs, payload.to_row(customer_type, year))
    return ok(stored, request_id=current_request_id())
