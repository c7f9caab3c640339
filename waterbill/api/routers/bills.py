from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from waterbill.api.dependencies import ApiContext, get_ctx
from waterbill.api.schemas.bills import CalculateBillPayload
from waterbill.api.schemas.common import ok
from waterbill.application.services.billing_service import calculate_bill
from waterbill.domain.errors import NotFoundError
from waterbill.logger import current_request_id

router = APIRouter(tags=["bills"])


@router.post("/bills/calculate")
def calculate(
    payload: CalculateBillPayload,
    ctx: Annotated[ApiContext, Depends(get_ctx)],
) -> dict:
    outcome = calculate_bill(
        ctx.tariffs,
        payload.to_input(),
        prior_balance=payload.prior_balance,
        due_days=ctx.settings.due_days,
    )
    diagnostic = outcome.diagnostics.to_payload()
    if not outcome.diagnostics.tariff_found:
        raise NotFoundError(
            f"no tariff for {payload.customer_type} in {outcome.diagnostics.year}",
            details={"diagnostic": diagnostic},
        )
    return ok({"bill": outcome.bill.to_payload(), "diagnostic": diagnostic}, request_id=current_request_id())
