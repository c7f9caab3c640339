"""batch: price a CSV of meter readings against the stored tariffs.

Input columns:
- `account_id`, `usage_m3`, `customer_type`, `sewerage_connection`,
  `meter_size`, `billing_month` (YYYY-MM), optional `prior_balance`

Output: one row per reading with every charge component and a `status`
(`ok`, `no_tariff`, `invalid`, `tariff_error`). Rows are priced independently;
a bad row never stops the run.

Example:
- `python -m waterbill.batch --readings readings.csv --out output/bills.csv`
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from waterbill.api.schemas.bills import CalculateBillPayload
from waterbill.application.services.billing_service import calculate_bill
from waterbill.billing.assembler import DEFAULT_DUE_DAYS
from waterbill.domain.errors import TariffConfigurationError
from waterbill.domain.ports.tariff_repository import TariffRepositoryPort
from waterbill.infrastructure.persistence.sqla import SqlTariffRepository, get_engine
from waterbill.logger import get_logger
from waterbill.settings import load_settings

READING_REQUIRED = [
    "account_id",
    "usage_m3",
    "customer_type",
    "sewerage_connection",
    "meter_size",
    "billing_month",
]

BILL_COLUMNS = [
    "account_id",
    "month_year",
    "status",
    "usage_m3",
    "usage_charge",
    "rental_charge",
    "sewerage_charge",
    "maintenance_fee",
    "sanitation_fee",
    "vat_amount",
    "balance_carried_forward",
    "total_amount_due",
    "grand_total",
    "due_date",
    "payment_status",
    "matched_key",
    "issues",
]


def make_parser(description: str) -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )


def read_readings(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in READING_REQUIRED if c not in df.columns]
    if missing:
        raise ValueError(f"readings file {path} is missing columns: {', '.join(missing)}")
    return df


def _payload_from_row(row: dict[str, Any]) -> CalculateBillPayload:
    data: dict[str, Any] = {
        "usageM3": str(row["usage_m3"]).strip(),
        "customerType": str(row["customer_type"]).strip(),
        "sewerageConnection": str(row["sewerage_connection"]).strip(),
        "meterSize": str(row["meter_size"]).strip(),
        "billingMonth": str(row["billing_month"]).strip(),
    }
    prior = str(row.get("prior_balance", "") or "").strip()
    if prior:
        data["priorBalance"] = prior
    return CalculateBillPayload.model_validate(data)


def _blank(account_id: str, month: str, status: str, issues: str) -> dict[str, Any]:
    out: dict[str, Any] = {c: "" for c in BILL_COLUMNS}
    out.update({"account_id": account_id, "month_year": month, "status": status, "issues": issues})
    return out


def bill_readings(
    store: TariffRepositoryPort,
    readings: pd.DataFrame,
    *,
    due_days: int = DEFAULT_DUE_DAYS,
) -> pd.DataFrame:
    logger = get_logger()
    rows: list[dict[str, Any]] = []
    for record in readings.to_dict(orient="records"):
        account_id = str(record.get("account_id", "")).strip()
        month = str(record.get("billing_month", "")).strip()
        try:
            payload = _payload_from_row(record)
        except PydanticValidationError as exc:
            fields = sorted({".".join(str(p) for p in e["loc"]) for e in exc.errors()})
            rows.append(_blank(account_id, month, "invalid", f"invalid fields: {', '.join(fields)}"))
            continue

        try:
            outcome = calculate_bill(
                store,
                payload.to_input(),
                prior_balance=payload.prior_balance,
                due_days=due_days,
            )
        except TariffConfigurationError as exc:
            logger.error(f"account {account_id}: tariff configuration error: {exc.message}")
            rows.append(_blank(account_id, month, "tariff_error", exc.message))
            continue
        except ArithmeticError as exc:
            logger.error(f"account {account_id}: charge out of range: {exc!r}")
            rows.append(_blank(account_id, month, "invalid", "charge out of range"))
            continue

        diagnostics = outcome.diagnostics
        issues = "; ".join(diagnostics.issues)
        if not diagnostics.tariff_found:
            rows.append(_blank(account_id, month, "no_tariff", issues))
            continue

        bill = outcome.bill.to_payload()
        out = {c: bill.get(c, "") for c in BILL_COLUMNS}
        out.update(
            {
                "account_id": account_id,
                "status": "ok",
                "matched_key": diagnostics.matched_key or "",
                "issues": issues,
            }
        )
        rows.append(out)

    return pd.DataFrame(rows, columns=BILL_COLUMNS)


def run_batch(
    readings_path: Path,
    out_path: Path,
    store: TariffRepositoryPort,
    *,
    due_days: int = DEFAULT_DUE_DAYS,
) -> pd.DataFrame:
    readings = read_readings(readings_path)
    bills = bill_readings(store, readings, due_days=due_days)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    bills.to_csv(out_path, index=False, encoding="utf-8")

    counts = bills["status"].value_counts().to_dict() if not bills.empty else {}
    get_logger().info(
        f"priced {len(bills)} readings -> {out_path} "
        + " ".join(f"{k}={v}" for k, v in sorted(counts.items()))
    )
    return bills


def main() -> None:
    settings = load_settings()
    parser = make_parser("Price a CSV of meter readings against the stored tariffs.")
    parser.add_argument("--readings", type=Path, required=True)
    parser.add_argument("--out", type=Path, default=Path("output/bills.csv"))
    parser.add_argument("--db", type=str, default=str(settings.db_path))
    parser.add_argument("--due-days", type=int, default=settings.due_days)
    args = parser.parse_args()

    store = SqlTariffRepository(get_engine(args.db))
    run_batch(args.readings, args.out, store, due_days=args.due_days)


if __name__ == "__main__":
    main()
