from __future__ import annotations

from .assembler import assemble_bill, due_date_for
from .decoder import decode_field, decode_rental_table, decode_tariff, decode_tier_table
from .rental import normalize_size_key, resolve_rental_price
from .selector import effective_year, select_tariff
from .tiers import charge_above, compute_usage_charge, usage_tier_breakdown

__all__ = [
    "assemble_bill",
    "charge_above",
    "compute_usage_charge",
    "decode_field",
    "decode_rental_table",
    "decode_tariff",
    "decode_tier_table",
    "due_date_for",
    "effective_year",
    "normalize_size_key",
    "resolve_rental_price",
    "select_tariff",
    "usage_tier_breakdown",
]
