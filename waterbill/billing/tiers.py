from __future__ import annotations

from decimal import Decimal

from waterbill.domain.models.bill import TierCharge
from waterbill.domain.models.tariff import UsageTierTable

from .money import ZERO


def usage_tier_breakdown(usage: Decimal, tiers: UsageTierTable) -> list[TierCharge]:
    """
    Split ``usage`` across progressive brackets.

    A bracket covers ``(previous limit, limit]``, so usage sitting exactly on a
    limit is billed entirely inside the lower bracket. Charges are not rounded.
    """
    lines: list[TierCharge] = []
    remaining = usage
    lower = ZERO
    for tier in tiers:
        if remaining <= 0:
            break
        if tier.limit is None:
            used = remaining
        else:
            used = min(remaining, tier.limit - lower)
        lines.append(
            TierCharge(
                start=lower,
                end=tier.limit,
                usage=used,
                rate=tier.rate,
                charge=used * tier.rate,
            )
        )
        remaining -= used
        if tier.limit is not None:
            lower = tier.limit
    return lines


def compute_usage_charge(usage: Decimal, tiers: UsageTierTable) -> Decimal:
    return sum((line.charge for line in usage_tier_breakdown(usage, tiers)), ZERO)


def charge_above(usage: Decimal, tiers: UsageTierTable, threshold: Decimal) -> Decimal:
    """Usage charge for the volume above ``threshold`` only, each slice at its own tier rate."""
    total = ZERO
    for line in usage_tier_breakdown(usage, tiers):
        start = max(line.start, threshold)
        end = line.start + line.usage
        if end > start:
            total += (end - start) * line.rate
    return total
