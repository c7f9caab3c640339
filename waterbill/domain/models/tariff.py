from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterator

from waterbill.domain.errors import TariffConfigurationError


@dataclass(frozen=True, slots=True)
class TariffRow:
    """A tariff row exactly as the store returns it; JSON columns are still raw."""

    customer_type: str
    year: int
    tiers: Any = None
    meter_rent_prices: Any = None
    sewerage_rate: Any = None
    maintenance_percentage: Any = None
    sanitation_percentage: Any = None
    vat_rate: Any = None
    domestic_vat_threshold_m3: Any = None


@dataclass(frozen=True, slots=True)
class UsageTier:
    limit: Decimal | None  # None = unbounded
    rate: Decimal

    @property
    def unbounded(self) -> bool:
        return self.limit is None


@dataclass(frozen=True, slots=True)
class UsageTierTable:
    tiers: tuple[UsageTier, ...]

    def __post_init__(self) -> None:
        if not self.tiers:
            raise TariffConfigurationError("tier table is empty")
        previous: Decimal | None = None
        for index, tier in enumerate(self.tiers):
            is_last = index == len(self.tiers) - 1
            if tier.unbounded and not is_last:
                raise TariffConfigurationError(
                    "only the last tier may be unbounded",
                    details={"tier_index": index},
                )
            if is_last and not tier.unbounded:
                raise TariffConfigurationError(
                    "last tier must be unbounded",
                    details={"tier_index": index, "limit": str(tier.limit)},
                )
            if tier.limit is not None:
                if tier.limit <= 0 or (previous is not None and tier.limit <= previous):
                    raise TariffConfigurationError(
                        "tier limits must be positive and strictly increasing",
                        details={"tier_index": index, "limit": str(tier.limit)},
                    )
                previous = tier.limit
            if tier.rate < 0:
                raise TariffConfigurationError(
                    "tier rate must not be negative",
                    details={"tier_index": index, "rate": str(tier.rate)},
                )

    def __iter__(self) -> Iterator[UsageTier]:
        return iter(self.tiers)

    def __len__(self) -> int:
        return len(self.tiers)


@dataclass(frozen=True, slots=True)
class RentalPriceTable:
    """Meter-size label -> rental price, in the order the tariff author wrote them."""

    prices: dict[str, Decimal] = field(default_factory=dict)

    def __iter__(self) -> Iterator[str]:
        return iter(self.prices)

    def __len__(self) -> int:
        return len(self.prices)

    def get(self, key: str) -> Decimal | None:
        return self.prices.get(key)


@dataclass(frozen=True, slots=True)
class Tariff:
    customer_type: str
    year: int
    tiers: UsageTierTable
    meter_rent_prices: RentalPriceTable
    sewerage_rate: Decimal
    maintenance_percentage: Decimal
    sanitation_percentage: Decimal
    vat_rate: Decimal
    domestic_vat_threshold_m3: Decimal
