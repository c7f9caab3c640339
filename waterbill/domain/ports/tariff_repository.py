from __future__ import annotations

from typing import Protocol

from waterbill.domain.models.tariff import TariffRow


class TariffRepositoryPort(Protocol):
    def fetch_tariff(self, customer_type: str, year: int) -> TariffRow | None: ...
