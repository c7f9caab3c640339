from __future__ import annotations

from enum import StrEnum


class CustomerType(StrEnum):
    DOMESTIC = "Domestic"
    NON_DOMESTIC = "Non-domestic"
    RENTAL_NON_DOMESTIC = "rental Non domestic"
    RENTAL_DOMESTIC = "rental domestic"

    @property
    def is_domestic(self) -> bool:
        return self in (CustomerType.DOMESTIC, CustomerType.RENTAL_DOMESTIC)


class SewerageConnection(StrEnum):
    YES = "Yes"
    NO = "No"

    @property
    def is_connected(self) -> bool:
        return self is SewerageConnection.YES


class PaymentStatus(StrEnum):
    PAID = "Paid"
    UNPAID = "Unpaid"
    PENDING = "Pending"
