"""
Who is selling, where, and in which currency.

A SessionContext is created once when a cashier opens a register and is
passed read-only to the cart calculator and the checkout orchestrator.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from django.conf import settings

from payments.money import to_decimal


@dataclass(frozen=True)
class SessionContext:
    tenant: Any
    store_location: Any
    cashier: Any = None
    currency: str = "USD"
    tax_rate: Decimal = Decimal("0")

    @property
    def tenant_id(self):
        return getattr(self.tenant, "id", self.tenant)

    @property
    def store_id(self):
        return getattr(self.store_location, "id", self.store_location)

    @property
    def cashier_id(self) -> Optional[Any]:
        if self.cashier is None:
            return None
        return getattr(self.cashier, "id", self.cashier)

    @classmethod
    def for_cashier(cls, cashier, store_location) -> "SessionContext":
        """
        Build the context from a StoreLocation and the signed-in cashier.

        Currency and tax rate come from the store, falling back to the
        POS["DEFAULT_CURRENCY"] setting when the store has none configured.
        """
        currency = store_location.currency or settings.POS["DEFAULT_CURRENCY"]
        return cls(
            tenant=store_location.tenant,
            store_location=store_location,
            cashier=cashier,
            currency=currency,
            tax_rate=to_decimal(store_location.get_effective_tax_rate()),
        )
