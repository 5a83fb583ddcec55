"""
Plain records handed from the checkout orchestrator to the SaleLedger.

They are built from a cart snapshot before the database transaction opens,
so the ledger never reads the live cart.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class SaleLine:
    product_id: Any
    variant_id: Optional[Any]
    product_name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    total: Decimal
    track_inventory: bool = False

    @classmethod
    def from_line(cls, line, calculator) -> "SaleLine":
        return cls(
            product_id=line.product_id,
            variant_id=line.variant_id,
            product_name=line.name,
            quantity=line.quantity,
            unit_price=calculator.round(line.unit_price),
            discount=calculator.round(line.discount),
            total=calculator.line_total(line),
            track_inventory=line.track_inventory,
        )


@dataclass(frozen=True)
class SaleHeader:
    tenant_id: Any
    store_id: Any
    cashier_id: Optional[Any]
    customer_id: Optional[Any]
    idempotency_key: str
    payment_method: str
    fulfillment_mode: str
    currency: str
    subtotal: Decimal
    discount_total: Decimal
    tax_total: Decimal
    grand_total: Decimal
    item_count: int
    notes: str = ""
    lines: Tuple[SaleLine, ...] = ()

    @classmethod
    def from_cart(cls, cart, context, calculator, payment_method) -> "SaleHeader":
        totals = cart.totals
        return cls(
            tenant_id=context.tenant_id,
            store_id=context.store_id,
            cashier_id=context.cashier_id,
            customer_id=cart.customer.id if cart.customer else None,
            idempotency_key=cart.checkout_key,
            payment_method=payment_method,
            fulfillment_mode=str(cart.fulfillment_mode),
            currency=context.currency,
            subtotal=totals.subtotal,
            discount_total=totals.total_discount,
            tax_total=totals.tax,
            grand_total=totals.grand_total,
            item_count=totals.item_count,
            notes=cart.notes,
            lines=tuple(SaleLine.from_line(line, calculator) for line in cart.lines),
        )
