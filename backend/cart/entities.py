"""
Value objects for the in-memory cart.

Everything here is immutable: cart mutations build new objects with
dataclasses.replace() so a snapshot taken for a held sale can never be
changed by later edits to the active cart.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Optional, Tuple
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from discounts.strategies import DiscountKind


class FulfillmentMode(models.TextChoices):
    PICKUP = "pickup", _("Pickup")
    DELIVERY = "delivery", _("Delivery")
    DINE_IN = "dine_in", _("Dine-In")


@dataclass(frozen=True)
class ProductRef:
    """Catalog product as it was when it was added to the cart."""

    id: Any
    name: str
    unit_price: Decimal
    track_inventory: bool = False
    sku: str = ""


@dataclass(frozen=True)
class VariantRef:
    id: Any
    name: str
    price: Optional[Decimal] = None
    sku: str = ""


@dataclass(frozen=True)
class CustomerRef:
    id: Any
    name: str = ""
    phone: str = ""


@dataclass(frozen=True)
class OrderDiscount:
    value: Decimal
    kind: str = DiscountKind.FIXED


def new_line_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class LineItem:
    """
    One product/variant entry in the cart.

    unit_price is captured when the line is created and never re-read
    from the catalog afterwards.
    """

    product: ProductRef
    unit_price: Decimal
    quantity: int = 1
    variant: Optional[VariantRef] = None
    discount: Decimal = Decimal("0")
    line_id: str = field(default_factory=new_line_id)

    @property
    def product_id(self):
        return self.product.id

    @property
    def variant_id(self):
        return self.variant.id if self.variant else None

    @property
    def name(self) -> str:
        if self.variant:
            return f"{self.product.name} - {self.variant.name}"
        return self.product.name

    @property
    def track_inventory(self) -> bool:
        return self.product.track_inventory

    def matches(self, product_id, variant_id) -> bool:
        """Same product and variant, and no per-item discount (merge candidate)."""
        return (
            self.product_id == product_id
            and self.variant_id == variant_id
            and not self.discount
        )

    def with_quantity(self, quantity: int) -> "LineItem":
        return replace(self, quantity=quantity)

    def with_discount(self, discount: Decimal) -> "LineItem":
        return replace(self, discount=discount)


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    item_discount_total: Decimal
    order_discount_amount: Decimal
    total_discount: Decimal
    taxable_amount: Decimal
    tax: Decimal
    grand_total: Decimal
    item_count: int = 0


def new_checkout_key() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Cart:
    """
    The order in progress.

    Lifecycle: created empty with the terminal session, mutated through
    CartStore, replaced by a fresh cart on checkout, clear or resume.
    """

    lines: Tuple[LineItem, ...] = ()
    customer: Optional[CustomerRef] = None
    notes: str = ""
    order_discount: Optional[OrderDiscount] = None
    fulfillment_mode: str = FulfillmentMode.PICKUP
    checkout_key: str = field(default_factory=new_checkout_key)
    totals: Optional[CartTotals] = None

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def get_line(self, line_id: str) -> Optional[LineItem]:
        for line in self.lines:
            if line.line_id == line_id:
                return line
        return None
