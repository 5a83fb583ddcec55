"""
Cart service layer for building an order at the register.

This service handles:
- Adding lines (price snapshot from the catalog at add-time)
- Updating quantities and per-item discounts, removing lines
- Order-level discount, customer, notes and fulfillment mode
- Recomputing totals after every mutation

The cart lives in memory for the duration of a terminal session. Nothing
here writes to the database; the only read is the catalog lookup when a
product is added. Every mutation validates first and only then swaps in
the new Cart, so a rejected call leaves the previous state untouched.
"""

from dataclasses import replace
from typing import Optional
import logging

from core_backend.exceptions import CartValidationError, LineItemNotFoundError
from discounts.factories import DiscountStrategyFactory
from discounts.strategies import DiscountKind
from payments.money import quantize, to_decimal

from .calculators import OrderCalculator
from .entities import Cart, CartTotals, CustomerRef, FulfillmentMode, LineItem, OrderDiscount, ProductRef, VariantRef

logger = logging.getLogger(__name__)


class CartStore:
    """
    Mutable holder of the order in progress for one register.

    Args:
        context: SessionContext (currency and tax rate drive the calculator)
        catalog: CatalogLookup used by add_item() to snapshot prices
    """

    def __init__(self, context, catalog=None):
        self.context = context
        self.catalog = catalog
        self.calculator = OrderCalculator(context.currency, context.tax_rate)
        self._cart = self._with_totals(Cart())

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def lines(self):
        return self._cart.lines

    @property
    def totals(self) -> CartTotals:
        return self._cart.totals

    @property
    def is_empty(self) -> bool:
        return self._cart.is_empty

    def get_line(self, line_id: str) -> LineItem:
        line = self._cart.get_line(line_id)
        if line is None:
            raise LineItemNotFoundError(f"Line {line_id} is not in the cart", line_id=line_id)
        return line

    def snapshot(self) -> Cart:
        """The current cart. Safe to keep: carts are immutable."""
        return self._cart

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def add_item(self, product_id, variant_id=None, quantity: int = 1) -> LineItem:
        """
        Look the product up in the catalog and add it to the cart.

        Raises:
            CartValidationError: If the quantity is not a positive integer or the
                product is unknown to the catalog
        """
        self._validate_quantity(quantity)
        if self.catalog is None:
            raise CartValidationError("No catalog configured for this register")

        product, variant = self.catalog.get_product(product_id, variant_id)
        return self.add_product(product, variant=variant, quantity=quantity)

    def add_product(
        self,
        product: ProductRef,
        variant: Optional[VariantRef] = None,
        quantity: int = 1,
    ) -> LineItem:
        """
        Add an already-resolved product snapshot.

        Merges into an existing line for the same product + variant unless
        that line carries its own discount, in which case a new line is
        appended so the discounted line keeps its terms.
        """
        self._validate_quantity(quantity)
        variant_id = variant.id if variant else None

        lines = list(self._cart.lines)
        for index, existing in enumerate(lines):
            if existing.matches(product.id, variant_id):
                line = existing.with_quantity(existing.quantity + quantity)
                lines[index] = line
                break
        else:
            unit_price = variant.price if variant is not None and variant.price is not None else product.unit_price
            unit_price = to_decimal(unit_price)
            if unit_price < 0:
                raise CartValidationError(f"Product {product.id} has a negative price")
            line = LineItem(product=product, variant=variant, quantity=quantity, unit_price=unit_price)
            lines.append(line)

        self._commit(replace(self._cart, lines=tuple(lines)))
        logger.debug(f"Added {quantity}x {line.name} (line {line.line_id})")
        return line

    def update_quantity(self, line_id: str, quantity: int) -> Optional[LineItem]:
        """
        Set a line's quantity. Zero or less removes the line.

        Returns:
            The updated line, or None if the line was removed
        """
        self._validate_integer(quantity)
        if quantity <= 0:
            self.remove_item(line_id)
            return None

        line = self.get_line(line_id).with_quantity(quantity)
        # Reducing quantity must not leave the existing discount larger than the line
        self.calculator.line_total(line)
        self._replace_line(line)
        return line

    def remove_item(self, line_id: str) -> None:
        self.get_line(line_id)
        lines = tuple(line for line in self._cart.lines if line.line_id != line_id)
        self._commit(replace(self._cart, lines=lines))

    def set_item_discount(self, line_id: str, amount) -> LineItem:
        """
        Set the per-item discount of a line (a monetary amount, not a percentage).

        Raises:
            CartValidationError: If the amount is negative or exceeds quantity * unit price
        """
        line = self.get_line(line_id)
        amount = to_decimal(amount)
        self.calculator.validate_line_discount(amount, self.calculator.line_gross(line))

        line = line.with_discount(quantize(self.context.currency, amount))
        self._replace_line(line)
        return line

    # ------------------------------------------------------------------
    # Order-level fields
    # ------------------------------------------------------------------

    def set_discount(self, value, kind=DiscountKind.FIXED) -> Optional[OrderDiscount]:
        """
        Apply an order-level discount. A value of zero removes it.

        Raises:
            CartValidationError: For an unknown kind, a percentage outside 0-100,
                or a fixed amount larger than the current subtotal
        """
        strategy = DiscountStrategyFactory.get_strategy(kind)
        value = strategy.validate(value, self.totals.subtotal)

        discount = OrderDiscount(value=value, kind=strategy.kind) if value else None
        self._commit(replace(self._cart, order_discount=discount))
        return discount

    def clear_discount(self) -> None:
        self._commit(replace(self._cart, order_discount=None))

    def set_customer(self, customer: Optional[CustomerRef]) -> None:
        self._commit(replace(self._cart, customer=customer))

    def set_notes(self, notes: Optional[str]) -> None:
        self._commit(replace(self._cart, notes=notes or ""))

    def set_fulfillment_mode(self, mode) -> None:
        if mode not in FulfillmentMode.values:
            raise CartValidationError(f"Unknown fulfillment mode '{mode}'")
        self._commit(replace(self._cart, fulfillment_mode=FulfillmentMode(mode)))

    def clear_cart(self) -> None:
        """Start over with an empty cart and a fresh checkout key."""
        self._commit(Cart())

    def load(self, cart: Cart) -> None:
        """Replace the active cart wholesale (used when resuming a held sale)."""
        self._commit(cart)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _replace_line(self, line: LineItem) -> None:
        lines = tuple(line if existing.line_id == line.line_id else existing for existing in self._cart.lines)
        self._commit(replace(self._cart, lines=lines))

    def _with_totals(self, cart: Cart) -> Cart:
        totals = self.calculator.calculate_totals(cart.lines, cart.order_discount)
        return replace(cart, totals=totals)

    def _commit(self, cart: Cart) -> None:
        self._cart = self._with_totals(cart)

    @staticmethod
    def _validate_integer(quantity) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise CartValidationError(f"Quantity must be a whole number, got {quantity!r}")

    @classmethod
    def _validate_quantity(cls, quantity) -> None:
        cls._validate_integer(quantity)
        if quantity <= 0:
            raise CartValidationError("Quantity must be greater than 0")
