"""
Cart financial calculator.

Pure functions over a list of LineItems and an optional order-level
discount. Nothing here holds state: CartStore calls calculate_totals()
after every mutation and replaces the previous totals wholesale, so the
figures are always derived from the lines and never accumulated.

Formula:
    line_total      = round(quantity * unit_price) - line discount
    subtotal        = sum(line_total)
    order_discount  = strategy(subtotal)                  (fixed or percentage)
    taxable_amount  = subtotal - order_discount
    tax             = round(taxable_amount * tax_rate)
    grand_total     = taxable_amount + tax

Usage:
    from cart.calculators import OrderCalculator
    calculator = OrderCalculator(currency="USD", tax_rate=Decimal("0.05"))
    totals = calculator.calculate_totals(cart.lines, cart.order_discount)
"""

from decimal import Decimal
from typing import Iterable, Optional

from core_backend.exceptions import CartValidationError
from discounts.factories import DiscountStrategyFactory
from payments.money import quantize, to_decimal, zero

from .entities import CartTotals, LineItem, OrderDiscount


class OrderCalculator:
    """
    Calculator for cart totals.

    Args:
        currency: ISO 4217 code, decides the rounding precision
        tax_rate: Store tax rate as a fraction (Decimal('0.05') for 5%)
    """

    def __init__(self, currency: str = "USD", tax_rate=Decimal("0")):
        tax_rate = to_decimal(tax_rate)
        if tax_rate < 0 or tax_rate > 1:
            raise CartValidationError(f"Tax rate must be a fraction between 0 and 1, got {tax_rate}")
        self.currency = currency
        self.tax_rate = tax_rate

    def round(self, amount) -> Decimal:
        return quantize(self.currency, amount)

    def line_gross(self, line: LineItem) -> Decimal:
        """quantity * unit_price, rounded to the currency."""
        return self.round(line.unit_price * line.quantity)

    def line_total(self, line: LineItem) -> Decimal:
        """
        Line value after its own discount.

        Raises:
            CartValidationError: If the discount is negative or larger than the line value
        """
        gross = self.line_gross(line)
        self.validate_line_discount(line.discount, gross)
        return self.round(gross - line.discount)

    @staticmethod
    def validate_line_discount(discount: Decimal, gross: Decimal) -> None:
        if discount < 0:
            raise CartValidationError("Item discount cannot be negative")
        if discount > gross:
            raise CartValidationError(
                f"Item discount {discount} exceeds the line value {gross}",
                discount=discount,
                line_value=gross,
            )

    def calculate_subtotal(self, lines: Iterable[LineItem]) -> Decimal:
        return sum((self.line_total(line) for line in lines), zero(self.currency))

    def calculate_item_discounts(self, lines: Iterable[LineItem]) -> Decimal:
        return self.round(sum((line.discount for line in lines), Decimal("0")))

    def calculate_order_discount(
        self, subtotal: Decimal, order_discount: Optional[OrderDiscount]
    ) -> Decimal:
        if not order_discount:
            return zero(self.currency)
        strategy = DiscountStrategyFactory.get_strategy(order_discount.kind)
        return self.round(strategy.apply(subtotal, order_discount.value))

    def calculate_tax(self, taxable_amount: Decimal) -> Decimal:
        """Tax on the post-discount amount. Never negative."""
        if taxable_amount <= 0:
            return zero(self.currency)
        return self.round(taxable_amount * self.tax_rate)

    def calculate_totals(
        self,
        lines: Iterable[LineItem],
        order_discount: Optional[OrderDiscount] = None,
    ) -> CartTotals:
        """
        Calculate all totals in one pass.

        Returns:
            CartTotals with subtotal, item/order/total discount, taxable amount,
            tax, grand total and item count
        """
        lines = list(lines)
        subtotal = self.calculate_subtotal(lines)
        item_discount_total = self.calculate_item_discounts(lines)
        order_discount_amount = self.calculate_order_discount(subtotal, order_discount)
        taxable_amount = self.round(subtotal - order_discount_amount)
        tax = self.calculate_tax(taxable_amount)
        grand_total = self.round(taxable_amount + tax)

        return CartTotals(
            subtotal=subtotal,
            item_discount_total=item_discount_total,
            order_discount_amount=order_discount_amount,
            total_discount=self.round(item_discount_total + order_discount_amount),
            taxable_amount=taxable_amount,
            tax=tax,
            grand_total=grand_total,
            item_count=sum(line.quantity for line in lines),
        )
