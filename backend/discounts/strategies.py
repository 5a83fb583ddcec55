"""
Order-level discount strategies.

The cart applies at most one order-level discount, either a fixed amount
taken off the subtotal or a percentage of it. Each strategy knows how to
validate a requested value against the current subtotal and how to compute
the (unrounded) amount to subtract.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
import logging

from django.db import models
from django.utils.translation import gettext_lazy as _

from core_backend.exceptions import CartValidationError
from payments.money import to_decimal, percentage_of

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


class DiscountKind(models.TextChoices):
    FIXED = "fixed", _("Fixed Amount")
    PERCENTAGE = "percentage", _("Percentage")


class DiscountStrategy(ABC):
    """The interface for an order-level discount strategy."""

    kind = None

    @abstractmethod
    def validate(self, value: Decimal, subtotal: Decimal) -> Decimal:
        """Return the normalised value or raise CartValidationError."""

    @abstractmethod
    def apply(self, subtotal: Decimal, value: Decimal) -> Decimal:
        """Return the discount amount for this subtotal, before rounding."""


class OrderFixedAmountDiscountStrategy(DiscountStrategy):
    """Takes a literal amount off the subtotal."""

    kind = DiscountKind.FIXED

    def validate(self, value, subtotal):
        value = to_decimal(value)
        if value < 0:
            raise CartValidationError("Discount amount cannot be negative")
        if value > subtotal:
            raise CartValidationError(
                f"Discount {value} exceeds the order subtotal {subtotal}",
                value=value,
                subtotal=subtotal,
            )
        return value

    def apply(self, subtotal, value):
        if subtotal <= 0:
            return Decimal("0")
        # Lines removed after the discount was set can leave it larger than the subtotal
        return max(Decimal("0"), min(subtotal, value))


class OrderPercentageDiscountStrategy(DiscountStrategy):
    """Takes a percentage of the subtotal."""

    kind = DiscountKind.PERCENTAGE

    def validate(self, value, subtotal):
        value = to_decimal(value)
        if value < 0 or value > HUNDRED:
            raise CartValidationError(
                f"Discount percentage must be between 0 and 100, got {value}",
                value=value,
            )
        return value

    def apply(self, subtotal, value):
        if subtotal <= 0:
            return Decimal("0")
        return percentage_of(subtotal, value)
