from core_backend.exceptions import CartValidationError
from .strategies import (
    DiscountKind,
    DiscountStrategy,
    OrderPercentageDiscountStrategy,
    OrderFixedAmountDiscountStrategy,
)


class DiscountStrategyFactory:
    """
    Factory for creating an order-level discount strategy from its kind.
    """

    _strategies = {
        DiscountKind.FIXED: OrderFixedAmountDiscountStrategy,
        DiscountKind.PERCENTAGE: OrderPercentageDiscountStrategy,
    }

    @staticmethod
    def get_strategy(kind) -> DiscountStrategy:
        """
        Selects and returns the appropriate strategy instance.

        Accepts either a DiscountKind member or its raw value ("fixed", "percentage").
        """
        try:
            kind = DiscountKind(kind)
        except ValueError:
            raise CartValidationError(f"Unknown discount kind '{kind}'")

        return DiscountStrategyFactory._strategies[kind]()
