"""
Error taxonomy for the cart and checkout engine.

ValidationError family
    Bad cashier input (quantities, discounts, unknown lines). Raised
    synchronously by the cart before anything reaches the database.
ConcurrencyError family
    Stock moved underneath the cart (another register sold it first).
    The checkout is rolled back and the cashier has to adjust the cart.
PersistenceError
    Database or transport failure. Retryable; the cart is left untouched.
CheckoutInProgressError
    A second checkout was requested while one is still submitting.
"""


class PosError(Exception):
    """Base class for all errors raised by the POS core."""

    code = "pos_error"

    def __init__(self, message="", **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        return self.message or self.__class__.__name__


class CartValidationError(PosError, ValueError):
    """Invalid input for a cart mutation or a checkout precondition."""

    code = "validation_error"


class LineItemNotFoundError(CartValidationError):
    code = "line_not_found"


class HeldSaleNotFoundError(CartValidationError):
    code = "held_sale_not_found"


class ConcurrencyError(PosError):
    """Stock availability changed between cart building and commit."""

    code = "concurrency_error"


class InsufficientStockError(ConcurrencyError):
    code = "insufficient_stock"

    def __init__(self, message="", product_id=None, requested=None, available=None):
        super().__init__(
            message or f"Insufficient stock for product {product_id}",
            product_id=product_id,
            requested=requested,
            available=available,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class StockNotFoundError(ConcurrencyError):
    code = "stock_not_found"

    def __init__(self, message="", product_id=None):
        super().__init__(
            message or f"No stock record for product {product_id}",
            product_id=product_id,
        )
        self.product_id = product_id


class PersistenceError(PosError):
    """Ledger or inventory write failed for reasons unrelated to stock."""

    code = "persistence_error"


class CheckoutInProgressError(PosError):
    code = "checkout_in_progress"
