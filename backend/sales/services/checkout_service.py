"""
Checkout orchestration: turns the active cart into a durable sale.

State machine per register:

    IDLE -> SUBMITTING -> COMMITTED
                       -> FAILED

Commit sequence, all inside one transaction.atomic() block:
    1. idempotency lookup by the cart's checkout_key (replay returns the stored sale)
    2. Sale header
    3. one SaleItem per line
    4. one conditional stock decrement per inventory-tracked line

Any failure in 2-4 rolls back 2-4 together, so a sale is never recorded
without its stock movement and stock never moves without a sale. The cart
is cleared only after the transaction commits; on failure it is left
exactly as it was so the cashier can retry with the same checkout key.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from django.conf import settings
from django.db import DatabaseError, models, transaction
from django.utils.translation import gettext_lazy as _

from core_backend.exceptions import (
    CartValidationError,
    CheckoutInProgressError,
    ConcurrencyError,
    PersistenceError,
    PosError,
)
from sales.entities import SaleHeader
from sales.models import Sale

logger = logging.getLogger(__name__)


class CheckoutState(models.TextChoices):
    IDLE = "idle", _("Idle")
    SUBMITTING = "submitting", _("Submitting")
    COMMITTED = "committed", _("Committed")
    FAILED = "failed", _("Failed")


class CheckoutStatus(models.TextChoices):
    COMMITTED = "committed", _("Committed")
    FAILED = "failed", _("Failed")
    REJECTED = "rejected", _("Rejected")


@dataclass(frozen=True)
class CheckoutResult:
    """
    Outcome of one checkout call.

    committed: sale is set (replayed=True when an earlier attempt had already
        recorded it)
    failed:    the transaction was rolled back; error is a ConcurrencyError or
        PersistenceError and the cart is untouched
    rejected:  a precondition failed before anything was sent to the database
    """

    status: str
    sale: Optional[Sale] = None
    error: Optional[PosError] = None
    replayed: bool = False

    @property
    def ok(self) -> bool:
        return self.status == CheckoutStatus.COMMITTED

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None

    @property
    def message(self) -> str:
        if self.error:
            return str(self.error)
        if self.sale is not None:
            return f"Sale {self.sale.sale_number} recorded"
        return ""


class CheckoutOrchestrator:
    """
    Commits the cart of one register.

    Args:
        context: SessionContext of the register
        cart_store: CartStore holding the cart to sell
        ledger: SaleLedger receiving the sale and its items
        inventory: InventoryStore that owns stock quantities
    """

    def __init__(self, context, cart_store, ledger, inventory):
        self.context = context
        self.cart_store = cart_store
        self.ledger = ledger
        self.inventory = inventory
        self.state = CheckoutState.IDLE
        self.last_result: Optional[CheckoutResult] = None

    @property
    def is_submitting(self) -> bool:
        return self.state == CheckoutState.SUBMITTING

    def checkout(self, payment_method=None) -> CheckoutResult:
        """
        Sell the current cart.

        Never raises for expected failures; inspect the returned
        CheckoutResult instead.
        """
        rejection = self._check_preconditions(payment_method)
        if rejection is not None:
            return rejection

        self.state = CheckoutState.SUBMITTING
        try:
            header = SaleHeader.from_cart(
                self.cart_store.snapshot(),
                self.context,
                self.cart_store.calculator,
                Sale.PaymentMethod(payment_method),
            )
            sale, replayed = self._commit(header)
        except (ConcurrencyError, PersistenceError) as exc:
            return self._fail(exc)
        except DatabaseError as exc:
            # Commit-time failures and statement timeouts surface here
            logger.error(f"Database error during checkout {self.cart_store.cart.checkout_key}: {exc}", exc_info=True)
            return self._fail(PersistenceError("Checkout could not be completed, please retry"))
        except Exception:
            self.state = CheckoutState.FAILED
            raise

        self.state = CheckoutState.COMMITTED
        self.cart_store.clear_cart()
        result = CheckoutResult(status=CheckoutStatus.COMMITTED, sale=sale, replayed=replayed)
        self.last_result = result
        if replayed:
            logger.info(f"Checkout replayed: sale {sale.sale_number} already recorded for key {header.idempotency_key}")
        else:
            logger.info(
                f"Sale {sale.sale_number} committed at store {header.store_id}: "
                f"{header.item_count} items, {header.grand_total} {header.currency} ({header.payment_method})"
            )
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_preconditions(self, payment_method) -> Optional[CheckoutResult]:
        error = None
        if self.is_submitting:
            error = CheckoutInProgressError("A checkout is already in progress for this register")
        elif self.cart_store.is_empty:
            error = CartValidationError("Cannot check out an empty cart")
        elif not payment_method:
            error = CartValidationError("Select a payment method before checking out")
        elif payment_method not in Sale.PaymentMethod.values:
            error = CartValidationError(f"Unknown payment method '{payment_method}'")

        if error is None:
            return None

        logger.warning(f"Checkout rejected: {error}")
        result = CheckoutResult(status=CheckoutStatus.REJECTED, error=error)
        if not isinstance(error, CheckoutInProgressError):
            self.last_result = result
        return result

    def _fail(self, error: PosError) -> CheckoutResult:
        self.state = CheckoutState.FAILED
        if isinstance(error, ConcurrencyError):
            logger.warning(f"Checkout failed on stock: {error}")
        result = CheckoutResult(status=CheckoutStatus.FAILED, error=error)
        self.last_result = result
        return result

    def _commit(self, header: SaleHeader):
        with transaction.atomic():
            existing = self.ledger.find_by_idempotency_key(header.idempotency_key)
            if existing is not None:
                return existing, True

            sale = self.ledger.create_sale(header)
            self.ledger.create_items(sale, header.lines)

            # Stable order so two registers decrementing the same products never deadlock
            tracked = sorted(
                (line for line in header.lines if line.track_inventory),
                key=lambda line: str(line.product_id),
            )
            for line in tracked:
                self.inventory.decrement(
                    line.product_id,
                    header.store_id,
                    line.quantity,
                    reference_id=sale.sale_number,
                )

            if tracked:
                self._queue_low_stock_alert(header.store_id, {line.product_id for line in tracked})

        return sale, False

    @staticmethod
    def _queue_low_stock_alert(store_id, product_ids):
        if not settings.POS.get("LOW_STOCK_ALERTS_ENABLED", True):
            return

        from inventory.tasks import send_low_stock_alert

        product_ids = sorted(product_ids, key=str)
        transaction.on_commit(
            lambda: send_low_stock_alert.delay(store_id, product_ids),
            robust=True,
        )
