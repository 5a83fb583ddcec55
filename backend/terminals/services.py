"""
One register's working state: the active cart, its held sales and the
checkout that commits them.

Usage:
    context = SessionContext.for_cashier(request.user, store_location)
    session = TerminalSession(context)
    session.cart.add_item(product.id, quantity=2)
    result = session.checkout("cash")
"""

from collections import OrderedDict
from decimal import Decimal
from typing import List, Optional
import logging

from cart.held_sales import HeldSale, HeldSaleQueue
from cart.services import CartStore
from inventory.services import DatabaseInventoryStore
from products.services import DatabaseCatalogLookup
from sales.services import CheckoutOrchestrator, DatabaseSaleLedger

logger = logging.getLogger(__name__)


class TerminalSession:
    """
    Wires the cart, held-sale queue and checkout orchestrator of one register.

    Collaborators default to the database-backed implementations for the
    context's tenant; tests pass in-memory ones.
    """

    def __init__(self, context, catalog=None, ledger=None, inventory=None):
        self.context = context
        self.catalog = catalog if catalog is not None else DatabaseCatalogLookup(context.tenant)
        self.ledger = ledger if ledger is not None else DatabaseSaleLedger(context.tenant)
        self.inventory = (
            inventory if inventory is not None
            else DatabaseInventoryStore(context.tenant, user=context.cashier)
        )

        self.cart = CartStore(context, catalog=self.catalog)
        self.held = HeldSaleQueue()
        self.orchestrator = CheckoutOrchestrator(context, self.cart, self.ledger, self.inventory)

    # ------------------------------------------------------------------
    # Held sales
    # ------------------------------------------------------------------

    def hold(self) -> HeldSale:
        return self.held.hold(self.cart)

    def resume(self, held_id: str) -> Optional[HeldSale]:
        return self.held.resume(self.cart, held_id)

    def held_sales(self) -> List[HeldSale]:
        return self.held.list()

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    @property
    def checkout_state(self):
        return self.orchestrator.state

    def checkout(self, payment_method=None):
        return self.orchestrator.checkout(payment_method)

    def validate_stock(self) -> List[dict]:
        """
        Advisory check of the active cart against current stock.

        Quantities of the same product on several lines are added up before
        comparing. Nothing is reserved: another register can still sell the
        units first, and the checkout decrement remains the authoritative
        check.

        Returns:
            One dict per short product: product_id, name, requested, available
            (None when the product has no stock record)
        """
        required = OrderedDict()
        names = {}
        for line in self.cart.lines:
            if not line.track_inventory:
                continue
            required[line.product_id] = required.get(line.product_id, 0) + line.quantity
            names.setdefault(line.product_id, line.product.name)

        shortfalls = []
        for product_id, requested in required.items():
            available = self.inventory.get_available(product_id, self.context.store_id)
            if available is None or available < Decimal(requested):
                shortfalls.append({
                    "product_id": product_id,
                    "name": names[product_id],
                    "requested": requested,
                    "available": available,
                })

        if shortfalls:
            logger.warning(
                f"Stock pre-check at store {self.context.store_id}: "
                f"{len(shortfalls)} product(s) short"
            )
        return shortfalls
