"""
Held sales: parking an in-progress cart so the cashier can serve someone else.

A HeldSale is a frozen snapshot of the cart (lines, customer, fulfillment
mode, notes, order discount and checkout key). Resuming loads the snapshot
back into the active cart and removes it from the queue. If the active
cart has items when a resume is requested it is held first, so an
in-progress sale is never discarded.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple
import itertools
import logging
import uuid

from django.utils import timezone

from core_backend.exceptions import CartValidationError, HeldSaleNotFoundError

from .entities import Cart, CustomerRef, LineItem, OrderDiscount

logger = logging.getLogger(__name__)

_sequence = itertools.count()


@dataclass(frozen=True)
class HeldSale:
    lines: Tuple[LineItem, ...]
    customer: Optional[CustomerRef]
    fulfillment_mode: str
    notes: str = ""
    order_discount: Optional[OrderDiscount] = None
    checkout_key: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    held_at: datetime = field(default_factory=timezone.now)
    sequence: int = field(default_factory=lambda: next(_sequence), repr=False)

    @classmethod
    def from_cart(cls, cart: Cart) -> "HeldSale":
        return cls(
            lines=cart.lines,
            customer=cart.customer,
            fulfillment_mode=cart.fulfillment_mode,
            notes=cart.notes,
            order_discount=cart.order_discount,
            checkout_key=cart.checkout_key,
        )

    def to_cart(self) -> Cart:
        return Cart(
            lines=self.lines,
            customer=self.customer,
            notes=self.notes,
            order_discount=self.order_discount,
            fulfillment_mode=self.fulfillment_mode,
            checkout_key=self.checkout_key,
        )

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


class HeldSaleQueue:
    """
    Unordered set of held sales for one register, keyed by id.

    There is no capacity limit and entries can be resumed in any order.
    list() returns them oldest first.
    """

    def __init__(self):
        self._held: Dict[str, HeldSale] = {}

    def __len__(self):
        return len(self._held)

    def __contains__(self, held_id):
        return held_id in self._held

    def list(self) -> List[HeldSale]:
        return sorted(self._held.values(), key=lambda held: (held.held_at, held.sequence))

    def get(self, held_id: str) -> HeldSale:
        try:
            return self._held[held_id]
        except KeyError:
            raise HeldSaleNotFoundError(f"Held sale {held_id} not found", held_id=held_id)

    def add(self, held: HeldSale) -> HeldSale:
        self._held[held.id] = held
        return held

    def pop(self, held_id: str) -> HeldSale:
        held = self.get(held_id)
        del self._held[held_id]
        return held

    def hold(self, cart_store) -> HeldSale:
        """
        Park the active cart and clear it.

        Raises:
            CartValidationError: If the cart is empty
        """
        if cart_store.is_empty:
            raise CartValidationError("Cannot hold an empty cart")

        held = self.add(HeldSale.from_cart(cart_store.snapshot()))
        cart_store.clear_cart()
        logger.info(f"Held sale {held.id} with {held.item_count} items ({len(self)} held)")
        return held

    def resume(self, cart_store, held_id: str) -> Optional[HeldSale]:
        """
        Load a held sale into the active cart.

        Returns:
            The HeldSale created for the previously active cart, or None if
            the active cart was empty

        Raises:
            HeldSaleNotFoundError: If no held sale has this id (nothing is changed)
        """
        # Look up first so a bad id never parks the active cart
        self.get(held_id)

        auto_held = None
        if not cart_store.is_empty:
            auto_held = self.hold(cart_store)

        held = self.pop(held_id)
        cart_store.load(held.to_cart())
        logger.info(f"Resumed held sale {held.id} ({len(self)} still held)")
        return auto_held
