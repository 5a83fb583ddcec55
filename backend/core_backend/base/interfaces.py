"""
Collaborator interfaces for the checkout engine.

The cart and the checkout orchestrator only talk to these abstractions.
Database-backed implementations live with the owning app:

    CatalogLookup   -> products.services.DatabaseCatalogLookup
    InventoryStore  -> inventory.services.DatabaseInventoryStore
    SaleLedger      -> sales.services.ledger_service.DatabaseSaleLedger
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Sequence, Tuple


class CatalogLookup(ABC):
    """Read-only product catalog, consulted only when a line is added."""

    @abstractmethod
    def get_product(self, product_id, variant_id=None) -> Tuple["ProductRef", Optional["VariantRef"]]:
        """
        Return snapshots of the product and (optionally) its variant.

        Raises:
            CartValidationError: If the product or variant is unknown or not for sale
        """

    def get_unit_price(self, product_id, variant_id=None) -> Decimal:
        """Selling price for a product, using the variant price when it overrides."""
        product, variant = self.get_product(product_id, variant_id)
        if variant is not None and variant.price is not None:
            return variant.price
        return product.unit_price


class InventoryStore(ABC):
    """Authoritative stock quantities shared by every register of a store."""

    @abstractmethod
    def decrement(self, product_id, store_id, quantity: int, reference_id: str = "") -> None:
        """
        Atomically remove `quantity` units. Either fully applies or fully fails.

        Raises:
            InsufficientStockError: If fewer than `quantity` units are available
            StockNotFoundError: If the product has no stock record at the store
        """

    @abstractmethod
    def get_available(self, product_id, store_id) -> Optional[Decimal]:
        """Current quantity, or None when the product has no stock record."""


class SaleLedger(ABC):
    """Append-only store of committed sales."""

    @abstractmethod
    def find_by_idempotency_key(self, idempotency_key: str):
        """Return the sale already recorded for this key, or None."""

    @abstractmethod
    def create_sale(self, header: "SaleHeader"):
        """
        Persist the sale header and return the stored sale.

        Raises:
            PersistenceError: On any storage failure
        """

    @abstractmethod
    def create_items(self, sale, items: Sequence["SaleLine"]) -> list:
        """
        Persist one row per line for an existing sale.

        Raises:
            PersistenceError: On any storage failure
        """
