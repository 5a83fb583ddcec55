from django.db import transaction
from django.db.models import F
from django.db.models.functions import Coalesce
from .models import InventoryStock, StockHistoryEntry
from core_backend.base.interfaces import InventoryStore
from core_backend.exceptions import CartValidationError, InsufficientStockError, StockNotFoundError
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


def _pk(obj):
    return getattr(obj, "pk", obj)


class InventoryService:
    """
    Stock movements for a store location.

    Every method takes the tenant explicitly and reads through all_objects,
    so the service behaves the same inside a request, a Celery worker or a
    checkout running on a register thread.
    """

    @staticmethod
    def _to_quantity(quantity) -> Decimal:
        try:
            value = Decimal(str(quantity))
        except (InvalidOperation, ValueError, TypeError):
            raise CartValidationError(f"Invalid quantity format: {quantity}")
        if not value.is_finite() or value <= 0:
            raise CartValidationError(f"Quantity must be greater than 0, got {quantity}")
        return value

    @staticmethod
    def _log_stock_operation(
        tenant,
        product_id,
        store_location_id,
        operation_type: str,
        quantity_change: Decimal,
        new_quantity: Decimal,
        user=None,
        reference_id: str = "",
    ):
        """
        Helper method to log stock operations to StockHistoryEntry.

        Runs inside the caller's transaction: if the caller rolls back, the
        history row goes with it.
        """
        StockHistoryEntry.all_objects.create(
            tenant=tenant,
            product_id=product_id,
            store_location_id=store_location_id,
            user=user,
            operation_type=operation_type,
            quantity_change=quantity_change,
            new_quantity=new_quantity,
            reference_id=reference_id or "",
        )

    @staticmethod
    @transaction.atomic
    def add_stock(tenant, store_location, product, quantity, user=None, reference_id=""):
        """
        Adds a specified quantity of a product at a store location.
        If stock for the product at the location does not exist, it will be created.
        """
        quantity_decimal = InventoryService._to_quantity(quantity)

        stock, created = InventoryStock.all_objects.get_or_create(
            store_location_id=_pk(store_location),
            product_id=_pk(product),
            defaults={"tenant": tenant, "quantity": Decimal("0.00")},
        )

        # Atomic F() increment so concurrent receipts never lose an update
        InventoryStock.all_objects.filter(id=stock.id).update(
            quantity=F('quantity') + quantity_decimal
        )
        stock.refresh_from_db()

        InventoryService._log_stock_operation(
            tenant=tenant,
            product_id=stock.product_id,
            store_location_id=stock.store_location_id,
            operation_type=(
                StockHistoryEntry.Operation.CREATED if created
                else StockHistoryEntry.Operation.ADJUSTED_ADD
            ),
            quantity_change=quantity_decimal,
            new_quantity=stock.quantity,
            user=user,
            reference_id=reference_id,
        )
        return stock

    @staticmethod
    @transaction.atomic
    def decrement_stock(tenant, store_location, product, quantity, reference_id="", user=None) -> Decimal:
        """
        Removes `quantity` units of a product at a store location.

        The decrement is one conditional UPDATE (quantity >= n), so two
        registers selling the last units race inside the database and the
        loser matches zero rows. Stock is never partially decremented and
        never goes negative.

        Returns:
            Decimal: The quantity left after the decrement

        Raises:
            InsufficientStockError: If fewer than `quantity` units are on hand
            StockNotFoundError: If the product has no stock record at the location
        """
        quantity_decimal = InventoryService._to_quantity(quantity)
        store_location_id = _pk(store_location)
        product_id = _pk(product)

        stock_rows = InventoryStock.all_objects.filter(
            tenant=tenant,
            store_location_id=store_location_id,
            product_id=product_id,
        )
        updated = stock_rows.filter(quantity__gte=quantity_decimal).update(
            quantity=F('quantity') - quantity_decimal
        )

        if not updated:
            available = stock_rows.values_list('quantity', flat=True).first()
            if available is None:
                logger.warning(
                    f"No stock record for product {product_id} at location {store_location_id}"
                )
                raise StockNotFoundError(product_id=product_id)
            logger.warning(
                f"Insufficient stock for product {product_id} at location {store_location_id}. "
                f"Required: {quantity_decimal}, Available: {available}"
            )
            raise InsufficientStockError(
                f"Insufficient stock for product {product_id}. "
                f"Required: {quantity_decimal}, Available: {available}",
                product_id=product_id,
                requested=quantity_decimal,
                available=available,
            )

        new_quantity = stock_rows.values_list('quantity', flat=True).get()

        InventoryService._log_stock_operation(
            tenant=tenant,
            product_id=product_id,
            store_location_id=store_location_id,
            operation_type=StockHistoryEntry.Operation.SALE_DEDUCTION,
            quantity_change=-quantity_decimal,
            new_quantity=new_quantity,
            user=user,
            reference_id=reference_id,
        )
        logger.info(
            f"Decremented product {product_id} at location {store_location_id} by {quantity_decimal} "
            f"(now {new_quantity}, ref {reference_id or '-'})"
        )
        return new_quantity

    @staticmethod
    def get_available_stock(tenant, store_location, product) -> Optional[Decimal]:
        """
        Get the current stock level for a product at a location.
        Returns None if no stock record exists.
        """
        return InventoryStock.all_objects.filter(
            tenant=tenant,
            store_location_id=_pk(store_location),
            product_id=_pk(product),
        ).values_list('quantity', flat=True).first()

    @staticmethod
    def check_bulk_availability(tenant, store_location, requirements: Dict) -> List[dict]:
        """
        Compare required quantities with what is on hand.

        Args:
            requirements: Mapping of product id -> total quantity needed

        Returns:
            One dict per product: product_id, requested, available (None when
            there is no stock record) and is_available.
        """
        if not requirements:
            return []

        on_hand = dict(
            InventoryStock.all_objects.filter(
                tenant=tenant,
                store_location_id=_pk(store_location),
                product_id__in=list(requirements),
            ).values_list('product_id', 'quantity')
        )

        results = []
        for product_id, requested in requirements.items():
            requested = Decimal(str(requested))
            available = on_hand.get(product_id)
            results.append({
                "product_id": product_id,
                "requested": requested,
                "available": available,
                "is_available": available is not None and available >= requested,
            })
        return results

    @staticmethod
    def get_low_stock_items(store_location, product_ids=None):
        """
        Stock rows at or below their effective threshold (row override, else
        the store location default).
        """
        queryset = InventoryStock.all_objects.filter(
            tenant_id=store_location.tenant_id,
            store_location=store_location,
        )
        if product_ids is not None:
            queryset = queryset.filter(product_id__in=list(product_ids))

        return (
            queryset
            .annotate(
                threshold=Coalesce(
                    F('low_stock_threshold'), F('store_location__low_stock_threshold')
                )
            )
            .filter(quantity__lte=F('threshold'))
            .select_related('product', 'store_location')
            .order_by('quantity', 'product__name')
        )


class DatabaseInventoryStore(InventoryStore):
    """InventoryStore over the InventoryStock table of one tenant."""

    def __init__(self, tenant, user=None):
        self.tenant = tenant
        self.user = user

    def decrement(self, product_id, store_id, quantity: int, reference_id: str = "") -> None:
        InventoryService.decrement_stock(
            self.tenant,
            store_id,
            product_id,
            quantity,
            reference_id=reference_id,
            user=self.user,
        )

    def get_available(self, product_id, store_id) -> Optional[Decimal]:
        return InventoryService.get_available_stock(self.tenant, store_id, product_id)
