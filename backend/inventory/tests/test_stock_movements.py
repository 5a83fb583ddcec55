"""
Inventory Stock Movement Tests

Tests for receiving stock, the conditional sale decrement, availability
checks and the low stock query used by alerts.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import (
    CartValidationError,
    InsufficientStockError,
    StockNotFoundError,
)
from inventory.models import InventoryStock, StockHistoryEntry
from inventory.services import DatabaseInventoryStore, InventoryService


@pytest.mark.django_db
class TestAddStock:

    def test_add_stock_creates_record(self, tenant_a, store_location_tenant_a, product_tenant_a):
        stock = InventoryService.add_stock(tenant_a, store_location_tenant_a, product_tenant_a, 25)

        assert stock.quantity == Decimal("25.00")
        assert stock.tenant == tenant_a

        history = StockHistoryEntry.all_objects.get(product=product_tenant_a)
        assert history.operation_type == StockHistoryEntry.Operation.CREATED
        assert history.quantity_change == Decimal("25.00")

    def test_add_stock_increments_existing(self, tenant_a, store_location_tenant_a, product_tenant_a, stock_tenant_a):
        stock = InventoryService.add_stock(
            tenant_a, store_location_tenant_a, product_tenant_a, "5", reference_id="PO-1"
        )

        assert stock.id == stock_tenant_a.id
        assert stock.quantity == Decimal("15.00")
        history = StockHistoryEntry.all_objects.get(reference_id="PO-1")
        assert history.operation_type == StockHistoryEntry.Operation.ADJUSTED_ADD
        assert history.new_quantity == Decimal("15.00")

    @pytest.mark.parametrize("quantity", [0, -3, "abc"])
    def test_invalid_quantity_rejected(self, tenant_a, store_location_tenant_a, product_tenant_a, quantity):
        with pytest.raises(CartValidationError):
            InventoryService.add_stock(tenant_a, store_location_tenant_a, product_tenant_a, quantity)


@pytest.mark.django_db
class TestDecrementStock:

    def test_decrement_stock(self, tenant_a, store_location_tenant_a, product_tenant_a, stock_tenant_a):
        remaining = InventoryService.decrement_stock(
            tenant_a, store_location_tenant_a, product_tenant_a, 4, reference_id="SALE-00001"
        )

        assert remaining == Decimal("6.00")
        stock_tenant_a.refresh_from_db()
        assert stock_tenant_a.quantity == Decimal("6.00")

        history = StockHistoryEntry.all_objects.get(reference_id="SALE-00001")
        assert history.operation_type == StockHistoryEntry.Operation.SALE_DEDUCTION
        assert history.quantity_change == Decimal("-4.00")

    def test_decrement_to_exactly_zero(self, tenant_a, store_location_tenant_a, product_tenant_a, stock_tenant_a):
        remaining = InventoryService.decrement_stock(tenant_a, store_location_tenant_a, product_tenant_a, 10)
        assert remaining == Decimal("0.00")

    def test_insufficient_stock_raises_and_leaves_stock(self, tenant_a, store_location_tenant_a, product_tenant_a, stock_tenant_a):
        """
        CRITICAL: Verify a decrement larger than the stock on hand changes nothing.
        """
        with pytest.raises(InsufficientStockError) as exc_info:
            InventoryService.decrement_stock(tenant_a, store_location_tenant_a, product_tenant_a, 11)

        assert exc_info.value.available == Decimal("10.00")
        assert exc_info.value.requested == Decimal("11")
        assert exc_info.value.code == "insufficient_stock"

        stock_tenant_a.refresh_from_db()
        assert stock_tenant_a.quantity == Decimal("10.00")
        assert not StockHistoryEntry.all_objects.filter(
            operation_type=StockHistoryEntry.Operation.SALE_DEDUCTION
        ).exists()

    def test_missing_stock_record(self, tenant_a, store_location_tenant_a, product_tenant_a):
        with pytest.raises(StockNotFoundError):
            InventoryService.decrement_stock(tenant_a, store_location_tenant_a, product_tenant_a, 1)

    def test_other_tenant_cannot_decrement(self, tenant_b, store_location_tenant_a, product_tenant_a, stock_tenant_a):
        with pytest.raises(StockNotFoundError):
            InventoryService.decrement_stock(tenant_b, store_location_tenant_a, product_tenant_a, 1)

        stock_tenant_a.refresh_from_db()
        assert stock_tenant_a.quantity == Decimal("10.00")

    def test_database_inventory_store_accepts_ids(self, tenant_a, store_location_tenant_a, product_tenant_a, stock_tenant_a, cashier_user_tenant_a):
        store = DatabaseInventoryStore(tenant_a, user=cashier_user_tenant_a)

        store.decrement(product_tenant_a.id, store_location_tenant_a.id, 3, reference_id="SALE-00009")

        assert store.get_available(product_tenant_a.id, store_location_tenant_a.id) == Decimal("7.00")
        history = StockHistoryEntry.all_objects.get(reference_id="SALE-00009")
        assert history.user == cashier_user_tenant_a


@pytest.mark.django_db
class TestAvailability:

    def test_get_available_stock(self, tenant_a, store_location_tenant_a, product_tenant_a, second_product_tenant_a, stock_tenant_a):
        assert InventoryService.get_available_stock(tenant_a, store_location_tenant_a, product_tenant_a) == Decimal("10.00")
        assert InventoryService.get_available_stock(tenant_a, store_location_tenant_a, second_product_tenant_a) is None

    def test_check_bulk_availability(self, tenant_a, store_location_tenant_a, product_tenant_a, second_product_tenant_a, stock_tenant_a):
        results = InventoryService.check_bulk_availability(
            tenant_a,
            store_location_tenant_a,
            {product_tenant_a.id: 12, second_product_tenant_a.id: 1},
        )

        by_product = {row["product_id"]: row for row in results}
        assert by_product[product_tenant_a.id]["is_available"] is False
        assert by_product[product_tenant_a.id]["available"] == Decimal("10.00")
        assert by_product[second_product_tenant_a.id]["available"] is None
        assert by_product[second_product_tenant_a.id]["is_available"] is False

    def test_check_bulk_availability_empty(self, tenant_a, store_location_tenant_a):
        assert InventoryService.check_bulk_availability(tenant_a, store_location_tenant_a, {}) == []


@pytest.mark.django_db
class TestLowStock:

    def test_low_stock_uses_location_threshold(self, tenant_a, store_location_tenant_a, product_tenant_a, stock_tenant_a):
        assert not InventoryService.get_low_stock_items(store_location_tenant_a).exists()

        InventoryStock.all_objects.filter(id=stock_tenant_a.id).update(quantity=Decimal("2.00"))

        items = list(InventoryService.get_low_stock_items(store_location_tenant_a))
        assert [item.product_id for item in items] == [product_tenant_a.id]
        assert items[0].threshold == Decimal("2.00")

    def test_row_threshold_overrides_location(self, tenant_a, store_location_tenant_a, product_tenant_a, stock_tenant_a):
        stock_tenant_a.low_stock_threshold = Decimal("12.00")
        stock_tenant_a.save()

        assert stock_tenant_a.is_low_stock
        assert InventoryService.get_low_stock_items(store_location_tenant_a, [product_tenant_a.id]).count() == 1

    def test_product_filter(self, tenant_a, store_location_tenant_a, product_tenant_a, second_product_tenant_a, stock_tenant_a):
        InventoryStock.all_objects.filter(id=stock_tenant_a.id).update(quantity=Decimal("0.00"))

        assert not InventoryService.get_low_stock_items(
            store_location_tenant_a, [second_product_tenant_a.id]
        ).exists()
