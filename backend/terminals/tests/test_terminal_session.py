"""
Terminal Session Tests

One register end to end: context from the store location, catalog
lookups, the advisory stock pre-check and held sales.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import CartValidationError
from sales.models import Sale
from sales.services import CheckoutState
from terminals.context import SessionContext
from terminals.services import TerminalSession


@pytest.fixture
def terminal(session_context):
    return TerminalSession(session_context)


@pytest.mark.django_db
class TestSessionContext:

    def test_context_from_store_location(self, session_context, tenant_a, store_location_tenant_a, cashier_user_tenant_a):
        assert session_context.tenant_id == tenant_a.id
        assert session_context.store_id == store_location_tenant_a.id
        assert session_context.cashier_id == cashier_user_tenant_a.id
        assert session_context.currency == "USD"
        assert session_context.tax_rate == Decimal("0.05")

    def test_default_currency_when_store_has_none(self, pos_settings, tenant_a, cashier_user_tenant_a):
        from settings.models import StoreLocation

        pos_settings["DEFAULT_CURRENCY"] = "GHS"
        store = StoreLocation.objects.create(tenant=tenant_a, name="Pop-up", currency="")

        context = SessionContext.for_cashier(cashier_user_tenant_a, store)

        assert context.currency == "GHS"
        assert context.tax_rate == Decimal("0")


@pytest.mark.django_db
class TestCatalogLookups:

    def test_add_variant(self, terminal, product_tenant_a, variant_tenant_a):
        line = terminal.cart.add_item(product_tenant_a.id, variant_id=variant_tenant_a.id)

        assert line.unit_price == Decimal("18.50")
        assert line.variant.id == variant_tenant_a.id

    def test_inactive_product_rejected(self, terminal, inactive_product_tenant_a):
        with pytest.raises(CartValidationError, match="not available"):
            terminal.cart.add_item(inactive_product_tenant_a.id)

    def test_other_tenants_product_rejected(self, terminal, product_tenant_b):
        """CRITICAL: Verify a register cannot sell another tenant's product"""
        with pytest.raises(CartValidationError, match="not found"):
            terminal.cart.add_item(product_tenant_b.id)
        assert terminal.cart.is_empty

    def test_unit_price_prefers_variant_price(self, catalog_tenant_a, product_tenant_a, variant_tenant_a, tenant_a):
        assert catalog_tenant_a.get_unit_price(product_tenant_a.id) == Decimal("10.00")
        assert catalog_tenant_a.get_unit_price(product_tenant_a.id, variant_tenant_a.id) == Decimal("18.50")

        from products.models import ProductVariant
        plain = ProductVariant.objects.create(tenant=tenant_a, product=product_tenant_a, name="Sachet")
        assert catalog_tenant_a.get_unit_price(product_tenant_a.id, plain.id) == Decimal("10.00")

    def test_variant_of_other_product_rejected(self, terminal, tenant_a, second_product_tenant_a, variant_tenant_a):
        with pytest.raises(CartValidationError, match="Variant"):
            terminal.cart.add_item(second_product_tenant_a.id, variant_id=variant_tenant_a.id)


@pytest.mark.django_db
class TestValidateStock:

    def test_quantities_are_aggregated_across_lines(self, terminal, product_tenant_a, stock_tenant_a):
        """
        Two lines of the same product (one discounted, so not merged) must be
        checked against stock as one total.
        """
        first = terminal.cart.add_item(product_tenant_a.id, quantity=6)
        terminal.cart.set_item_discount(first.line_id, "1.00")
        terminal.cart.add_item(product_tenant_a.id, quantity=5)
        assert len(terminal.cart.lines) == 2

        shortfalls = terminal.validate_stock()

        assert shortfalls == [{
            "product_id": product_tenant_a.id,
            "name": "Milo 400g",
            "requested": 11,
            "available": Decimal("10.00"),
        }]

    def test_enough_stock(self, terminal, product_tenant_a, second_product_tenant_a, stock_tenant_a):
        terminal.cart.add_item(product_tenant_a.id, quantity=10)
        terminal.cart.add_item(second_product_tenant_a.id, quantity=50)

        assert terminal.validate_stock() == []

    def test_missing_stock_record(self, terminal, product_tenant_a):
        terminal.cart.add_item(product_tenant_a.id)

        assert terminal.validate_stock()[0]["available"] is None

    def test_pre_check_does_not_reserve(self, terminal, product_tenant_a, stock_tenant_a):
        terminal.cart.add_item(product_tenant_a.id, quantity=4)
        terminal.validate_stock()

        stock_tenant_a.refresh_from_db()
        assert stock_tenant_a.quantity == Decimal("10.00")


@pytest.mark.django_db
class TestHeldSalesOnRegister:

    def test_hold_serve_next_customer_and_resume(self, terminal, product_tenant_a, second_product_tenant_a, stock_tenant_a):
        terminal.cart.add_item(product_tenant_a.id, quantity=2)
        held = terminal.hold()

        terminal.cart.add_item(second_product_tenant_a.id)
        assert terminal.checkout("cash").ok

        assert terminal.resume(held.id) is None
        assert terminal.held_sales() == []
        result = terminal.checkout("card")

        assert result.ok
        assert result.sale.idempotency_key == held.checkout_key
        assert Sale.all_objects.count() == 2
        assert terminal.checkout_state == CheckoutState.COMMITTED

    def test_held_sales_listed(self, terminal, product_tenant_a, second_product_tenant_a):
        terminal.cart.add_item(product_tenant_a.id)
        first = terminal.hold()
        terminal.cart.add_item(second_product_tenant_a.id)
        second = terminal.hold()

        assert [held.id for held in terminal.held_sales()] == [first.id, second.id]
