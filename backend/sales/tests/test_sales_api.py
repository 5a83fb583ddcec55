"""
Sales API Tests

Read-only sale history endpoints: listing, detail with items, filters,
and tenant isolation.
"""
import pytest
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework.test import APIClient

from terminals.context import SessionContext
from terminals.services import TerminalSession


def ring_up(cashier, store_location, product, quantity=1, payment_method="cash"):
    session = TerminalSession(SessionContext.for_cashier(cashier, store_location))
    session.cart.add_item(product.id, quantity=quantity)
    result = session.checkout(payment_method)
    assert result.ok, result.message
    return result.sale


@pytest.fixture
def api_client():
    return APIClient()


@pytest.mark.django_db
class TestSalesAPI:

    def test_requires_authentication(self, api_client):
        response = api_client.get("/api/sales/")
        assert response.status_code == 403

    def test_user_without_tenant_is_refused(self, api_client, django_user_model):
        user = django_user_model.objects.create_user(username="drifter", password="password123")
        api_client.force_login(user)

        response = api_client.get("/api/sales/")

        assert response.status_code == 403

    def test_list_sales(self, api_client, cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a):
        ring_up(cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a, quantity=2)
        api_client.force_login(cashier_user_tenant_a)

        response = api_client.get("/api/sales/")

        assert response.status_code == 200
        assert response.data["count"] == 1
        row = response.data["results"][0]
        assert row["sale_number"] == "SALE-00001"
        assert row["grand_total"] == "10.50"
        assert row["cashier_name"] == "Esi Mensah"
        assert row["store_location_name"] == "Osu Branch"
        assert "items" not in row

    def test_sale_detail_includes_items(self, api_client, cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a):
        sale = ring_up(cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a, quantity=3)
        api_client.force_login(cashier_user_tenant_a)

        response = api_client.get(f"/api/sales/{sale.id}/")

        assert response.status_code == 200
        assert response.data["subtotal"] == "15.00"
        assert response.data["tax_total"] == "0.75"
        assert len(response.data["items"]) == 1
        item = response.data["items"][0]
        assert item["product_name"] == "Bread Loaf"
        assert item["quantity"] == 3
        assert Decimal(item["total"]) == Decimal("15.00")

    def test_amounts_use_sale_currency_precision(self, api_client, tenant_a, cashier_user_tenant_a):
        from products.models import Product
        from settings.models import StoreLocation

        store = StoreLocation.objects.create(tenant=tenant_a, name="Salmiya", currency="KWD")
        dates = Product.objects.create(tenant=tenant_a, name="Dates 1kg", price=Decimal("1.235"))
        sale = ring_up(cashier_user_tenant_a, store, dates, quantity=2)
        api_client.force_login(cashier_user_tenant_a)

        response = api_client.get(f"/api/sales/{sale.id}/")

        assert response.data["grand_total"] == "2.470"
        assert response.data["tax_total"] == "0.000"
        assert response.data["items"][0]["unit_price"] == "1.235"

    def test_sales_are_isolated_by_tenant(
        self,
        api_client,
        cashier_user_tenant_a,
        cashier_user_tenant_b,
        store_location_tenant_a,
        second_product_tenant_a,
    ):
        """
        CRITICAL: Verify one tenant can never list or open another tenant's sales.
        """
        sale = ring_up(cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a)
        api_client.force_login(cashier_user_tenant_b)

        list_response = api_client.get("/api/sales/")
        detail_response = api_client.get(f"/api/sales/{sale.id}/")

        assert list_response.data["count"] == 0
        assert detail_response.status_code == 404

    def test_filter_by_payment_method(self, api_client, cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a):
        ring_up(cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a, payment_method="cash")
        ring_up(cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a, payment_method="card")
        api_client.force_login(cashier_user_tenant_a)

        response = api_client.get("/api/sales/", {"payment_method": "card"})

        assert response.data["count"] == 1
        assert response.data["results"][0]["payment_method"] == "card"

    def test_filter_by_store_location(
        self,
        api_client,
        cashier_user_tenant_a,
        store_location_tenant_a,
        second_store_location_tenant_a,
        second_product_tenant_a,
    ):
        ring_up(cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a)
        ring_up(cashier_user_tenant_a, second_store_location_tenant_a, second_product_tenant_a)
        api_client.force_login(cashier_user_tenant_a)

        response = api_client.get("/api/sales/", {"store_location": second_store_location_tenant_a.id})

        assert response.data["count"] == 1
        assert response.data["results"][0]["store_location_name"] == "Airport Kiosk"

    def test_filter_by_date_range(self, api_client, cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a):
        ring_up(cashier_user_tenant_a, store_location_tenant_a, second_product_tenant_a)
        api_client.force_login(cashier_user_tenant_a)
        today = timezone.localdate()

        same_day = api_client.get("/api/sales/", {"created_after": today.isoformat(), "created_before": today.isoformat()})
        before = api_client.get("/api/sales/", {"created_before": (today - timedelta(days=1)).isoformat()})

        assert same_day.data["count"] == 1
        assert before.data["count"] == 0

    def test_api_is_read_only(self, api_client, cashier_user_tenant_a):
        api_client.force_login(cashier_user_tenant_a)

        response = api_client.post("/api/sales/", {}, format="json")

        assert response.status_code == 405

    def test_health_check_is_public(self, client):
        response = client.get("/api/health/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
