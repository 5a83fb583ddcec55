"""
Low Stock Alert Task Tests

The checkout queues send_low_stock_alert after commit. These tests call
the task directly, the way a worker would run it.
"""
import pytest
from decimal import Decimal
from smtplib import SMTPException
from unittest.mock import patch

from inventory.models import InventoryStock
from inventory.tasks import send_low_stock_alert


@pytest.mark.django_db
class TestSendLowStockAlert:

    def test_alert_sent_to_store_email(self, store_location_tenant_a, product_tenant_a, stock_tenant_a, mailoutbox):
        InventoryStock.all_objects.filter(id=stock_tenant_a.id).update(quantity=Decimal("1.00"))

        result = send_low_stock_alert(store_location_tenant_a.id, [product_tenant_a.id])

        assert result == {"status": "completed", "items": 1, "recipients": 1}
        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == ["osu@minimart.test"]
        assert "Milo 400g" in mailoutbox[0].body
        assert mailoutbox[0].subject == "Low stock alert: Osu Branch"

    def test_falls_back_to_owner_emails(self, tenant_a, second_store_location_tenant_a, product_tenant_a, owner_user_tenant_a, cashier_user_tenant_a, mailoutbox):
        InventoryStock.all_objects.create(
            tenant=tenant_a,
            store_location=second_store_location_tenant_a,
            product=product_tenant_a,
            quantity=Decimal("3.00"),
        )

        result = send_low_stock_alert(second_store_location_tenant_a.id)

        assert result["status"] == "completed"
        assert mailoutbox[0].to == ["owner@minimart.test"]

    def test_no_recipients(self, tenant_a, second_store_location_tenant_a, product_tenant_a, mailoutbox):
        InventoryStock.all_objects.create(
            tenant=tenant_a,
            store_location=second_store_location_tenant_a,
            product=product_tenant_a,
            quantity=Decimal("0.00"),
        )

        result = send_low_stock_alert(second_store_location_tenant_a.id)

        assert result["status"] == "skipped"
        assert result["reason"] == "no_recipients"
        assert mailoutbox == []

    def test_nothing_low(self, store_location_tenant_a, product_tenant_a, stock_tenant_a, mailoutbox):
        result = send_low_stock_alert(store_location_tenant_a.id, [product_tenant_a.id])

        assert result["reason"] == "no_low_stock"
        assert mailoutbox == []

    def test_alerts_disabled(self, pos_settings, store_location_tenant_a, stock_tenant_a, mailoutbox):
        pos_settings["LOW_STOCK_ALERTS_ENABLED"] = False
        InventoryStock.all_objects.filter(id=stock_tenant_a.id).update(quantity=Decimal("0.00"))

        result = send_low_stock_alert(store_location_tenant_a.id)

        assert result == {"status": "skipped", "reason": "alerts_disabled"}
        assert mailoutbox == []

    def test_unknown_store_location(self, db):
        result = send_low_stock_alert(987654)

        assert result["status"] == "failed"
        assert result["error"] == "Store location not found"

    def test_mail_failure_is_retried(self, store_location_tenant_a, stock_tenant_a):
        InventoryStock.all_objects.filter(id=stock_tenant_a.id).update(quantity=Decimal("0.00"))

        with patch("inventory.tasks.send_mail", side_effect=SMTPException("relay down")):
            # Called outside a worker, retry() re-raises the original error
            with pytest.raises(SMTPException):
                send_low_stock_alert(store_location_tenant_a.id)
