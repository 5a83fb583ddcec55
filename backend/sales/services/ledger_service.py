from typing import Optional, Sequence
import logging

from django.db import DatabaseError

from core_backend.base.interfaces import SaleLedger
from core_backend.exceptions import PersistenceError
from sales.entities import SaleHeader, SaleLine
from sales.models import Sale, SaleItem

logger = logging.getLogger(__name__)


class DatabaseSaleLedger(SaleLedger):
    """
    SaleLedger over the Sale and SaleItem tables of one tenant.

    Does not open transactions of its own: the checkout orchestrator wraps
    the header, the items and the stock decrements in one atomic block.
    """

    def __init__(self, tenant):
        self.tenant = tenant

    def find_by_idempotency_key(self, idempotency_key: str) -> Optional[Sale]:
        try:
            return Sale.all_objects.filter(
                tenant=self.tenant, idempotency_key=idempotency_key
            ).first()
        except DatabaseError as exc:
            raise PersistenceError(f"Could not look up sale for key {idempotency_key}") from exc

    def create_sale(self, header: SaleHeader) -> Sale:
        sale = Sale(
            tenant=self.tenant,
            store_location_id=header.store_id,
            cashier_id=header.cashier_id,
            customer_id=header.customer_id,
            idempotency_key=header.idempotency_key,
            payment_method=header.payment_method,
            payment_status=Sale.PaymentStatus.PAID,
            status=Sale.SaleStatus.COMPLETED,
            fulfillment_mode=header.fulfillment_mode,
            currency=header.currency,
            subtotal=header.subtotal,
            discount_total=header.discount_total,
            tax_total=header.tax_total,
            grand_total=header.grand_total,
            item_count=header.item_count,
            notes=header.notes,
        )
        try:
            sale.save()
        except DatabaseError as exc:
            logger.error(f"Failed to persist sale for key {header.idempotency_key}: {exc}", exc_info=True)
            raise PersistenceError("Could not record the sale") from exc
        return sale

    def create_items(self, sale: Sale, items: Sequence[SaleLine]) -> list:
        rows = [
            SaleItem(
                tenant=self.tenant,
                sale=sale,
                product_id=item.product_id,
                variant_id=item.variant_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                discount=item.discount,
                total=item.total,
            )
            for item in items
        ]
        try:
            return SaleItem.all_objects.bulk_create(rows)
        except DatabaseError as exc:
            logger.error(f"Failed to persist items for sale {sale.sale_number}: {exc}", exc_info=True)
            raise PersistenceError("Could not record the sale items") from exc
