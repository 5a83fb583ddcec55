from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
import logging

from .services import InventoryService

logger = logging.getLogger(__name__)


def _alert_recipients(store_location):
    """The location's contact address, falling back to the tenant's owners."""
    if store_location.email:
        return [store_location.email]

    from users.models import User

    return list(
        User.objects.filter(
            tenant_id=store_location.tenant_id,
            role=User.Role.OWNER,
            is_active=True,
            email__gt='',
        ).values_list('email', flat=True)
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_low_stock_alert(self, store_location_id, product_ids=None):
    """
    Notify the store when products sold in a sale are at or below their
    low-stock threshold.

    Queued with transaction.on_commit by the checkout, so it only ever sees
    committed stock levels and a rolled-back sale never triggers an alert.

    Args:
        store_location_id: Location whose stock was decremented
        product_ids: Products to check (None checks the whole location)

    Returns:
        dict: Status and details of the alert
    """
    if not settings.POS.get("LOW_STOCK_ALERTS_ENABLED", True):
        return {"status": "skipped", "reason": "alerts_disabled"}

    from settings.models import StoreLocation

    try:
        store_location = StoreLocation.all_objects.get(id=store_location_id)
    except StoreLocation.DoesNotExist:
        logger.error(f"Store location {store_location_id} not found for low stock alert")
        return {
            "status": "failed",
            "error": "Store location not found",
            "store_location_id": store_location_id,
        }

    low_items = list(InventoryService.get_low_stock_items(store_location, product_ids))
    if not low_items:
        return {"status": "skipped", "reason": "no_low_stock", "store_location_id": store_location_id}

    for item in low_items:
        logger.warning(
            f"Low stock at {store_location.name}: {item.product.name} "
            f"({item.quantity} left, threshold {item.threshold})"
        )

    recipients = _alert_recipients(store_location)
    if not recipients:
        logger.warning(f"No recipients with valid emails for low stock alert at {store_location.name}")
        return {
            "status": "skipped",
            "reason": "no_recipients",
            "items": len(low_items),
        }

    lines = [
        f"- {item.product.name}: {item.quantity} left (threshold {item.threshold})"
        for item in low_items
    ]
    body = (
        f"The following products are running low at {store_location.name}:\n\n"
        + "\n".join(lines)
    )

    try:
        send_mail(
            subject=f"Low stock alert: {store_location.name}",
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=recipients,
        )
    except Exception as exc:
        logger.error(f"Failed to send low stock alert for {store_location.name}: {type(exc).__name__}")
        raise self.retry(exc=exc)

    logger.info(f"Low stock alert sent for {len(low_items)} items at {store_location.name}")
    return {
        "status": "completed",
        "items": len(low_items),
        "recipients": len(recipients),
    }
