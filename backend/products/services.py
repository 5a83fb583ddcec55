from typing import Optional, Tuple
import logging

from core_backend.base.interfaces import CatalogLookup
from core_backend.exceptions import CartValidationError
from cart.entities import ProductRef, VariantRef

from .models import Product, ProductVariant

logger = logging.getLogger(__name__)


class DatabaseCatalogLookup(CatalogLookup):
    """
    Catalog backed by the products tables of one tenant.

    Queries go through all_objects with an explicit tenant filter so the
    lookup works outside the request cycle (Celery, management commands).
    """

    def __init__(self, tenant):
        if tenant is None:
            raise ValueError("Tenant is required for catalog lookups")
        self.tenant = tenant

    def get_product(self, product_id, variant_id=None) -> Tuple[ProductRef, Optional[VariantRef]]:
        try:
            product = Product.all_objects.get(id=product_id, tenant=self.tenant)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise CartValidationError(f"Product {product_id} not found", product_id=product_id)

        if not product.is_active:
            raise CartValidationError(f"Product '{product.name}' is not available for sale", product_id=product_id)

        variant_ref = None
        if variant_id is not None:
            try:
                variant = ProductVariant.all_objects.get(
                    id=variant_id, product=product, tenant=self.tenant
                )
            except (ProductVariant.DoesNotExist, ValueError, TypeError):
                raise CartValidationError(
                    f"Variant {variant_id} not found for product '{product.name}'",
                    product_id=product_id,
                    variant_id=variant_id,
                )
            if not variant.is_active:
                raise CartValidationError(f"Variant '{variant}' is not available for sale", variant_id=variant_id)
            variant_ref = VariantRef(id=variant.id, name=variant.name, price=variant.price, sku=variant.sku)

        product_ref = ProductRef(
            id=product.id,
            name=product.name,
            unit_price=product.price,
            track_inventory=product.track_inventory,
            sku=product.sku,
        )
        return product_ref, variant_ref
