"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like tenants, cashiers, store locations, products and stock.
"""
import pytest
from decimal import Decimal

from tenant.models import Tenant
from tenant.managers import set_current_tenant
from users.models import User
from products.models import Product, ProductVariant
from customers.models import Customer
from inventory.models import InventoryStock
from settings.models import StoreLocation


# ============================================================================
# TENANT FIXTURES
# ============================================================================

@pytest.fixture
def tenant_a(db):
    """Create test tenant A (Mini Mart)"""
    return Tenant.objects.create(
        name='Kofi Mini Mart',
        slug='kofi-mini-mart',
        is_active=True
    )


@pytest.fixture
def tenant_b(db):
    """Create test tenant B (Pharmacy)"""
    return Tenant.objects.create(
        name='Ama Pharmacy',
        slug='ama-pharmacy',
        is_active=True
    )


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def owner_user_tenant_a(tenant_a):
    """Create owner user for tenant A"""
    return User.objects.create_user(
        email='owner@minimart.test',
        username='owner_minimart',
        password='password123',
        tenant=tenant_a,
        role=User.Role.OWNER,
    )


@pytest.fixture
def cashier_user_tenant_a(tenant_a):
    """Create cashier user for tenant A"""
    return User.objects.create_user(
        email='cashier@minimart.test',
        username='cashier_minimart',
        password='password123',
        first_name='Esi',
        last_name='Mensah',
        tenant=tenant_a,
        role=User.Role.CASHIER,
    )


@pytest.fixture
def cashier_user_tenant_b(tenant_b):
    """Create cashier user for tenant B"""
    return User.objects.create_user(
        email='cashier@pharmacy.test',
        username='cashier_pharmacy',
        password='password123',
        tenant=tenant_b,
        role=User.Role.CASHIER,
    )


# ============================================================================
# STORE LOCATION FIXTURES
# ============================================================================

@pytest.fixture
def store_location_tenant_a(tenant_a):
    """Main store for tenant A: USD, 5% sales tax"""
    return StoreLocation.objects.create(
        tenant=tenant_a,
        name='Osu Branch',
        email='osu@minimart.test',
        currency='USD',
        tax_rate=Decimal('0.05'),
        low_stock_threshold=Decimal('2.00'),
    )


@pytest.fixture
def second_store_location_tenant_a(tenant_a):
    """Second store for tenant A, no tax configured"""
    return StoreLocation.objects.create(
        tenant=tenant_a,
        name='Airport Kiosk',
        currency='USD',
    )


@pytest.fixture
def store_location_tenant_b(tenant_b):
    return StoreLocation.objects.create(
        tenant=tenant_b,
        name='Main Pharmacy',
        currency='GHS',
        tax_rate=Decimal('0.15'),
    )


# ============================================================================
# PRODUCT FIXTURES
# ============================================================================

@pytest.fixture
def product_tenant_a(tenant_a):
    """Tracked product priced 10.00"""
    return Product.objects.create(
        tenant=tenant_a,
        name='Milo 400g',
        sku='MILO-400',
        price=Decimal('10.00'),
        track_inventory=True,
    )


@pytest.fixture
def second_product_tenant_a(tenant_a):
    """Untracked product priced 5.00"""
    return Product.objects.create(
        tenant=tenant_a,
        name='Bread Loaf',
        sku='BREAD-01',
        price=Decimal('5.00'),
        track_inventory=False,
    )


@pytest.fixture
def variant_tenant_a(tenant_a, product_tenant_a):
    """Variant of the tracked product with its own price"""
    return ProductVariant.objects.create(
        tenant=tenant_a,
        product=product_tenant_a,
        name='Family Pack',
        sku='MILO-FAM',
        price=Decimal('18.50'),
    )


@pytest.fixture
def inactive_product_tenant_a(tenant_a):
    return Product.objects.create(
        tenant=tenant_a,
        name='Discontinued Soda',
        price=Decimal('2.00'),
        is_active=False,
    )


@pytest.fixture
def product_tenant_b(tenant_b):
    return Product.objects.create(
        tenant=tenant_b,
        name='Paracetamol',
        price=Decimal('3.00'),
        track_inventory=True,
    )


@pytest.fixture
def customer_tenant_a(tenant_a):
    return Customer.objects.create(
        tenant=tenant_a,
        name='Yaw Boateng',
        phone_number='0241234567',
    )


# ============================================================================
# INVENTORY FIXTURES
# ============================================================================

@pytest.fixture
def stock_tenant_a(tenant_a, store_location_tenant_a, product_tenant_a):
    """10 units of the tracked product at the main store"""
    return InventoryStock.objects.create(
        tenant=tenant_a,
        store_location=store_location_tenant_a,
        product=product_tenant_a,
        quantity=Decimal('10.00'),
    )


# ============================================================================
# REGISTER FIXTURES
# ============================================================================

@pytest.fixture
def session_context(cashier_user_tenant_a, store_location_tenant_a):
    """Register context for the tenant A cashier at the main store"""
    from terminals.context import SessionContext

    return SessionContext.for_cashier(cashier_user_tenant_a, store_location_tenant_a)


@pytest.fixture
def catalog_tenant_a(tenant_a):
    from products.services import DatabaseCatalogLookup

    return DatabaseCatalogLookup(tenant_a)


@pytest.fixture
def tenant_context_a(tenant_a):
    """Set tenant A as the current tenant for the test"""
    set_current_tenant(tenant_a)
    yield tenant_a
    set_current_tenant(None)
