"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from tenant.managers import set_current_tenant

# Import all fixtures from core_backend.tests.fixtures
from core_backend.tests.fixtures import *  # noqa: F401,F403


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def reset_tenant_context():
    """
    Reset tenant context after each test.

    CRITICAL: This prevents tenant context from leaking between tests.
    If tenant context leaks, tests may pass when they should fail.
    """
    yield  # Run the test
    set_current_tenant(None)


@pytest.fixture
def pos_settings(settings):
    """
    Writable copy of the POS settings dict.

    Mutating settings.POS in place would leak into later tests; this
    replaces the whole dict so pytest-django restores it afterwards.
    """
    settings.POS = dict(settings.POS)
    return settings.POS
