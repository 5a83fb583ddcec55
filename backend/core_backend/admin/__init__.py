"""
Admin utilities for the core_backend app.
"""

from .mixins import TenantAdminMixin

__all__ = [
    'TenantAdminMixin',
]
