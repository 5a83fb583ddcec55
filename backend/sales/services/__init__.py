"""
Sales services package.

- DatabaseSaleLedger: Sale and SaleItem persistence behind the SaleLedger interface
- CheckoutOrchestrator: Commits a cart as one sale with its stock decrements
"""

from .ledger_service import DatabaseSaleLedger
from .checkout_service import CheckoutOrchestrator, CheckoutResult, CheckoutState

__all__ = [
    'DatabaseSaleLedger',
    'CheckoutOrchestrator',
    'CheckoutResult',
    'CheckoutState',
]
