"""
Order services module.

All services are exported from this module to maintain backward compatibility.
"""
from .ledger import LedgerLine, OrderLedger
from .order_service import OrderService

__all__ = [
    'LedgerLine',
    'OrderLedger',
    'OrderService',
]
