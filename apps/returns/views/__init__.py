"""
Returns views module.

All views are exported from this module to maintain backward compatibility.
"""
from .customer_views import ReturnCreateView, ReturnAvailabilityView, MyReturnsView
from .admin_views import (
    AdminReturnListView, AdminReturnDetailView, AdminCreditNoteView, AdminRefundPreviewView,
)

__all__ = [
    'ReturnCreateView',
    'ReturnAvailabilityView',
    'MyReturnsView',
    'AdminReturnListView',
    'AdminReturnDetailView',
    'AdminCreditNoteView',
    'AdminRefundPreviewView',
]
