"""
Returns services module.

All services are exported from this module to maintain backward compatibility.
"""
from .proration_service import LineRefund, ProrationCalculator, RefundComputation, ReturnedLine
from .credit_note_service import CreditNoteData, CreditNoteLine, CreditNoteService
from .notification_service import ReturnNotificationService
from .return_service import ReturnService
from .completion_service import ReturnCompletionService

__all__ = [
    'LineRefund',
    'ProrationCalculator',
    'RefundComputation',
    'ReturnedLine',
    'CreditNoteData',
    'CreditNoteLine',
    'CreditNoteService',
    'ReturnNotificationService',
    'ReturnService',
    'ReturnCompletionService',
]
