"""
Returns models module.

All models are exported from this module to maintain backward compatibility.
"""
from .return_request import ReturnRequest
from .return_item import ReturnItem

__all__ = [
    'ReturnRequest',
    'ReturnItem',
]
