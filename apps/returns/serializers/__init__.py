"""
Returns serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .return_serializers import (
    ReturnItemSerializer,
    ReturnRequestSerializer,
    ReturnCreateSerializer,
    ReturnUpdateSerializer,
)

__all__ = [
    'ReturnItemSerializer',
    'ReturnRequestSerializer',
    'ReturnCreateSerializer',
    'ReturnUpdateSerializer',
]
