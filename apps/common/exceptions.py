"""
Domain exceptions for the return and loyalty reconciliation flow,
plus the custom exception handler for consistent API responses.
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


class ReconciliationError(Exception):
    """Base class for errors raised by the order/return/points services"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Request could not be processed'

    def __init__(self, message=None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class NotFoundError(ReconciliationError):
    """Order, return, timer or user is missing"""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Resource not found'


class ValidationError(ReconciliationError):
    """Over-returning a line, invalid status transition, bad input"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Validation error'


class InconsistentStateError(ReconciliationError):
    """Persisted state contradicts itself (e.g. points credited to a missing user)"""

    status_code = status.HTTP_409_CONFLICT
    default_message = 'Inconsistent state'


class ConcurrentUpdateError(InconsistentStateError):
    """A versioned row was modified by someone else between read and write"""

    default_message = 'Record was modified concurrently, please retry'


class CollaboratorFailure(ReconciliationError):
    """Restock, email or document generation failed"""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = 'Dependent service failed'


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error responses
    """
    if isinstance(exc, ReconciliationError):
        if exc.status_code >= 500:
            logger.error(f"Service failure: {exc.message} {exc.context}", exc_info=True)
        else:
            logger.warning(f"Request rejected: {exc.message} {exc.context}")
        data = {
            'code': exc.status_code,
            'msg': exc.message,
        }
        if exc.context:
            data['errors'] = {key: str(value) for key, value in exc.context.items()}
        return Response(data, status=exc.status_code)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        logger.error(f"API Exception: {exc}", exc_info=True)

        custom_response_data = {
            'code': response.status_code,
            'msg': 'An error occurred',
            'errors': response.data
        }

        if response.status_code == status.HTTP_400_BAD_REQUEST:
            custom_response_data['msg'] = 'Validation error'
        elif response.status_code == status.HTTP_401_UNAUTHORIZED:
            custom_response_data['msg'] = 'Authentication required'
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            custom_response_data['msg'] = 'Permission denied'
        elif response.status_code == status.HTTP_404_NOT_FOUND:
            custom_response_data['msg'] = 'Resource not found'
        elif response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            custom_response_data['msg'] = 'Method not allowed'
        elif response.status_code >= 500:
            custom_response_data['msg'] = 'Internal server error'
            # Don't expose internal errors in production
            if not hasattr(context['request'], 'user') or not context['request'].user.is_staff:
                custom_response_data['errors'] = {'detail': 'Internal server error'}

        response.data = custom_response_data

    return response
