"""
Customer return views.
"""
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.common.utils import error_response, success_response
from ..serializers import ReturnCreateSerializer, ReturnRequestSerializer
from ..services import ReturnService


class ReturnCreateView(APIView):
    """File a return for a delivered order"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ReturnCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid return data", serializer.errors)

        data = serializer.validated_data
        return_request = ReturnService.create_return(
            request.user,
            data['orderNumber'],
            [dict(item) for item in data['items']],
            data.get('notes', ''),
        )
        return_request = ReturnService.get_return(return_request.pk)
        return success_response(
            ReturnRequestSerializer(return_request).data,
            "Return request received",
            status.HTTP_201_CREATED,
        )


class ReturnAvailabilityView(APIView):
    """Returnable quantities per order line"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        order_number = request.query_params.get('orderNumber')
        if not order_number:
            return error_response("orderNumber is required")

        order = ReturnService.get_user_order(request.user, order_number)
        lines = ReturnService.get_availability(order)
        return success_response({
            'orderNumber': order.order_number,
            'items': lines,
            'hasReturnableItems': any(line['isAvailable'] for line in lines),
        })


class MyReturnsView(APIView):
    """Returns filed by the current user"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        returns = ReturnService.list_for_user(request.user)
        return success_response(ReturnRequestSerializer(returns, many=True).data)
