"""
Admin return views: listing, decisions, credit note data and refund preview.
"""
from rest_framework.permissions import IsAdminUser
from rest_framework.views import APIView

from apps.common.utils import error_response, paginated_response, success_response
from ..serializers import ReturnRequestSerializer, ReturnUpdateSerializer
from ..services import CreditNoteService, ReturnCompletionService, ReturnService


class AdminReturnListView(APIView):
    """Paginated list of returns, filterable by ``status`` and ``user``"""
    permission_classes = [IsAdminUser]

    def get(self, request):
        user_id = request.query_params.get('user')
        if user_id is not None:
            try:
                user_id = int(user_id)
            except ValueError:
                return error_response("Invalid user id", {'user': [user_id]})

        queryset = ReturnService.list_for_admin(
            status=request.query_params.get('status'),
            user_id=user_id,
        )
        return paginated_response(queryset, ReturnRequestSerializer, request)


class AdminReturnDetailView(APIView):
    """Read a return or apply an admin decision to it"""
    permission_classes = [IsAdminUser]

    def get(self, request, pk):
        return_request = ReturnService.get_return(pk)
        return success_response(ReturnRequestSerializer(return_request).data)

    def patch(self, request, pk):
        serializer = ReturnUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid return update", serializer.errors)

        data = serializer.validated_data
        ReturnCompletionService.process_update(
            pk,
            items=[dict(item) for item in data.get('items', [])] or None,
            status=data.get('status'),
            notes=data.get('notes'),
            refund=dict(data['refund']) if data.get('refund') else None,
        )
        return_request = ReturnService.get_return(pk)
        return success_response(ReturnRequestSerializer(return_request).data, "Return updated")


class AdminCreditNoteView(APIView):
    """Credit note data of a completed return, for (re)generating the document"""
    permission_classes = [IsAdminUser]

    def get(self, request, pk):
        return_request = ReturnService.get_return(pk)
        data = CreditNoteService.build_for_return(return_request)
        return success_response(data.as_dict())


class AdminRefundPreviewView(APIView):
    """Refund the current item decisions would produce"""
    permission_classes = [IsAdminUser]

    def get(self, request, pk):
        return_request = ReturnService.get_return(pk)
        computation = ReturnService.preview_refund(return_request)
        return success_response({
            'lines': [
                {
                    'lineNo': line.line_no,
                    'name': line.name,
                    'quantity': line.quantity,
                    'unitPriceCents': line.unit_price_cents,
                    'effectiveUnitCents': line.effective_unit_cents,
                    'refundCents': line.refund_cents,
                }
                for line in computation.lines
            ],
            'itemsRefundCents': computation.items_refund_cents,
            'shippingRefundCents': computation.shipping_refund_cents,
            'isFullReturn': computation.is_full_return,
            'totalRefundCents': computation.total_refund_cents,
        })
