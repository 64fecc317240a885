"""
Return serializers. Input and output use camelCase keys.
"""
from rest_framework import serializers

from ..models import ReturnItem, ReturnRequest


class ReturnItemSerializer(serializers.ModelSerializer):
    """Serializer for return lines"""
    lineNo = serializers.IntegerField(source='line_no')
    productId = serializers.CharField(source='product_slug')
    unitPriceCents = serializers.IntegerField(source='unit_price_cents')
    selectedOptions = serializers.JSONField(source='selected_options')
    requestedQuantity = serializers.IntegerField(source='requested_quantity')
    effectiveUnitCents = serializers.IntegerField(source='effective_unit_cents', allow_null=True)
    refundCents = serializers.IntegerField(source='refund_cents', allow_null=True)

    class Meta:
        model = ReturnItem
        fields = [
            'lineNo', 'productId', 'name', 'unitPriceCents', 'selectedOptions',
            'requestedQuantity', 'quantity', 'accepted', 'effectiveUnitCents', 'refundCents'
        ]
        read_only_fields = fields


class ReturnRequestSerializer(serializers.ModelSerializer):
    """Serializer for return requests"""
    orderNumber = serializers.CharField(source='order.order_number', read_only=True)
    items = ReturnItemSerializer(many=True, read_only=True)
    refund = serializers.SerializerMethodField()
    itemsRefundCents = serializers.IntegerField(source='items_refund_cents', allow_null=True)
    shippingRefundCents = serializers.IntegerField(source='shipping_refund_cents', allow_null=True)
    isFullReturn = serializers.BooleanField(source='is_full_return')
    frozenPoints = serializers.IntegerField(source='frozen_points')
    pointsDeducted = serializers.IntegerField(source='points_deducted')
    completedAt = serializers.DateTimeField(source='completed_at', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = ReturnRequest
        fields = [
            'id', 'orderNumber', 'status', 'notes', 'items', 'refund',
            'itemsRefundCents', 'shippingRefundCents', 'isFullReturn',
            'frozenPoints', 'pointsDeducted', 'completedAt', 'createdAt', 'updatedAt'
        ]
        read_only_fields = fields

    def get_refund(self, obj):
        return {
            'method': obj.refund_method or None,
            'reference': obj.refund_reference or None,
            'amountCents': obj.refund_amount_cents,
        }


class ReturnLineInputSerializer(serializers.Serializer):
    lineNo = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class ReturnCreateSerializer(serializers.Serializer):
    """Serializer for customers filing a return"""
    orderNumber = serializers.CharField(max_length=50)
    items = ReturnLineInputSerializer(many=True)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True, default='')

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("Select at least one item")
        return value


class ItemDecisionSerializer(serializers.Serializer):
    lineNo = serializers.IntegerField(min_value=1, required=False)
    productId = serializers.CharField(max_length=200, required=False)
    accepted = serializers.BooleanField(required=False)
    quantity = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    def validate(self, attrs):
        if 'lineNo' not in attrs and 'productId' not in attrs:
            raise serializers.ValidationError("lineNo or productId is required")
        return attrs


class RefundRecordSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=ReturnRequest.REFUND_METHOD_CHOICES, required=False)
    reference = serializers.CharField(max_length=200, required=False, allow_blank=True)
    amountCents = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class ReturnUpdateSerializer(serializers.Serializer):
    """Serializer for admin decisions on a return"""
    items = ItemDecisionSerializer(many=True, required=False)
    status = serializers.ChoiceField(
        choices=[ReturnRequest.STATUS_PROCESSING, ReturnRequest.STATUS_COMPLETED, ReturnRequest.STATUS_REJECTED],
        required=False,
    )
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    refund = RefundRecordSerializer(required=False)
