from django.contrib import admin
from .models import ReturnItem, ReturnRequest


class ReturnItemInline(admin.TabularInline):
    model = ReturnItem
    extra = 0
    fields = [
        'line_no', 'name', 'unit_price_cents', 'requested_quantity', 'quantity',
        'accepted', 'effective_unit_cents', 'refund_cents'
    ]
    readonly_fields = fields


@admin.register(ReturnRequest)
class ReturnRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'order', 'user', 'status', 'refund_amount_cents', 'is_full_return', 'created_at']
    list_filter = ['status', 'is_full_return', 'created_at']
    search_fields = ['order__order_number', 'user__username', 'user__email']
    inlines = [ReturnItemInline]
    # Decisions go through the admin API so points and stock stay consistent
    readonly_fields = [
        'order', 'user', 'status', 'items_refund_cents', 'shipping_refund_cents', 'is_full_return',
        'frozen_points', 'points_deducted', 'points_settled_at', 'restocked_at',
        'completed_at', 'created_at', 'updated_at'
    ]
