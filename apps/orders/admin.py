from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['line_no', 'product_slug', 'name', 'unit_price_cents', 'quantity', 'selected_options']

    def has_add_permission(self, request, obj=None):
        return False  # Lines are fixed at placement


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        'order_number', 'user', 'status', 'total_cents',
        'bonus_points_earned', 'bonus_points_credited', 'created_at'
    ]
    list_filter = ['status', 'bonus_points_credited', 'created_at']
    search_fields = ['order_number', 'user__username', 'user__email']
    inlines = [OrderItemInline]
    # Money and points fields are written by the services only
    readonly_fields = [
        'subtotal_cents', 'shipping_cost_cents', 'discount_cents', 'discount_code', 'total_cents',
        'bonus_points_redeemed', 'bonus_points_earned', 'bonus_points_credited',
        'bonus_points_credited_at', 'bonus_points_scheduled_at', 'bonus_points_deducted',
        'bonus_points_deducted_at', 'version', 'created_at', 'updated_at',
    ]
