from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['slug', 'name', 'price_cents', 'stock_quantity', 'in_stock', 'update_time']
    list_filter = ['in_stock']
    search_fields = ['slug', 'name']
