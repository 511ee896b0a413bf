# ==========================================
# apps/stock/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import StockItem, ProductStockUsage


class UsageInline(admin.TabularInline):
    model = ProductStockUsage
    extra = 0
    autocomplete_fields = ['product']


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    """Admin interface for stock items."""

    list_display = ['name', 'shop', 'quantity', 'unit', 'min_stock', 'low_badge', 'is_active']
    list_filter = ['is_active', 'shop']
    search_fields = ['name', 'shop__name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [UsageInline]

    def low_badge(self, obj):
        if obj.is_low:
            return format_html(
                '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Low</span>'
            )
        return format_html(
            '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">OK</span>'
        )
    low_badge.short_description = 'Level'


@admin.register(ProductStockUsage)
class ProductStockUsageAdmin(admin.ModelAdmin):
    list_display = ['product', 'stock_item', 'quantity_used']
    search_fields = ['product__name', 'stock_item__name']
    list_select_related = ['product', 'stock_item']
