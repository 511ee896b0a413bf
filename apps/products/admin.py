# ==========================================
# apps/products/admin.py
# ==========================================

from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for the product catalog."""

    list_display = ['__str__', 'shop', 'category', 'sell_price', 'buy_price', 'stock', 'is_active']
    list_filter = ['is_active', 'category', 'shop']
    search_fields = ['name', 'shop__name']
    readonly_fields = ['created_at', 'updated_at']

    actions = ['activate_products', 'deactivate_products']

    @admin.action(description='Show selected products at the till')
    def activate_products(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} product(s).')

    @admin.action(description='Hide selected products from the till')
    def deactivate_products(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'Deactivated {count} product(s).')
