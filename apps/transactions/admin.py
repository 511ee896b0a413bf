# ==========================================
# apps/transactions/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Transaction, TransactionType
from .payments import format_payment_status


VARIANT_COLORS = {
    'success': '#6B8E5E',
    'warning': '#D4A017',
    'error': '#B85C5C',
    'default': '#999',
}


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin interface for the cash book."""

    list_display = [
        'created_at',
        'shop',
        'type_badge',
        'amount',
        'product',
        'quantity',
        'payment_method',
        'payment_badge',
        'created_by',
    ]
    list_filter = ['type', 'payment_method', 'payment_status', 'shop']
    search_fields = ['note', 'category', 'order_id', 'product__name']
    readonly_fields = ['created_at', 'order_id']
    date_hierarchy = 'created_at'
    list_select_related = ['shop', 'product', 'created_by']

    def type_badge(self, obj):
        color = '#6B8E5E' if obj.type == TransactionType.INCOME else '#B85C5C'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            color, obj.get_type_display()
        )
    type_badge.short_description = 'Type'
    type_badge.admin_order_field = 'type'

    def payment_badge(self, obj):
        if not obj.payment_status:
            return '-'
        label, variant = format_payment_status(obj.payment_status)
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            VARIANT_COLORS[variant], label
        )
    payment_badge.short_description = 'Payment'
