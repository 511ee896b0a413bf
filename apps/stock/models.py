# ==========================================
# apps/stock/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
import uuid


class StockItem(models.Model):
    """Tracked ingredient or supply (cups, straws, cones, milk...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(
        'accounts.Shop',
        on_delete=models.CASCADE,
        related_name='stock_items'
    )
    name = models.CharField(max_length=200)

    # Never negative: sales floor it at zero
    quantity = models.PositiveIntegerField(default=0)
    unit = models.CharField(max_length=20, default='pcs')
    min_stock = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'stock_items'
        indexes = [
            models.Index(fields=['shop', 'is_active'], name='stock_items_shop_active_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit})"

    @property
    def is_low(self):
        """At or below the reorder threshold."""
        return self.quantity <= self.min_stock


class ProductStockUsage(models.Model):
    """How many units of a stock item one sold product consumes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.CASCADE,
        related_name='stock_usages'
    )
    stock_item = models.ForeignKey(
        StockItem,
        on_delete=models.CASCADE,
        related_name='usages'
    )
    quantity_used = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)]
    )

    class Meta:
        db_table = 'product_stock_usage'
        unique_together = [['product', 'stock_item']]

    def __str__(self):
        return f"{self.product.name} uses {self.quantity_used} x {self.stock_item.name}"

    @property
    def shop_id(self):
        return self.stock_item.shop_id
