# ==========================================
# apps/products/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class ProductCategory(models.TextChoices):
    ICE_CREAM = 'ice_cream', 'Es Krim'
    DRINK = 'drink', 'Minuman'
    FOOD = 'food', 'Makanan'
    SNACK = 'snack', 'Camilan'
    OTHER = 'other', 'Lainnya'


class Product(models.Model):
    """Item on the shop's menu, sold at the till."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(
        'accounts.Shop',
        on_delete=models.CASCADE,
        related_name='products'
    )
    name = models.CharField(max_length=200, db_index=True)

    buy_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    sell_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Ready-made units on hand; ingredients live in stock items
    stock = models.PositiveIntegerField(default=0)

    category = models.CharField(
        max_length=50,
        choices=ProductCategory.choices,
        default=ProductCategory.OTHER
    )
    emoji = models.CharField(max_length=16, blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['shop', 'is_active'], name='products_shop_active_idx'),
            models.Index(fields=['shop', 'category'], name='products_shop_category_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.emoji} {self.name}".strip()

    @property
    def margin(self):
        """Profit per unit sold."""
        return self.sell_price - self.buy_price
