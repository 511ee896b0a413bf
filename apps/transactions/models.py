# ==========================================
# apps/transactions/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid

from .payments import format_payment_status


class TransactionType(models.TextChoices):
    INCOME = 'income', 'Pemasukan'
    EXPENSE = 'expense', 'Pengeluaran'


class PaymentMethod(models.TextChoices):
    CASH = 'cash', 'Tunai'
    QRIS = 'qris', 'QRIS'
    TRANSFER = 'transfer', 'Transfer'


class PaymentStatus(models.TextChoices):
    """Gateway statuses as reported by the payment webhook."""
    CAPTURE = 'capture', 'Capture'
    SETTLEMENT = 'settlement', 'Settlement'
    PENDING = 'pending', 'Pending'
    DENY = 'deny', 'Deny'
    CANCEL = 'cancel', 'Cancel'
    EXPIRE = 'expire', 'Expire'
    FAILURE = 'failure', 'Failure'


class Transaction(models.Model):
    """One entry in the shop's cash book: a sale or an expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(
        'accounts.Shop',
        on_delete=models.CASCADE,
        related_name='transactions'
    )
    type = models.CharField(max_length=10, choices=TransactionType.choices)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    # Sales of catalog items; expenses and ad-hoc income leave these empty
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    quantity = models.PositiveIntegerField(null=True, blank=True)

    category = models.CharField(max_length=100, blank=True)
    note = models.TextField(blank=True)
    receipt_url = models.URLField(max_length=500, blank=True)

    payment_method = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH
    )
    # Shared by every line of one QRIS checkout
    order_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        blank=True
    )

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='transactions'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'transactions'
        indexes = [
            models.Index(fields=['shop', 'created_at'], name='transactions_shop_created_idx'),
            models.Index(fields=['shop', 'type'], name='transactions_shop_type_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_type_display()} {self.amount} ({self.shop})"

    @property
    def payment_status_label(self):
        if not self.payment_status:
            return None
        label, variant = format_payment_status(self.payment_status)
        return {'label': label, 'variant': variant}
