from decimal import Decimal
from rest_framework import serializers
from apps.products.serializers import ProductMinimalSerializer
from .models import Transaction, TransactionType, PaymentMethod


class TransactionSerializer(serializers.ModelSerializer):
    """Transaction as shown in the history list."""

    product = ProductMinimalSerializer(read_only=True)
    created_by_name = serializers.SerializerMethodField()
    payment_status_label = serializers.DictField(read_only=True, allow_null=True)

    class Meta:
        model = Transaction
        fields = [
            'id',
            'shop',
            'type',
            'amount',
            'product',
            'quantity',
            'category',
            'note',
            'receipt_url',
            'payment_method',
            'order_id',
            'payment_status',
            'payment_status_label',
            'created_by',
            'created_by_name',
            'created_at',
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return obj.created_by.get_display_name() if obj.created_by else None


class TransactionCreateSerializer(serializers.Serializer):
    """Input for recording an income or expense."""

    type = serializers.ChoiceField(choices=TransactionType.choices)
    amount = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False
    )
    product_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    note = serializers.CharField(required=False, allow_blank=True, default='')
    receipt_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices,
        required=False,
        default=PaymentMethod.CASH
    )


class CheckoutItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class CheckoutSerializer(serializers.Serializer):
    """A till cart paid in one go."""

    items = CheckoutItemSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices,
        required=False,
        default=PaymentMethod.CASH
    )


class TransactionFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the transaction list.

    Query Parameters:
        type (str): income or expense
        today (bool): Only the current business day
        date_from (date): First business-day label, inclusive
        date_to (date): Last business-day label, inclusive
    """

    type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    today = serializers.BooleanField(required=False, default=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError('date_from must not be after date_to')
        return attrs


class PaymentNotificationSerializer(serializers.Serializer):
    """Payment gateway notification body (fields we use)."""

    order_id = serializers.CharField()
    transaction_status = serializers.CharField()
    gross_amount = serializers.CharField()
    signature_key = serializers.CharField(required=False, allow_blank=True)
    status_code = serializers.CharField(required=False)
    payment_type = serializers.CharField(required=False)
    transaction_id = serializers.CharField(required=False)
    transaction_time = serializers.CharField(required=False)
