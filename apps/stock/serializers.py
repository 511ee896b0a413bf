from rest_framework import serializers
from .models import StockItem, ProductStockUsage


class StockItemSerializer(serializers.ModelSerializer):
    """Stock item with its low-stock flag."""

    is_low = serializers.BooleanField(read_only=True)

    class Meta:
        model = StockItem
        fields = [
            'id',
            'shop',
            'name',
            'quantity',
            'unit',
            'min_stock',
            'is_low',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'shop', 'is_active', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name cannot be blank')
        return value


class StockFilterSerializer(serializers.Serializer):
    low = serializers.BooleanField(required=False, default=False)


class RestockSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1)


class ProductStockUsageSerializer(serializers.ModelSerializer):
    """Link between a product and the stock item it consumes."""

    product_name = serializers.CharField(source='product.name', read_only=True)
    stock_item_name = serializers.CharField(source='stock_item.name', read_only=True)
    unit = serializers.CharField(source='stock_item.unit', read_only=True)

    class Meta:
        model = ProductStockUsage
        fields = [
            'id',
            'product',
            'product_name',
            'stock_item',
            'stock_item_name',
            'unit',
            'quantity_used',
        ]
        read_only_fields = ['id']


class UsageUpdateSerializer(serializers.Serializer):
    quantity_used = serializers.IntegerField(min_value=1)


class UsageFilterSerializer(serializers.Serializer):
    product = serializers.UUIDField(required=False)
