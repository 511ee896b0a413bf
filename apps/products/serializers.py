from rest_framework import serializers
from .models import Product, ProductCategory


class ProductFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for product filtering.

    Query Parameters:
        search (str): Match on name or category
        category (str): Exact category
        include_inactive (bool): Also list soft-deleted products
    """

    search = serializers.CharField(max_length=100, required=False)
    category = serializers.ChoiceField(choices=ProductCategory.choices, required=False)
    include_inactive = serializers.BooleanField(required=False, default=False)


class ProductSerializer(serializers.ModelSerializer):
    """Main serializer for products."""

    margin = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'shop',
            'name',
            'buy_price',
            'sell_price',
            'margin',
            'stock',
            'category',
            'emoji',
            'image_url',
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


class ProductMinimalSerializer(serializers.ModelSerializer):
    """Minimal product info for nested serialization."""

    class Meta:
        model = Product
        fields = ['id', 'name', 'emoji', 'sell_price']
        read_only_fields = fields
