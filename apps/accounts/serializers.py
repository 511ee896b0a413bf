from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Shop


class ShopSerializer(serializers.ModelSerializer):
    """Shop profile."""

    class Meta:
        model = Shop
        fields = [
            'id',
            'name',
            'address',
            'phone',
            'logo_url',
            'owner',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'owner', 'created_at', 'updated_at']


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    shop = ShopSerializer(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'full_name',
            'phone',
            'avatar_url',
            'role',
            'shop',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'role', 'shop', 'created_at', 'last_login']


class StaffSerializer(serializers.ModelSerializer):
    """Staff member as listed for the owner."""

    class Meta:
        model = User
        fields = ['id', 'email', 'full_name', 'phone', 'role', 'is_active', 'created_at']
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for owner registration."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    full_name = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class ShopCreateSerializer(serializers.Serializer):
    """Onboarding input: the owner's shop."""

    name = serializers.CharField(max_length=200)
    address = serializers.CharField(required=False, allow_blank=True, default='')
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    logo_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')


class StaffCreateSerializer(serializers.Serializer):
    """Input for adding a cashier account."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        min_length=6,
        style={'input_type': 'password'}
    )
    full_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
