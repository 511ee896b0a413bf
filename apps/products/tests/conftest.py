import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Shop, UserRole
from apps.products.models import Product, ProductCategory


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def owner(db):
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        full_name='Shop Owner',
        role=UserRole.OWNER,
    )


@pytest.fixture
def shop(owner):
    shop = Shop.objects.create(name="D'Creamy", owner=owner)
    owner.shop = shop
    owner.save()
    return shop


@pytest.fixture
def staff(shop):
    return User.objects.create_user(
        email='cashier@example.com',
        password='TestPass123!',
        role=UserRole.STAFF,
        shop=shop,
    )


@pytest.fixture
def other_shop(db):
    other_owner = User.objects.create_user(email='rival@example.com', password='TestPass123!')
    shop = Shop.objects.create(name='Rival Warung', owner=other_owner)
    other_owner.shop = shop
    other_owner.save()
    return shop


def _authenticate(client, user):
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def owner_client(api_client, owner, shop):
    return _authenticate(api_client, owner)


@pytest.fixture
def staff_client(api_client, staff):
    return _authenticate(api_client, staff)


@pytest.fixture
def cone_sundae(shop):
    return Product.objects.create(
        shop=shop,
        name='Cone Sundae',
        buy_price=Decimal('4000'),
        sell_price=Decimal('8000'),
        category=ProductCategory.ICE_CREAM,
        emoji='🍦',
    )


@pytest.fixture
def es_teh(shop):
    return Product.objects.create(
        shop=shop,
        name='Es Teh',
        buy_price=Decimal('1500'),
        sell_price=Decimal('5000'),
        category=ProductCategory.DRINK,
    )


@pytest.fixture
def rival_product(other_shop):
    return Product.objects.create(
        shop=other_shop,
        name='Rival Cone',
        sell_price=Decimal('7000'),
    )
