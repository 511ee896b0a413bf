import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Shop, UserRole
from apps.products.models import Product
from apps.stock.models import StockItem, ProductStockUsage


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
        full_name='Cashier',
        role=UserRole.STAFF,
        shop=shop,
    )


@pytest.fixture
def other_shop(db):
    other_owner = User.objects.create_user(
        email='rival@example.com',
        password='TestPass123!',
        role=UserRole.OWNER,
    )
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
    """Return API client authenticated as the shop owner."""
    return _authenticate(api_client, owner)


@pytest.fixture
def staff_client(api_client, staff):
    """Return API client authenticated as a cashier."""
    return _authenticate(api_client, staff)


@pytest.fixture
def cone_sundae(shop):
    return Product.objects.create(
        shop=shop,
        name='Cone Sundae',
        sell_price=Decimal('8000'),
        buy_price=Decimal('3500'),
        category='ice_cream',
    )


@pytest.fixture
def cups(shop):
    return StockItem.objects.create(shop=shop, name='Cup', quantity=10, min_stock=5)


@pytest.fixture
def cones(shop):
    return StockItem.objects.create(shop=shop, name='Cone', quantity=2, min_stock=5)


@pytest.fixture
def sundae_usage(cone_sundae, cups, cones):
    """One cone sundae takes 2 cups and 1 cone."""
    return [
        ProductStockUsage.objects.create(product=cone_sundae, stock_item=cups, quantity_used=2),
        ProductStockUsage.objects.create(product=cone_sundae, stock_item=cones, quantity_used=1),
    ]
