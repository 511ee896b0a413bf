import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Shop, UserRole


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a freshly registered owner without a shop."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        full_name='Test User',
        role=UserRole.OWNER,
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        full_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def shop(user):
    """Onboarded shop owned by ``user``."""
    shop = Shop.objects.create(name="D'Creamy", address='Jl. Merdeka 1', owner=user)
    user.shop = shop
    user.save()
    return shop


@pytest.fixture
def staff(shop):
    """Create and return a cashier working in ``shop``."""
    return User.objects.create_user(
        email='cashier@example.com',
        password='TestPass123!',
        full_name='Kasir Satu',
        role=UserRole.STAFF,
        shop=shop,
    )


@pytest.fixture
def other_owner_staff(db):
    """Cashier of a different shop."""
    owner = User.objects.create_user(email='rival@example.com', password='TestPass123!')
    other = Shop.objects.create(name='Rival Warung', owner=owner)
    owner.shop = other
    owner.save()
    return User.objects.create_user(
        email='rivalcashier@example.com',
        password='TestPass123!',
        role=UserRole.STAFF,
        shop=other,
    )


def _authenticate(client, user):
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as ``user``."""
    return _authenticate(api_client, user)


@pytest.fixture
def owner_client(api_client, user, shop):
    """Return API client authenticated as the onboarded owner."""
    return _authenticate(api_client, user)


@pytest.fixture
def staff_client(api_client, staff):
    """Return API client authenticated as the cashier."""
    return _authenticate(api_client, staff)
