import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Shop, UserRole


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new owner."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'full_name': 'New Owner',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['role'] == 'owner'
        assert response.data['user']['shop'] is None

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('users:register')
        data = {
            'email': user.email.upper(),
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'OtherPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_weak_password(self, api_client):
        """Registration fails with weak password."""
        url = reverse('users:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Login / Logout Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['email'] == user.email

    def test_login_wrong_password(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPassword123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data

    def test_login_inactive_user(self, api_client, user_inactive):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user_inactive.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_updates_last_login(self, api_client, user):
        url = reverse('users:login')
        api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        user.refresh_from_db()
        assert user.last_login is not None


@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_success(self, authenticated_client, user):
        url = reverse('users:logout')
        refresh = str(RefreshToken.for_user(user))
        response = authenticated_client.post(url, {'refresh': refresh})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Logout successful'

    def test_logout_invalid_token(self, authenticated_client):
        url = reverse('users:logout')
        response = authenticated_client.post(url, {'refresh': 'not-a-token'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_logout_unauthenticated(self, api_client):
        url = reverse('users:logout')
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET/PATCH /api/auth/user/"""

    def test_get_current_user_with_shop(self, owner_client, user, shop):
        response = owner_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['shop']['name'] == "D'Creamy"

    def test_update_profile(self, authenticated_client, user):
        response = authenticated_client.patch(
            reverse('users:current-user'),
            {'full_name': 'Bu Sari', 'phone': '08123456789'}
        )

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.full_name == 'Bu Sari'
        assert user.phone == '08123456789'

    def test_cannot_change_role(self, staff_client, staff):
        staff_client.patch(reverse('users:current-user'), {'role': 'owner'})

        staff.refresh_from_db()
        assert staff.role == UserRole.STAFF


# =============================================================================
# Shop Tests
# =============================================================================

@pytest.mark.django_db
class TestShop:
    """Tests for /api/auth/shop/"""

    def test_onboarding_creates_shop(self, authenticated_client, user):
        response = authenticated_client.post(reverse('users:shop'), {
            'name': "D'Creamy",
            'address': 'Jl. Merdeka 1',
        })

        assert response.status_code == status.HTTP_201_CREATED
        user.refresh_from_db()
        assert user.shop.name == "D'Creamy"
        assert str(user.shop.owner_id) == str(user.id)

    def test_second_shop_rejected(self, owner_client):
        response = owner_client.post(reverse('users:shop'), {'name': 'Cabang 2'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_staff_cannot_create_shop(self, staff_client):
        response = staff_client.post(reverse('users:shop'), {'name': 'Warung Sendiri'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_get_shop_before_onboarding(self, authenticated_client):
        response = authenticated_client.get(reverse('users:shop'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_staff_reads_shop(self, staff_client):
        response = staff_client.get(reverse('users:shop'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == "D'Creamy"

    def test_owner_updates_shop(self, owner_client, shop):
        response = owner_client.patch(reverse('users:shop'), {'phone': '0274123456'})

        assert response.status_code == status.HTTP_200_OK
        shop.refresh_from_db()
        assert shop.phone == '0274123456'


# =============================================================================
# Staff Tests
# =============================================================================

@pytest.mark.django_db
class TestStaff:
    """Tests for /api/auth/staff/"""

    def test_owner_creates_staff(self, owner_client, shop):
        response = owner_client.post(reverse('users:staff'), {
            'email': 'kasir2@example.com',
            'password': 'rahasia1',
            'full_name': 'Kasir Dua',
        })

        assert response.status_code == status.HTTP_201_CREATED
        created = User.objects.get(email='kasir2@example.com')
        assert created.role == UserRole.STAFF
        assert created.shop_id == shop.id

    def test_duplicate_staff_email(self, owner_client, staff):
        response = owner_client.post(reverse('users:staff'), {
            'email': staff.email,
            'password': 'rahasia1',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_short_password(self, owner_client):
        response = owner_client.post(reverse('users:staff'), {
            'email': 'kasir3@example.com',
            'password': '123',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_staff(self, owner_client, staff):
        response = owner_client.get(reverse('users:staff'))

        assert response.status_code == status.HTTP_200_OK
        assert [row['email'] for row in response.data] == [staff.email]

    def test_staff_cannot_manage_staff(self, staff_client):
        response = staff_client.get(reverse('users:staff'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_kick_staff(self, owner_client, staff):
        response = owner_client.post(reverse('users:staff-kick', args=[staff.id]))

        assert response.status_code == status.HTTP_200_OK
        staff.refresh_from_db()
        assert staff.shop is None
        assert staff.role == UserRole.USER

    def test_kick_self(self, owner_client, user):
        response = owner_client.post(reverse('users:staff-kick', args=[user.id]))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_kick_other_shop_staff(self, owner_client, other_owner_staff):
        response = owner_client.post(reverse('users:staff-kick', args=[other_owner_staff.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        other_owner_staff.refresh_from_db()
        assert other_owner_staff.shop is not None

    def test_kicked_staff_loses_access(self, owner_client, staff, api_client):
        owner_client.post(reverse('users:staff-kick', args=[staff.id]))

        refresh = RefreshToken.for_user(staff)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        response = api_client.get('/api/transactions/')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# User Model Tests
# =============================================================================

@pytest.mark.django_db
class TestUserModel:
    """Tests for User and Shop model methods."""

    def test_create_user(self, db):
        user = User.objects.create_user(email='model@example.com', password='TestPass123!')

        assert user.check_password('TestPass123!')
        assert user.role == UserRole.OWNER
        assert user.shop is None
        assert user.is_staff is False

    def test_create_superuser(self, db):
        user = User.objects.create_superuser(email='admin@example.com', password='AdminPass123!')

        assert user.is_staff is True
        assert user.is_superuser is True

    def test_get_display_name(self, user):
        assert user.get_display_name() == 'Test User'

        user.full_name = ''
        assert user.get_display_name() == 'testuser'

    def test_shop_membership(self, shop, staff, other_owner_staff):
        assert shop.has_member(staff)
        assert not shop.has_member(other_owner_staff)
        assert Shop.objects.get(id=shop.id).members.count() == 2
