"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InactiveAccountError,
    ShopNotFoundError,
    ShopAlreadyExistsError,
    StaffNotFoundError,
    CannotKickOwnerError,
    NotShopOwnerError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .shop_management import create_shop, get_owned_shop, update_shop
from .staff_management import create_staff, kick_staff, list_staff

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'DuplicateEmailError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'ShopNotFoundError',
    'ShopAlreadyExistsError',
    'StaffNotFoundError',
    'CannotKickOwnerError',
    'NotShopOwnerError',
    # Services
    'register_user',
    'authenticate_user',
    'create_shop',
    'get_owned_shop',
    'update_shop',
    'create_staff',
    'kick_staff',
    'list_staff',
]
