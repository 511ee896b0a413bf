"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole
from .exceptions import DuplicateEmailError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    full_name: str = ""
) -> User:
    """
    Register a new shop owner.

    The owner starts without a shop; onboarding (``create_shop``) attaches one.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        full_name: Optional full name

    Returns:
        Created User instance

    Raises:
        DuplicateEmailError: If the email is already registered
    """
    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateEmailError(f"Email {email} is already registered")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            full_name=full_name,
            role=UserRole.OWNER,
        )
    except IntegrityError:
        raise DuplicateEmailError(f"Email {email} is already registered")

    logger.info("Registered owner %s", user.email)
    return user
