"""
Staff (cashier) account management.

Only the shop owner may add or remove staff. Removing a staff member
detaches them from the shop instead of deleting the account, so their
past transactions keep their author.
"""

import logging
from typing import List
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.accounts.models import User, UserRole
from .exceptions import (
    DuplicateEmailError,
    StaffNotFoundError,
    CannotKickOwnerError,
)
from .shop_management import get_owned_shop

logger = logging.getLogger(__name__)


@transaction.atomic
def create_staff(
    *,
    owner: User,
    email: str,
    password: str,
    full_name: str = ""
) -> User:
    """
    Create a cashier account attached to the owner's shop.

    Raises:
        ShopNotFoundError: If the owner has no shop yet
        DuplicateEmailError: If the email is already registered
    """
    shop = get_owned_shop(owner)
    email = User.objects.normalize_email(email)

    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateEmailError(f"Email {email} is already registered")

    try:
        staff = User.objects.create_user(
            email=email,
            password=password,
            full_name=full_name or 'Staff',
            role=UserRole.STAFF,
            shop=shop,
        )
    except IntegrityError:
        raise DuplicateEmailError(f"Email {email} is already registered")

    logger.info("Staff %s added to shop %s", staff.email, shop.id)
    return staff


@transaction.atomic
def kick_staff(*, owner: User, staff_id: UUID) -> User:
    """
    Remove a staff member from the owner's shop.

    Raises:
        ShopNotFoundError: If the owner has no shop yet
        CannotKickOwnerError: If the owner targets themselves
        StaffNotFoundError: If no such staff member works in the shop
    """
    shop = get_owned_shop(owner)

    if staff_id == owner.id:
        raise CannotKickOwnerError("The shop owner cannot be removed")

    try:
        staff = (
            User.objects
            .select_for_update()
            .get(id=staff_id, shop=shop, role=UserRole.STAFF)
        )
    except User.DoesNotExist:
        raise StaffNotFoundError(f"Staff {staff_id} not found in this shop")

    staff.shop = None
    staff.role = UserRole.USER
    staff.save(update_fields=['shop', 'role', 'updated_at'])

    logger.info("Staff %s removed from shop %s", staff.email, shop.id)
    return staff


def list_staff(owner: User) -> List[User]:
    """Return the staff of the owner's shop, newest first."""
    shop = get_owned_shop(owner)
    return list(
        User.objects
        .filter(shop=shop, role=UserRole.STAFF)
        .order_by('-created_at')
    )
