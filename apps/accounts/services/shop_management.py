"""
Shop onboarding and profile service.

An owner registers first and then creates exactly one shop, which also
becomes the shop they work in.
"""

import logging

from django.db import transaction

from apps.accounts.models import Shop, User, UserRole
from .exceptions import ShopAlreadyExistsError, ShopNotFoundError, NotShopOwnerError

logger = logging.getLogger(__name__)

SHOP_EDITABLE_FIELDS = ('name', 'address', 'phone', 'logo_url')


@transaction.atomic
def create_shop(
    *,
    owner: User,
    name: str,
    address: str = "",
    phone: str = "",
    logo_url: str = ""
) -> Shop:
    """
    Create the owner's shop and attach the owner to it.

    Raises:
        NotShopOwnerError: If the user is a staff member
        ShopAlreadyExistsError: If the owner already runs a shop
    """
    owner = User.objects.select_for_update().get(pk=owner.pk)

    if owner.role == UserRole.STAFF:
        raise NotShopOwnerError("Staff members cannot create a shop")
    if owner.shop_id is not None or Shop.objects.filter(owner=owner).exists():
        raise ShopAlreadyExistsError("You already have a shop")

    shop = Shop.objects.create(
        owner=owner,
        name=name,
        address=address,
        phone=phone,
        logo_url=logo_url,
    )
    owner.shop = shop
    owner.role = UserRole.OWNER
    owner.save(update_fields=['shop', 'role', 'updated_at'])

    logger.info("Shop %s created by %s", shop.id, owner.email)
    return shop


def get_owned_shop(owner: User) -> Shop:
    """
    Return the shop run by this owner.

    Raises:
        ShopNotFoundError: If the owner has not onboarded yet
    """
    shop = Shop.objects.filter(owner=owner).first()
    if shop is None:
        raise ShopNotFoundError("Shop has not been set up yet")
    return shop


@transaction.atomic
def update_shop(*, owner: User, **fields) -> Shop:
    """Update shop profile fields; unknown keys are ignored."""
    shop = get_owned_shop(owner)

    changed = []
    for key in SHOP_EDITABLE_FIELDS:
        if key in fields:
            setattr(shop, key, fields[key])
            changed.append(key)

    if changed:
        shop.save(update_fields=changed + ['updated_at'])

    return shop
