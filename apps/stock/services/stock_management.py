"""
Stock item and usage-rule management.

Owners restock items by hand and decide how many units of each item a
product consumes. Sales never pass through here; see
:mod:`apps.stock.services.stock_deduction`.
"""

import logging
from typing import List
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import F
from django.utils import timezone

from apps.products.models import Product
from apps.stock.models import StockItem, ProductStockUsage
from .exceptions import (
    StockItemNotFoundError,
    UsageRuleNotFoundError,
    DuplicateUsageRuleError,
    ShopMismatchError,
    InvalidQuantityError,
)

logger = logging.getLogger(__name__)


def _get_item(shop_id: UUID, item_id: UUID) -> StockItem:
    try:
        return StockItem.objects.get(id=item_id, shop_id=shop_id, is_active=True)
    except StockItem.DoesNotExist:
        raise StockItemNotFoundError(f"Stock item {item_id} not found")


@transaction.atomic
def restock_item(*, shop_id: UUID, item_id: UUID, amount: int) -> StockItem:
    """
    Add ``amount`` units to a stock item.

    The addition is done in the database so it cannot overwrite a sale
    decrement running at the same time.

    Raises:
        InvalidQuantityError: If amount is not positive
        StockItemNotFoundError: If the item does not exist in the shop
    """
    if amount < 1:
        raise InvalidQuantityError("Restock amount must be at least 1")

    updated = (
        StockItem.objects
        .filter(id=item_id, shop_id=shop_id, is_active=True)
        .update(quantity=F('quantity') + amount, updated_at=timezone.now())
    )
    if not updated:
        raise StockItemNotFoundError(f"Stock item {item_id} not found")

    item = StockItem.objects.get(id=item_id)
    logger.info("Restocked %s by %s (now %s)", item.name, amount, item.quantity)
    return item


@transaction.atomic
def deactivate_item(*, shop_id: UUID, item_id: UUID) -> StockItem:
    """Soft delete; usage rules stay but are skipped during sales."""
    item = _get_item(shop_id, item_id)
    item.is_active = False
    item.save(update_fields=['is_active', 'updated_at'])
    return item


@transaction.atomic
def link_product(
    *,
    shop_id: UUID,
    product_id: UUID,
    stock_item_id: UUID,
    quantity_used: int = 1
) -> ProductStockUsage:
    """
    Declare that one sold unit of a product consumes ``quantity_used``
    units of a stock item.

    Raises:
        InvalidQuantityError: If quantity_used is not positive
        StockItemNotFoundError: If the item does not exist in the shop
        ShopMismatchError: If the product is not in the shop
        DuplicateUsageRuleError: If the link already exists
    """
    if quantity_used < 1:
        raise InvalidQuantityError("quantity_used must be at least 1")

    item = _get_item(shop_id, stock_item_id)

    try:
        product = Product.objects.get(id=product_id)
    except Product.DoesNotExist:
        raise ShopMismatchError(f"Product {product_id} not found")
    if product.shop_id != item.shop_id:
        raise ShopMismatchError("Product and stock item belong to different shops")

    if ProductStockUsage.objects.filter(product=product, stock_item=item).exists():
        raise DuplicateUsageRuleError(
            f"{product.name} is already linked to {item.name}"
        )

    try:
        with transaction.atomic():
            usage = ProductStockUsage.objects.create(
                product=product,
                stock_item=item,
                quantity_used=quantity_used,
            )
    except IntegrityError:
        raise DuplicateUsageRuleError(
            f"{product.name} is already linked to {item.name}"
        )

    return usage


def _get_usage(shop_id: UUID, usage_id: UUID) -> ProductStockUsage:
    try:
        return (
            ProductStockUsage.objects
            .select_related('product', 'stock_item')
            .get(id=usage_id, stock_item__shop_id=shop_id)
        )
    except ProductStockUsage.DoesNotExist:
        raise UsageRuleNotFoundError(f"Usage rule {usage_id} not found")


@transaction.atomic
def update_usage(*, shop_id: UUID, usage_id: UUID, quantity_used: int) -> ProductStockUsage:
    if quantity_used < 1:
        raise InvalidQuantityError("quantity_used must be at least 1")

    usage = _get_usage(shop_id, usage_id)
    usage.quantity_used = quantity_used
    usage.save(update_fields=['quantity_used'])
    return usage


@transaction.atomic
def unlink_product(*, shop_id: UUID, usage_id: UUID) -> None:
    _get_usage(shop_id, usage_id).delete()


def get_low_stock_items(shop_id: UUID) -> List[StockItem]:
    """Active items at or below their reorder threshold."""
    return list(
        StockItem.objects
        .filter(shop_id=shop_id, is_active=True, quantity__lte=F('min_stock'))
        .order_by('quantity', 'name')
    )
