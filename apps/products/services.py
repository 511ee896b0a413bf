"""
Product catalog service.

All lookups are scoped to a shop: a product id from another shop behaves
exactly like a missing one.
"""

import logging
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from .exceptions import ProductNotFoundError, DuplicateProductError
from .models import Product

logger = logging.getLogger(__name__)


def search_products(
    *,
    shop_id: UUID,
    search: Optional[str] = None,
    category: Optional[str] = None,
    include_inactive: bool = False
) -> QuerySet:
    """Filter the shop's catalog by name and category."""
    queryset = Product.objects.filter(shop_id=shop_id)

    if not include_inactive:
        queryset = queryset.filter(is_active=True)

    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(category__icontains=search))

    if category:
        queryset = queryset.filter(category=category)

    return queryset


@transaction.atomic
def create_product(*, shop_id: UUID, name: str, sell_price, **fields) -> Product:
    """
    Add a product to the catalog.

    Raises:
        DuplicateProductError: If an active product with the same name exists
    """
    name = name.strip()
    if Product.objects.filter(shop_id=shop_id, name__iexact=name, is_active=True).exists():
        raise DuplicateProductError(f"Product '{name}' already exists")

    product = Product.objects.create(
        shop_id=shop_id,
        name=name,
        sell_price=sell_price,
        **fields
    )
    logger.info("Product %s (%s) created in shop %s", product.id, product.name, shop_id)
    return product


@transaction.atomic
def soft_delete_product(*, shop_id: UUID, product_id: UUID) -> Product:
    """Hide a product from the till; past transactions keep referencing it."""
    try:
        product = Product.objects.select_for_update().get(id=product_id, shop_id=shop_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")

    product.is_active = False
    product.save(update_fields=['is_active', 'updated_at'])
    return product


def get_categories(shop_id: UUID) -> List[str]:
    """Categories in use by the shop's active products."""
    return list(
        Product.objects
        .filter(shop_id=shop_id, is_active=True)
        .values_list('category', flat=True)
        .distinct()
        .order_by('category')
    )
