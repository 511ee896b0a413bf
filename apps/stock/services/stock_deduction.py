"""
Stock Deduction Module
======================

Decrements the stock items a product consumes whenever that product is
sold.

The deduction is best effort: it walks the product's usage rules one by
one, skips items it cannot read or write, and never blocks or reverses
the sale that triggered it. Running out of stock is reported back as data
(``insufficient_items``) so the till can warn the cashier.

Classes:
    UsageRule: One product -> stock item consumption rule.
    DecrementOutcome: What a single decrement did to a stock item.
    DeductionResult: Overall result returned to the caller.
    StockRepository: Data-access contract the service depends on.
    DjangoStockRepository: ORM implementation with atomic decrements.
    StockDeductionService: The deduction policy itself.

Example:
    Deducting after a sale of three cones::

        from apps.stock.services import StockDeductionService

        result = StockDeductionService().deduct(product.id, quantity=3)
        if result.insufficient_items:
            warn(f"Running out of: {', '.join(result.insufficient_items)}")
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from django.db import DatabaseError, transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from apps.stock.models import ProductStockUsage, StockItem
from .exceptions import StockRepositoryError, StockItemNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageRule:
    product_id: UUID
    stock_item_id: UUID
    quantity_used: int


@dataclass(frozen=True)
class DecrementOutcome:
    """
    Result of decrementing one stock item.

    ``applied`` is False when the item held less than the requested
    amount; the quantity was then floored at zero instead.
    """
    stock_item_id: UUID
    name: str
    applied: bool


@dataclass
class DeductionResult:
    success: bool
    insufficient_items: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'success': self.success,
            'insufficient_items': list(self.insufficient_items),
        }


class StockRepository:
    """
    Data access used by :class:`StockDeductionService`.

    Implementations raise :class:`StockRepositoryError` when the backend
    fails and :class:`StockItemNotFoundError` when an item is gone.
    """

    def usage_rules_for(self, product_id) -> List[UsageRule]:
        raise NotImplementedError

    def decrement(self, stock_item_id, amount: int) -> DecrementOutcome:
        raise NotImplementedError

    def increment(self, stock_item_id, amount: int) -> str:
        """Add ``amount`` back to an item; returns the item name."""
        raise NotImplementedError


class DjangoStockRepository(StockRepository):
    """
    ORM-backed repository.

    Decrements are single UPDATE statements, so two concurrent sales of
    the same product cannot both read the same starting quantity:

        UPDATE stock_items SET quantity = quantity - X WHERE id = ? AND quantity >= X

    and, when that matches nothing because stock ran short,

        UPDATE stock_items SET quantity = GREATEST(quantity - X, 0) WHERE id = ?
    """

    def usage_rules_for(self, product_id) -> List[UsageRule]:
        try:
            rows = list(
                ProductStockUsage.objects
                .filter(product_id=product_id)
                .values_list('product_id', 'stock_item_id', 'quantity_used')
            )
        except DatabaseError as e:
            raise StockRepositoryError(f"Failed to fetch usage rules: {e}") from e

        return [UsageRule(*row) for row in rows]

    def decrement(self, stock_item_id, amount: int) -> DecrementOutcome:
        try:
            with transaction.atomic():
                items = StockItem.objects.filter(id=stock_item_id, is_active=True)
                now = timezone.now()

                applied = items.filter(quantity__gte=amount).update(
                    quantity=F('quantity') - amount,
                    updated_at=now,
                )
                if not applied:
                    floored = items.update(
                        quantity=Greatest(F('quantity') - amount, Value(0)),
                        updated_at=now,
                    )
                    if not floored:
                        raise StockItemNotFoundError(
                            f"Stock item {stock_item_id} not found"
                        )

                name = items.values_list('name', flat=True).first()
        except DatabaseError as e:
            raise StockRepositoryError(
                f"Failed to update stock item {stock_item_id}: {e}"
            ) from e

        return DecrementOutcome(
            stock_item_id=stock_item_id,
            name=name or str(stock_item_id),
            applied=bool(applied),
        )

    def increment(self, stock_item_id, amount: int) -> str:
        try:
            items = StockItem.objects.filter(id=stock_item_id, is_active=True)
            updated = items.update(
                quantity=F('quantity') + amount,
                updated_at=timezone.now(),
            )
            if not updated:
                raise StockItemNotFoundError(f"Stock item {stock_item_id} not found")
            name = items.values_list('name', flat=True).first()
        except DatabaseError as e:
            raise StockRepositoryError(
                f"Failed to update stock item {stock_item_id}: {e}"
            ) from e

        return name or str(stock_item_id)


class StockDeductionService:
    """
    Best-effort stock deduction for a completed sale.

    The repository is injected so tests can run the policy against an
    in-memory fake; by default the ORM repository is used.

    Policy:
        - Usage rules cannot be fetched: ``success=False``, nothing written.
        - Product has no usage rules: ``success=True``, nothing written.
        - A stock item is missing, deleted or fails to update: logged and
          skipped, the remaining items are still processed.
        - A stock item holds less than required: its name is reported in
          ``insufficient_items`` and its quantity is floored at zero.
    """

    def __init__(self, repository: Optional[StockRepository] = None):
        self.repository = repository or DjangoStockRepository()

    def deduct(self, product_id, quantity: int = 1) -> DeductionResult:
        """
        Deduct ``quantity_used * quantity`` from every stock item the
        product consumes.

        Args:
            product_id: The product that was sold.
            quantity: Number of units sold. Defaults to 1.

        Returns:
            DeductionResult with ``success`` and ``insufficient_items``.

        Raises:
            ValueError: If quantity is not a positive integer.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        insufficient_items = []

        try:
            rules = self.repository.usage_rules_for(product_id)
        except StockRepositoryError:
            logger.exception("[Stock] Failed to fetch usage rules for product %s", product_id)
            return DeductionResult(success=False, insufficient_items=insufficient_items)

        if not rules:
            return DeductionResult(success=True, insufficient_items=insufficient_items)

        for rule in rules:
            required = rule.quantity_used * quantity

            try:
                outcome = self.repository.decrement(rule.stock_item_id, required)
            except StockItemNotFoundError:
                logger.error(
                    "[Stock] Stock item %s linked to product %s is missing, skipped",
                    rule.stock_item_id, product_id,
                )
                continue
            except StockRepositoryError:
                logger.exception("[Stock] Failed to update stock item %s", rule.stock_item_id)
                continue

            if not outcome.applied:
                logger.warning(
                    "[Stock] Insufficient: %s needed %s, floored at 0",
                    outcome.name, required,
                )
                insufficient_items.append(outcome.name)

        return DeductionResult(success=True, insufficient_items=insufficient_items)

    def restore(self, product_id, quantity: int = 1) -> DeductionResult:
        """
        Give back the stock a sale took, e.g. when its payment failed.

        Items that were floored at zero get the full amount back, so a
        restore can overshoot what was actually taken. Missing items are
        skipped the same way :meth:`deduct` skips them.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        try:
            rules = self.repository.usage_rules_for(product_id)
        except StockRepositoryError:
            logger.exception("[Stock] Failed to fetch usage rules for product %s", product_id)
            return DeductionResult(success=False)

        for rule in rules:
            amount = rule.quantity_used * quantity
            try:
                name = self.repository.increment(rule.stock_item_id, amount)
            except StockItemNotFoundError:
                logger.error(
                    "[Stock] Stock item %s linked to product %s is missing, not restored",
                    rule.stock_item_id, product_id,
                )
                continue
            except StockRepositoryError:
                logger.exception("[Stock] Failed to restore stock item %s", rule.stock_item_id)
                continue

            logger.info("[Stock] Restored %s %s", amount, name)

        return DeductionResult(success=True)
