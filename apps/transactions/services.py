"""
Transaction recording service.

Recording a sale happens in two steps. The transaction row is saved in
its own database transaction first; only after it is committed does the
stock deduction run, so a stock problem can never undo a sale the
customer has already paid for.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from django.db import transaction as db_transaction
from django.db.models import QuerySet

from apps.accounts.models import User, UserRole
from apps.products.models import Product
from apps.stock.services import StockDeductionService, DeductionResult
from .business_day import BusinessDayClock, default_clock
from .exceptions import (
    InvalidTransactionError,
    TransactionNotFoundError,
    NotShopOwnerError,
)
from .models import Transaction, TransactionType, PaymentMethod, PaymentStatus
from .payments import generate_order_id, FAILED_PAYMENT_STATUSES

logger = logging.getLogger(__name__)

# Category of rows recorded from the till cart
SALE_CATEGORY = 'Penjualan'


def _sale_product(shop_id: UUID, product_id: UUID) -> Product:
    try:
        return Product.objects.get(id=product_id, shop_id=shop_id, is_active=True)
    except Product.DoesNotExist:
        raise InvalidTransactionError(f"Product {product_id} not found")


def record_transaction(
    *,
    user: User,
    type: str,
    amount: Optional[Decimal] = None,
    product_id: Optional[UUID] = None,
    quantity: Optional[int] = None,
    category: str = '',
    note: str = '',
    receipt_url: str = '',
    payment_method: str = PaymentMethod.CASH,
    deduction_service: Optional[StockDeductionService] = None
) -> Tuple[Transaction, Optional[DeductionResult]]:
    """
    Record an income or expense for the user's shop.

    For a product sale ``amount`` defaults to ``sell_price * quantity``
    and the product's stock items are deducted afterwards. QRIS sales get
    an order id and start in ``pending`` until the gateway confirms them.

    Returns:
        tuple: ``(transaction, deduction_result)``; the result is None
        when no deduction ran.

    Raises:
        InvalidTransactionError: If the input cannot be recorded
    """
    if not user.shop_id:
        raise InvalidTransactionError("You must belong to a shop to record transactions")

    product = None
    if type == TransactionType.EXPENSE:
        if product_id:
            raise InvalidTransactionError("Expenses cannot reference a product")
        if not note.strip():
            raise InvalidTransactionError("Expenses need a note")
        payment_method = PaymentMethod.CASH
    elif product_id:
        product = _sale_product(user.shop_id, product_id)
        if quantity is None:
            quantity = 1
        if quantity < 1:
            raise InvalidTransactionError("Quantity must be at least 1")

    if amount is None:
        if product is None:
            raise InvalidTransactionError("Amount is required")
        amount = product.sell_price * quantity
    if amount <= 0:
        raise InvalidTransactionError("Amount must be positive")

    if product is not None:
        category = category or product.get_category_display()
        note = note or product.name

    order_id = None
    payment_status = ''
    if payment_method == PaymentMethod.QRIS:
        order_id = generate_order_id()
        payment_status = PaymentStatus.PENDING

    with db_transaction.atomic():
        txn = Transaction.objects.create(
            shop_id=user.shop_id,
            type=type,
            amount=amount,
            product=product,
            quantity=quantity if product else None,
            category=category,
            note=note,
            receipt_url=receipt_url,
            payment_method=payment_method,
            order_id=order_id,
            payment_status=payment_status,
            created_by=user,
        )

    logger.info(
        "Recorded %s %s in shop %s by %s",
        txn.type, txn.amount, txn.shop_id, user.email,
    )

    if product is None or type != TransactionType.INCOME:
        return txn, None

    service = deduction_service or StockDeductionService()
    result = service.deduct(product.id, quantity=quantity)
    if not result.success:
        logger.error("Stock deduction failed for transaction %s", txn.id)
    return txn, result


def checkout_cart(
    *,
    user: User,
    items: List[dict],
    payment_method: str = PaymentMethod.CASH,
    deduction_service: Optional[StockDeductionService] = None
) -> Tuple[List[Transaction], DeductionResult]:
    """
    Record a till cart: one income transaction per line.

    Each line is ``{'product_id': UUID, 'quantity': int}``. All lines are
    saved together or not at all; stock is deducted afterwards, line by
    line. A QRIS cart shares one order id, so the customer pays once.

    Returns:
        tuple: ``(transactions, deduction_result)`` where the result
        merges every line's ``insufficient_items``.

    Raises:
        InvalidTransactionError: If the cart is empty or a line is invalid
    """
    if not user.shop_id:
        raise InvalidTransactionError("You must belong to a shop to record transactions")
    if not items:
        raise InvalidTransactionError("Cart is empty")

    lines = []
    for item in items:
        quantity = item.get('quantity')
        if quantity is None:
            quantity = 1
        if quantity < 1:
            raise InvalidTransactionError("Quantity must be at least 1")
        lines.append((_sale_product(user.shop_id, item['product_id']), quantity))

    order_id = None
    payment_status = ''
    if payment_method == PaymentMethod.QRIS:
        order_id = generate_order_id()
        payment_status = PaymentStatus.PENDING

    with db_transaction.atomic():
        transactions = [
            Transaction.objects.create(
                shop_id=user.shop_id,
                type=TransactionType.INCOME,
                amount=product.sell_price * quantity,
                product=product,
                quantity=quantity,
                category=SALE_CATEGORY,
                note=product.name,
                payment_method=payment_method,
                order_id=order_id,
                payment_status=payment_status,
                created_by=user,
            )
            for product, quantity in lines
        ]

    logger.info(
        "Checked out %s line(s) in shop %s by %s",
        len(transactions), user.shop_id, user.email,
    )

    service = deduction_service or StockDeductionService()
    combined = DeductionResult(success=True)
    for txn in transactions:
        result = service.deduct(txn.product_id, quantity=txn.quantity)
        if not result.success:
            combined.success = False
            logger.error("Stock deduction failed for transaction %s", txn.id)
        for name in result.insufficient_items:
            if name not in combined.insufficient_items:
                combined.insufficient_items.append(name)

    return transactions, combined


def transactions_for_shop(
    *,
    shop_id: UUID,
    type: Optional[str] = None,
    today: bool = False,
    date_from=None,
    date_to=None,
    clock: Optional[BusinessDayClock] = None
) -> QuerySet:
    """
    The shop's transactions, newest first.

    ``today`` limits to the current business day; ``date_from`` and
    ``date_to`` are business-day labels (inclusive).
    """
    clock = clock or default_clock()
    queryset = (
        Transaction.objects
        .filter(shop_id=shop_id)
        .select_related('product', 'created_by')
    )

    if type:
        queryset = queryset.filter(type=type)

    if today:
        queryset = queryset.filter(
            created_at__gte=clock.business_day_start(),
            created_at__lt=clock.business_day_end(),
        )

    if date_from:
        queryset = queryset.filter(created_at__gte=clock.business_day_range_for_label(date_from)[0])
    if date_to:
        queryset = queryset.filter(created_at__lt=clock.business_day_range_for_label(date_to)[1])

    return queryset


@db_transaction.atomic
def delete_transaction(*, user: User, transaction_id: UUID) -> None:
    """
    Delete a transaction. Stock already deducted is not restored.

    Raises:
        NotShopOwnerError: If the user is not the shop owner
        TransactionNotFoundError: If the transaction is not in the shop
    """
    if user.role != UserRole.OWNER:
        raise NotShopOwnerError("Only the shop owner can delete transactions")

    deleted, _ = Transaction.objects.filter(id=transaction_id, shop_id=user.shop_id).delete()
    if not deleted:
        raise TransactionNotFoundError(f"Transaction {transaction_id} not found")

    logger.info("Transaction %s deleted by %s", transaction_id, user.email)


def apply_payment_notification(
    *,
    order_id: str,
    transaction_status: str,
    deduction_service: Optional[StockDeductionService] = None
) -> List[Transaction]:
    """
    Store a gateway status on every transaction of the order.

    When a sale's payment fails its stock is given back; a failed order
    that is later paid after all is deducted again.

    Returns:
        list: The updated transactions; empty if the order is unknown.
    """
    stock_changes = []

    with db_transaction.atomic():
        transactions = list(Transaction.objects.select_for_update().filter(order_id=order_id))

        for txn in transactions:
            was_failed = txn.payment_status in FAILED_PAYMENT_STATUSES
            txn.payment_status = transaction_status
            txn.save(update_fields=['payment_status'])

            is_failed = transaction_status in FAILED_PAYMENT_STATUSES
            if txn.type == TransactionType.INCOME and txn.product_id and was_failed != is_failed:
                stock_changes.append((txn, is_failed))

    if not transactions:
        return transactions

    logger.info("Order %s is now %s", order_id, transaction_status)

    service = deduction_service or StockDeductionService()
    for txn, failed in stock_changes:
        quantity = txn.quantity or 1
        if failed:
            result = service.restore(txn.product_id, quantity=quantity)
        else:
            result = service.deduct(txn.product_id, quantity=quantity)
        if not result.success:
            logger.error("Stock adjustment failed for transaction %s", txn.id)

    return transactions
