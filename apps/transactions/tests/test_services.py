"""
Service layer tests for recording transactions.
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.stock.models import StockItem
from apps.stock.services import StockDeductionService
from apps.stock.tests.fakes import InMemoryStockRepository
from apps.transactions.models import Transaction, PaymentStatus
from apps.transactions.services import (
    record_transaction,
    checkout_cart,
    delete_transaction,
    apply_payment_notification,
)
from apps.transactions.exceptions import (
    InvalidTransactionError,
    TransactionNotFoundError,
    NotShopOwnerError,
)


@pytest.mark.django_db
class TestRecordSale:

    def test_amount_defaults_to_price_times_quantity(self, staff, cone_sundae):
        txn, _ = record_transaction(
            user=staff,
            type='income',
            product_id=cone_sundae.id,
            quantity=3,
        )

        assert txn.amount == Decimal('24000')
        assert txn.quantity == 3
        assert txn.note == 'Cone Sundae'
        assert txn.category == 'Es Krim'
        assert txn.created_by == staff

    def test_deducts_linked_stock(self, staff, cone_sundae, cups, straws, sundae_usage):
        _, result = record_transaction(
            user=staff,
            type='income',
            product_id=cone_sundae.id,
            quantity=3,
        )

        assert result.success is True
        assert result.insufficient_items == ['Sedotan']
        assert StockItem.objects.get(id=cups.id).quantity == 7
        assert StockItem.objects.get(id=straws.id).quantity == 0

    def test_failed_deduction_keeps_the_sale(self, staff, cone_sundae):
        broken = StockDeductionService(repository=InMemoryStockRepository(fail_rules=True))

        txn, result = record_transaction(
            user=staff,
            type='income',
            product_id=cone_sundae.id,
            deduction_service=broken,
        )

        assert result.success is False
        assert Transaction.objects.filter(id=txn.id).exists()

    def test_inactive_product_rejected(self, staff, cone_sundae):
        cone_sundae.is_active = False
        cone_sundae.save()

        with pytest.raises(InvalidTransactionError):
            record_transaction(user=staff, type='income', product_id=cone_sundae.id)

    def test_ad_hoc_income_without_product(self, staff):
        txn, result = record_transaction(user=staff, type='income', amount=Decimal('5000'))

        assert result is None
        assert txn.product is None
        assert txn.quantity is None

    def test_amount_required_without_product(self, staff):
        with pytest.raises(InvalidTransactionError):
            record_transaction(user=staff, type='income')

    def test_qris_sale_gets_pending_order(self, staff, cone_sundae):
        txn, _ = record_transaction(
            user=staff,
            type='income',
            product_id=cone_sundae.id,
            payment_method='qris',
        )

        assert txn.order_id.startswith('DC-')
        assert txn.payment_status == PaymentStatus.PENDING

    def test_user_without_shop(self, shopless_user):
        with pytest.raises(InvalidTransactionError):
            record_transaction(user=shopless_user, type='income', amount=Decimal('1000'))


@pytest.mark.django_db
class TestRecordExpense:

    def test_expense_is_cash_without_deduction(self, owner, shop):
        txn, result = record_transaction(
            user=owner,
            type='expense',
            amount=Decimal('50000'),
            note='Beli susu',
            payment_method='qris',
        )

        assert result is None
        assert txn.payment_method == 'cash'
        assert txn.order_id is None

    def test_expense_needs_note(self, owner, shop):
        with pytest.raises(InvalidTransactionError):
            record_transaction(user=owner, type='expense', amount=Decimal('50000'))

    def test_expense_cannot_reference_product(self, owner, cone_sundae):
        with pytest.raises(InvalidTransactionError):
            record_transaction(
                user=owner,
                type='expense',
                amount=Decimal('1000'),
                note='x',
                product_id=cone_sundae.id,
            )


@pytest.mark.django_db
class TestDeleteTransaction:

    def test_owner_deletes(self, owner, shop):
        txn, _ = record_transaction(user=owner, type='income', amount=Decimal('1000'))

        delete_transaction(user=owner, transaction_id=txn.id)

        assert not Transaction.objects.filter(id=txn.id).exists()

    def test_staff_cannot_delete(self, staff):
        txn, _ = record_transaction(user=staff, type='income', amount=Decimal('1000'))

        with pytest.raises(NotShopOwnerError):
            delete_transaction(user=staff, transaction_id=txn.id)

    def test_unknown_transaction(self, owner, shop):
        with pytest.raises(TransactionNotFoundError):
            delete_transaction(user=owner, transaction_id=uuid4())


@pytest.mark.django_db
class TestPaymentNotification:

    def test_updates_status(self, staff):
        txn, _ = record_transaction(
            user=staff,
            type='income',
            amount=Decimal('15000'),
            payment_method='qris',
        )

        updated = apply_payment_notification(order_id=txn.order_id, transaction_status='settlement')

        assert [row.id for row in updated] == [txn.id]
        assert Transaction.objects.get(id=txn.id).payment_status == 'settlement'

    def test_unknown_order(self, db):
        assert apply_payment_notification(order_id='DC-NOPE', transaction_status='settlement') == []

    def test_expired_sale_gives_stock_back(self, staff, cone_sundae, cups, straws, sundae_usage):
        txn, _ = record_transaction(
            user=staff,
            type='income',
            product_id=cone_sundae.id,
            quantity=2,
            payment_method='qris',
        )
        assert StockItem.objects.get(id=cups.id).quantity == 8

        apply_payment_notification(order_id=txn.order_id, transaction_status='expire')

        assert StockItem.objects.get(id=cups.id).quantity == 10
        assert StockItem.objects.get(id=straws.id).quantity == 2

    def test_repeated_failure_restores_once(self, staff, cone_sundae, cups, sundae_usage):
        txn, _ = record_transaction(
            user=staff,
            type='income',
            product_id=cone_sundae.id,
            payment_method='qris',
        )

        apply_payment_notification(order_id=txn.order_id, transaction_status='deny')
        apply_payment_notification(order_id=txn.order_id, transaction_status='cancel')

        assert StockItem.objects.get(id=cups.id).quantity == 10

    def test_late_settlement_deducts_again(self, staff, cone_sundae, cups, sundae_usage):
        txn, _ = record_transaction(
            user=staff,
            type='income',
            product_id=cone_sundae.id,
            payment_method='qris',
        )

        apply_payment_notification(order_id=txn.order_id, transaction_status='expire')
        apply_payment_notification(order_id=txn.order_id, transaction_status='settlement')

        assert StockItem.objects.get(id=cups.id).quantity == 9

    def test_settlement_leaves_stock_alone(self, staff, cone_sundae, cups, sundae_usage):
        txn, _ = record_transaction(
            user=staff,
            type='income',
            product_id=cone_sundae.id,
            payment_method='qris',
        )

        apply_payment_notification(order_id=txn.order_id, transaction_status='settlement')

        assert StockItem.objects.get(id=cups.id).quantity == 9

    def test_updates_every_line_of_a_cart(self, staff, cone_sundae, es_teh):
        transactions, _ = checkout_cart(
            user=staff,
            items=[
                {'product_id': cone_sundae.id, 'quantity': 1},
                {'product_id': es_teh.id, 'quantity': 2},
            ],
            payment_method='qris',
        )

        updated = apply_payment_notification(
            order_id=transactions[0].order_id,
            transaction_status='settlement',
        )

        assert len(updated) == 2
        assert set(
            Transaction.objects.filter(order_id=transactions[0].order_id)
            .values_list('payment_status', flat=True)
        ) == {'settlement'}


@pytest.mark.django_db
class TestQuantity:

    def test_zero_quantity_rejected(self, staff, cone_sundae):
        with pytest.raises(InvalidTransactionError):
            record_transaction(
                user=staff,
                type='income',
                product_id=cone_sundae.id,
                quantity=0,
            )

        assert not Transaction.objects.exists()

    def test_missing_quantity_means_one(self, staff, cone_sundae):
        txn, _ = record_transaction(user=staff, type='income', product_id=cone_sundae.id)

        assert txn.quantity == 1
        assert txn.amount == Decimal('8000')


@pytest.mark.django_db
class TestCheckout:

    def test_one_row_per_line(self, staff, cone_sundae, es_teh):
        transactions, result = checkout_cart(
            user=staff,
            items=[
                {'product_id': cone_sundae.id, 'quantity': 2},
                {'product_id': es_teh.id, 'quantity': 1},
            ],
        )

        assert result.success is True
        assert [(txn.note, txn.amount) for txn in transactions] == [
            ('Cone Sundae', Decimal('16000')),
            ('Es Teh', Decimal('3000')),
        ]
        for txn in transactions:
            assert txn.type == 'income'
            assert txn.category == 'Penjualan'
            assert txn.payment_method == 'cash'
            assert txn.order_id is None
            assert txn.created_by == staff

    def test_qris_cart_shares_one_order(self, staff, cone_sundae, es_teh):
        transactions, _ = checkout_cart(
            user=staff,
            items=[{'product_id': cone_sundae.id}, {'product_id': es_teh.id}],
            payment_method='qris',
        )

        assert transactions[0].order_id.startswith('DC-')
        assert {txn.order_id for txn in transactions} == {transactions[0].order_id}
        assert {txn.payment_status for txn in transactions} == {PaymentStatus.PENDING}

    def test_invalid_line_saves_nothing(self, staff, cone_sundae, rival_product):
        with pytest.raises(InvalidTransactionError):
            checkout_cart(
                user=staff,
                items=[
                    {'product_id': cone_sundae.id, 'quantity': 1},
                    {'product_id': rival_product.id, 'quantity': 1},
                ],
            )

        assert not Transaction.objects.exists()

    def test_zero_quantity_line_saves_nothing(self, staff, cone_sundae, es_teh):
        with pytest.raises(InvalidTransactionError):
            checkout_cart(
                user=staff,
                items=[
                    {'product_id': cone_sundae.id, 'quantity': 1},
                    {'product_id': es_teh.id, 'quantity': 0},
                ],
            )

        assert not Transaction.objects.exists()

    def test_empty_cart(self, staff):
        with pytest.raises(InvalidTransactionError):
            checkout_cart(user=staff, items=[])

    def test_user_without_shop(self, shopless_user, cone_sundae):
        with pytest.raises(InvalidTransactionError):
            checkout_cart(user=shopless_user, items=[{'product_id': cone_sundae.id}])

    def test_deducts_every_line_and_merges_warnings(self, staff, cone_sundae, cups, straws, sundae_usage):
        _, result = checkout_cart(
            user=staff,
            items=[
                {'product_id': cone_sundae.id, 'quantity': 2},
                {'product_id': cone_sundae.id, 'quantity': 1},
            ],
        )

        assert result.success is True
        assert result.insufficient_items == ['Sedotan']
        assert StockItem.objects.get(id=cups.id).quantity == 7
        assert StockItem.objects.get(id=straws.id).quantity == 0

    def test_failed_deduction_keeps_the_cart(self, staff, cone_sundae):
        broken = StockDeductionService(repository=InMemoryStockRepository(fail_rules=True))

        transactions, result = checkout_cart(
            user=staff,
            items=[{'product_id': cone_sundae.id}],
            deduction_service=broken,
        )

        assert result.success is False
        assert Transaction.objects.filter(id=transactions[0].id).exists()
