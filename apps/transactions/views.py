import logging

from django.conf import settings
from django.db.models import Sum
from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework import serializers as drf_serializers
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.accounts.permissions import IsShopMember
from .exceptions import (
    InvalidTransactionError,
    TransactionNotFoundError,
    NotShopOwnerError,
    InvalidSignatureError,
    UnknownOrderError,
)
from .payments import (
    verify_midtrans_signature,
    format_payment_status,
    format_rupiah,
    QRISPaymentGenerator,
)
from .serializers import (
    TransactionSerializer,
    TransactionCreateSerializer,
    CheckoutSerializer,
    TransactionFilterSerializer,
    PaymentNotificationSerializer,
)
from .services import (
    record_transaction,
    checkout_cart,
    transactions_for_shop,
    delete_transaction,
    apply_payment_notification,
)

logger = logging.getLogger(__name__)


class TransactionCreatedResponseSerializer(drf_serializers.Serializer):
    transaction = TransactionSerializer()
    stock_warnings = drf_serializers.ListField(child=drf_serializers.CharField())
    stock_deduction_failed = drf_serializers.BooleanField()


class CheckoutResponseSerializer(drf_serializers.Serializer):
    transactions = TransactionSerializer(many=True)
    total = drf_serializers.DecimalField(max_digits=14, decimal_places=2)
    order_id = drf_serializers.CharField(allow_null=True)
    stock_warnings = drf_serializers.ListField(child=drf_serializers.CharField())
    stock_deduction_failed = drf_serializers.BooleanField()


class QRISResponseSerializer(drf_serializers.Serializer):
    order_id = drf_serializers.CharField(allow_null=True)
    amount = drf_serializers.DecimalField(max_digits=14, decimal_places=2)
    amount_display = drf_serializers.CharField()
    merchant_name = drf_serializers.CharField()
    qr_image = drf_serializers.CharField(help_text='Base64 encoded PNG')


class TransactionPagination(PageNumberPagination):
    """Custom pagination for transaction history."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class TransactionViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         mixins.CreateModelMixin,
                         mixins.DestroyModelMixin,
                         viewsets.GenericViewSet):
    """
    ViewSet for the shop's cash book.

    list: Transactions, newest first (?today=true, ?type=, ?date_from=, ?date_to=)
    create: Record an income or expense (owner and staff)
    retrieve: Get a transaction
    destroy: Delete a transaction (owner)
    checkout: Record a whole till cart (owner and staff)
    qris: QR code to show the customer for a QRIS sale
    """

    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated, IsShopMember]
    pagination_class = TransactionPagination

    def get_queryset(self):
        if self.action != 'list':
            return transactions_for_shop(shop_id=self.request.user.shop_id)

        filter_serializer = TransactionFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return transactions_for_shop(
            shop_id=self.request.user.shop_id,
            type=params.get('type'),
            today=params.get('today', False),
            date_from=params.get('date_from'),
            date_to=params.get('date_to'),
        )

    @extend_schema(
        parameters=[
            OpenApiParameter('today', bool, description='Only the current business day'),
            OpenApiParameter('type', str, enum=['income', 'expense']),
            OpenApiParameter('date_from', str, description='Business-day label YYYY-MM-DD'),
            OpenApiParameter('date_to', str, description='Business-day label YYYY-MM-DD'),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        request=TransactionCreateSerializer,
        responses={201: TransactionCreatedResponseSerializer},
    )
    def create(self, request, *args, **kwargs):
        """Record a transaction; stock problems come back as warnings."""
        serializer = TransactionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            txn, deduction = record_transaction(
                user=request.user,
                **serializer.validated_data
            )
        except InvalidTransactionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'transaction': TransactionSerializer(txn).data,
            'stock_warnings': deduction.insufficient_items if deduction else [],
            'stock_deduction_failed': bool(deduction and not deduction.success),
        }, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_transaction(user=request.user, transaction_id=kwargs.get('pk'))
        except NotShopOwnerError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except TransactionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=CheckoutSerializer,
        responses={201: CheckoutResponseSerializer},
    )
    @action(detail=False, methods=['post'])
    def checkout(self, request):
        """
        Record a whole till cart in one request.

        POST /api/transactions/checkout/
        """
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            transactions, deduction = checkout_cart(
                user=request.user,
                **serializer.validated_data
            )
        except InvalidTransactionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'transactions': TransactionSerializer(transactions, many=True).data,
            'total': sum(txn.amount for txn in transactions),
            'order_id': transactions[0].order_id,
            'stock_warnings': deduction.insufficient_items,
            'stock_deduction_failed': not deduction.success,
        }, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: QRISResponseSerializer})
    @action(detail=True, methods=['get'])
    def qris(self, request, pk=None):
        """
        QRIS code for a sale; a checkout order shows its cart total.

        GET /api/transactions/{id}/qris/
        """
        txn = self.get_object()

        if not settings.QRIS_STATIC_CODE:
            return Response(
                {'error': 'QRIS is not configured for this shop'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

        amount = txn.amount
        if txn.order_id:
            amount = (
                self.get_queryset()
                .filter(order_id=txn.order_id)
                .aggregate(total=Sum('amount'))['total']
            )

        image = QRISPaymentGenerator.generate_qr_image(settings.QRIS_STATIC_CODE)

        return Response({
            'order_id': txn.order_id,
            'amount': amount,
            'amount_display': format_rupiah(amount),
            'merchant_name': txn.shop.name,
            'qr_image': QRISPaymentGenerator.to_base64_png(image),
        })


@extend_schema(
    request=PaymentNotificationSerializer,
    responses={200: TransactionSerializer},
    description="Payment gateway notification (Midtrans).",
    tags=['payments'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def payment_webhook(request):
    """
    Receive a payment status notification.

    POST /api/transactions/payments/webhook/
    """
    serializer = PaymentNotificationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    payload = serializer.validated_data

    if not verify_midtrans_signature(request.data, settings.MIDTRANS_SERVER_KEY):
        logger.warning("Rejected payment notification for order %s", payload['order_id'])
        raise InvalidSignatureError()

    transactions = apply_payment_notification(
        order_id=payload['order_id'],
        transaction_status=payload['transaction_status'],
    )
    if not transactions:
        raise UnknownOrderError()

    label, variant = format_payment_status(payload['transaction_status'])
    return Response({
        'order_id': payload['order_id'],
        'payment_status': payload['transaction_status'],
        'label': label,
        'variant': variant,
    })
