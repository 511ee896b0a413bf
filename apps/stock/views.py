from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.accounts.permissions import IsShopOwner, IsShopOwnerOrReadOnly
from .models import StockItem, ProductStockUsage
from .serializers import (
    StockItemSerializer,
    StockFilterSerializer,
    RestockSerializer,
    ProductStockUsageSerializer,
    UsageUpdateSerializer,
    UsageFilterSerializer,
)
from .services import (
    restock_item,
    deactivate_item,
    link_product,
    update_usage,
    unlink_product,
    get_low_stock_items,
    StockItemNotFoundError,
    UsageRuleNotFoundError,
    DuplicateUsageRuleError,
    ShopMismatchError,
    InvalidQuantityError,
)


class StockItemViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the shop's stock items.

    list: Active items (``?low=true`` for items at or below min_stock)
    create / update: Manage items (owner)
    destroy: Deactivate an item (owner, soft delete)
    restock: Add units to an item (owner)
    """

    serializer_class = StockItemSerializer
    permission_classes = [IsAuthenticated, IsShopOwnerOrReadOnly]

    def get_queryset(self):
        return StockItem.objects.filter(
            shop_id=self.request.user.shop_id,
            is_active=True
        )

    @extend_schema(
        parameters=[OpenApiParameter('low', bool, description='Only items at or below min_stock')],
    )
    def list(self, request, *args, **kwargs):
        filter_serializer = StockFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        if filter_serializer.validated_data['low']:
            items = get_low_stock_items(request.user.shop_id)
            return Response(self.get_serializer(items, many=True).data)

        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        serializer.save(shop_id=self.request.user.shop_id)

    def destroy(self, request, *args, **kwargs):
        try:
            deactivate_item(shop_id=request.user.shop_id, item_id=kwargs.get('pk'))
        except StockItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=RestockSerializer, responses={200: StockItemSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsShopOwner])
    def restock(self, request, pk=None):
        """Add units to a stock item."""
        serializer = RestockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = restock_item(
                shop_id=request.user.shop_id,
                item_id=pk,
                amount=serializer.validated_data['amount']
            )
        except StockItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(StockItemSerializer(item).data)


class UsageRuleViewSet(mixins.ListModelMixin,
                       mixins.CreateModelMixin,
                       mixins.UpdateModelMixin,
                       mixins.DestroyModelMixin,
                       viewsets.GenericViewSet):
    """
    Product -> stock item consumption rules.

    Reading is open to shop members; changes are owner only.
    """

    serializer_class = ProductStockUsageSerializer
    permission_classes = [IsAuthenticated, IsShopOwnerOrReadOnly]
    http_method_names = ['get', 'post', 'patch', 'put', 'delete']

    def get_queryset(self):
        queryset = (
            ProductStockUsage.objects
            .filter(stock_item__shop_id=self.request.user.shop_id)
            .select_related('product', 'stock_item')
            .order_by('product__name', 'stock_item__name')
        )

        if self.action == 'list':
            filter_serializer = UsageFilterSerializer(data=self.request.query_params)
            filter_serializer.is_valid(raise_exception=True)
            product_id = filter_serializer.validated_data.get('product')
            if product_id:
                queryset = queryset.filter(product_id=product_id)

        return queryset

    @extend_schema(
        parameters=[OpenApiParameter('product', str, description='Filter by product id')],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            usage = link_product(
                shop_id=request.user.shop_id,
                product_id=data['product'].id,
                stock_item_id=data['stock_item'].id,
                quantity_used=data.get('quantity_used', 1),
            )
        except DuplicateUsageRuleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except (StockItemNotFoundError, ShopMismatchError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidQuantityError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            ProductStockUsageSerializer(usage).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=UsageUpdateSerializer, responses={200: ProductStockUsageSerializer})
    def update(self, request, *args, **kwargs):
        serializer = UsageUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            usage = update_usage(
                shop_id=request.user.shop_id,
                usage_id=kwargs.get('pk'),
                quantity_used=serializer.validated_data['quantity_used'],
            )
        except UsageRuleNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(ProductStockUsageSerializer(usage).data)

    def destroy(self, request, *args, **kwargs):
        try:
            unlink_product(shop_id=request.user.shop_id, usage_id=kwargs.get('pk'))
        except UsageRuleNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)
