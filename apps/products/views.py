from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from apps.accounts.permissions import IsShopOwnerOrReadOnly
from .models import Product
from .serializers import ProductSerializer, ProductFilterSerializer
from .services import (
    search_products,
    create_product,
    soft_delete_product,
    get_categories,
    DuplicateProductError,
    ProductNotFoundError,
)


class ProductPagination(PageNumberPagination):
    """Custom pagination for products."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class ProductViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the shop's product catalog.

    list: Products of the user's shop (filterable)
    create: Add a product (owner)
    retrieve: Get a product
    update / partial_update: Edit a product (owner)
    destroy: Hide a product from the till (owner, soft delete)
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, IsShopOwnerOrReadOnly]
    pagination_class = ProductPagination

    def get_queryset(self):
        """Filter the user's catalog using validated query parameters."""
        if self.action != 'list':
            return Product.objects.filter(shop_id=self.request.user.shop_id)

        filter_serializer = ProductFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return search_products(
            shop_id=self.request.user.shop_id,
            search=params.get('search'),
            category=params.get('category'),
            include_inactive=params.get('include_inactive', False),
        )

    def create(self, request, *args, **kwargs):
        """Create a new product in the user's shop."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = create_product(
                shop_id=request.user.shop_id,
                **serializer.validated_data
            )
        except DuplicateProductError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            ProductSerializer(product).data,
            status=status.HTTP_201_CREATED
        )

    def destroy(self, request, *args, **kwargs):
        """Soft delete a product."""
        try:
            soft_delete_product(shop_id=request.user.shop_id, product_id=kwargs.get('pk'))
        except ProductNotFoundError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def categories(self, request):
        """Categories used by the shop's active products."""
        return Response(get_categories(request.user.shop_id))
