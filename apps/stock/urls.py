from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'stock'

router = DefaultRouter()
router.register(r'items', views.StockItemViewSet, basename='stock-item')
router.register(r'usage', views.UsageRuleViewSet, basename='stock-usage')

urlpatterns = [
    # GET    /api/stock/items/                - List items (?low=true)
    # POST   /api/stock/items/                - Create item
    # PATCH  /api/stock/items/{id}/           - Update item
    # DELETE /api/stock/items/{id}/           - Deactivate item
    # POST   /api/stock/items/{id}/restock/   - Add units
    # GET    /api/stock/usage/?product=       - List usage rules
    # POST   /api/stock/usage/                - Link product to item
    # PATCH  /api/stock/usage/{id}/           - Change quantity used
    # DELETE /api/stock/usage/{id}/           - Unlink
    path('', include(router.urls)),
]
