from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'products'

router = DefaultRouter()
router.register(r'', views.ProductViewSet, basename='product')

urlpatterns = [
    # GET    /api/products/              - List products
    # POST   /api/products/              - Create product
    # GET    /api/products/{id}/         - Get product
    # PATCH  /api/products/{id}/         - Update product
    # DELETE /api/products/{id}/         - Hide product
    # GET    /api/products/categories/   - Categories in use
    path('', include(router.urls)),
]
