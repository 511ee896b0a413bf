from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'transactions'

router = DefaultRouter()
router.register(r'', views.TransactionViewSet, basename='transaction')

urlpatterns = [
    # POST   /api/transactions/payments/webhook/  - Gateway notification
    path('payments/webhook/', views.payment_webhook, name='payment-webhook'),

    # GET    /api/transactions/                   - List (?today=true)
    # POST   /api/transactions/                   - Record
    # GET    /api/transactions/{id}/              - Get
    # DELETE /api/transactions/{id}/              - Delete (owner)
    # POST   /api/transactions/checkout/          - Record a till cart
    # GET    /api/transactions/{id}/qris/         - QRIS code
    path('', include(router.urls)),
]
