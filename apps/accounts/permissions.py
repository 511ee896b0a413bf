"""
Shop-scoped permission classes.

Every bookkeeping endpoint works inside the requesting user's shop. Staff
may read and record sales; only the owner manages the catalog, stock,
staff and reports.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import UserRole


class IsShopMember(BasePermission):
    """
    Allow users attached to a shop (owner or staff).

    Objects must expose ``shop_id``; access is granted only inside the
    user's own shop.
    """

    message = 'You must belong to a shop to access this resource.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.shop_id)

    def has_object_permission(self, request, view, obj):
        return getattr(obj, 'shop_id', None) == request.user.shop_id


class IsShopOwner(IsShopMember):
    """Allow only the owner of the user's shop."""

    message = 'Only the shop owner can perform this action.'

    def has_permission(self, request, view):
        return (
            super().has_permission(request, view) and
            request.user.role == UserRole.OWNER
        )


class IsShopOwnerOrReadOnly(IsShopMember):
    """
    Shop members can read; only the owner can write.

    Usage:
        class ProductViewSet(viewsets.ModelViewSet):
            permission_classes = [IsAuthenticated, IsShopOwnerOrReadOnly]
    """

    message = 'Only the shop owner can modify this resource.'

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method in SAFE_METHODS:
            return True
        return request.user.role == UserRole.OWNER
