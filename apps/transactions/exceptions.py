"""Domain exceptions for transactions app."""
from rest_framework.exceptions import APIException


class TransactionServiceError(Exception):
    """Base exception for transaction service errors."""
    pass


class InvalidTransactionError(TransactionServiceError):
    """Raised when a transaction cannot be recorded as given."""
    pass


class TransactionNotFoundError(TransactionServiceError):
    """Raised when a transaction does not exist in the shop."""
    pass


class NotShopOwnerError(TransactionServiceError):
    """Raised when a cashier attempts an owner-only operation."""
    pass


class InvalidSignatureError(APIException):
    """Payment notification signature does not match."""
    status_code = 403
    default_detail = 'Invalid payment notification signature.'
    default_code = 'invalid_signature'


class UnknownOrderError(APIException):
    """Payment notification for an order we never issued."""
    status_code = 404
    default_detail = 'Order not found.'
    default_code = 'unknown_order'
