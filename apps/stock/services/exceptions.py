"""Domain-specific exceptions for stock services."""


class StockServiceError(Exception):
    """Base exception for stock services."""
    pass


class StockRepositoryError(StockServiceError):
    """Raised when the stock backend cannot be read or written."""
    pass


class StockItemNotFoundError(StockServiceError):
    """Raised when a stock item is missing or deactivated."""
    pass


class UsageRuleNotFoundError(StockServiceError):
    """Raised when a product/stock item link does not exist."""
    pass


class DuplicateUsageRuleError(StockServiceError):
    """Raised when a product is already linked to the stock item."""
    pass


class ShopMismatchError(StockServiceError):
    """Raised when a product and a stock item belong to different shops."""
    pass


class InvalidQuantityError(StockServiceError):
    """Raised when a restock or usage quantity is not positive."""
    pass
