"""Domain exceptions for products app."""


class ProductsServiceError(Exception):
    """Base exception for product catalog errors."""
    pass


class ProductNotFoundError(ProductsServiceError):
    """Product does not exist in the shop."""
    pass


class DuplicateProductError(ProductsServiceError):
    """An active product with this name already exists in the shop."""
    pass
