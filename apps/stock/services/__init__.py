"""Services for stock business logic."""

from .exceptions import (
    StockServiceError,
    StockRepositoryError,
    StockItemNotFoundError,
    UsageRuleNotFoundError,
    DuplicateUsageRuleError,
    ShopMismatchError,
    InvalidQuantityError,
)
from .stock_deduction import (
    UsageRule,
    DecrementOutcome,
    DeductionResult,
    StockRepository,
    DjangoStockRepository,
    StockDeductionService,
)
from .stock_management import (
    restock_item,
    deactivate_item,
    link_product,
    update_usage,
    unlink_product,
    get_low_stock_items,
)

__all__ = [
    # Exceptions
    'StockServiceError',
    'StockRepositoryError',
    'StockItemNotFoundError',
    'UsageRuleNotFoundError',
    'DuplicateUsageRuleError',
    'ShopMismatchError',
    'InvalidQuantityError',
    # Deduction
    'UsageRule',
    'DecrementOutcome',
    'DeductionResult',
    'StockRepository',
    'DjangoStockRepository',
    'StockDeductionService',
    # Management
    'restock_item',
    'deactivate_item',
    'link_product',
    'update_usage',
    'unlink_product',
    'get_low_stock_items',
]
