"""Services for adjustments business logic."""

from .adjustment_management import (
    create_adjustment,
    get_adjustment_by_id,
    list_order_adjustments,
    close_adjustment,
    open_adjustment,
    recalculate_adjustment,
    delete_adjustment,
)
from .item_adjustments import (
    ItemAdjustments,
    summarize_adjustments,
)

__all__ = [
    # Adjustment Management
    'create_adjustment',
    'get_adjustment_by_id',
    'list_order_adjustments',
    'close_adjustment',
    'open_adjustment',
    'recalculate_adjustment',
    'delete_adjustment',
    # Item Adjustments
    'ItemAdjustments',
    'summarize_adjustments',
]
