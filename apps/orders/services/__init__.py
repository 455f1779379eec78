"""Services for orders business logic."""

from .exceptions import (
    OrdersServiceError,
    OrderNotFoundError,
    LineItemNotFoundError,
    InvalidCancellationError,
)
from .order_totals import (
    update_order_totals,
    recalculate_order,
    get_order_by_id,
)
from .unit_cancellation import (
    cancel_units,
)

__all__ = [
    # Exceptions
    'OrdersServiceError',
    'OrderNotFoundError',
    'LineItemNotFoundError',
    'InvalidCancellationError',
    # Order Totals
    'update_order_totals',
    'recalculate_order',
    'get_order_by_id',
    # Unit Cancellation
    'cancel_units',
]
