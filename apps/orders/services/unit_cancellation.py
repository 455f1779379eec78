"""Cancellation of line item units."""

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import Sum

from ..models import LineItem, UnitCancel, CancelReason
from .exceptions import LineItemNotFoundError, InvalidCancellationError

logger = logging.getLogger(__name__)


@transaction.atomic
def cancel_units(
    *,
    line_item_id: UUID,
    quantity: int,
    reason: str = CancelReason.CANCEL
) -> UnitCancel:
    """
    Cancel units of a line item and credit them back on the order.

    Creates a UnitCancel and a cancellation adjustment on the line item;
    the adjustment hooks refresh the line item and order totals.

    Args:
        line_item_id: Line item UUID
        quantity: Number of units to cancel
        reason: Cancellation reason

    Returns:
        Created UnitCancel

    Raises:
        LineItemNotFoundError: If line item doesn't exist
        InvalidCancellationError: If quantity exceeds the remaining units
    """
    from apps.adjustments.models import Adjustment

    try:
        line_item = (
            LineItem.objects
            .select_for_update()
            .select_related('order')
            .get(id=line_item_id)
        )
    except LineItem.DoesNotExist:
        raise LineItemNotFoundError(f"Line item {line_item_id} not found")

    already_cancelled = line_item.unit_cancels.aggregate(total=Sum('quantity'))['total'] or 0
    remaining = line_item.quantity - already_cancelled
    if quantity < 1 or quantity > remaining:
        raise InvalidCancellationError(
            f"Cannot cancel {quantity} unit(s); {remaining} remaining on line item {line_item_id}"
        )

    unit_cancel = UnitCancel.objects.create(
        line_item=line_item,
        quantity=quantity,
        reason=reason,
    )
    Adjustment.objects.create(
        order=line_item.order,
        adjustable=line_item,
        source=unit_cancel,
        label=f"Cancellation - {unit_cancel.get_reason_display()}",
        amount=unit_cancel.compute_amount(line_item),
    )

    logger.info(
        "Cancelled %d unit(s) of line item %s on order %s (%s)",
        quantity, line_item.id, line_item.order.number, reason
    )
    return unit_cancel
