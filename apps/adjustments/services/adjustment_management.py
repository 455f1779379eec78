"""Adjustment CRUD and lifecycle operations service."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from apps.orders.models import Order
from ..models import Adjustment, AdjustmentReason
from ..exceptions import (
    AdjustmentNotFoundError,
    AdjustmentValidationError,
    OrderNotFoundError,
)

logger = logging.getLogger(__name__)


def _lock_adjustment(adjustment_id: UUID) -> Adjustment:
    try:
        return Adjustment.objects.select_for_update().get(id=adjustment_id)
    except Adjustment.DoesNotExist:
        raise AdjustmentNotFoundError(f"Adjustment {adjustment_id} not found")


@transaction.atomic
def create_adjustment(
    *,
    order_id: UUID,
    label: str,
    amount: Decimal,
    adjustable=None,
    source=None,
    mandatory: bool = False,
    included: bool = False,
    eligible: bool = True,
    promotion_code=None,
    adjustment_reason: Optional[AdjustmentReason] = None
) -> Adjustment:
    """
    Create an adjustment on an order, line item or shipment.

    Args:
        order_id: Order UUID
        label: Text shown to the customer
        amount: Signed amount; negative for credits
        adjustable: Order, LineItem or Shipment; defaults to the order
        source: Object that computes the amount (TaxRate, PromotionAction, ...)
        mandatory: Keep the adjustment even when its amount is zero
        included: Amount is already part of the item price
        eligible: Whether the adjustment counts towards totals
        promotion_code: Code that unlocked a promotion source
        adjustment_reason: Reason for a manual adjustment

    Returns:
        Created Adjustment instance

    Raises:
        OrderNotFoundError: If order doesn't exist
        AdjustmentValidationError: If the adjustment is invalid
    """
    try:
        order = Order.objects.get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order {order_id} not found")

    adjustment = Adjustment(
        order=order,
        adjustable=adjustable if adjustable is not None else order,
        source=source,
        label=label,
        amount=amount,
        mandatory=mandatory,
        included=included,
        eligible=eligible,
        promotion_code=promotion_code,
        adjustment_reason=adjustment_reason,
    )

    try:
        adjustment.full_clean()
    except ValidationError as e:
        raise AdjustmentValidationError(e.message_dict)

    adjustment.save()
    logger.info(
        "Created adjustment %s (%s) of %s on order %s",
        adjustment.id, adjustment.label, adjustment.amount, order.number
    )
    return adjustment


def get_adjustment_by_id(*, adjustment_id: UUID) -> Adjustment:
    """
    Get adjustment by ID.

    Raises:
        AdjustmentNotFoundError: If adjustment doesn't exist
    """
    try:
        return (
            Adjustment.objects
            .select_related('order', 'promotion_code', 'adjustment_reason')
            .get(id=adjustment_id)
        )
    except Adjustment.DoesNotExist:
        raise AdjustmentNotFoundError(f"Adjustment {adjustment_id} not found")


def list_order_adjustments(
    *,
    order_id: UUID,
    state: Optional[str] = None,
    kind: Optional[str] = None
) -> QuerySet:
    """
    Adjustments of an order, optionally narrowed by state and kind.

    Args:
        order_id: Order UUID
        state: 'open' or 'closed'
        kind: 'tax', 'promotion', 'cancellation', 'shipping' or 'price'

    Raises:
        OrderNotFoundError: If order doesn't exist
    """
    if not Order.objects.filter(id=order_id).exists():
        raise OrderNotFoundError(f"Order {order_id} not found")

    queryset = Adjustment.objects.filter(order_id=order_id)
    if state == 'open':
        queryset = queryset.open()
    elif state == 'closed':
        queryset = queryset.closed()

    scopes = {
        'tax': queryset.tax,
        'promotion': queryset.promotion,
        'cancellation': queryset.cancellation,
        'shipping': queryset.shipping,
        'price': queryset.price,
    }
    if kind in scopes:
        queryset = scopes[kind]()
    return queryset


@transaction.atomic
def close_adjustment(*, adjustment_id: UUID) -> Adjustment:
    """
    Close an adjustment so its amount is no longer recalculated.

    Raises:
        AdjustmentNotFoundError: If adjustment doesn't exist
        InvalidStateTransitionError: If adjustment is already closed
    """
    adjustment = _lock_adjustment(adjustment_id)
    adjustment.close()
    logger.info("Closed adjustment %s", adjustment.id)
    return adjustment


@transaction.atomic
def open_adjustment(*, adjustment_id: UUID) -> Adjustment:
    """
    Reopen a closed adjustment.

    Raises:
        AdjustmentNotFoundError: If adjustment doesn't exist
        InvalidStateTransitionError: If adjustment is already open
    """
    adjustment = _lock_adjustment(adjustment_id)
    adjustment.open()
    logger.info("Opened adjustment %s", adjustment.id)
    return adjustment


@transaction.atomic
def recalculate_adjustment(*, adjustment_id: UUID) -> Adjustment:
    """
    Recalculate an adjustment from its source and refresh the adjustable totals.

    Closed and sourceless adjustments keep their amount.

    Raises:
        AdjustmentNotFoundError: If adjustment doesn't exist
    """
    from .item_adjustments import ItemAdjustments

    adjustment = _lock_adjustment(adjustment_id)
    previous = adjustment.amount
    adjustment.recalculate()
    if adjustment.adjustable is not None:
        ItemAdjustments(adjustment.adjustable).update()
        adjustment.refresh_from_db()

    if adjustment.amount != previous:
        logger.info(
            "Recalculated adjustment %s: %s -> %s",
            adjustment.id, previous, adjustment.amount
        )
    return adjustment


@transaction.atomic
def delete_adjustment(*, adjustment_id: UUID) -> None:
    """
    Delete an adjustment; the adjustable totals are refreshed by the model.

    Raises:
        AdjustmentNotFoundError: If adjustment doesn't exist
    """
    adjustment = _lock_adjustment(adjustment_id)
    adjustment.delete()
    logger.info("Deleted adjustment %s", adjustment_id)
