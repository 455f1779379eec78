"""Order total recalculation service."""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from ..models import Order
from .exceptions import OrderNotFoundError

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

def update_order_totals(order: Order) -> Order:
    """
    Recompute the order totals from its items and stored adjustment totals.

    Line item and shipment totals are taken as stored; order-level
    adjustments are summed directly. Nothing is recalculated from sources.

    Args:
        order: Order to update

    Returns:
        The same order with fresh totals
    """
    from apps.adjustments.services.item_adjustments import summarize_adjustments

    line_items = list(order.line_items.all())
    shipments = list(order.shipments.all())
    items = line_items + shipments
    order_level = summarize_adjustments(order.adjustments.all())

    totals = {
        'item_total': sum((line_item.amount for line_item in line_items), ZERO),
        'ship_total': sum((shipment.cost for shipment in shipments), ZERO),
    }
    for field in ['promo_total', 'included_tax_total', 'additional_tax_total', 'adjustment_total']:
        totals[field] = sum((getattr(item, field) for item in items), order_level[field])
    totals['total'] = totals['item_total'] + totals['ship_total'] + totals['adjustment_total']

    now = timezone.now()
    Order.objects.filter(pk=order.pk).update(updated_at=now, **totals)
    for field, value in totals.items():
        setattr(order, field, value)
    order.updated_at = now

    logger.debug("Order %s totals: %s", order.number, totals)
    return order


@transaction.atomic
def recalculate_order(*, order_id: UUID) -> Order:
    """
    Recalculate every adjustment on an order and refresh its totals.

    Line items and shipments go first so that order-level promotions see
    the current item total.

    Args:
        order_id: Order UUID

    Returns:
        Updated Order instance

    Raises:
        OrderNotFoundError: If order doesn't exist
    """
    from apps.adjustments.services.item_adjustments import ItemAdjustments

    try:
        order = Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order {order_id} not found")

    update_order_totals(order)
    for item in list(order.line_items.all()) + list(order.shipments.all()):
        ItemAdjustments(item).update(update_order=False)
    ItemAdjustments(order).update()

    logger.info("Recalculated order %s: total %s", order.number, order.total)
    return order


def get_order_by_id(*, order_id: UUID) -> Order:
    """
    Get order by ID.

    Raises:
        OrderNotFoundError: If order doesn't exist
    """
    try:
        return Order.objects.prefetch_related('line_items', 'shipments').get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order {order_id} not found")
