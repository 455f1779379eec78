"""Tax adjustment service."""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction

from apps.orders.models import Order
from ..models import TaxRate
from .exceptions import OrderNotFoundError

logger = logging.getLogger(__name__)


@transaction.atomic
def apply_tax_rates(
    *,
    order_id: UUID,
    rate_ids: Optional[Iterable[UUID]] = None
) -> list:
    """
    Replace the open tax adjustments of an order's line items and shipments.

    Every open tax adjustment on the order is removed and one adjustment per
    (rate, item) is created. Items that still carry a closed adjustment from
    a rate keep it and get no new one for that rate.

    Args:
        order_id: Order UUID
        rate_ids: Rates to apply; all rates when omitted

    Returns:
        List of created tax adjustments

    Raises:
        OrderNotFoundError: If order doesn't exist
    """
    from apps.adjustments.models import Adjustment

    try:
        order = Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order {order_id} not found")

    rates = TaxRate.objects.all()
    if rate_ids is not None:
        rates = rates.filter(id__in=list(rate_ids))
    rates = list(rates)

    for stale in Adjustment.objects.filter(order=order).tax().open():
        stale.delete()

    created = []
    for rate in rates:
        created.extend(rate.adjust(order))

    logger.info(
        "Applied %d tax rate(s) to order %s: %d adjustment(s)",
        len(rates), order.number, len(created)
    )
    return created
