"""Promotion activation service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.orders.models import Order
from apps.orders.services.order_totals import update_order_totals
from ..models import Promotion, PromotionCode
from .exceptions import (
    OrderNotFoundError,
    PromotionNotFoundError,
    PromotionCodeNotFoundError,
    PromotionNotEligibleError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def activate_promotion(
    *,
    order_id: UUID,
    promotion_id: Optional[UUID] = None,
    code: Optional[str] = None
) -> Promotion:
    """
    Apply a promotion to an order, by id or by coupon code.

    Args:
        order_id: Order UUID
        promotion_id: Promotion UUID (for automatic promotions)
        code: Coupon code; selects the promotion when promotion_id is omitted

    Returns:
        The applied Promotion

    Raises:
        OrderNotFoundError: If order doesn't exist
        PromotionNotFoundError: If promotion doesn't exist
        PromotionCodeNotFoundError: If the code is unknown
        PromotionNotEligibleError: If the promotion created no adjustment
    """
    try:
        order = Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order {order_id} not found")

    promotion_code = None
    if code:
        try:
            promotion_code = PromotionCode.objects.select_related('promotion').get(
                value=code.strip().lower()
            )
        except PromotionCode.DoesNotExist:
            raise PromotionCodeNotFoundError(f"Promotion code '{code}' not found")

    if promotion_id is not None:
        try:
            promotion = Promotion.objects.get(id=promotion_id)
        except Promotion.DoesNotExist:
            raise PromotionNotFoundError(f"Promotion {promotion_id} not found")
    elif promotion_code is not None:
        promotion = promotion_code.promotion
    else:
        raise PromotionNotFoundError("Either promotion_id or code is required")

    # Eligibility rules read the item total
    update_order_totals(order)

    if not promotion.activate(order, promotion_code=promotion_code):
        raise PromotionNotEligibleError(
            f"Promotion '{promotion.name}' cannot be applied to order {order.number}"
        )

    logger.info("Activated promotion '%s' on order %s", promotion.name, order.number)
    return promotion
