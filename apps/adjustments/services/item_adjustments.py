"""Recalculation of the adjustment totals stored on an adjustable."""

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from apps.orders.models import Order

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def summarize_adjustments(adjustments):
    """
    Reduce a set of adjustments to the totals stored on their adjustable.

    Args:
        adjustments: Adjustment queryset of one adjustable

    Returns:
        Dict with promo_total, included_tax_total, additional_tax_total
        and adjustment_total
    """
    promo_total = adjustments.promotion().eligible().total_amount()
    included_tax_total = adjustments.tax().is_included().total_amount()
    additional_tax_total = adjustments.tax().additional().total_amount()
    other_total = adjustments.non_tax().non_promotion().eligible().total_amount()

    return {
        'promo_total': promo_total,
        'included_tax_total': included_tax_total,
        'additional_tax_total': additional_tax_total,
        'adjustment_total': promo_total + additional_tax_total + other_total,
    }


class ItemAdjustments:
    """
    Recalculates the adjustments of one order, line item or shipment.

    Promotions are recalculated first and only the best eligible one is kept
    eligible; taxes are then recalculated on the discounted amount. The
    resulting totals are written to the adjustable, and the order totals are
    refreshed.

    Example:
        ItemAdjustments(line_item).update()
    """

    def __init__(self, item):
        self.item = item

    @property
    def adjustments(self):
        return self.item.adjustments.all()

    @transaction.atomic
    def update(self, update_order=True):
        self.update_promotion_adjustments()
        self.update_tax_adjustments()
        totals = summarize_adjustments(self.adjustments)

        if isinstance(self.item, Order):
            # Order-level adjustments are folded into the order totals
            from apps.orders.services.order_totals import update_order_totals
            update_order_totals(self.item)
            return totals

        now = timezone.now()
        type(self.item).objects.filter(pk=self.item.pk).update(updated_at=now, **totals)
        for field, value in totals.items():
            setattr(self.item, field, value)
        self.item.updated_at = now

        logger.debug(
            "Updated adjustment totals of %s %s: %s",
            type(self.item).__name__, self.item.pk, totals
        )

        if update_order:
            from apps.orders.services.order_totals import update_order_totals
            update_order_totals(self.item.order)
        return totals

    def _bind(self, adjustments):
        # Recalculation must see the in-memory promo_total of this item
        for adjustment in adjustments:
            adjustment.adjustable = self.item
        return adjustments

    def update_promotion_adjustments(self):
        promotions = self._bind(list(self.adjustments.promotion()))
        promotion_total = sum((adjustment.recalculate() for adjustment in promotions), ZERO)

        if promotion_total != 0:
            self.choose_best_promotion_adjustment()

        best = self.best_promotion_adjustment()
        self.item.promo_total = best.amount if best is not None else ZERO

    def update_tax_adjustments(self):
        for adjustment in self._bind(list(self.adjustments.tax())):
            adjustment.recalculate()

    def best_promotion_adjustment(self):
        return (
            self.adjustments
            .promotion()
            .eligible()
            .order_by('amount', '-created_at', '-id')
            .first()
        )

    def choose_best_promotion_adjustment(self):
        best = self.best_promotion_adjustment()
        if best is None:
            return
        demoted = self.adjustments.promotion().exclude(id=best.id).update(eligible=False)
        if demoted:
            logger.info(
                "Kept promotion adjustment %s on %s %s, marked %d other(s) ineligible",
                best.id, type(self.item).__name__, self.item.pk, demoted
            )
