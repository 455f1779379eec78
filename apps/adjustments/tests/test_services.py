"""
Service layer unit tests for adjustments app.

Tests cover:
- Manual adjustment creation and validation
- Listing with state and kind filters
- Lifecycle operations
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.adjustments.exceptions import (
    AdjustmentNotFoundError,
    AdjustmentValidationError,
    InvalidStateTransitionError,
    OrderNotFoundError,
)
from apps.adjustments.models import Adjustment
from apps.adjustments.services import (
    close_adjustment,
    create_adjustment,
    delete_adjustment,
    get_adjustment_by_id,
    list_order_adjustments,
    open_adjustment,
    recalculate_adjustment,
    summarize_adjustments,
)
from apps.orders.models import LineItem
from apps.pricing.models import PromotionCode, TaxRate


# =============================================================================
# Adjustment Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestCreateAdjustment:
    """Tests for create_adjustment."""

    def test_defaults_to_order(self, order, adjustment_reason):
        adjustment = create_adjustment(
            order_id=order.id,
            label='Price match',
            amount=Decimal('-2.00'),
            adjustment_reason=adjustment_reason,
        )

        assert adjustment.adjustable == order
        assert adjustment.source is None
        assert adjustment.adjustment_reason == adjustment_reason

        order.refresh_from_db()
        assert order.total == Decimal('18.00')

    def test_on_line_item(self, order, line_item):
        adjustment = create_adjustment(
            order_id=order.id,
            adjustable=line_item,
            label='Scratched',
            amount=Decimal('-3.00'),
        )

        line_item.refresh_from_db()
        assert adjustment.adjustable == line_item
        assert line_item.adjustment_total == Decimal('-3.00')

    def test_promotion_without_required_code(self, order, promotion):
        PromotionCode.objects.create(promotion=promotion, value='five')

        with pytest.raises(AdjustmentValidationError) as exc_info:
            create_adjustment(
                order_id=order.id,
                source=promotion.actions.get(),
                label='Promotion (Five Off)',
                amount=Decimal('-5.00'),
            )

        assert 'promotion_code' in exc_info.value.errors
        assert not Adjustment.objects.exists()

    def test_order_not_found(self, db):
        with pytest.raises(OrderNotFoundError):
            create_adjustment(order_id=uuid4(), label='Nope', amount=Decimal('1.00'))


@pytest.mark.django_db
class TestListAdjustments:
    """Tests for list_order_adjustments."""

    def test_list_all(self, order, tax_adjustment, manual_adjustment):
        assert list_order_adjustments(order_id=order.id).count() == 2

    def test_filter_by_kind(self, order, tax_adjustment, manual_adjustment):
        assert list(list_order_adjustments(order_id=order.id, kind='tax')) == [tax_adjustment]
        assert list(list_order_adjustments(order_id=order.id, kind='price')) == [tax_adjustment]

    def test_filter_by_state(self, order, tax_adjustment, manual_adjustment):
        manual_adjustment.close()

        assert list(list_order_adjustments(order_id=order.id, state='closed')) == [manual_adjustment]
        assert list(list_order_adjustments(order_id=order.id, state='open')) == [tax_adjustment]

    def test_order_not_found(self, db):
        with pytest.raises(OrderNotFoundError):
            list_order_adjustments(order_id=uuid4())


@pytest.mark.django_db
class TestAdjustmentLifecycle:
    """Tests for close, open, recalculate and delete."""

    def test_close_and_open(self, tax_adjustment):
        closed = close_adjustment(adjustment_id=tax_adjustment.id)
        assert closed.is_closed

        reopened = open_adjustment(adjustment_id=tax_adjustment.id)
        assert reopened.is_open

    def test_close_closed_fails(self, tax_adjustment):
        close_adjustment(adjustment_id=tax_adjustment.id)

        with pytest.raises(InvalidStateTransitionError):
            close_adjustment(adjustment_id=tax_adjustment.id)

    def test_recalculate_follows_price_change(self, order, line_item, tax_adjustment):
        LineItem.objects.filter(id=line_item.id).update(price=Decimal('30.00'))

        adjustment = recalculate_adjustment(adjustment_id=tax_adjustment.id)

        assert adjustment.amount == Decimal('3.00')
        line_item.refresh_from_db()
        assert line_item.additional_tax_total == Decimal('3.00')

    def test_recalculate_closed_keeps_amount(self, line_item, tax_adjustment):
        close_adjustment(adjustment_id=tax_adjustment.id)
        LineItem.objects.filter(id=line_item.id).update(price=Decimal('30.00'))

        adjustment = recalculate_adjustment(adjustment_id=tax_adjustment.id)

        assert adjustment.amount == Decimal('2.00')

    def test_delete(self, order, tax_adjustment):
        delete_adjustment(adjustment_id=tax_adjustment.id)

        assert not Adjustment.objects.filter(id=tax_adjustment.id).exists()
        order.refresh_from_db()
        assert order.total == Decimal('20.00')

    def test_not_found(self, db):
        with pytest.raises(AdjustmentNotFoundError):
            get_adjustment_by_id(adjustment_id=uuid4())
        with pytest.raises(AdjustmentNotFoundError):
            close_adjustment(adjustment_id=uuid4())


# =============================================================================
# Item Adjustments Service Tests
# =============================================================================

@pytest.mark.django_db
class TestSummarizeAdjustments:

    def test_summary(self, order, line_item, tax_rate):
        vat = TaxRate.objects.create(name='VAT', amount=Decimal('0.25'), included_in_price=True)
        Adjustment.objects.create(
            order=order, adjustable=line_item, source=tax_rate,
            label='Sales Tax 10%', amount=Decimal('2.00'),
        )
        Adjustment.objects.create(
            order=order, adjustable=line_item, source=vat,
            label='VAT 25%', amount=Decimal('4.00'), included=True,
        )
        Adjustment.objects.create(
            order=order, adjustable=line_item,
            label='Damaged box', amount=Decimal('-0.50'),
        )

        totals = summarize_adjustments(line_item.adjustments.all())

        assert totals['promo_total'] == Decimal('0.00')
        assert totals['additional_tax_total'] == Decimal('2.00')
        assert totals['included_tax_total'] == Decimal('4.00')
        assert totals['adjustment_total'] == Decimal('1.50')
