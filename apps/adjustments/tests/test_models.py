"""
Model unit tests for adjustments app.

Tests cover:
- Total refresh on create and destroy
- Touching the adjustable on save
- Scopes
- State transitions
- Currency and display
- Recalculation from the source
- Promotion code validation and best promotion selection
"""

import pytest
from decimal import Decimal
from datetime import timedelta
from unittest.mock import patch
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.adjustments.exceptions import InvalidStateTransitionError
from apps.adjustments.models import Adjustment, AdjustmentState
from apps.adjustments.services import ItemAdjustments
from apps.orders.models import LineItem, Order
from apps.orders.services import update_order_totals
from apps.pricing.models import Calculator, Promotion, PromotionAction, PromotionCode, TaxRate


# =============================================================================
# Persistence Hooks
# =============================================================================

@pytest.mark.django_db
class TestAdjustmentHooks:

    def test_create_updates_adjustable_and_order_totals(self, order, line_item, tax_adjustment):
        line_item.refresh_from_db()
        order.refresh_from_db()

        assert line_item.additional_tax_total == Decimal('2.00')
        assert line_item.adjustment_total == Decimal('2.00')
        assert order.additional_tax_total == Decimal('2.00')
        assert order.total == Decimal('22.00')

    def test_destroy_updates_totals(self, order, line_item, tax_adjustment):
        tax_adjustment.delete()

        line_item.refresh_from_db()
        order.refresh_from_db()
        assert line_item.additional_tax_total == Decimal('0.00')
        assert order.total == Decimal('20.00')

    def test_save_touches_adjustable(self, line_item, tax_adjustment):
        long_ago = timezone.now() - timedelta(days=30)
        LineItem.objects.filter(id=line_item.id).update(updated_at=long_ago)

        tax_adjustment.label = 'Renamed tax'
        tax_adjustment.save()

        line_item.refresh_from_db()
        assert line_item.updated_at > long_ago

    def test_manual_credit_counts_towards_order_total(self, order, manual_adjustment):
        order.refresh_from_db()

        assert order.adjustment_total == Decimal('-1.50')
        assert order.total == Decimal('18.50')

    def test_ineligible_adjustment_ignored(self, order):
        Adjustment.objects.create(
            order=order,
            adjustable=order,
            label='Not applied',
            amount=Decimal('-4.00'),
            eligible=False,
        )

        order.refresh_from_db()
        assert order.total == Decimal('20.00')


# =============================================================================
# Scopes
# =============================================================================

@pytest.mark.django_db
class TestAdjustmentScopes:

    def test_tax_and_non_tax(self, tax_adjustment, manual_adjustment):
        assert list(Adjustment.objects.tax()) == [tax_adjustment]
        # Adjustments without a source are not tax
        assert list(Adjustment.objects.non_tax()) == [manual_adjustment]

    def test_price_and_shipping(self, order, shipment, tax_adjustment, tax_rate):
        shipping_tax = Adjustment.objects.create(
            order=order,
            adjustable=shipment,
            source=tax_rate,
            label='Shipping tax',
            amount=Decimal('0.50'),
        )

        assert list(Adjustment.objects.price()) == [tax_adjustment]
        assert list(Adjustment.objects.shipping()) == [shipping_tax]

    def test_charge_credit_nonzero(self, order, tax_adjustment, manual_adjustment):
        zero = Adjustment.objects.create(order=order, adjustable=order, label='Zero', amount=Decimal('0'))

        assert zero in Adjustment.objects.charge()
        assert tax_adjustment in Adjustment.objects.charge()
        assert list(Adjustment.objects.credit()) == [manual_adjustment]
        assert zero not in Adjustment.objects.nonzero()

    def test_open_closed(self, tax_adjustment, manual_adjustment):
        manual_adjustment.close()

        assert list(Adjustment.objects.open()) == [tax_adjustment]
        assert list(Adjustment.objects.closed()) == [manual_adjustment]

    def test_optional_and_included(self, order, tax_adjustment):
        mandatory = Adjustment.objects.create(
            order=order, adjustable=order, label='Shipping', amount=Decimal('0'), mandatory=True
        )

        assert mandatory not in Adjustment.objects.optional()
        assert tax_adjustment in Adjustment.objects.additional()
        assert not Adjustment.objects.is_included().exists()

    def test_total_amount(self, tax_adjustment, manual_adjustment):
        assert Adjustment.objects.total_amount() == Decimal('0.50')
        assert Adjustment.objects.none().total_amount() == Decimal('0.00')


# =============================================================================
# State Transitions
# =============================================================================

@pytest.mark.django_db
class TestAdjustmentState:

    def test_new_adjustment_is_open(self, tax_adjustment):
        assert tax_adjustment.state == AdjustmentState.OPEN
        assert tax_adjustment.is_open
        assert not tax_adjustment.is_closed

    def test_close_and_open(self, tax_adjustment):
        tax_adjustment.close()
        tax_adjustment.refresh_from_db()
        assert tax_adjustment.is_closed

        tax_adjustment.open()
        tax_adjustment.refresh_from_db()
        assert tax_adjustment.is_open

    def test_close_twice_fails(self, tax_adjustment):
        tax_adjustment.close()

        with pytest.raises(InvalidStateTransitionError):
            tax_adjustment.close()

    def test_open_an_open_adjustment_fails(self, tax_adjustment):
        with pytest.raises(InvalidStateTransitionError):
            tax_adjustment.open()


# =============================================================================
# Currency and Display
# =============================================================================

@pytest.mark.django_db
class TestAdjustmentMoney:

    def test_currency_from_adjustable(self, db):
        order = Order.objects.create(currency='JPY')
        adjustment = Adjustment(order=order, adjustable=order, label='Fee', amount=Decimal('10.55'))

        assert adjustment.currency == 'JPY'
        assert adjustment.display_amount == '¥11'

    def test_currency_defaults_to_store_currency(self, settings):
        settings.STORE_CURRENCY = 'USD'
        adjustment = Adjustment(label='Loose', amount=Decimal('10.55'))

        assert adjustment.currency == 'USD'
        assert adjustment.display_amount == '$10.55'

    def test_line_item_currency_follows_order(self, line_item, tax_adjustment):
        assert tax_adjustment.currency == 'USD'
        assert tax_adjustment.display_amount == '$2.00'


# =============================================================================
# Recalculation
# =============================================================================

@pytest.mark.django_db
class TestAdjustmentRecalculate:

    def test_open_adjustment_updated_from_source(self, tax_adjustment):
        with patch.object(TaxRate, 'compute_amount', return_value=Decimal('10.00')):
            assert tax_adjustment.recalculate() == Decimal('10.00')

        tax_adjustment.refresh_from_db()
        assert tax_adjustment.amount == Decimal('10.00')

    def test_closed_adjustment_unchanged(self, tax_adjustment):
        tax_adjustment.close()

        with patch.object(TaxRate, 'compute_amount', return_value=Decimal('10.00')):
            assert tax_adjustment.recalculate() == Decimal('2.00')

        tax_adjustment.refresh_from_db()
        assert tax_adjustment.amount == Decimal('2.00')

    def test_sourceless_adjustment_unchanged(self, manual_adjustment):
        assert manual_adjustment.recalculate() == Decimal('-1.50')

    def test_promotion_eligibility_refreshed(self, order, promotion):
        promotion.activate(order)
        adjustment = order.all_adjustments.get()
        assert adjustment.eligible

        promotion.starts_at = timezone.now() + timedelta(days=1)
        promotion.save()
        adjustment.recalculate()

        adjustment.refresh_from_db()
        assert not adjustment.eligible
        assert adjustment.amount == Decimal('-5.00')

    def test_target_argument_deprecated(self, line_item, tax_adjustment):
        with pytest.warns(DeprecationWarning):
            tax_adjustment.recalculate(line_item)


# =============================================================================
# Promotions
# =============================================================================

@pytest.mark.django_db
class TestPromotionAdjustments:

    def test_promotion_code_required_when_promotion_has_codes(self, order, promotion):
        PromotionCode.objects.create(promotion=promotion, value='five')
        adjustment = Adjustment(
            order=order,
            adjustable=order,
            source=promotion.actions.get(),
            label='Promotion (Five Off)',
            amount=Decimal('-5.00'),
        )

        with pytest.raises(ValidationError) as exc_info:
            adjustment.full_clean()

        assert 'promotion_code' in exc_info.value.message_dict

    def test_promotion_code_not_required_without_codes(self, order, promotion):
        adjustment = Adjustment(
            order=order,
            adjustable=order,
            source=promotion.actions.get(),
            label='Promotion (Five Off)',
            amount=Decimal('-5.00'),
        )

        adjustment.full_clean()

    def test_predicates(self, order, promotion, tax_adjustment, manual_adjustment):
        promotion.activate(order)
        promotion_adjustment = order.all_adjustments.promotion().get()

        assert promotion_adjustment.is_promotion
        assert tax_adjustment.is_tax
        assert not manual_adjustment.is_promotion
        assert not manual_adjustment.is_tax
        assert not manual_adjustment.is_cancellation

    def test_target_does_not_change_eligibility(self, order, promotion):
        promotion.minimum_item_total = Decimal('10.00')
        promotion.save()
        promotion.activate(order)
        adjustment = order.all_adjustments.promotion().get()

        small_order = Order.objects.create(email='small@example.com', currency='USD')
        LineItem.objects.create(order=small_order, variant_name='Pin', price=Decimal('8.00'))
        small_order = update_order_totals(small_order)

        with pytest.warns(DeprecationWarning):
            amount = adjustment.recalculate(small_order)

        assert amount == Decimal('-5.00')
        adjustment.refresh_from_db()
        # Eligibility follows the order the adjustment belongs to
        assert adjustment.eligible is True

    def test_best_promotion_kept(self, order, promotion):
        ten_percent = Promotion.objects.create(name='Ten Percent')
        PromotionAction.objects.create(
            promotion=ten_percent,
            calculator=Calculator.PERCENT,
            preferred_amount=Decimal('10'),
        )

        promotion.activate(order)
        ten_percent.activate(order)

        best = order.all_adjustments.promotion().get(eligible=True)
        worse = order.all_adjustments.promotion().get(eligible=False)
        assert best.amount == Decimal('-5.00')
        assert worse.amount == Decimal('-2.00')

        order.refresh_from_db()
        assert order.promo_total == Decimal('-5.00')
        assert order.total == Decimal('15.00')

    def test_item_adjustments_tax_after_promotion(self, order, line_item, tax_rate):
        per_item = Promotion.objects.create(name='Item Deal')
        action = PromotionAction.objects.create(
            promotion=per_item,
            action_type='line_item_adjustment',
            preferred_amount=Decimal('4.00'),
        )
        Adjustment.objects.create(
            order=order,
            adjustable=line_item,
            source=tax_rate,
            label='Sales Tax 10%',
            amount=Decimal('2.00'),
        )
        action.perform(order)

        line_item.refresh_from_db()
        ItemAdjustments(line_item).update()

        line_item.refresh_from_db()
        assert line_item.promo_total == Decimal('-4.00')
        # 10% of 16.00
        assert line_item.additional_tax_total == Decimal('1.60')

        order = update_order_totals(order)
        assert order.total == Decimal('17.60')
