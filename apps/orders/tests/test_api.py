import pytest
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone
from rest_framework import status
from apps.orders.models import LineItem, Order
from apps.orders.services import update_order_totals
from apps.pricing.models import PromotionCode


def order_url(order, suffix=''):
    return f'/api/orders/{order.id}/{suffix}'


# =============================================================================
# Order API Tests
# =============================================================================

@pytest.mark.django_db
class TestOrderAPI:
    """Test order read endpoints."""

    def test_list_orders_requires_staff(self, customer_client, order):
        """Regular users cannot see orders."""
        response = customer_client.get('/api/orders/')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_orders_unauthenticated(self, api_client, order):
        response = api_client.get('/api/orders/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_orders(self, staff_client, order):
        response = staff_client.get('/api/orders/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['number'] == order.number

    def test_retrieve_order_with_items(self, staff_client, order, line_item, shipment):
        update_order_totals(order)

        response = staff_client.get(order_url(order))

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['total']) == Decimal('25.00')
        assert len(response.data['line_items']) == 1
        assert Decimal(response.data['line_items'][0]['amount']) == Decimal('20.00')
        assert len(response.data['shipments']) == 1

    def test_order_number_generated(self, order):
        assert order.number.startswith('R')
        assert len(order.number) == 10


# =============================================================================
# Order Pricing Actions Tests
# =============================================================================

@pytest.mark.django_db
class TestOrderPricingActions:
    """Test recalculate, taxes, promotions and cancellations."""

    def test_recalculate(self, staff_client, order, line_item):
        response = staff_client.post(order_url(order, 'recalculate/'))

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['item_total']) == Decimal('20.00')
        assert Decimal(response.data['total']) == Decimal('20.00')

    def test_apply_taxes(self, staff_client, order, line_item, shipment, tax_rate):
        response = staff_client.post(order_url(order, 'apply-taxes/'), {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['additional_tax_total']) == Decimal('2.50')
        assert Decimal(response.data['total']) == Decimal('27.50')

    def test_apply_taxes_twice_does_not_duplicate(self, staff_client, order, line_item, tax_rate):
        staff_client.post(order_url(order, 'apply-taxes/'), {}, format='json')
        response = staff_client.post(order_url(order, 'apply-taxes/'), {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert order.all_adjustments.count() == 1
        assert Decimal(response.data['total']) == Decimal('22.00')

    def test_apply_promotion(self, staff_client, order, line_item, promotion):
        response = staff_client.post(
            order_url(order, 'apply-promotion/'),
            {'promotion': str(promotion.id)},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['promo_total']) == Decimal('-5.00')
        assert Decimal(response.data['total']) == Decimal('15.00')

    def test_apply_promotion_by_code(self, staff_client, order, line_item, promotion):
        PromotionCode.objects.create(promotion=promotion, value='SAVE5')

        response = staff_client.post(
            order_url(order, 'apply-promotion/'),
            {'code': 'save5'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['total']) == Decimal('15.00')

    def test_apply_promotion_unknown_code(self, staff_client, order, line_item):
        response = staff_client.post(
            order_url(order, 'apply-promotion/'),
            {'code': 'nope'},
            format='json'
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_apply_promotion_not_eligible(self, staff_client, order, line_item, promotion):
        promotion.expires_at = timezone.now() - timedelta(days=1)
        promotion.save()

        response = staff_client.post(
            order_url(order, 'apply-promotion/'),
            {'promotion': str(promotion.id)},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_apply_promotion_requires_promotion_or_code(self, staff_client, order):
        response = staff_client.post(order_url(order, 'apply-promotion/'), {}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cancel_units(self, staff_client, order, line_item):
        response = staff_client.post(
            order_url(order, 'cancel-units/'),
            {'line_item': str(line_item.id), 'quantity': 1},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['adjustment_total']) == Decimal('-10.00')
        assert Decimal(response.data['total']) == Decimal('10.00')

    def test_cancel_too_many_units(self, staff_client, order, line_item):
        response = staff_client.post(
            order_url(order, 'cancel-units/'),
            {'line_item': str(line_item.id), 'quantity': 3},
            format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cancel_units_of_other_order(self, staff_client, order):
        other_order = Order.objects.create(email='other@example.com')
        other_item = LineItem.objects.create(order=other_order, variant_name='Mug', price=Decimal('8.00'))

        response = staff_client.post(
            order_url(order, 'cancel-units/'),
            {'line_item': str(other_item.id), 'quantity': 1},
            format='json'
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
