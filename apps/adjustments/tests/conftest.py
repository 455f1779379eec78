import pytest
from decimal import Decimal
from django.contrib.auth.models import User
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.adjustments.models import Adjustment, AdjustmentReason
from apps.orders.models import LineItem, Order, Shipment
from apps.orders.services import update_order_totals
from apps.pricing.models import Promotion, PromotionAction, TaxRate


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def staff_user(db):
    """Create and return a staff user."""
    return User.objects.create_user(
        username='adjustments_staff',
        email='adjustments@example.com',
        password='TestPass123!',
        is_staff=True,
    )


@pytest.fixture
def staff_client(api_client, staff_user):
    """Return API client authenticated as staff."""
    refresh = RefreshToken.for_user(staff_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def customer_client(db):
    """Return API client authenticated as a regular user."""
    client = APIClient()
    user = User.objects.create_user(username='adjustments_customer', password='TestPass123!')
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def order(db):
    """USD order with one 20.00 line item and totals computed."""
    order = Order.objects.create(email='adjust@example.com', currency='USD')
    LineItem.objects.create(order=order, variant_name='Hoodie', price=Decimal('20.00'), quantity=1)
    return update_order_totals(order)


@pytest.fixture
def line_item(order):
    return order.line_items.get()


@pytest.fixture
def shipment(order):
    return Shipment.objects.create(order=order, cost=Decimal('5.00'))


@pytest.fixture
def tax_rate(db):
    """Additional 10% sales tax."""
    return TaxRate.objects.create(name='Sales Tax', amount=Decimal('0.10'))


@pytest.fixture
def promotion(db):
    """Promotion taking 5.00 off the order."""
    promotion = Promotion.objects.create(name='Five Off')
    PromotionAction.objects.create(promotion=promotion, preferred_amount=Decimal('5.00'))
    return promotion


@pytest.fixture
def tax_adjustment(order, line_item, tax_rate):
    """Open tax adjustment on the line item."""
    return Adjustment.objects.create(
        order=order,
        adjustable=line_item,
        source=tax_rate,
        label=tax_rate.adjustment_label(),
        amount=Decimal('2.00'),
    )


@pytest.fixture
def manual_adjustment(order):
    """Sourceless order-level credit."""
    return Adjustment.objects.create(
        order=order,
        adjustable=order,
        label='Goodwill credit',
        amount=Decimal('-1.50'),
    )


@pytest.fixture
def adjustment_reason(db):
    return AdjustmentReason.objects.create(name='Damaged', code='damaged')
