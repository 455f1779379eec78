import pytest
from decimal import Decimal
from django.contrib.auth.models import User
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.orders.models import LineItem, Order, Shipment
from apps.pricing.models import Promotion, PromotionAction, TaxRate


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def staff_user(db):
    """Create and return a staff user."""
    return User.objects.create_user(
        username='orders_staff',
        email='staff@example.com',
        password='TestPass123!',
        is_staff=True,
    )


@pytest.fixture
def customer_user(db):
    """Create and return a regular user."""
    return User.objects.create_user(
        username='orders_customer',
        email='customer@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def staff_client(api_client, staff_user):
    """Return API client authenticated as staff."""
    refresh = RefreshToken.for_user(staff_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def customer_client(api_client, customer_user):
    """Return API client authenticated as a customer."""
    refresh = RefreshToken.for_user(customer_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def order(db):
    """Create and return an empty USD order."""
    return Order.objects.create(email='buyer@example.com', currency='USD')


@pytest.fixture
def line_item(order):
    """Two units at 10.00."""
    return LineItem.objects.create(
        order=order,
        variant_name='Ruby Tee',
        sku='TEE-RUBY',
        price=Decimal('10.00'),
        quantity=2,
    )


@pytest.fixture
def shipment(order):
    """Shipment costing 5.00."""
    return Shipment.objects.create(order=order, number='H123456', cost=Decimal('5.00'))


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
