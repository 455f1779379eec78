import pytest
from decimal import Decimal
from apps.orders.models import LineItem, Order
from apps.pricing.models import Promotion, PromotionAction, TaxRate


@pytest.fixture
def order(db):
    """Create and return an empty USD order."""
    return Order.objects.create(email='pricing@example.com', currency='USD')


@pytest.fixture
def line_item(order):
    """Two units at 10.00."""
    return LineItem.objects.create(
        order=order,
        variant_name='Ruby Tee',
        price=Decimal('10.00'),
        quantity=2,
    )


@pytest.fixture
def sales_tax(db):
    """Additional 10% sales tax."""
    return TaxRate.objects.create(name='Sales Tax', amount=Decimal('0.10'))


@pytest.fixture
def vat(db):
    """20% VAT included in prices."""
    return TaxRate.objects.create(name='VAT', amount=Decimal('0.20'), included_in_price=True)


@pytest.fixture
def promotion(db):
    """Promotion taking 5.00 off the order."""
    promotion = Promotion.objects.create(name='Five Off')
    PromotionAction.objects.create(promotion=promotion, preferred_amount=Decimal('5.00'))
    return promotion
