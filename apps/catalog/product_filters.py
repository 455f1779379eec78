"""
Product filters offered on taxon pages.

Each filter is a plain dict:

    name:   heading shown to the shopper
    scope:  name of the query parameter that selects it
    conds:  label -> Q condition on Product
    labels: (label, value) pairs for the form
"""

from decimal import Decimal

from django.conf import settings
from django.db.models import Q

from apps.pricing.money import display_money

# (low, high) bounds; None means unbounded
PRICE_RANGES = [
    (None, Decimal('10')),
    (Decimal('10'), Decimal('15')),
    (Decimal('15'), Decimal('18')),
    (Decimal('18'), Decimal('20')),
    (Decimal('20'), None),
]


def _price_range_label(low, high, currency):
    if low is None:
        return f"Under {display_money(high, currency)}"
    if high is None:
        return f"{display_money(low, currency)} or over"
    return f"{display_money(low, currency)} - {display_money(high, currency)}"


def _price_range_condition(low, high):
    if low is None:
        return Q(price__lt=high)
    if high is None:
        return Q(price__gte=low)
    return Q(price__gte=low, price__lt=high)


def price_filter(currency=None):
    """Fixed price brackets, labelled in the store currency."""
    currency = currency or settings.STORE_CURRENCY
    conds = {}
    for low, high in PRICE_RANGES:
        conds[_price_range_label(low, high, currency)] = _price_range_condition(low, high)

    return {
        'name': 'Price Range',
        'scope': 'price_range_any',
        'conds': conds,
        'labels': [(label, label) for label in conds],
    }


def brand_filter(products=None):
    """One option per brand found among the products."""
    from .models import Product

    if products is None:
        products = Product.objects.all()

    brands = sorted(
        set(products.exclude(brand='').values_list('brand', flat=True))
    )

    return {
        'name': 'Brands',
        'scope': 'brand_any',
        'conds': {brand: Q(brand=brand) for brand in brands},
        'labels': [(brand, brand) for brand in brands],
    }


def apply_price_ranges(queryset, labels, currency=None):
    """
    Keep products falling in any of the labelled price ranges.

    Unknown labels are ignored; with no known label the queryset is
    returned unchanged.
    """
    conds = price_filter(currency)['conds']
    condition = Q()
    for label in labels:
        if label in conds:
            condition |= conds[label]
    if not condition:
        return queryset
    return queryset.filter(condition)


def apply_brands(queryset, brands):
    brands = [brand for brand in brands if brand]
    if not brands:
        return queryset
    return queryset.filter(brand__in=brands)
