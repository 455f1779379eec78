"""Money rounding and display helpers shared by calculators and adjustments."""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')

# currency -> (symbol, decimal places)
CURRENCY_FORMATS = {
    'USD': ('$', 2),
    'CAD': ('$', 2),
    'AUD': ('$', 2),
    'EUR': ('€', 2),
    'GBP': ('£', 2),
    'CZK': ('Kč ', 2),
    'JPY': ('¥', 0),
    'KRW': ('₩', 0),
}


def round_money(amount):
    """Round to whole cents, half away from zero."""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def display_money(amount, currency):
    """
    Format an amount for display in the given currency.

    Unknown currencies fall back to the ISO code as prefix with two decimals.

    Example:
        >>> display_money(Decimal('10.55'), 'USD')
        '$10.55'
        >>> display_money(Decimal('10.55'), 'JPY')
        '¥11'
    """
    symbol, places = CURRENCY_FORMATS.get(currency, (f"{currency} ", 2))
    exponent = Decimal(1).scaleb(-places)
    value = Decimal(str(amount)).quantize(exponent, rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    return f"{sign}{symbol}{abs(value):,}"
