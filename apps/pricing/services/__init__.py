"""Services for pricing business logic."""

from .exceptions import (
    PricingServiceError,
    PromotionNotFoundError,
    PromotionCodeNotFoundError,
    PromotionNotEligibleError,
    OrderNotFoundError,
)
from .tax_calculation import (
    apply_tax_rates,
)
from .promotion_activation import (
    activate_promotion,
)

__all__ = [
    # Exceptions
    'PricingServiceError',
    'PromotionNotFoundError',
    'PromotionCodeNotFoundError',
    'PromotionNotEligibleError',
    'OrderNotFoundError',
    # Tax Calculation
    'apply_tax_rates',
    # Promotion Activation
    'activate_promotion',
]
