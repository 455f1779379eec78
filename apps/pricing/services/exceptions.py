"""Domain-specific exceptions for pricing services."""


class PricingServiceError(Exception):
    """Base exception for pricing services."""
    pass


class PromotionNotFoundError(PricingServiceError):
    """Raised when promotion does not exist."""
    pass


class PromotionCodeNotFoundError(PricingServiceError):
    """Raised when no promotion has the given code."""
    pass


class PromotionNotEligibleError(PricingServiceError):
    """Raised when a promotion cannot be applied to the order."""
    pass


class OrderNotFoundError(PricingServiceError):
    """Raised when order does not exist."""
    pass
