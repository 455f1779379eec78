"""Domain-specific exceptions for orders services."""


class OrdersServiceError(Exception):
    """Base exception for orders services."""
    pass


class OrderNotFoundError(OrdersServiceError):
    """Raised when order does not exist."""
    pass


class LineItemNotFoundError(OrdersServiceError):
    """Raised when line item does not exist."""
    pass


class InvalidCancellationError(OrdersServiceError):
    """Raised when more units are cancelled than remain on the line item."""
    pass
