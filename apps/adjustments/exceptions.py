"""
Domain exceptions for adjustments app.

This module defines the exception hierarchy for adjustment-related errors.
Service errors are plain exceptions; the API-facing ones map straight to
HTTP responses through DRF.
"""
from rest_framework.exceptions import APIException


class AdjustmentServiceError(Exception):
    """Base exception for adjustment service errors."""
    pass


class AdjustmentValidationError(AdjustmentServiceError):
    """Raised when an adjustment fails model validation."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__(f"Invalid adjustment: {errors}")


class OrderNotFoundError(AdjustmentServiceError):
    """Raised when the order to adjust does not exist."""
    pass


class AdjustmentNotFoundError(APIException):
    """Adjustment not found."""
    status_code = 404
    default_detail = 'Adjustment not found.'
    default_code = 'adjustment_not_found'


class InvalidStateTransitionError(APIException):
    """Invalid adjustment state transition."""
    status_code = 400
    default_detail = 'Invalid state transition for adjustment.'
    default_code = 'invalid_state_transition'
