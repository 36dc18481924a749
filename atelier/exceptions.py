"""
Atelier Exceptions.

All atelier errors derive from AtelierError for consistent handling.
Every error is raised before (or rolls back) any write, so a rejected
operation leaves persisted state unchanged.
"""

from typing import Any


class AtelierError(Exception):
    """
    Base exception for all Atelier errors.

    Usage:
        raise AtelierError('INVALID_STATUS', current='completed')

    Attributes:
        code: Error code (INSUFFICIENT_STOCK, ALREADY_COMPLETED, etc.)
        details: Additional context as keyword arguments
    """

    default_code = "ATELIER_ERROR"

    def __init__(self, code: str | None = None, **details: Any):
        self.code = code or self.default_code
        self.details = details
        message = f"{self.code}: {details}" if details else self.code
        super().__init__(message)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        return {"code": self.code, **self.details}

    def __str__(self) -> str:
        name = type(self).__name__
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{name}({self.code}: {details_str})"
        return f"{name}({self.code})"


class ValidationError(AtelierError):
    """Missing or invalid input. Raised before any mutation."""

    default_code = "INVALID_INPUT"


class NotFound(AtelierError):
    """Referenced stock line, order, service type or artisan does not exist."""

    default_code = "NOT_FOUND"


class InsufficientStock(AtelierError):
    """Requested debit exceeds the stock line balance."""

    default_code = "INSUFFICIENT_STOCK"


class AlreadyCompleted(AtelierError):
    """Material line is no longer pending."""

    default_code = "ALREADY_COMPLETED"


class CompletionOnTerminalOrder(AlreadyCompleted):
    """Order is completed; none of its lines can be completed again."""

    default_code = "ORDER_COMPLETED"


# Common error codes
# INVALID_INPUT: Generic invalid field
# INVALID_QUANTITY: Quantity out of range
# EMPTY_ORDER: Order without material lines
# ARTISAN_NOT_QUALIFIED: No override and no rate for the service
# UNKNOWN_CODE_CATEGORY: Code allocator category not configured
# INSUFFICIENT_STOCK: Debit exceeds balance
# ALREADY_COMPLETED: Line not pending
# ORDER_COMPLETED: Order terminal
# NOT_FOUND: Entity does not exist
