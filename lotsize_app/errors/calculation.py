"""
Calculation error classifications for position sizing.

These exceptions describe the ways a single sizing request can fail. They
are all recoverable: the calculator turns them into a failed result and the
host shows the message next to the input that needs attention.
"""

from typing import Any, Optional


class CalculationError(Exception):
    """Base class for failures of a single sizing request."""

    kind = "calculation_error"

    def __init__(self, message: str, hint: Optional[str] = None,
                 context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint or message
        self.context = context or {}
        self.recoverable = True


class InvalidInputError(CalculationError):
    """Unparseable or non-positive price/size, or a zero price difference."""

    kind = "invalid_input"

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class MissingRateError(CalculationError):
    """A conversion rate is required for the instrument but was not supplied."""

    kind = "missing_rate"

    def __init__(self, message: str, currency: Optional[str] = None,
                 pair: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.currency = currency
        self.pair = pair


class DivisionByZeroError(CalculationError):
    """A per-lot quantity evaluated to zero or a non-finite value."""

    kind = "division_by_zero"

    def __init__(self, message: str, quantity: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.quantity = quantity


class NotFoundError(CalculationError):
    """Unknown instrument symbol."""

    kind = "not_found"

    def __init__(self, message: str, symbol: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
