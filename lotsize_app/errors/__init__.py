"""
Error classification for the position sizing engine.

Calculation errors are recoverable and returned to the host as typed
failures; system failures propagate.
"""

from .calculation import (
    CalculationError,
    InvalidInputError,
    MissingRateError,
    DivisionByZeroError,
    NotFoundError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
)

__all__ = [
    # Calculation errors
    "CalculationError",
    "InvalidInputError",
    "MissingRateError",
    "DivisionByZeroError",
    "NotFoundError",
    # System failures
    "SystemFailureError",
    "PersistenceError",
]
