"""
Calculation Errors

Typed failures raised by the calculation engine. The API layer turns
these into 400 responses; nothing here is retried.
"""


class CalculationError(ValueError):
    """Base class for calculations that cannot produce a result."""


class InvalidInput(CalculationError):
    """A value that must be non-negative (or otherwise bounded) is not."""


class InvalidTerm(CalculationError):
    """Zero or negative number of periods."""


class PaymentTooLow(CalculationError):
    """Payment can never amortize the principal."""
