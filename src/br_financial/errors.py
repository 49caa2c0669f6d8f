# Requires Python 3.12+
"""
Error taxonomy for debt trajectory calculations.

Validation errors are ValueError subclasses so callers that only know the
standard library conventions can still catch them. Arithmetic failures are
also ArithmeticError subclasses.
"""

from __future__ import annotations

__version__ = "0.1.0"


class DebtCalculationError(ValueError):
    """Base class for every error raised by br_financial."""


class InvalidPrincipal(DebtCalculationError):
    """total_amount is zero or negative."""


class InvalidRate(DebtCalculationError):
    """interest_per_year (or a periodic rate) is negative."""


class InvalidTerm(DebtCalculationError):
    """total_months is smaller than one."""


class ScheduleArithmeticError(DebtCalculationError, ArithmeticError):
    """
    An amortization schedule could not be computed.

    Raised for non-finite decimal inputs and for decimal operations that are
    undefined or overflow at the working precision.
    """
