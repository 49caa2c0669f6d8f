# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal

from br_financial.errors import DebtCalculationError, InvalidRate, ScheduleArithmeticError

__version__ = "0.1.0"


# =============================================================================
# Decimal Conventions
# =============================================================================
#
# Money and rates are Decimal end to end. Intermediate arithmetic runs in a
# private context so results never depend on the caller's thread-local
# decimal context. Monetary values are quantized by a RoundingPolicy; the
# periodic rate is kept at full working precision.
# =============================================================================

WORKING_PRECISION: int = 50   # significant digits for rate and schedule arithmetic
PERIODS_PER_YEAR: int = 12    # monthly payment periods

_ZERO = Decimal(0)
_ONE = Decimal(1)
_HUNDRED = Decimal(100)

_ROUNDING_MODES = frozenset({
    decimal.ROUND_HALF_UP,
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_UP,
    decimal.ROUND_DOWN,
    decimal.ROUND_CEILING,
    decimal.ROUND_FLOOR,
    decimal.ROUND_05UP,
})


def working_context() -> decimal.Context:
    """Fresh decimal context used for every engine computation."""
    return decimal.Context(
        prec=WORKING_PRECISION,
        rounding=decimal.ROUND_HALF_EVEN,
        traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
    )


@dataclass(frozen=True)
class RoundingPolicy:
    """
    How monetary amounts are rounded to the currency's minor unit.

    Attributes:
        places: Number of fractional digits kept (2 for cents).
        rounding: One of the decimal module rounding constants.

    The Price engine applies the policy to its installment and to every
    per-period interest amount, and reconciles the accumulated rounding
    difference in the final period, so the remaining balance closes at zero.
    SAC schedules are kept at the working precision; use apply() to present
    their amounts in the minor unit.
    """
    places: int = 2
    rounding: str = decimal.ROUND_HALF_UP

    def __post_init__(self) -> None:
        if isinstance(self.places, bool) or not isinstance(self.places, int):
            raise TypeError(f"places must be an int, got {type(self.places).__name__}")
        if self.places < 0:
            raise ValueError(f"places must be non-negative, got {self.places}")
        if self.rounding not in _ROUNDING_MODES:
            raise ValueError(f"rounding must be a decimal rounding mode, got {self.rounding!r}")

    @property
    def quantum(self) -> Decimal:
        """Smallest representable amount, e.g. Decimal('0.01')."""
        return _ONE.scaleb(-self.places)

    def apply(self, value: Decimal) -> Decimal:
        """Round value to the minor unit."""
        return value.quantize(self.quantum, rounding=self.rounding)


HALF_UP = RoundingPolicy()
HALF_EVEN = RoundingPolicy(rounding=decimal.ROUND_HALF_EVEN)
DEFAULT_ROUNDING = HALF_UP


def to_decimal(value: Decimal | int | str, name: str) -> Decimal:
    """
    Coerce an exact numeric value to Decimal.

    Binary floats are refused: they cannot represent most decimal amounts
    exactly and would leak representation error into the schedule.

    Raises:
        TypeError: If value is a float, a bool, or not a number-like type.
        DebtCalculationError: If a string does not parse as a decimal.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"{name} must be a Decimal, int or str, got bool")
    if isinstance(value, float):
        raise TypeError(
            f"{name} must be a Decimal, int or str, got float {value!r}; "
            f"pass Decimal({str(value)!r}) instead"
        )
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except decimal.InvalidOperation:
            raise DebtCalculationError(f"{name} is not a valid decimal, got {value!r}") from None
    raise TypeError(f"{name} must be a Decimal, int or str, got {type(value).__name__}")


def require_finite(value: Decimal, name: str) -> Decimal:
    """Raise ScheduleArithmeticError for NaN or infinite decimals."""
    if not value.is_finite():
        raise ScheduleArithmeticError(f"{name} must be finite, got {value}")
    return value


# =============================================================================
# Rate Conversion
# =============================================================================

def convert_annual_to_periodic(
        annual_rate_percent: Decimal | int | str,
        periods_per_year: int = PERIODS_PER_YEAR
) -> Decimal:
    """
    Convert an annual rate in percent to the equivalent effective periodic rate.

    Formula:
        i = (1 + R / 100) ^ (1 / periods_per_year) - 1

    Where:
        R = annual rate as percentage (e.g. 10.5 for 10.5%)
        i = effective rate per period as a decimal fraction

    Compounding i over periods_per_year periods reproduces R exactly:

        (1 + i) ^ periods_per_year = 1 + R / 100

    The fractional power is evaluated by the decimal module, which rounds it
    correctly at WORKING_PRECISION digits. No binary float is involved, so the
    rate does not drift when compounded over terms of several hundred months.

    Args:
        annual_rate_percent: Annual rate as percentage (e.g. Decimal("10.5"))
        periods_per_year: Payment periods per year (12 for monthly)

    Returns:
        Effective periodic rate as a Decimal fraction (not rounded to cents)

    Raises:
        InvalidRate: If annual_rate_percent is negative
        ScheduleArithmeticError: If annual_rate_percent is not finite
        ValueError: If periods_per_year is not positive

    Example:
        >>> convert_annual_to_periodic(Decimal("12"))  # doctest: +ELLIPSIS
        Decimal('0.0094887929...')
    """
    rate = require_finite(to_decimal(annual_rate_percent, "annual_rate_percent"), "annual_rate_percent")
    if periods_per_year <= 0:
        raise ValueError(f"periods_per_year must be positive, got {periods_per_year}")
    if rate < 0:
        raise InvalidRate(f"annual_rate_percent must be non-negative, got {rate}")
    if rate == 0:
        return _ZERO

    with decimal.localcontext(working_context()):
        try:
            base = _ONE + rate / _HUNDRED
            return base ** (_ONE / Decimal(periods_per_year)) - _ONE
        except decimal.DecimalException as e:
            raise ScheduleArithmeticError(
                f"cannot convert annual rate {rate}% to a periodic rate: {e!r}"
            ) from e


def convert_periodic_to_annual(
        periodic_rate: Decimal | int | str,
        periods_per_year: int = PERIODS_PER_YEAR
) -> Decimal:
    """
    Inverse of convert_annual_to_periodic: effective annual rate in percent.

        R = ((1 + i) ^ periods_per_year - 1) * 100

    Raises:
        InvalidRate: If periodic_rate is negative
        ScheduleArithmeticError: If periodic_rate is not finite
        ValueError: If periods_per_year is not positive
    """
    rate = require_finite(to_decimal(periodic_rate, "periodic_rate"), "periodic_rate")
    if periods_per_year <= 0:
        raise ValueError(f"periods_per_year must be positive, got {periods_per_year}")
    if rate < 0:
        raise InvalidRate(f"periodic_rate must be non-negative, got {rate}")
    if rate == 0:
        return _ZERO

    with decimal.localcontext(working_context()):
        try:
            return ((_ONE + rate) ** periods_per_year - _ONE) * _HUNDRED
        except decimal.DecimalException as e:
            raise ScheduleArithmeticError(
                f"cannot convert periodic rate {rate} to an annual rate: {e!r}"
            ) from e
