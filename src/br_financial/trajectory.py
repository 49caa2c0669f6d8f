# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal

from br_financial.amortization import build_price_table, build_sac_table
from br_financial.errors import InvalidPrincipal, InvalidRate, InvalidTerm
from br_financial.rates import (
    DEFAULT_ROUNDING,
    RoundingPolicy,
    convert_annual_to_periodic,
    require_finite,
    to_decimal,
    working_context,
)
from br_financial.schedules import PriceTable, SacTable

__version__ = "0.1.0"


# =============================================================================
# Input / Result Records
# =============================================================================

@dataclass(frozen=True)
class DebtCalculationInput:
    """
    Loan parameters for a debt trajectory.

    Rate convention: interest_per_year is a nominal annual rate stored as a
    percentage (e.g. Decimal("10.5") for 10.5%), converted to an effective
    monthly rate by convert_annual_to_periodic().

    Construction only normalizes types (int and str become Decimal, floats
    are refused). Range checks live in validate(), which
    calculate_debt_trajectory() runs before any computation.
    """
    total_amount: Decimal      # financed principal
    interest_per_year: Decimal  # annual % (e.g. 10.5 for 10.5%)
    total_months: int           # term in monthly periods

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_amount", to_decimal(self.total_amount, "total_amount"))
        object.__setattr__(
            self, "interest_per_year", to_decimal(self.interest_per_year, "interest_per_year")
        )
        if isinstance(self.total_months, bool) or not isinstance(self.total_months, int):
            raise TypeError(f"total_months must be an int, got {type(self.total_months).__name__}")

    def validate(self) -> None:
        """
        Check the inputs in field order and raise on the first violation.

        Raises:
            InvalidPrincipal: If total_amount <= 0
            InvalidRate: If interest_per_year < 0
            InvalidTerm: If total_months < 1
            ScheduleArithmeticError: If a decimal field is NaN or infinite
        """
        if require_finite(self.total_amount, "total_amount") <= 0:
            raise InvalidPrincipal(f"total_amount must be positive, got {self.total_amount}")
        if require_finite(self.interest_per_year, "interest_per_year") < 0:
            raise InvalidRate(f"interest_per_year must be non-negative, got {self.interest_per_year}")
        if self.total_months < 1:
            raise InvalidTerm(f"total_months must be at least 1, got {self.total_months}")


@dataclass(frozen=True)
class DebtCalculationResult:
    """
    SAC and Price schedules computed for the same loan and the same periodic rate.
    """
    initial_total_amount: Decimal
    periodic_rate: Decimal
    sac_table: SacTable
    price_table: PriceTable

    @property
    def total_paid_difference(self) -> Decimal:
        """Price total minus SAC total, at the working precision."""
        with decimal.localcontext(working_context()):
            return self.price_table.total_paid - self.sac_table.total_paid

    def as_dict(self) -> dict[str, object]:
        return {
            "initial_total_amount": str(self.initial_total_amount),
            "periodic_rate": str(self.periodic_rate),
            "sac_table": self.sac_table.as_dict(),
            "price_table": self.price_table.as_dict(),
        }


# =============================================================================
# Orchestration
# =============================================================================

def calculate_debt_trajectory(
        debt_input: DebtCalculationInput,
        *,
        rounding: RoundingPolicy = DEFAULT_ROUNDING
) -> DebtCalculationResult:
    """
    Compute and pair the SAC and Price schedules for one loan.

    The annual rate is converted once and the same periodic rate feeds both
    engines, so the two tables are directly comparable. The engines share no
    state; their order is irrelevant to the result.

    Args:
        debt_input: Loan parameters
        rounding: Rounding policy for the Price schedule (default HALF_UP to cents)

    Returns:
        DebtCalculationResult with both schedules

    Raises:
        InvalidPrincipal, InvalidRate, InvalidTerm: First violated input constraint
        ScheduleArithmeticError: If a decimal input is NaN or infinite

    Example:
        >>> result = calculate_debt_trajectory(
        ...     DebtCalculationInput(Decimal("12000"), Decimal("12"), 12))
        >>> DEFAULT_ROUNDING.apply(result.sac_table.first_payment)
        Decimal('1113.87')
        >>> result.price_table.fixed_payment
        Decimal('1062.74')
    """
    debt_input.validate()

    periodic_rate = convert_annual_to_periodic(debt_input.interest_per_year)

    sac_table = build_sac_table(debt_input.total_amount, periodic_rate, debt_input.total_months)
    # Interest-free loans are valid input at this level
    price_table = build_price_table(
        debt_input.total_amount, periodic_rate, debt_input.total_months,
        rounding=rounding, warn_on_zero_rate=False
    )

    return DebtCalculationResult(
        initial_total_amount=debt_input.total_amount,
        periodic_rate=periodic_rate,
        sac_table=sac_table,
        price_table=price_table,
    )
