"""
br_financial - Worked Examples

**Version**: 0.1.0
**Status**: Active

Loan cases with known outputs, used by the verification tests and as
documentation of the library's conventions.

Structure:
  (1) TrajectoryExample.debt_input - loan parameters
  (2) SacExpectation               - expected SAC summary
  (3) PriceExpectation             - expected Price summary

Expected values are in cents. SAC schedules are kept at full working
precision, so their figures are compared after rounding with
DEFAULT_ROUNDING; Price figures are compared as produced. Values left as
None are not asserted. The Price total carries a tolerance because it adds
up one rounded interest amount per period.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from br_financial.trajectory import DebtCalculationInput


# =============================================================================
# EXPECTATIONS
# =============================================================================

@dataclass(frozen=True)
class SacExpectation:
    """Expected SAC figures (cents)."""
    fixed_amortization: Optional[Decimal] = None
    first_payment: Optional[Decimal] = None
    last_payment: Optional[Decimal] = None
    total_paid: Optional[Decimal] = None


@dataclass(frozen=True)
class PriceExpectation:
    """Expected Price figures (cents)."""
    fixed_payment: Optional[Decimal] = None
    total_paid: Optional[Decimal] = None


# =============================================================================
# EXAMPLE - Combines inputs and expectations
# =============================================================================

@dataclass(frozen=True)
class TrajectoryExample:
    """
    Loan with inputs and expected outputs.

    total_tolerance applies to the Price total_paid only; every other figure
    is compared exactly.
    """
    id: str
    description: str
    debt_input: DebtCalculationInput
    sac: SacExpectation
    price: PriceExpectation
    total_tolerance: Decimal = Decimal("0.10")

    @property
    def is_interest_free(self) -> bool:
        return self.debt_input.interest_per_year == 0


# =============================================================================
# EXAMPLES
# =============================================================================

# =============================================================================
# One-year loan at 12% per year
# =============================================================================
# (1.12)^(1/12) - 1 = 0.0094887929...  per month
# SAC:   A = 1000.00; J(1) = 12000 × i = 113.87; J(12) = 1000 × i = 9.49
# Price: PMT = 12000 × i / (1 - 1.12^-1) = 1062.7448 -> 1062.74
ONE_YEAR_12PCT = TrajectoryExample(
    id="ONE-YEAR-12",
    description="12,000 financed over 12 months at 12% per year.",
    debt_input=DebtCalculationInput(
        total_amount=Decimal("12000"),
        interest_per_year=Decimal("12"),
        total_months=12,
    ),
    sac=SacExpectation(
        fixed_amortization=Decimal("1000.00"),
        first_payment=Decimal("1113.87"),
        last_payment=Decimal("1009.49"),
        total_paid=Decimal("12740.13"),
    ),
    price=PriceExpectation(
        fixed_payment=Decimal("1062.74"),
        total_paid=Decimal("12752.94"),
    ),
)

# =============================================================================
# 35-year real-estate loan at 10.5% per year
# =============================================================================
# (1.105)^(1/12) - 1 = 0.0083551557...  per month
# SAC:   A = 360000 / 420 = 857.142857...; J(1) = 360000 × i = 3007.856046
#        J(420) = A × i = 7.161562; total = P + i × P × 421 / 2 = 993153.6977
# Price: (1.105)^35 = 32.936673; PMT = 3102.037930 -> 3102.04
#        total = 420 × PMT + sum of per-period interest rounding = 1302855.93 +/- noise
REAL_ESTATE_35Y = TrajectoryExample(
    id="REAL-ESTATE-35Y",
    description="360,000 financed over 420 months at 10.5% per year.",
    debt_input=DebtCalculationInput(
        total_amount=Decimal("360000"),
        interest_per_year=Decimal("10.5"),
        total_months=420,
    ),
    sac=SacExpectation(
        fixed_amortization=Decimal("857.14"),
        first_payment=Decimal("3865.00"),
        last_payment=Decimal("864.30"),
        total_paid=Decimal("993153.70"),
    ),
    price=PriceExpectation(
        fixed_payment=Decimal("3102.04"),
        total_paid=Decimal("1302855.93"),
    ),
    total_tolerance=Decimal("1.00"),
)

# =============================================================================
# Interest-free loan
# =============================================================================
INTEREST_FREE = TrajectoryExample(
    id="INTEREST-FREE",
    description="1,200 over 12 months without interest: both systems pay 100 a month.",
    debt_input=DebtCalculationInput(
        total_amount=Decimal("1200"),
        interest_per_year=Decimal("0"),
        total_months=12,
    ),
    sac=SacExpectation(
        fixed_amortization=Decimal("100.00"),
        first_payment=Decimal("100.00"),
        last_payment=Decimal("100.00"),
        total_paid=Decimal("1200.00"),
    ),
    price=PriceExpectation(
        fixed_payment=Decimal("100.00"),
        total_paid=Decimal("1200.00"),
    ),
    total_tolerance=Decimal("0"),
)


EXAMPLES: Tuple[TrajectoryExample, ...] = (
    ONE_YEAR_12PCT,
    REAL_ESTATE_35Y,
    INTEREST_FREE,
)
