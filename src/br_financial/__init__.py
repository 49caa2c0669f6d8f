# Requires Python 3.12+
"""
br_financial: real-estate financing schedules (SAC and Price).

Computes the constant-amortization (SAC) and fixed-installment (Price /
French) schedules of a loan from its principal, nominal annual rate and
term in months, using exact Decimal arithmetic throughout.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from br_financial.errors import (
    DebtCalculationError,
    InvalidPrincipal,
    InvalidRate,
    InvalidTerm,
    ScheduleArithmeticError,
)

# Rate conversion and decimal conventions
from br_financial.rates import (
    WORKING_PRECISION,
    PERIODS_PER_YEAR,
    RoundingPolicy,
    HALF_UP,
    HALF_EVEN,
    DEFAULT_ROUNDING,
    convert_annual_to_periodic,
    convert_periodic_to_annual,
)

# Schedules
from br_financial.schedules import (
    AmortizationSystem,
    PaymentPeriod,
    ScheduleArrays,
    AmortizationTable,
    SacTable,
    PriceTable,
)

# Engines
from br_financial.amortization import (
    build_sac_table,
    build_price_table,
    price_installment,
)

# Orchestration
from br_financial.trajectory import (
    DebtCalculationInput,
    DebtCalculationResult,
    calculate_debt_trajectory,
)

# Closed-form reference factors
from br_financial.reference import (
    price_payment_factor,
    price_balance_factors,
    sac_balance_factors,
    sac_payment_factors,
    price_rounding_bound,
    implied_periodic_rate,
    compare_arrays,
)

# Worked examples
from br_financial.examples import (
    TrajectoryExample,
    EXAMPLES,
)

__all__ = [
    "__version__",
    # Errors
    "DebtCalculationError",
    "InvalidPrincipal",
    "InvalidRate",
    "InvalidTerm",
    "ScheduleArithmeticError",
    # Rates
    "WORKING_PRECISION",
    "PERIODS_PER_YEAR",
    "RoundingPolicy",
    "HALF_UP",
    "HALF_EVEN",
    "DEFAULT_ROUNDING",
    "convert_annual_to_periodic",
    "convert_periodic_to_annual",
    # Schedules
    "AmortizationSystem",
    "PaymentPeriod",
    "ScheduleArrays",
    "AmortizationTable",
    "SacTable",
    "PriceTable",
    # Engines
    "build_sac_table",
    "build_price_table",
    "price_installment",
    # Orchestration
    "DebtCalculationInput",
    "DebtCalculationResult",
    "calculate_debt_trajectory",
    # Reference
    "price_payment_factor",
    "price_balance_factors",
    "sac_balance_factors",
    "sac_payment_factors",
    "price_rounding_bound",
    "implied_periodic_rate",
    "compare_arrays",
    # Examples
    "TrajectoryExample",
    "EXAMPLES",
]
