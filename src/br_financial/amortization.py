# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import decimal
import warnings
from decimal import Decimal

from br_financial.errors import InvalidPrincipal, InvalidRate, InvalidTerm, ScheduleArithmeticError
from br_financial.rates import (
    DEFAULT_ROUNDING,
    WORKING_PRECISION,
    RoundingPolicy,
    require_finite,
    to_decimal,
    working_context,
)
from br_financial.schedules import AmortizationSystem, PaymentPeriod, PriceTable, SacTable

__version__ = "0.1.0"

_ONE = Decimal(1)


def _check_engine_inputs(
        principal: Decimal | int | str,
        periodic_rate: Decimal | int | str,
        total_months: int
) -> tuple[Decimal, Decimal]:
    principal = require_finite(to_decimal(principal, "principal"), "principal")
    periodic_rate = require_finite(to_decimal(periodic_rate, "periodic_rate"), "periodic_rate")
    if isinstance(total_months, bool) or not isinstance(total_months, int):
        raise TypeError(f"total_months must be an int, got {type(total_months).__name__}")
    if principal <= 0:
        raise InvalidPrincipal(f"principal must be positive, got {principal}")
    if periodic_rate < 0:
        raise InvalidRate(f"periodic_rate must be non-negative, got {periodic_rate}")
    if total_months < 1:
        raise InvalidTerm(f"total_months must be at least 1, got {total_months}")
    return principal, periodic_rate


# =============================================================================
# SAC: Sistema de Amortização Constante
# =============================================================================

def _sac_fixed_amortization(principal: Decimal, total_months: int) -> Decimal:
    """P / n, rounded up to the last digit the working precision keeps for P."""
    with decimal.localcontext(working_context()) as ctx:
        ctx.rounding = decimal.ROUND_CEILING
        fixed_amortization = principal / Decimal(total_months)
        if ctx.flags[decimal.Inexact]:
            # P - k × A must stay exact for every k
            step = _ONE.scaleb(principal.adjusted() + 1 - WORKING_PRECISION)
            fixed_amortization = fixed_amortization.quantize(step)
    return fixed_amortization


def build_sac_table(
        principal: Decimal | int | str,
        periodic_rate: Decimal | int | str,
        total_months: int
) -> SacTable:
    """
    Build the constant-amortization (SAC) schedule.

    Formula (period k = 1..n):
        A      = P / n
        J(k)   = SD(k-1) × i
        PMT(k) = A + J(k)
        SD(k)  = SD(k-1) - A

    Where:
        P     = principal, SD(0) = P
        i     = effective periodic rate
        n     = total_months
        SD(k) = remaining balance after period k

    Every amount is kept at the working precision (WORKING_PRECISION
    significant digits); none is rounded to the monetary unit, so the
    schedule is defined for any positive principal over any term. Round
    for display with RoundingPolicy.apply().

    When n does not divide P, A is rounded UP in its last working digit and
    the last period amortizes the balance that is left, which is then
    slightly below A. The amortizations add up to P exactly, SD(n) is
    exactly zero and the installments never increase; with i > 0 they fall
    by A × i every period.

    Args:
        principal: Financed amount (P)
        periodic_rate: Effective rate per period as a decimal fraction (i)
        total_months: Number of periods (n)

    Returns:
        SacTable with one PaymentPeriod per month

    Raises:
        InvalidPrincipal: If principal is not positive
        InvalidRate: If periodic_rate is negative
        InvalidTerm: If total_months < 1
        ScheduleArithmeticError: If inputs are not finite

    Example:
        >>> table = build_sac_table(Decimal("12000"), Decimal("0.01"), 12)
        >>> table.fixed_amortization, table.first_payment
        (Decimal('1000'), Decimal('1120.00'))
    """
    principal, periodic_rate = _check_engine_inputs(principal, periodic_rate, total_months)

    with decimal.localcontext(working_context()):
        try:
            fixed_amortization = _sac_fixed_amortization(principal, total_months)
            balance = principal
            rows: list[PaymentPeriod] = []
            for period in range(1, total_months + 1):
                interest = balance * periodic_rate
                # Last period closes the balance, absorbing the P / n remainder
                amortization = balance if period == total_months else fixed_amortization
                balance = balance - amortization
                rows.append(PaymentPeriod(
                    period=period,
                    interest=interest,
                    amortization=amortization,
                    payment=interest + amortization,
                    balance=balance,
                ))
        except decimal.DecimalException as e:
            raise ScheduleArithmeticError(f"SAC schedule computation failed: {e!r}") from e

    return SacTable(
        system=AmortizationSystem.SAC,
        principal=principal,
        periodic_rate=periodic_rate,
        periods=tuple(rows),
        fixed_amortization=fixed_amortization,
    )


# =============================================================================
# Price: Sistema Francês de Amortização
# =============================================================================

def price_installment(
        principal: Decimal | int | str,
        periodic_rate: Decimal | int | str,
        total_months: int
) -> Decimal:
    """
    Unrounded level installment that amortizes principal in total_months periods.

    Formula:
        PMT = P × i / [1 - (1 + i)^-n]        (i > 0)
        PMT = P / n                           (i = 0)

    Raises:
        InvalidPrincipal, InvalidRate, InvalidTerm: On out-of-range inputs
        ScheduleArithmeticError: If inputs are not finite or the formula is undefined
    """
    principal, periodic_rate = _check_engine_inputs(principal, periodic_rate, total_months)

    with decimal.localcontext(working_context()):
        try:
            if periodic_rate == 0:
                return principal / Decimal(total_months)
            return principal * periodic_rate / (_ONE - (_ONE + periodic_rate) ** -total_months)
        except decimal.DecimalException as e:
            raise ScheduleArithmeticError(f"Price installment computation failed: {e!r}") from e


def _price_periods(
        principal: Decimal,
        fixed_payment: Decimal,
        interest_due: list[Decimal],
        rounding: RoundingPolicy
) -> list[PaymentPeriod]:
    # Must run inside the working context
    last = len(interest_due)
    balance = principal
    rows: list[PaymentPeriod] = []
    for period, due in enumerate(interest_due, start=1):
        interest = rounding.apply(due)
        if period == last:
            amortization = balance
            payment = interest + amortization
        else:
            amortization = fixed_payment - interest
            payment = fixed_payment
        balance = balance - amortization
        rows.append(PaymentPeriod(
            period=period,
            interest=interest,
            amortization=amortization,
            payment=payment,
            balance=balance,
        ))
    return rows


def build_price_table(
        principal: Decimal | int | str,
        periodic_rate: Decimal | int | str,
        total_months: int,
        *,
        rounding: RoundingPolicy = DEFAULT_ROUNDING,
        warn_on_zero_rate: bool = True
) -> PriceTable:
    """
    Build the fixed-installment (Price / French) schedule.

    Exact path (working precision, k = 1..n):
        PMT    = P × i / [1 - (1 + i)^-n]
        J(k)   = B(k-1) × i
        B(k)   = B(k-1) - (PMT - J(k)),     B(0) = P

    Reported schedule (amounts in the policy's minor unit, k = 1..n-1):
        F      = PMT rounded by the policy
        J'(k)  = J(k) rounded by the policy
        A(k)   = F - J'(k)
        SD(k)  = SD(k-1) - A(k),            SD(0) = P

    Final period n (rounding reconciliation):
        A(n)   = SD(n-1)
        PMT(n) = A(n) + J'(n)

    Interest always comes from the exact balance B, so the rounding of each
    period does not feed into the interest of the next one. J(k) falls
    every period, hence J'(k) never rises and A(k) never falls for k < n.
    The reported balance drifts from B by at most |F - PMT| + quantum / 2
    per period; the drift is settled in the last installment, so SD(n) is
    exactly zero and only PMT(n) may differ from F.

    When the drift leaves A(n) below A(n-1) (small principals over long
    terms, where F overshoots PMT by a large share of a quantum), F is
    lowered one quantum at a time until the amortizations are non-decreasing
    over the whole schedule. The balance then stays non-negative.

    With i = 0 the schedule degenerates to straight-line installments of
    P / n; the same reconciliation applies.

    Args:
        principal: Financed amount (P)
        periodic_rate: Effective rate per period as a decimal fraction (i)
        total_months: Number of periods (n)
        rounding: Rounding policy for monetary amounts
        warn_on_zero_rate: Emit a UserWarning when periodic_rate is zero

    Returns:
        PriceTable with one PaymentPeriod per month

    Raises:
        InvalidPrincipal: If principal is not positive
        InvalidRate: If periodic_rate is negative
        InvalidTerm: If total_months < 1
        ScheduleArithmeticError: If inputs are not finite
        Warning: If periodic_rate is zero and warn_on_zero_rate is set
    """
    principal, periodic_rate = _check_engine_inputs(principal, periodic_rate, total_months)
    if periodic_rate == 0 and warn_on_zero_rate:
        warnings.warn("periodic_rate is zero, returning straight-line installments", UserWarning)

    installment = price_installment(principal, periodic_rate, total_months)

    with decimal.localcontext(working_context()):
        try:
            interest_due: list[Decimal] = []
            exact_balance = principal
            for _ in range(total_months):
                due = exact_balance * periodic_rate
                interest_due.append(due)
                exact_balance = exact_balance - (installment - due)

            fixed_payment = rounding.apply(installment)
            rows = _price_periods(principal, fixed_payment, interest_due, rounding)
            while total_months > 1 and rows[-1].amortization < rows[-2].amortization:
                fixed_payment = fixed_payment - rounding.quantum
                rows = _price_periods(principal, fixed_payment, interest_due, rounding)
        except decimal.DecimalException as e:
            raise ScheduleArithmeticError(f"Price schedule computation failed: {e!r}") from e

    return PriceTable(
        system=AmortizationSystem.PRICE,
        principal=principal,
        periodic_rate=periodic_rate,
        periods=tuple(rows),
        fixed_payment=fixed_payment,
    )
