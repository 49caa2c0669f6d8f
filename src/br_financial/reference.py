# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import numpy as np
from scipy.optimize import brentq

__version__ = "0.1.0"


# =============================================================================
# Closed-Form Reference Factors (float64)
# =============================================================================
#
# Vectorized closed forms of both schedules, per unit of principal and
# without rounding. They are not used to produce schedules; they exist to
# cross-check the exact Decimal engines in amortization.py, whose rounded
# results must stay within a bounded distance of these curves.
#
# Indexing: vectors of balances are indexed by AGE k = 0..n (k = 0 is
# origination); vectors of payments are indexed by period k = 1..n.
# =============================================================================

def _check_reference_inputs(periodic_rate: float, total_months: int) -> None:
    if total_months < 1:
        raise ValueError(f"total_months must be at least 1, got {total_months}")
    if periodic_rate < 0:
        raise ValueError(f"periodic_rate must be non-negative, got {periodic_rate}")


def price_payment_factor(periodic_rate: float, total_months: int) -> float:
    """
    Level installment per unit of principal.

    Formula:
        AF(n, i) = i / [1 - (1 + i)^-n],   or 1 / n when i = 0

    Args:
        periodic_rate: Effective periodic rate as decimal fraction
        total_months: Number of periods (n)

    Returns:
        Installment as a fraction of the principal
    """
    _check_reference_inputs(periodic_rate, total_months)
    if periodic_rate == 0.0:
        return 1.0 / total_months
    return periodic_rate / (1.0 - (1.0 + periodic_rate) ** (-total_months))


def price_balance_factors(periodic_rate: float, total_months: int) -> np.ndarray:
    """
    Remaining Price balance per unit of principal after each period.

    Formula:
        BAL(k) = [1 - (1 + i)^-(n-k)] / [1 - (1 + i)^-n]     k = 0..n
        BAL(k) = (n - k) / n                                  when i = 0

    This is the ratio of the annuity factors for the remaining and the
    original term: the balance is the present value of the installments
    still to be paid.

    Returns:
        ndarray of length n + 1 with BAL(0) = 1 and BAL(n) = 0
    """
    _check_reference_inputs(periodic_rate, total_months)
    remaining = total_months - np.arange(total_months + 1)
    if periodic_rate == 0.0:
        return remaining / total_months
    v = 1.0 + periodic_rate
    return (1.0 - np.power(v, -remaining)) / (1.0 - v ** (-total_months))


def sac_balance_factors(total_months: int) -> np.ndarray:
    """
    Remaining SAC balance per unit of principal after each period.

    Formula:
        BAL(k) = (n - k) / n     k = 0..n

    Returns:
        ndarray of length n + 1 with BAL(0) = 1 and BAL(n) = 0
    """
    _check_reference_inputs(0.0, total_months)
    return (total_months - np.arange(total_months + 1)) / total_months


def sac_payment_factors(periodic_rate: float, total_months: int) -> np.ndarray:
    """
    SAC installment per unit of principal for periods 1..n.

    Formula:
        PMT(k) = 1/n + i × BAL(k-1) = 1/n + i × (n - k + 1) / n

    Returns:
        ndarray of length n (index 0 is period 1)
    """
    _check_reference_inputs(periodic_rate, total_months)
    beginning = sac_balance_factors(total_months)[:-1]
    return 1.0 / total_months + periodic_rate * beginning


def price_rounding_bound(installment_error: float, total_months: int, quantum: float = 0.01) -> float:
    """
    Upper bound on |reported balance - exact balance| for a Price schedule.

    The engine takes interest from the exact balance, so rounding does not
    compound. Each period moves the reported balance away from the exact
    one by at most |F - PMT| (level installment against the exact one) plus
    quantum / 2 (rounded interest), which gives after k periods

        |SD(k) - B(k)| <= k × (|F - PMT| + quantum / 2)

    The value returned is the bound after total_months periods. It also
    bounds |PMT(n) - PMT|, the reconciliation carried by the last
    installment.

    Args:
        installment_error: F - PMT, level installment minus the exact one
        total_months: Number of periods (n)
        quantum: Minor monetary unit (default 0.01)
    """
    _check_reference_inputs(0.0, total_months)
    return total_months * (abs(installment_error) + quantum / 2.0)


# =============================================================================
# Implied Rate
# =============================================================================

def implied_periodic_rate(
        principal: float,
        installment: float,
        total_months: int,
        tolerance: float = 1e-12,
        max_iterations: int = 200
) -> float:
    """
    Periodic rate at which a level installment amortizes principal in total_months.

    Inverts the annuity formula, which has no closed-form solution for i:

        principal × AF(n, i) = installment

    AF(n, i) is increasing in i, equals 1 / n at i = 0 and exceeds i for
    every i > 0, so the root lies in [0, installment / principal]. Brent's
    method (scipy.optimize.brentq) finds it within that bracket.

    Args:
        principal: Financed amount
        installment: Level installment paid every period
        total_months: Number of periods (n)
        tolerance: Absolute tolerance on the rate (default 1e-12)
        max_iterations: Maximum iterations for Brent's method (default 200)

    Returns:
        Effective periodic rate as decimal fraction

    Raises:
        ValueError: If principal or installment is not positive, total_months < 1,
            or the installments do not repay the principal (implied rate < 0)

    Example:
        >>> rate = implied_periodic_rate(12000.0, 1062.7448, 12)
        >>> round((1 + rate) ** 12, 6)
        1.12
    """
    if principal <= 0:
        raise ValueError(f"principal must be positive, got {principal}")
    if installment <= 0:
        raise ValueError(f"installment must be positive, got {installment}")
    _check_reference_inputs(0.0, total_months)

    paid = installment * total_months
    if paid < principal:
        raise ValueError(
            f"installments do not repay the principal: {total_months} x {installment} < {principal}"
        )
    if paid == principal:
        return 0.0

    def objective(rate: float) -> float:
        return principal * price_payment_factor(rate, total_months) - installment

    try:
        return brentq(
            objective,
            0.0, installment / principal,
            xtol=tolerance,
            maxiter=max_iterations
        )
    except (ValueError, RuntimeError) as e:
        raise ValueError(
            f"Could not find the periodic rate for installment {installment} "
            f"on principal {principal} over {total_months} periods. Original error: {e}"
        ) from e


def compare_arrays(reference: np.ndarray, test_array: np.ndarray,
                   rtol: float = 1e-9, atol: float = 1e-10) -> tuple[bool, float, int]:
    """Compare two arrays; returns (all_close, max_rel_diff, worst_period)."""
    min_len = min(len(reference), len(test_array))
    ref = np.asarray(reference[:min_len], dtype=float)
    test = np.asarray(test_array[:min_len], dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        rel_diff = np.abs(ref - test) / np.maximum(np.abs(ref), atol)
        rel_diff = np.where(np.isfinite(rel_diff), rel_diff, 0.0)
    max_rel_diff = float(np.max(rel_diff)) if min_len else 0.0
    worst_period = int(np.argmax(rel_diff)) if min_len else 0
    all_close = bool(np.allclose(test, ref, rtol=rtol, atol=atol))
    return all_close, max_rel_diff, worst_period
