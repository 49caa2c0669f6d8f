# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import decimal
from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

import numpy as np

from br_financial.rates import working_context

__version__ = "0.1.0"


# =============================================================================
# Amortization Systems
# =============================================================================

class AmortizationSystem(Enum):
    """Amortization systems used in Brazilian real-estate financing."""
    SAC = "SAC"      # Sistema de Amortização Constante: constant principal
    PRICE = "PRICE"  # Sistema Francês (Tabela Price): constant installment


# =============================================================================
# Schedule Rows
# =============================================================================

@dataclass(frozen=True)
class PaymentPeriod:
    """
    One row of an amortization schedule.

    Attributes:
        period: 1-based period index
        interest: Interest charged on the balance outstanding at period start
        amortization: Principal repaid in the period
        payment: Installment paid (interest + amortization)
        balance: Remaining balance after the payment
    """
    period: int
    interest: Decimal
    amortization: Decimal
    payment: Decimal
    balance: Decimal

    def as_dict(self) -> dict[str, int | str]:
        return {
            "period": self.period,
            "interest": str(self.interest),
            "amortization": str(self.amortization),
            "payment": str(self.payment),
            "balance": str(self.balance),
        }


@dataclass(frozen=True)
class ScheduleArrays:
    """
    Column view of a schedule as float64 numpy arrays.

    Intended for plotting and vectorized comparison only; the Decimal
    schedule remains the authoritative result. Index 0 is the origination
    state (balance = principal, flows = 0), index k is period k.
    """
    period: np.ndarray
    interest: np.ndarray
    amortization: np.ndarray
    payment: np.ndarray
    balance: np.ndarray


# =============================================================================
# Amortization Tables
# =============================================================================

@dataclass(frozen=True)
class AmortizationTable:
    """
    Complete schedule for one amortization system.

    Summary figures (first/last payment, totals) are derived from the rows,
    so they cannot disagree with the schedule itself.
    """
    system: AmortizationSystem
    principal: Decimal
    periodic_rate: Decimal
    periods: tuple[PaymentPeriod, ...]

    def __len__(self) -> int:
        return len(self.periods)

    def __iter__(self) -> Iterator[PaymentPeriod]:
        return iter(self.periods)

    @property
    def term(self) -> int:
        return len(self.periods)

    @property
    def first_payment(self) -> Decimal:
        return self.periods[0].payment

    @property
    def last_payment(self) -> Decimal:
        return self.periods[-1].payment

    @property
    def final_balance(self) -> Decimal:
        return self.periods[-1].balance

    @property
    def total_paid(self) -> Decimal:
        """Sum of every installment over the life of the loan."""
        return _exact_sum(p.payment for p in self.periods)

    @property
    def total_interest(self) -> Decimal:
        return _exact_sum(p.interest for p in self.periods)

    @property
    def total_amortization(self) -> Decimal:
        return _exact_sum(p.amortization for p in self.periods)

    def payments(self) -> list[Decimal]:
        return [p.payment for p in self.periods]

    def as_arrays(self) -> ScheduleArrays:
        """Float64 column view (origination row at index 0)."""
        n = len(self.periods)
        period = np.arange(n + 1, dtype=int)
        interest = np.zeros(n + 1)
        amortization = np.zeros(n + 1)
        payment = np.zeros(n + 1)
        balance = np.zeros(n + 1)
        balance[0] = float(self.principal)
        for row in self.periods:
            i = row.period
            interest[i] = float(row.interest)
            amortization[i] = float(row.amortization)
            payment[i] = float(row.payment)
            balance[i] = float(row.balance)
        return ScheduleArrays(
            period=period,
            interest=interest,
            amortization=amortization,
            payment=payment,
            balance=balance,
        )

    def _summary_dict(self) -> dict[str, object]:
        return {
            "system": self.system.value,
            "principal": str(self.principal),
            "periodic_rate": str(self.periodic_rate),
            "first_payment": str(self.first_payment),
            "last_payment": str(self.last_payment),
            "total_paid": str(self.total_paid),
            "total_interest": str(self.total_interest),
            "periods": [p.as_dict() for p in self.periods],
        }

    def as_dict(self) -> dict[str, object]:
        """JSON-ready mapping; Decimal values are rendered as strings."""
        return self._summary_dict()


@dataclass(frozen=True)
class SacTable(AmortizationTable):
    """SAC schedule: constant amortization, decreasing installments."""
    fixed_amortization: Decimal

    def as_dict(self) -> dict[str, object]:
        data = self._summary_dict()
        data["fixed_amortization"] = str(self.fixed_amortization)
        return data


@dataclass(frozen=True)
class PriceTable(AmortizationTable):
    """
    Price schedule: constant installment, increasing amortization.

    fixed_payment is the installment of every period but the last;
    last_payment carries the rounding reconciliation and may differ by a
    few minor units.
    """
    fixed_payment: Decimal

    def as_dict(self) -> dict[str, object]:
        data = self._summary_dict()
        data["fixed_payment"] = str(self.fixed_payment)
        return data


def _exact_sum(values) -> Decimal:
    with decimal.localcontext(working_context()):
        return sum(values, Decimal(0))
