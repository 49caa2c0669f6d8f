"""
Unit tests for the debt trajectory orchestrator.

Tests input validation order, the shared periodic rate, the SAC versus Price
comparison identities, and the result views.

Version: 0.1.0
Status: Active
"""

import decimal
import unittest
import warnings
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from br_financial.errors import (
    DebtCalculationError,
    InvalidPrincipal,
    InvalidRate,
    InvalidTerm,
    ScheduleArithmeticError,
)
from br_financial.amortization import build_price_table, build_sac_table, price_installment
from br_financial.rates import HALF_EVEN, HALF_UP, convert_annual_to_periodic, working_context
from br_financial.trajectory import (
    DebtCalculationInput,
    DebtCalculationResult,
    calculate_debt_trajectory,
)
from tests.utilities import generate_random_loans


CENT = Decimal("0.01")


def _input(total_amount="360000", interest_per_year="10.5", total_months=420):
    return DebtCalculationInput(
        total_amount=Decimal(total_amount),
        interest_per_year=Decimal(interest_per_year),
        total_months=total_months,
    )


class TestDebtCalculationInput(unittest.TestCase):
    """Construction normalizes types; validate() checks ranges in field order."""

    def test_int_and_str_are_coerced(self):
        debt_input = DebtCalculationInput(total_amount=360000, interest_per_year="10.5", total_months=420)
        self.assertEqual(debt_input.total_amount, Decimal("360000"))
        self.assertIsInstance(debt_input.total_amount, Decimal)
        self.assertEqual(debt_input.interest_per_year, Decimal("10.5"))

    def test_float_is_refused(self):
        with self.assertRaises(TypeError):
            DebtCalculationInput(total_amount=360000.0, interest_per_year=Decimal("10.5"), total_months=420)
        with self.assertRaises(TypeError):
            DebtCalculationInput(total_amount=Decimal("1"), interest_per_year=10.5, total_months=420)

    def test_non_int_term_is_refused(self):
        for months in (12.0, "12", True):
            with self.subTest(months=months):
                with self.assertRaises(TypeError):
                    DebtCalculationInput(Decimal("1000"), Decimal("1"), months)

    def test_invalid_values_construct_but_do_not_validate(self):
        debt_input = _input(total_amount="-1")
        with self.assertRaises(InvalidPrincipal):
            debt_input.validate()

    def test_input_is_immutable(self):
        debt_input = _input()
        with self.assertRaises(AttributeError):
            debt_input.total_months = 12


class TestValidation(unittest.TestCase):
    """calculate_debt_trajectory fails fast on the first violated constraint."""

    def test_invalid_principal(self):
        for amount in ("0", "-360000"):
            with self.subTest(amount=amount):
                with self.assertRaises(InvalidPrincipal):
                    calculate_debt_trajectory(_input(total_amount=amount))

    def test_invalid_rate(self):
        with self.assertRaises(InvalidRate):
            calculate_debt_trajectory(_input(interest_per_year="-10.5"))

    def test_invalid_term(self):
        for months in (0, -12):
            with self.subTest(months=months):
                with self.assertRaises(InvalidTerm):
                    calculate_debt_trajectory(_input(total_months=months))

    def test_constraints_checked_in_order(self):
        """Principal is reported before rate, rate before term."""
        with self.assertRaises(InvalidPrincipal):
            calculate_debt_trajectory(_input(total_amount="-1", interest_per_year="-1", total_months=0))
        with self.assertRaises(InvalidRate):
            calculate_debt_trajectory(_input(interest_per_year="-1", total_months=0))

    def test_non_finite_values(self):
        with self.assertRaises(ScheduleArithmeticError):
            calculate_debt_trajectory(_input(total_amount="NaN"))
        with self.assertRaises(ScheduleArithmeticError):
            calculate_debt_trajectory(_input(interest_per_year="Infinity"))

    def test_errors_share_a_base_class(self):
        for error in (InvalidPrincipal, InvalidRate, InvalidTerm, ScheduleArithmeticError):
            with self.subTest(error=error.__name__):
                self.assertTrue(issubclass(error, DebtCalculationError))
                self.assertTrue(issubclass(error, ValueError))
        self.assertTrue(issubclass(ScheduleArithmeticError, ArithmeticError))

    def test_small_principals_over_long_terms_complete(self):
        """Valid input never fails, however small the principal is for its term."""
        for amount, months in (("1000", 420), ("10", 420), ("0.05", 10), ("0.01", 360)):
            with self.subTest(amount=amount, months=months):
                result = calculate_debt_trajectory(_input(total_amount=amount, total_months=months))
                for table in (result.sac_table, result.price_table):
                    self.assertEqual(table.final_balance, 0)
                    self.assertEqual(table.total_amortization, Decimal(amount))
                    self.assertEqual(len(table), months)
                amortization = [row.amortization for row in result.price_table]
                self.assertEqual(amortization, sorted(amortization))
                payments = result.sac_table.payments()
                self.assertEqual(payments, sorted(payments, reverse=True))


class TestTrajectory(unittest.TestCase):
    """Both schedules are computed from one periodic rate and compare as expected."""

    @classmethod
    def setUpClass(cls):
        cls.result = calculate_debt_trajectory(_input())

    def test_result_shape(self):
        self.assertIsInstance(self.result, DebtCalculationResult)
        self.assertEqual(self.result.initial_total_amount, Decimal("360000"))
        self.assertEqual(len(self.result.sac_table), 420)
        self.assertEqual(len(self.result.price_table), 420)

    def test_rate_is_shared(self):
        expected = convert_annual_to_periodic(Decimal("10.5"))
        self.assertEqual(self.result.periodic_rate, expected)
        self.assertEqual(self.result.sac_table.periodic_rate, expected)
        self.assertEqual(self.result.price_table.periodic_rate, expected)

    def test_tables_match_engines(self):
        rate = self.result.periodic_rate
        self.assertEqual(self.result.sac_table, build_sac_table(Decimal("360000"), rate, 420))
        self.assertEqual(self.result.price_table, build_price_table(Decimal("360000"), rate, 420))

    def test_both_schedules_close(self):
        self.assertEqual(self.result.sac_table.final_balance, 0)
        self.assertEqual(self.result.price_table.final_balance, 0)
        self.assertEqual(self.result.sac_table.total_amortization, Decimal("360000"))
        self.assertEqual(self.result.price_table.total_amortization, Decimal("360000"))

    def test_sac_starts_above_price(self):
        self.assertGreater(self.result.sac_table.first_payment, self.result.price_table.fixed_payment)
        self.assertLess(self.result.sac_table.last_payment, self.result.price_table.fixed_payment)

    def test_sac_payments_strictly_decrease(self):
        payments = self.result.sac_table.payments()
        for k in range(1, len(payments)):
            with self.subTest(period=k + 1):
                self.assertLess(payments[k], payments[k - 1])

    def test_price_payment_is_level(self):
        price = self.result.price_table
        self.assertEqual(set(price.payments()[:-1]), {price.fixed_payment})

    def test_price_amortization_strictly_increases(self):
        amortization = [row.amortization for row in self.result.price_table]
        for k in range(1, len(amortization)):
            with self.subTest(period=k + 1):
                self.assertGreater(amortization[k], amortization[k - 1])

    def test_price_pays_more_than_sac(self):
        self.assertGreater(self.result.price_table.total_paid, self.result.sac_table.total_paid)
        self.assertGreater(self.result.total_paid_difference, 0)
        with decimal.localcontext(working_context()):
            expected = self.result.price_table.total_paid - self.result.sac_table.total_paid
        self.assertEqual(self.result.total_paid_difference, expected)

    def test_as_dict(self):
        data = self.result.as_dict()
        self.assertEqual(data["initial_total_amount"], "360000")
        self.assertEqual(data["sac_table"]["system"], "SAC")
        self.assertEqual(data["price_table"]["system"], "PRICE")
        self.assertEqual(data["price_table"]["fixed_payment"], str(self.result.price_table.fixed_payment))
        self.assertEqual(len(data["sac_table"]["periods"]), 420)

    def test_deterministic_across_threads(self):
        """Repeated and concurrent runs give identical results."""
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: calculate_debt_trajectory(_input()), range(4)))
        for other in results:
            self.assertEqual(other, self.result)


class TestComparisonIdentities(unittest.TestCase):
    """Price pays more total interest than SAC whenever the rate is positive."""

    def test_random_loans(self):
        for loan in generate_random_loans(count=20, seed=7):
            with self.subTest(loan_id=loan.loan_id, term=loan.term):
                result = calculate_debt_trajectory(
                    DebtCalculationInput(loan.principal, loan.annual_rate, loan.term)
                )
                sac, price = result.sac_table, result.price_table
                if loan.term == 1:
                    self.assertEqual(price.total_paid, HALF_UP.apply(sac.total_paid))
                    continue
                # Price rounding moves its total by at most half a cent per period
                with decimal.localcontext(working_context()):
                    installment = price_installment(loan.principal, result.periodic_rate, loan.term)
                    exact_gap = installment * loan.term - sac.total_paid
                if exact_gap > CENT * loan.term:
                    self.assertGreater(price.total_paid, sac.total_paid)

    def test_zero_rate_degenerates_to_principal_without_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = calculate_debt_trajectory(_input(total_amount="1200", interest_per_year="0", total_months=12))
        self.assertEqual(result.periodic_rate, 0)
        self.assertEqual(result.sac_table.total_paid, Decimal("1200"))
        self.assertEqual(result.price_table.total_paid, Decimal("1200"))
        self.assertEqual(result.sac_table.payments(), result.price_table.payments())
        self.assertEqual(result.total_paid_difference, 0)

    def test_single_month(self):
        result = calculate_debt_trajectory(_input(total_amount="12000", interest_per_year="12", total_months=1))
        for table in (result.sac_table, result.price_table):
            with self.subTest(system=table.system.value):
                self.assertEqual(len(table), 1)
                self.assertEqual(HALF_UP.apply(table.first_payment), Decimal("12113.87"))

    def test_rounding_policy_is_forwarded(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = calculate_debt_trajectory(
                _input(total_amount="1", interest_per_year="0.1", total_months=1),
                rounding=HALF_EVEN,
            )
        self.assertEqual(result.sac_table.final_balance, 0)
        self.assertEqual(result.price_table.final_balance, 0)


if __name__ == '__main__':
    unittest.main()
