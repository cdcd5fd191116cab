"""
Interest Rate Solver

Recovers the periodic interest rate implied by a loan amount, payment and
term using Newton-Raphson on the annuity present-value equation:

    P = M * (1 - (1 + r)^-n) / r
"""

import logging
import math
from dataclasses import dataclass
from typing import Union

from app.calculations.errors import InvalidInput, InvalidTerm, PaymentTooLow

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-6
DEFAULT_GUESS = 0.005  # 0.5% per period, ~6% annual for monthly loans


@dataclass(frozen=True)
class Converged:
    """Successive iterates agreed within TOLERANCE."""

    rate: float
    iterations: int


@dataclass(frozen=True)
class MaxIterationsReached:
    """Iteration cap hit; ``rate`` is the last iterate."""

    rate: float
    iterations: int


RateSolution = Union[Converged, MaxIterationsReached]


@dataclass(frozen=True)
class InterestRateResult:
    """Annualized rate and totals for the interest rate calculator."""

    annual_rate_percent: float
    loan_amount: float
    monthly_payment: float
    term_months: int
    total_payments: float
    total_interest: float
    solution: RateSolution

    @property
    def converged(self) -> bool:
        return isinstance(self.solution, Converged)


def _present_value(payment: float, rate: float, periods: int) -> float:
    return payment * (1 - (1 + rate) ** -periods) / rate


def _present_value_derivative(payment: float, rate: float, periods: int) -> float:
    """d/dr of the annuity present value (for Newton-Raphson)."""
    discount = (1 + rate) ** -periods
    return payment * (
        periods * discount / (rate * (1 + rate)) - (1 - discount) / (rate * rate)
    )


def solve_periodic_rate(
    principal: float,
    payment: float,
    periods: int,
    guess: float = DEFAULT_GUESS,
) -> RateSolution:
    """
    Solve for the periodic rate that amortizes ``principal`` with ``payment``.

    Args:
        principal: Loan principal amount
        payment: Payment per period
        periods: Number of payment periods
        guess: Initial rate estimate

    Returns:
        Converged, or MaxIterationsReached carrying the last estimate

    Raises:
        InvalidTerm: If periods is zero or negative
        InvalidInput: If principal or payment is not positive
        PaymentTooLow: If payment is below principal / periods
    """
    if periods <= 0:
        raise InvalidTerm(f"Number of periods must be positive, got {periods}")
    if principal <= 0 or payment <= 0:
        raise InvalidInput("Principal and payment must both be positive")

    min_payment = principal / periods
    if math.isclose(payment, min_payment, rel_tol=1e-12):
        return Converged(rate=0.0, iterations=0)
    if payment < min_payment:
        raise PaymentTooLow(
            f"Payment {payment:.2f} is below the minimum {min_payment:.2f} "
            "needed to repay the principal"
        )

    rate = guess
    for iteration in range(1, MAX_ITERATIONS + 1):
        f = _present_value(payment, rate, periods) - principal
        df = _present_value_derivative(payment, rate, periods)

        if df == 0:
            break

        new_rate = rate - f / df

        if abs(new_rate - rate) < TOLERANCE:
            return Converged(rate=new_rate, iterations=iteration)

        rate = new_rate
        if rate == 0:
            # f is undefined at exactly zero; step just off it
            rate = TOLERANCE

    logger.warning(
        f"Rate solve did not converge after {MAX_ITERATIONS} iterations "
        f"(principal={principal}, payment={payment}, periods={periods}); "
        f"returning last estimate {rate}"
    )
    return MaxIterationsReached(rate=rate, iterations=MAX_ITERATIONS)


def annualize_rate(periodic_rate: float, periods_per_year: int = 12) -> float:
    """Convert a periodic rate to a nominal annual percentage."""
    return periodic_rate * periods_per_year * 100


def calculate_interest_rate(
    principal: float,
    years: float,
    months: float,
    payment: float,
) -> InterestRateResult:
    """
    Calculate the annual interest rate of a monthly-payment loan.

    Args:
        principal: Loan amount
        years: Whole years of the term
        months: Additional months of the term
        payment: Monthly payment

    Returns:
        InterestRateResult with the annualized rate in percent
    """
    try:
        term_months = int(years * 12 + months)
    except (OverflowError, ValueError):
        raise InvalidTerm(f"Term of {years} years is too long")
    solution = solve_periodic_rate(principal, payment, term_months)
    total_payments = payment * term_months

    return InterestRateResult(
        annual_rate_percent=annualize_rate(solution.rate),
        loan_amount=principal,
        monthly_payment=payment,
        term_months=term_months,
        total_payments=total_payments,
        total_interest=total_payments - principal,
        solution=solution,
    )
