"""
Loan Amortization Calculations

Implements the level-payment formula and the period-by-period
interest/principal split shared by the mortgage, down payment and
student loan calculators.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List

from dateutil.relativedelta import relativedelta

from app.calculations.errors import InvalidInput, InvalidTerm


@dataclass(frozen=True)
class AmortizationRow:
    """One payment period of an amortization schedule."""

    period: int
    date: date
    payment: float
    interest: float
    principal: float
    balance: float


@dataclass(frozen=True)
class LoanResult:
    """Payment summary for a fully amortizing loan."""

    principal: float
    payment: float
    total_paid: float
    total_interest: float
    payoff_date: date
    schedule: List[AmortizationRow] = field(default_factory=list)


def _check_loan_inputs(principal: float, periodic_rate: float, periods: int) -> None:
    if periods <= 0:
        raise InvalidTerm(f"Number of periods must be positive, got {periods}")
    if principal < 0:
        raise InvalidInput(f"Principal must be non-negative, got {principal}")
    if periodic_rate < 0:
        raise InvalidInput(f"Interest rate must be non-negative, got {periodic_rate}")


def term_in_months(years: float, months: float = 0.0) -> int:
    """Whole number of monthly periods in a term given in years plus months."""
    try:
        return int(round(years * 12 + months))
    except (OverflowError, ValueError):
        raise InvalidTerm(f"Term of {years} years is too long")


def calculate_payment(principal: float, periodic_rate: float, periods: int) -> float:
    """
    Calculate the level periodic payment that retires a loan.

    Matches Excel's PMT() function (sign flipped to positive).

    Args:
        principal: Loan principal amount
        periodic_rate: Interest rate per period as decimal (e.g., 0.005)
        periods: Number of payment periods

    Returns:
        Payment per period

    Raises:
        InvalidTerm: If periods is zero or negative, or so many that
            compounding overflows
        InvalidInput: If principal or rate is negative
    """
    _check_loan_inputs(principal, periodic_rate, periods)

    if periodic_rate == 0:
        return principal / periods

    try:
        growth = (1 + periodic_rate) ** periods
    except OverflowError:
        raise InvalidTerm(f"Compounding over {periods} periods overflows")
    return principal * periodic_rate * growth / (growth - 1)


def generate_amortization_schedule(
    principal: float,
    periodic_rate: float,
    periods: int,
    start_date: date,
) -> List[AmortizationRow]:
    """
    Generate a full amortization schedule.

    Each period accrues interest on the prior balance and applies the rest
    of the payment to principal. The last period pays off whatever balance
    is left, so the schedule always ends at exactly zero.

    Args:
        principal: Loan principal amount
        periodic_rate: Interest rate per period as decimal
        periods: Number of payment periods
        start_date: Date the loan starts; the first payment falls one month later

    Returns:
        List of amortization rows in chronological order
    """
    payment = calculate_payment(principal, periodic_rate, periods)
    calculate_payoff_date(start_date, periods)

    schedule = []
    balance = principal

    for period in range(1, periods + 1):
        interest = balance * periodic_rate

        if period == periods:
            principal_pmt = balance
        else:
            principal_pmt = min(payment - interest, balance)

        balance -= principal_pmt

        schedule.append(
            AmortizationRow(
                period=period,
                date=start_date + relativedelta(months=period),
                payment=interest + principal_pmt,
                interest=interest,
                principal=principal_pmt,
                balance=balance,
            )
        )

    return schedule


def calculate_payoff_date(start_date: date, periods: int) -> date:
    """Date of the final monthly payment."""
    try:
        return start_date + relativedelta(months=periods)
    except (OverflowError, ValueError):
        raise InvalidTerm(f"Term of {periods} months runs past the supported calendar")


def calculate_loan(
    principal: float,
    annual_rate: float,
    term_months: int,
    today: date,
) -> LoanResult:
    """
    Calculate payment, totals and schedule for a monthly amortizing loan.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.065 for 6.5%)
        term_months: Loan term in months
        today: Date the loan starts (injected so results are reproducible)

    Returns:
        LoanResult including the full schedule
    """
    monthly_rate = annual_rate / 12
    payment = calculate_payment(principal, monthly_rate, term_months)
    schedule = generate_amortization_schedule(principal, monthly_rate, term_months, today)

    total_paid = payment * term_months

    return LoanResult(
        principal=principal,
        payment=payment,
        total_paid=total_paid,
        total_interest=total_paid - principal,
        payoff_date=calculate_payoff_date(today, term_months),
        schedule=schedule,
    )
