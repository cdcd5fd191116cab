"""
Student Loan Calculations

Standard repayment plus the effect of extra payments: a one-time payment
applied up front, an extra amount every month, and an extra amount every
twelfth month.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List

from app.calculations.amortization import (
    calculate_payment,
    calculate_payoff_date,
    term_in_months,
)
from app.calculations.errors import InvalidInput

PAID_OFF_THRESHOLD = 0.01


@dataclass(frozen=True)
class StudentLoanRow:
    period: int
    date: date
    payment: float
    principal: float
    interest: float
    extra_payment: float
    balance: float


@dataclass(frozen=True)
class StudentLoanResult:
    loan_amount: float
    monthly_payment: float
    standard_total_interest: float
    payoff_date: date
    total_months: int
    total_paid: float
    total_interest: float
    interest_savings: float
    new_payoff_date: date
    months_saved: int
    schedule: List[StudentLoanRow] = field(default_factory=list)


def calculate_student_loan(
    balance: float,
    term_years: float,
    annual_rate: float,
    today: date,
    extra_monthly: float = 0.0,
    extra_yearly: float = 0.0,
    one_time: float = 0.0,
) -> StudentLoanResult:
    """
    Calculate repayment with optional extra payments.

    The schedule runs until the balance is within a cent of zero, capped at
    twice the standard term.

    Args:
        balance: Outstanding loan balance
        term_years: Standard repayment term in years
        annual_rate: Annual interest rate as decimal
        today: Repayment start date
        extra_monthly: Extra principal paid every month
        extra_yearly: Extra principal paid every twelfth month
        one_time: Lump sum applied before the first payment

    Returns:
        StudentLoanResult comparing standard and accelerated repayment
    """
    if min(extra_monthly, extra_yearly, one_time) < 0:
        raise InvalidInput("Extra payments must be non-negative")
    if one_time > balance:
        raise InvalidInput("One-time payment cannot exceed the loan balance")

    monthly_rate = annual_rate / 12
    term_months = term_in_months(term_years)
    payment = calculate_payment(balance, monthly_rate, term_months)
    # latest date the capped schedule can reach
    calculate_payoff_date(today, term_months * 2)
    standard_interest = payment * term_months - balance

    schedule = []
    remaining = balance - one_time
    total_paid = one_time
    total_interest = 0.0
    month = 0

    while remaining > PAID_OFF_THRESHOLD and month < term_months * 2:
        month += 1
        interest = remaining * monthly_rate
        principal = payment - interest

        extra = extra_monthly
        if month % 12 == 0:
            extra += extra_yearly

        if principal + extra > remaining:
            principal = remaining
            extra = 0.0

        paid = principal + interest + extra
        remaining -= principal + extra
        total_paid += paid
        total_interest += interest

        schedule.append(
            StudentLoanRow(
                period=month,
                date=calculate_payoff_date(today, month),
                payment=paid,
                principal=principal + extra,
                interest=interest,
                extra_payment=extra,
                balance=max(0.0, remaining),
            )
        )

    return StudentLoanResult(
        loan_amount=balance,
        monthly_payment=payment,
        standard_total_interest=standard_interest,
        payoff_date=calculate_payoff_date(today, term_months),
        total_months=term_months,
        total_paid=total_paid,
        total_interest=total_interest,
        interest_savings=standard_interest - total_interest,
        new_payoff_date=calculate_payoff_date(today, month),
        months_saved=term_months - month,
        schedule=schedule,
    )
