"""
Mortgage and Down Payment Calculations

Monthly principal and interest from the amortization engine, with
property tax and insurance escrow added on top.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List

from app.calculations.amortization import (
    AmortizationRow,
    calculate_loan,
    calculate_payment,
    term_in_months,
)
from app.calculations.errors import InvalidInput


@dataclass(frozen=True)
class MortgageResult:
    """Payment breakdown for a fixed-rate mortgage."""

    loan_amount: float
    monthly_payment: float
    total_payment: float
    total_interest: float
    property_tax_monthly: float
    property_tax_total: float
    insurance_monthly: float
    insurance_total: float
    total_monthly: float
    total_out_of_pocket: float
    payoff_date: date
    schedule: List[AmortizationRow] = field(default_factory=list)


@dataclass(frozen=True)
class DownPaymentResult:
    home_price: float
    down_payment: float
    down_payment_percent: float
    closing_costs: float
    loan_amount: float
    monthly_payment: float
    total_upfront_cash: float


def calculate_mortgage(
    home_price: float,
    down_payment: float,
    term_years: float,
    annual_rate: float,
    today: date,
    property_tax: float = 0.0,
    insurance: float = 0.0,
) -> MortgageResult:
    """
    Calculate a fixed-rate mortgage.

    Args:
        home_price: Purchase price
        down_payment: Cash paid up front
        term_years: Loan term in years
        annual_rate: Annual interest rate as decimal
        today: Loan start date
        property_tax: Monthly property tax escrow
        insurance: Monthly homeowner's insurance escrow

    Returns:
        MortgageResult with totals and amortization schedule

    Raises:
        InvalidInput: If the down payment exceeds the price or escrow is negative
    """
    if down_payment > home_price:
        raise InvalidInput("Down payment cannot exceed the home price")
    if property_tax < 0 or insurance < 0:
        raise InvalidInput("Property tax and insurance must be non-negative")

    term_months = term_in_months(term_years)
    loan = calculate_loan(home_price - down_payment, annual_rate, term_months, today)

    property_tax_total = property_tax * term_months
    insurance_total = insurance * term_months

    return MortgageResult(
        loan_amount=loan.principal,
        monthly_payment=loan.payment,
        total_payment=loan.total_paid,
        total_interest=loan.total_interest,
        property_tax_monthly=property_tax,
        property_tax_total=property_tax_total,
        insurance_monthly=insurance,
        insurance_total=insurance_total,
        total_monthly=loan.payment + property_tax + insurance,
        total_out_of_pocket=loan.total_paid + property_tax_total + insurance_total,
        payoff_date=loan.payoff_date,
        schedule=loan.schedule,
    )


def calculate_down_payment(
    home_price: float,
    down_payment_percent: float,
    closing_costs_percent: float,
    annual_rate: float,
    term_years: float,
) -> DownPaymentResult:
    """
    Cash needed at closing and the resulting monthly payment.

    Percentages are given as whole numbers (20 for 20%); ``annual_rate`` is
    a decimal.
    """
    if home_price < 0:
        raise InvalidInput(f"Home price must be non-negative, got {home_price}")
    if not 0 <= down_payment_percent <= 100:
        raise InvalidInput(
            f"Down payment percent must be between 0 and 100, got {down_payment_percent}"
        )
    if closing_costs_percent < 0:
        raise InvalidInput("Closing costs percent must be non-negative")

    down_payment = home_price * down_payment_percent / 100
    closing_costs = home_price * closing_costs_percent / 100
    loan_amount = home_price - down_payment
    monthly_payment = calculate_payment(
        loan_amount, annual_rate / 12, term_in_months(term_years)
    )

    return DownPaymentResult(
        home_price=home_price,
        down_payment=down_payment,
        down_payment_percent=down_payment_percent,
        closing_costs=closing_costs,
        loan_amount=loan_amount,
        monthly_payment=monthly_payment,
        total_upfront_cash=down_payment + closing_costs,
    )
