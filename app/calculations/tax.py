"""
Income Tax Calculations

Progressive federal bracket tax plus the flat payroll taxes (Social
Security with a wage base cap, Medicare with an additional-rate surtax).
Figures are for the 2024 tax year.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from app.calculations.errors import InvalidInput


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    HEAD = "head"


@dataclass(frozen=True)
class TaxBracket:
    """Income up to ``upper_bound`` (inclusive) is taxed at ``rate``."""

    upper_bound: float
    rate: float


TAX_YEAR = 2024

FEDERAL_BRACKETS: Dict[FilingStatus, List[TaxBracket]] = {
    FilingStatus.SINGLE: [
        TaxBracket(11600, 0.10),
        TaxBracket(47150, 0.12),
        TaxBracket(100525, 0.22),
        TaxBracket(191950, 0.24),
        TaxBracket(243725, 0.32),
        TaxBracket(609350, 0.35),
        TaxBracket(math.inf, 0.37),
    ],
    FilingStatus.MARRIED: [
        TaxBracket(23200, 0.10),
        TaxBracket(94300, 0.12),
        TaxBracket(201050, 0.22),
        TaxBracket(383900, 0.24),
        TaxBracket(487450, 0.32),
        TaxBracket(731200, 0.35),
        TaxBracket(math.inf, 0.37),
    ],
    FilingStatus.HEAD: [
        TaxBracket(16550, 0.10),
        TaxBracket(63100, 0.12),
        TaxBracket(100500, 0.22),
        TaxBracket(191950, 0.24),
        TaxBracket(243700, 0.32),
        TaxBracket(609350, 0.35),
        TaxBracket(math.inf, 0.37),
    ],
}

STANDARD_DEDUCTION: Dict[FilingStatus, float] = {
    FilingStatus.SINGLE: 14600,
    FilingStatus.MARRIED: 29200,
    FilingStatus.HEAD: 21900,
}

SOCIAL_SECURITY_RATE = 0.062
SOCIAL_SECURITY_WAGE_BASE = 168600
MEDICARE_RATE = 0.0145
ADDITIONAL_MEDICARE_RATE = 0.009
ADDITIONAL_MEDICARE_THRESHOLD: Dict[FilingStatus, float] = {
    FilingStatus.SINGLE: 200000,
    FilingStatus.MARRIED: 250000,
    FilingStatus.HEAD: 200000,
}


@dataclass(frozen=True)
class PayrollTaxes:
    social_security: float
    medicare: float

    @property
    def total(self) -> float:
        return self.social_security + self.medicare


@dataclass(frozen=True)
class IncomeTaxResult:
    """Full breakdown shown by the income tax calculator."""

    gross_income: float
    deduction: float
    taxable_income: float
    federal_tax: float
    state_tax: float
    social_security: float
    medicare: float
    total_tax: float
    effective_rate: float
    marginal_rate: float
    take_home_pay: float
    monthly_take_home: float
    biweekly_take_home: float


def calculate_bracket_tax(
    income: float, brackets: List[TaxBracket]
) -> Tuple[float, float]:
    """
    Calculate tax under a progressive bracket schedule.

    Walks the brackets in ascending order, taxing the slice of income that
    falls inside each one, and stops once income is fully covered.

    Args:
        income: Taxable income
        brackets: Brackets ordered by ascending upper bound; the last one
            should be unbounded

    Returns:
        Tuple of (tax owed, marginal rate of the last bracket entered)
    """
    tax = 0.0
    marginal_rate = 0.0
    previous_bound = 0.0

    for bracket in brackets:
        if income <= previous_bound:
            break

        taxed_here = min(income, bracket.upper_bound) - previous_bound
        tax += taxed_here * bracket.rate
        marginal_rate = bracket.rate

        if income <= bracket.upper_bound:
            break
        previous_bound = bracket.upper_bound

    return tax, marginal_rate


def calculate_capped_tax(income: float, rate: float, cap: float) -> float:
    """Flat tax on income up to a wage base."""
    return rate * min(max(income, 0.0), cap)


def calculate_surtax(income: float, rate: float, threshold: float) -> float:
    """Additional flat tax on income above a threshold."""
    return rate * max(0.0, income - threshold)


def calculate_payroll_taxes(income: float, status: FilingStatus) -> PayrollTaxes:
    """Social Security and Medicare (FICA) on wages."""
    social_security = calculate_capped_tax(
        income, SOCIAL_SECURITY_RATE, SOCIAL_SECURITY_WAGE_BASE
    )
    medicare = calculate_capped_tax(income, MEDICARE_RATE, math.inf) + calculate_surtax(
        income, ADDITIONAL_MEDICARE_RATE, ADDITIONAL_MEDICARE_THRESHOLD[status]
    )
    return PayrollTaxes(social_security=social_security, medicare=medicare)


def calculate_income_tax(
    gross_income: float,
    status: FilingStatus = FilingStatus.SINGLE,
    deduction: Optional[float] = None,
    state_rate: float = 0.05,
) -> IncomeTaxResult:
    """
    Estimate annual tax and take-home pay.

    State tax is a flat percentage of gross income.

    Args:
        gross_income: Annual gross income
        status: Filing status selecting the bracket table
        deduction: Deduction from gross income; the standard deduction for
            ``status`` when omitted
        state_rate: Flat state income tax rate as decimal

    Returns:
        IncomeTaxResult breakdown

    Raises:
        InvalidInput: If income, deduction or state rate is negative
    """
    if gross_income < 0:
        raise InvalidInput(f"Income must be non-negative, got {gross_income}")
    if state_rate < 0:
        raise InvalidInput(f"State tax rate must be non-negative, got {state_rate}")
    if deduction is None:
        deduction = STANDARD_DEDUCTION[status]
    if deduction < 0:
        raise InvalidInput(f"Deduction must be non-negative, got {deduction}")

    taxable_income = max(0.0, gross_income - deduction)
    federal_tax, marginal_rate = calculate_bracket_tax(
        taxable_income, FEDERAL_BRACKETS[status]
    )
    state_tax = gross_income * state_rate
    payroll = calculate_payroll_taxes(gross_income, status)

    total_tax = federal_tax + state_tax + payroll.total
    take_home = gross_income - total_tax

    return IncomeTaxResult(
        gross_income=gross_income,
        deduction=deduction,
        taxable_income=taxable_income,
        federal_tax=federal_tax,
        state_tax=state_tax,
        social_security=payroll.social_security,
        medicare=payroll.medicare,
        total_tax=total_tax,
        effective_rate=total_tax / gross_income if gross_income > 0 else 0.0,
        marginal_rate=marginal_rate,
        take_home_pay=take_home,
        monthly_take_home=take_home / 12,
        biweekly_take_home=take_home / 26,
    )
