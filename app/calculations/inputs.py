"""
Form Input Parsing

Free-text form fields are parsed the way a browser's parseFloat/parseInt
read them: leading whitespace is skipped and the longest numeric prefix is
used. Anything unparseable decays to a default. Constant defaults live in
FORM_DEFAULTS; the two that depend on other inputs (the filing status's
standard deduction and the current year) have their own helpers below, so
every fallback can be audited in this module.
"""

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Union

from app.calculations.tax import STANDARD_DEDUCTION, FilingStatus

RawNumber = Union[str, int, float, None]

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")


@dataclass(frozen=True)
class ParsedNumber:
    """Outcome of parsing one field: either a value or an error message."""

    value: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_number(raw: RawNumber, integer: bool = False) -> ParsedNumber:
    """
    Parse a raw form value.

    Args:
        raw: Value as received (text, number or None)
        integer: Truncate to an integer prefix like parseInt

    Returns:
        ParsedNumber with either value or error set
    """
    if raw is None:
        return ParsedNumber(error="missing value")

    if isinstance(raw, bool):
        return ParsedNumber(error=f"not a number: {raw!r}")

    if isinstance(raw, (int, float)):
        if not math.isfinite(raw):
            return ParsedNumber(error=f"not a finite number: {raw!r}")
        if integer:
            return ParsedNumber(value=float(int(raw)))
        return ParsedNumber(value=float(raw))

    text = str(raw).lstrip()
    pattern = _INT_PREFIX if integer else _FLOAT_PREFIX
    match = pattern.match(text)
    if not match:
        return ParsedNumber(error=f"not a number: {raw!r}")

    token = match.group(0)
    try:
        value = float(int(token)) if integer else float(token)
    except (OverflowError, ValueError):
        return ParsedNumber(error=f"not a finite number: {raw!r}")
    if not math.isfinite(value):
        return ParsedNumber(error=f"not a finite number: {raw!r}")
    return ParsedNumber(value=value)


def number_or_default(raw: RawNumber, default: float, integer: bool = False) -> float:
    """Return the parsed value, or ``default`` when parsing fails."""
    parsed = parse_number(raw, integer=integer)
    if parsed.ok:
        return parsed.value
    return default


# Fallback values applied when a field cannot be parsed.
FORM_DEFAULTS: Dict[str, Dict[str, float]] = {
    "mortgage": {
        "home_price": 0.0,
        "down_payment": 0.0,
        "loan_term_years": 30.0,
        "interest_rate": 0.0,
        "property_tax": 0.0,
        "home_insurance": 0.0,
    },
    "down_payment": {
        "home_price": 450000.0,
        "down_payment_percent": 20.0,
        "closing_costs_percent": 3.0,
        "interest_rate": 6.5,
        "loan_term_years": 30.0,
    },
    "student_loan": {
        "loan_balance": 0.0,
        "loan_term_years": 10.0,
        "interest_rate": 0.0,
        "extra_monthly_payment": 0.0,
        "extra_yearly_payment": 0.0,
        "one_time_payment": 0.0,
    },
    "amortization": {
        "principal": 0.0,
        "interest_rate": 0.0,
        "loan_term_years": 30.0,
    },
    "interest_rate": {
        "loan_amount": 250000.0,
        "loan_years": 5.0,
        "loan_months": 0.0,
        "monthly_payment": 4800.0,
    },
    "future_value": {
        "present_value": 0.0,
        "periodic_deposit": 0.0,
        "interest_rate": 0.0,
        "number_of_periods": 0.0,
    },
    "present_value": {
        "future_value": 100000.0,
        "periodic_payment": 1000.0,
        "number_of_periods": 10.0,
        "interest_rate": 5.0,
    },
    "income_tax": {
        "annual_income": 85000.0,
        "state_rate": 5.0,
    },
    "rmd": {
        "birth_year": 1951.0,
        "account_balance": 500000.0,
        "spouse_birth_year": 1951.0,
        "return_rate": 5.0,
    },
    "inflation": {
        "amount": 100.0,
        "start_year": 2000.0,
        "end_year": 2024.0,
        "flat_amount": 1000.0,
        "flat_rate": 3.0,
        "flat_years": 10.0,
    },
    "discount": {
        "original_price": 0.0,
        "discount_value": 0.0,
    },
    "roi": {
        "amount_invested": 50000.0,
        "amount_returned": 70000.0,
        "investment_years": 2.0,
    },
    "salary": {
        "amount": 0.0,
        "hours_per_week": 40.0,
        "days_per_week": 5.0,
        "holidays_per_year": 0.0,
        "vacation_days": 0.0,
    },
}


def form_value(calculator: str, field: str, raw: RawNumber, integer: bool = False) -> float:
    """Parse a field of the named calculator form, falling back to its default."""
    return number_or_default(raw, FORM_DEFAULTS[calculator][field], integer=integer)


def deduction_or_standard(raw: RawNumber, status: FilingStatus) -> float:
    """Deduction field; falls back to the standard deduction for ``status``."""
    return number_or_default(raw, STANDARD_DEDUCTION[status])


def year_or_current(raw: RawNumber, today: date) -> int:
    """Calendar year field; falls back to the year of ``today``."""
    return int(number_or_default(raw, today.year, integer=True))
