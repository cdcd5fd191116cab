"""
Salary Conversion

Converts pay quoted at one frequency into every other frequency, both
unadjusted (52 working weeks) and adjusted for holidays and vacation.
"""

from dataclasses import dataclass
from enum import Enum

from app.calculations.errors import InvalidInput

WEEKS_PER_YEAR = 52


class PayFrequency(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


@dataclass(frozen=True)
class PayBreakdown:
    hourly: float
    daily: float
    weekly: float
    biweekly: float
    semimonthly: float
    monthly: float
    quarterly: float
    annual: float


@dataclass(frozen=True)
class SalaryResult:
    unadjusted: PayBreakdown
    adjusted: PayBreakdown
    total_working_days: float
    adjusted_working_days: float


def to_hourly_rate(
    amount: float, frequency: PayFrequency, hours_per_week: float, days_per_week: float
) -> float:
    """Hourly equivalent of ``amount`` paid at ``frequency``."""
    hours_per_year = hours_per_week * WEEKS_PER_YEAR

    if frequency == PayFrequency.HOURLY:
        return amount
    if frequency == PayFrequency.DAILY:
        return amount / (hours_per_week / days_per_week)
    if frequency == PayFrequency.WEEKLY:
        return amount / hours_per_week
    if frequency == PayFrequency.BIWEEKLY:
        return amount / (hours_per_week * 2)
    if frequency == PayFrequency.SEMIMONTHLY:
        return amount * 24 / hours_per_year
    if frequency == PayFrequency.MONTHLY:
        return amount * 12 / hours_per_year
    if frequency == PayFrequency.QUARTERLY:
        return amount * 4 / hours_per_year
    return amount / hours_per_year


def _from_annual(hourly: float, daily: float, annual: float) -> PayBreakdown:
    weekly = annual / WEEKS_PER_YEAR
    return PayBreakdown(
        hourly=hourly,
        daily=daily,
        weekly=weekly,
        biweekly=weekly * 2,
        semimonthly=annual / 24,
        monthly=annual / 12,
        quarterly=annual / 4,
        annual=annual,
    )


def convert_salary(
    amount: float,
    frequency: PayFrequency,
    hours_per_week: float = 40,
    days_per_week: float = 5,
    holidays: float = 0,
    vacation_days: float = 0,
) -> SalaryResult:
    """
    Convert pay between frequencies.

    Args:
        amount: Pay amount at ``frequency``
        frequency: Frequency ``amount`` is quoted at
        hours_per_week: Working hours per week
        days_per_week: Working days per week
        holidays: Paid holidays per year
        vacation_days: Paid vacation days per year

    Returns:
        SalaryResult with unadjusted and time-off adjusted breakdowns
    """
    if amount < 0:
        raise InvalidInput(f"Pay amount must be non-negative, got {amount}")
    if hours_per_week <= 0 or days_per_week <= 0:
        raise InvalidInput("Hours and days per week must be positive")

    hours_per_day = hours_per_week / days_per_week
    hourly = to_hourly_rate(amount, frequency, hours_per_week, days_per_week)
    daily = hourly * hours_per_day

    total_days = WEEKS_PER_YEAR * days_per_week
    adjusted_days = total_days - holidays - vacation_days

    return SalaryResult(
        unadjusted=_from_annual(hourly, daily, hourly * hours_per_week * WEEKS_PER_YEAR),
        adjusted=_from_annual(hourly, daily, hourly * hours_per_day * adjusted_days),
        total_working_days=total_days,
        adjusted_working_days=adjusted_days,
    )
