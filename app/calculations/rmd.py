"""
Required Minimum Distribution Calculations

Distribution periods come from the IRS Uniform Lifetime Table. When the
sole beneficiary is a spouse ten or more years younger, a simplified
joint-life adjustment is applied instead of the IRS Joint Life and Last
Survivor table. That adjustment is an approximation and is not
authoritative for filing purposes.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from app.calculations.errors import InvalidInput
from app.calculations.tables import interpolate_table

UNIFORM_LIFETIME_TABLE: Dict[int, float] = {
    72: 27.4, 73: 26.5, 74: 25.5, 75: 24.6, 76: 23.7, 77: 22.9, 78: 22.0, 79: 21.1,
    80: 20.2, 81: 19.4, 82: 18.5, 83: 17.7, 84: 16.8, 85: 16.0, 86: 15.2, 87: 14.4,
    88: 13.7, 89: 12.9, 90: 12.2, 91: 11.5, 92: 10.8, 93: 10.1, 94: 9.5, 95: 8.9,
    96: 8.4, 97: 7.8, 98: 7.3, 99: 6.8, 100: 6.4, 101: 6.0, 102: 5.6, 103: 5.2,
    104: 4.9, 105: 4.6, 106: 4.3, 107: 4.1, 108: 3.9, 109: 3.7, 110: 3.5,
    111: 3.4, 112: 3.3, 113: 3.1, 114: 3.0, 115: 2.9, 116: 2.8, 117: 2.7, 118: 2.5,
    119: 2.3, 120: 2.0,
}

UNIFORM_TABLE_NAME = "Uniform Lifetime Table"
JOINT_TABLE_NAME = "Joint Life and Last Survivor Expectancy Table (approximation)"

JOINT_LIFE_MIN_GAP = 10
JOINT_LIFE_MAX_EXCESS_GAP = 20
JOINT_LIFE_YEARS_PER_GAP_YEAR = 0.5

MAX_PROJECTION_YEARS = 46


@dataclass(frozen=True)
class RMDResult:
    age: int
    distribution_period: float
    rmd_amount: float
    remaining_balance: float
    table_used: str


@dataclass(frozen=True)
class RMDProjectionRow:
    age: int
    distribution_period: float
    starting_balance: float
    rmd_amount: float
    end_balance: float


def uniform_distribution_period(age: float) -> float:
    """Uniform Lifetime Table factor, interpolated and clamped to the table."""
    return interpolate_table(UNIFORM_LIFETIME_TABLE, age)


def distribution_period(age: int, spouse_age: Optional[int] = None) -> Tuple[float, str]:
    """
    Distribution period for an account owner.

    Args:
        age: Owner's age at the end of the distribution year
        spouse_age: Age of a spouse who is the sole beneficiary, if any

    Returns:
        Tuple of (distribution period, name of the table used)
    """
    base = uniform_distribution_period(age)

    if spouse_age is None:
        return base, UNIFORM_TABLE_NAME

    gap = age - spouse_age
    if gap < JOINT_LIFE_MIN_GAP:
        return base, UNIFORM_TABLE_NAME

    excess = min(gap - JOINT_LIFE_MIN_GAP, JOINT_LIFE_MAX_EXCESS_GAP)
    return base + excess * JOINT_LIFE_YEARS_PER_GAP_YEAR, JOINT_TABLE_NAME


def calculate_rmd(
    balance: float, age: int, spouse_age: Optional[int] = None
) -> RMDResult:
    """
    Calculate the required minimum distribution for one year.

    Args:
        balance: Account balance at the end of the prior year
        age: Owner's age in the distribution year
        spouse_age: Spouse beneficiary's age, if any

    Returns:
        RMDResult with amount and factor used
    """
    if balance < 0:
        raise InvalidInput(f"Account balance must be non-negative, got {balance}")

    period, table_used = distribution_period(age, spouse_age)
    amount = balance / period

    return RMDResult(
        age=age,
        distribution_period=period,
        rmd_amount=amount,
        remaining_balance=balance - amount,
        table_used=table_used,
    )


def project_rmds(
    start_age: int,
    balance: float,
    growth_rate: float,
    spouse_age: Optional[int] = None,
    max_years: int = MAX_PROJECTION_YEARS,
) -> List[RMDProjectionRow]:
    """
    Project RMDs year by year.

    Each year the RMD is withdrawn and the remainder grows at
    ``growth_rate`` before the next year. Stops when the balance is gone or
    after ``max_years`` years.

    Args:
        start_age: Owner's age in the first projected year
        balance: Starting account balance
        growth_rate: Annual return on the remaining balance as decimal
        spouse_age: Spouse beneficiary's age in the first year, if any
        max_years: Maximum number of years to project

    Returns:
        List of projection rows, one per year
    """
    if balance < 0:
        raise InvalidInput(f"Account balance must be non-negative, got {balance}")

    projection = []
    current = balance

    for year in range(max_years):
        age = start_age + year
        current_spouse_age = spouse_age + year if spouse_age is not None else None

        period, _ = distribution_period(age, current_spouse_age)
        amount = current / period
        end_balance = (current - amount) * (1 + growth_rate)

        projection.append(
            RMDProjectionRow(
                age=age,
                distribution_period=period,
                starting_balance=current,
                rmd_amount=amount,
                end_balance=end_balance,
            )
        )

        current = end_balance
        if current <= 0:
            break

    return projection
