"""
Inflation Calculations

Historical purchasing power from a sparse CPI-U table, plus forward and
backward projection at a flat annual rate.
"""

from dataclasses import dataclass
from typing import Dict

from app.calculations.errors import InvalidInput
from app.calculations.tables import interpolate_table

# Annual average CPI-U; intermediate years are interpolated.
CPI_TABLE: Dict[int, float] = {
    1990: 130.7,
    1995: 152.4,
    2000: 172.2,
    2005: 195.3,
    2010: 218.1,
    2015: 237.0,
    2020: 258.8,
    2021: 271.0,
    2022: 292.7,
    2023: 304.7,
    2024: 315.2,
}


@dataclass(frozen=True)
class CPIInflationResult:
    amount: float
    start_year: int
    end_year: int
    equivalent_value: float
    total_inflation: float
    average_annual_inflation: float
    value_change: float


@dataclass(frozen=True)
class FlatRateResult:
    amount: float
    adjusted_value: float
    total_change: float


def cpi_for_year(year: int) -> float:
    return interpolate_table(CPI_TABLE, year)


def calculate_cpi_inflation(amount: float, start_year: int, end_year: int) -> CPIInflationResult:
    """
    What ``amount`` in ``start_year`` dollars is worth in ``end_year``.

    Total and average inflation are returned as decimals; the average is
    the simple (not compounded) per-year share of the total.

    Raises:
        InvalidInput: If start_year is not before end_year
    """
    if start_year >= end_year:
        raise InvalidInput(
            f"Start year must be before end year, got {start_year} and {end_year}"
        )

    start_cpi = cpi_for_year(start_year)
    end_cpi = cpi_for_year(end_year)

    equivalent = amount * end_cpi / start_cpi
    total_inflation = (end_cpi - start_cpi) / start_cpi

    return CPIInflationResult(
        amount=amount,
        start_year=start_year,
        end_year=end_year,
        equivalent_value=equivalent,
        total_inflation=total_inflation,
        average_annual_inflation=total_inflation / (end_year - start_year),
        value_change=equivalent - amount,
    )


def _compound(rate: float, years: float) -> float:
    if rate <= -1:
        raise InvalidInput(f"Inflation rate must be above -100%, got {rate * 100:g}%")
    if years < 0:
        raise InvalidInput(f"Years must be non-negative, got {years}")
    try:
        factor = (1 + rate) ** years
    except OverflowError:
        raise InvalidInput(f"Compounding {rate * 100:g}% over {years} years overflows")
    if factor == 0:
        raise InvalidInput(f"Compounding {rate * 100:g}% over {years} years underflows")
    return factor


def inflate_forward(amount: float, rate: float, years: float) -> FlatRateResult:
    """
    Future cost of ``amount`` after ``years`` of inflation at ``rate``.

    Raises:
        InvalidInput: If rate is -100% or lower, years is negative, or the
            growth factor leaves the float range
    """
    future = amount * _compound(rate, years)
    return FlatRateResult(
        amount=amount,
        adjusted_value=future,
        total_change=(future - amount) / amount if amount else 0.0,
    )


def deflate_backward(amount: float, rate: float, years: float) -> FlatRateResult:
    """Past cost of today's ``amount`` ``years`` ago at ``rate`` inflation."""
    past = amount / _compound(rate, years)
    return FlatRateResult(
        amount=amount,
        adjusted_value=past,
        total_change=(amount - past) / past if past else 0.0,
    )
