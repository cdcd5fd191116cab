"""
Annuity Present and Future Value

Present/future value of lump sums and level payment streams, with payments
either at the end of each period (ordinary annuity) or at the start
(annuity due).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from app.calculations.errors import InvalidInput, InvalidTerm


class PaymentTiming(str, Enum):
    """When in each period the payment is made."""

    END = "end"
    BEGINNING = "beginning"


@dataclass(frozen=True)
class AnnuityRow:
    """One period of an accumulation schedule."""

    period: int
    starting_balance: float
    deposit: float
    interest: float
    ending_balance: float


@dataclass(frozen=True)
class AnnuityResult:
    """Values and schedule for a lump sum and/or payment stream."""

    present_value: float
    future_value: float
    total_principal: float
    total_interest: float
    periods: int
    schedule: List[AnnuityRow] = field(default_factory=list)


def _check_periods(periods: int) -> None:
    if periods <= 0:
        raise InvalidTerm(f"Number of periods must be positive, got {periods}")


def _check_rate(rate: float) -> None:
    if rate < 0:
        raise InvalidInput(f"Interest rate must be non-negative, got {rate}")


def _growth_factor(rate: float, periods: int) -> float:
    try:
        return (1 + rate) ** periods
    except OverflowError:
        raise InvalidTerm(f"Compounding over {periods} periods overflows")


def future_value_of_lump_sum(amount: float, rate: float, periods: int) -> float:
    """Compound ``amount`` forward ``periods`` periods."""
    return amount * _growth_factor(rate, periods)


def present_value_of_lump_sum(amount: float, rate: float, periods: int) -> float:
    """Discount ``amount`` back ``periods`` periods."""
    return amount / _growth_factor(rate, periods)


def future_value_of_annuity(
    payment: float,
    rate: float,
    periods: int,
    timing: PaymentTiming = PaymentTiming.END,
) -> float:
    """
    Future value of a level payment stream.

    Ordinary: PMT * ((1 + r)^n - 1) / r. Annuity due multiplies by (1 + r).

    Args:
        payment: Payment per period
        rate: Interest rate per period as decimal
        periods: Number of periods
        timing: END for ordinary annuity, BEGINNING for annuity due

    Returns:
        Value of all payments at the end of the last period
    """
    if rate == 0:
        return payment * periods

    value = payment * (_growth_factor(rate, periods) - 1) / rate
    if timing == PaymentTiming.BEGINNING:
        value *= 1 + rate
    return value


def present_value_of_annuity(
    payment: float,
    rate: float,
    periods: int,
    timing: PaymentTiming = PaymentTiming.END,
) -> float:
    """
    Present value of a level payment stream.

    Ordinary: PMT * (1 - (1 + r)^-n) / r. Annuity due multiplies by (1 + r).
    """
    if rate == 0:
        return payment * periods

    value = payment * (1 - 1 / _growth_factor(rate, periods)) / rate
    if timing == PaymentTiming.BEGINNING:
        value *= 1 + rate
    return value


def accumulate(
    starting_balance: float,
    deposit: float,
    rate: float,
    periods: int,
    timing: PaymentTiming = PaymentTiming.END,
) -> List[AnnuityRow]:
    """
    Build a period-by-period accumulation schedule.

    With BEGINNING timing the deposit lands before the period's interest is
    accrued; with END timing interest accrues first and the deposit follows.
    """
    schedule = []
    balance = starting_balance

    for period in range(1, periods + 1):
        period_start = balance

        if timing == PaymentTiming.BEGINNING:
            balance += deposit
            interest = balance * rate
            balance += interest
        else:
            interest = balance * rate
            balance += interest
            balance += deposit

        schedule.append(
            AnnuityRow(
                period=period,
                starting_balance=period_start,
                deposit=deposit,
                interest=interest,
                ending_balance=balance,
            )
        )

    return schedule


def calculate_future_value(
    present_value: float,
    payment: float,
    rate: float,
    periods: int,
    timing: PaymentTiming = PaymentTiming.END,
) -> AnnuityResult:
    """
    Future value of a starting balance plus periodic deposits.

    Args:
        present_value: Starting balance
        payment: Deposit per period
        rate: Interest rate per period as decimal
        periods: Number of periods
        timing: When deposits are made

    Returns:
        AnnuityResult with the combined future value and schedule

    Raises:
        InvalidTerm: If periods is not positive or compounding overflows
        InvalidInput: If rate is negative
    """
    _check_periods(periods)
    _check_rate(rate)

    total_fv = future_value_of_lump_sum(present_value, rate, periods) + (
        future_value_of_annuity(payment, rate, periods, timing)
    )
    total_deposits = payment * periods

    return AnnuityResult(
        present_value=present_value,
        future_value=total_fv,
        total_principal=total_deposits,
        total_interest=total_fv - present_value - total_deposits,
        periods=periods,
        schedule=accumulate(present_value, payment, rate, periods, timing),
    )


def calculate_present_value_of_lump_sum(
    future_value: float, rate: float, periods: int
) -> AnnuityResult:
    """Present value of a single future amount, with its growth schedule."""
    _check_periods(periods)
    _check_rate(rate)

    pv = present_value_of_lump_sum(future_value, rate, periods)

    return AnnuityResult(
        present_value=pv,
        future_value=future_value,
        total_principal=pv,
        total_interest=future_value - pv,
        periods=periods,
        schedule=accumulate(pv, 0.0, rate, periods),
    )


def calculate_present_value_of_payments(
    payment: float,
    rate: float,
    periods: int,
    timing: PaymentTiming = PaymentTiming.END,
) -> AnnuityResult:
    """Present and future value of a payment stream, with its schedule."""
    _check_periods(periods)
    _check_rate(rate)

    fv = future_value_of_annuity(payment, rate, periods, timing)
    total_principal = payment * periods

    return AnnuityResult(
        present_value=present_value_of_annuity(payment, rate, periods, timing),
        future_value=fv,
        total_principal=total_principal,
        total_interest=fv - total_principal,
        periods=periods,
        schedule=accumulate(0.0, payment, rate, periods, timing),
    )
