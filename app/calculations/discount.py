"""
Discount Calculations
"""

from dataclasses import dataclass
from enum import Enum

from app.calculations.errors import InvalidInput


class DiscountKind(str, Enum):
    PERCENT = "percent"
    FIXED = "fixed"


@dataclass(frozen=True)
class DiscountResult:
    original_price: float
    discount_amount: float
    discount_percent: float
    final_price: float


def calculate_discount(
    price: float, value: float, kind: DiscountKind = DiscountKind.PERCENT
) -> DiscountResult:
    """
    Apply a percentage or fixed-amount discount to a price.

    Args:
        price: Original price
        value: Percent off (e.g., 20 for 20%) or amount off, per ``kind``
        kind: How ``value`` is interpreted

    Returns:
        DiscountResult; the final price never goes below zero
    """
    if price < 0 or value < 0:
        raise InvalidInput("Price and discount must be non-negative")

    if kind == DiscountKind.PERCENT:
        amount = price * value / 100
        percent = value
    else:
        amount = value
        percent = value / price * 100 if price > 0 else 0.0

    return DiscountResult(
        original_price=price,
        discount_amount=amount,
        discount_percent=percent,
        final_price=max(0.0, price - amount),
    )
