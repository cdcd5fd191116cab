"""
Return on Investment Calculations
"""

from dataclasses import dataclass

from app.calculations.errors import InvalidInput, InvalidTerm


@dataclass(frozen=True)
class ROIResult:
    amount_invested: float
    amount_returned: float
    gain: float
    roi: float
    annualized_roi: float
    years: float


def calculate_roi(invested: float, returned: float, years: float) -> ROIResult:
    """
    Calculate simple and annualized ROI.

    ROI = gain / invested; annualized = (1 + ROI)^(1 / years) - 1.

    Args:
        invested: Amount invested
        returned: Amount returned at the end
        years: Length of the investment in years

    Returns:
        ROIResult with rates as decimals (0.4 for 40%)
    """
    if invested <= 0:
        raise InvalidInput(f"Amount invested must be positive, got {invested}")
    if returned < 0:
        raise InvalidInput(f"Amount returned must be non-negative, got {returned}")
    if years <= 0:
        raise InvalidTerm(f"Investment length must be positive, got {years}")

    gain = returned - invested
    roi = gain / invested

    return ROIResult(
        amount_invested=invested,
        amount_returned=returned,
        gain=gain,
        roi=roi,
        annualized_roi=(1 + roi) ** (1 / years) - 1,
        years=years,
    )
