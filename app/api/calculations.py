"""
Financial calculation API endpoints.

Each endpoint accepts the raw form fields of one calculator, substitutes
defaults for anything unparseable, and returns the calculated results
together with display-formatted values.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.api.formatting import format_currency, format_percent, preview_schedule
from app.calculations import (
    amortization,
    annuity,
    discount,
    inflation,
    mortgage,
    rate_solver,
    rmd,
    roi,
    salary,
    student_loan,
    tax,
)
from app.calculations.errors import CalculationError
from app.calculations.inputs import deduction_or_standard, form_value, year_or_current

logger = logging.getLogger(__name__)

router = APIRouter()

RawField = Optional[Union[float, str]]


def get_today() -> date:
    """Calculation date; overridden in tests to pin schedule dates."""
    return date.today()


def _bad_request(calculator: str, exc: CalculationError) -> HTTPException:
    logger.info(f"{calculator} calculation rejected: {exc}")
    return HTTPException(status_code=400, detail=str(exc))


def _schedule_payload(schedule: list) -> dict:
    preview = preview_schedule(schedule)
    return {
        "rows": [asdict(row) for row in preview.rows],
        "omitted": preview.omitted,
        "note": preview.note,
        "total_rows": len(schedule),
    }


# ============================================================================
# LOANS
# ============================================================================


class MortgageInput(BaseModel):
    """Input for mortgage calculation."""

    home_price: RawField = None
    down_payment: RawField = None
    loan_term_years: RawField = None
    interest_rate: RawField = None  # percent
    property_tax: RawField = None  # monthly
    home_insurance: RawField = None  # monthly


@router.post("/mortgage")
async def calculate_mortgage(inputs: MortgageInput, today: date = Depends(get_today)):
    """Monthly payment, totals and amortization schedule for a mortgage."""
    try:
        result = mortgage.calculate_mortgage(
            home_price=form_value("mortgage", "home_price", inputs.home_price),
            down_payment=form_value("mortgage", "down_payment", inputs.down_payment),
            term_years=form_value("mortgage", "loan_term_years", inputs.loan_term_years),
            annual_rate=form_value("mortgage", "interest_rate", inputs.interest_rate) / 100,
            today=today,
            property_tax=form_value("mortgage", "property_tax", inputs.property_tax),
            insurance=form_value("mortgage", "home_insurance", inputs.home_insurance),
        )
    except CalculationError as e:
        raise _bad_request("mortgage", e)

    summary = asdict(result)
    summary.pop("schedule")

    return {
        "result": summary,
        "formatted": {
            "monthly_payment": format_currency(result.monthly_payment),
            "total_monthly": format_currency(result.total_monthly),
            "total_interest": format_currency(result.total_interest),
            "total_out_of_pocket": format_currency(result.total_out_of_pocket),
            "payoff_date": result.payoff_date.strftime("%B %Y"),
        },
        "schedule": _schedule_payload(result.schedule),
    }


class DownPaymentInput(BaseModel):
    """Input for down payment calculation."""

    home_price: RawField = None
    down_payment_percent: RawField = None
    closing_costs_percent: RawField = None
    interest_rate: RawField = None  # percent
    loan_term_years: RawField = None


@router.post("/down-payment")
async def calculate_down_payment(inputs: DownPaymentInput):
    """Upfront cash and monthly payment for a home purchase."""
    try:
        result = mortgage.calculate_down_payment(
            home_price=form_value("down_payment", "home_price", inputs.home_price),
            down_payment_percent=form_value(
                "down_payment", "down_payment_percent", inputs.down_payment_percent
            ),
            closing_costs_percent=form_value(
                "down_payment", "closing_costs_percent", inputs.closing_costs_percent
            ),
            annual_rate=form_value("down_payment", "interest_rate", inputs.interest_rate) / 100,
            term_years=form_value("down_payment", "loan_term_years", inputs.loan_term_years),
        )
    except CalculationError as e:
        raise _bad_request("down payment", e)

    return {
        "result": asdict(result),
        "formatted": {
            "down_payment": format_currency(result.down_payment, 0),
            "closing_costs": format_currency(result.closing_costs, 0),
            "loan_amount": format_currency(result.loan_amount, 0),
            "monthly_payment": format_currency(result.monthly_payment, 0),
            "total_upfront_cash": format_currency(result.total_upfront_cash, 0),
        },
    }


class StudentLoanInput(BaseModel):
    """Input for student loan calculation."""

    loan_balance: RawField = None
    loan_term_years: RawField = None
    interest_rate: RawField = None  # percent
    extra_monthly_payment: RawField = None
    extra_yearly_payment: RawField = None
    one_time_payment: RawField = None


@router.post("/student-loan")
async def calculate_student_loan(inputs: StudentLoanInput, today: date = Depends(get_today)):
    """Repayment schedule with optional extra payments."""
    try:
        result = student_loan.calculate_student_loan(
            balance=form_value("student_loan", "loan_balance", inputs.loan_balance),
            term_years=form_value("student_loan", "loan_term_years", inputs.loan_term_years),
            annual_rate=form_value("student_loan", "interest_rate", inputs.interest_rate) / 100,
            today=today,
            extra_monthly=form_value(
                "student_loan", "extra_monthly_payment", inputs.extra_monthly_payment
            ),
            extra_yearly=form_value(
                "student_loan", "extra_yearly_payment", inputs.extra_yearly_payment
            ),
            one_time=form_value("student_loan", "one_time_payment", inputs.one_time_payment),
        )
    except CalculationError as e:
        raise _bad_request("student loan", e)

    summary = asdict(result)
    summary.pop("schedule")

    return {
        "result": summary,
        "formatted": {
            "monthly_payment": format_currency(result.monthly_payment),
            "total_paid": format_currency(result.total_paid),
            "total_interest": format_currency(result.total_interest),
            "interest_savings": format_currency(result.interest_savings),
            "payoff_date": result.payoff_date.strftime("%B %Y"),
            "new_payoff_date": result.new_payoff_date.strftime("%B %Y"),
        },
        "schedule": _schedule_payload(result.schedule),
    }


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: RawField = None
    interest_rate: RawField = None  # percent
    loan_term_years: RawField = None


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput, today: date = Depends(get_today)):
    """Generate loan amortization schedule."""
    term_years = form_value("amortization", "loan_term_years", inputs.loan_term_years)

    try:
        loan = amortization.calculate_loan(
            principal=form_value("amortization", "principal", inputs.principal),
            annual_rate=form_value("amortization", "interest_rate", inputs.interest_rate) / 100,
            term_months=amortization.term_in_months(term_years),
            today=today,
        )
    except CalculationError as e:
        raise _bad_request("amortization", e)

    return {
        "payment": loan.payment,
        "total_paid": loan.total_paid,
        "total_interest": loan.total_interest,
        "total_principal": sum(row.principal for row in loan.schedule),
        "payoff_date": loan.payoff_date,
        "schedule": _schedule_payload(loan.schedule),
    }


class InterestRateInput(BaseModel):
    """Input for interest rate calculation."""

    loan_amount: RawField = None
    loan_years: RawField = None
    loan_months: RawField = None
    monthly_payment: RawField = None


class InterestRateResponse(BaseModel):
    """Response with the solved interest rate."""

    annual_rate_percent: float
    converged: bool
    iterations: int
    loan_amount: float
    monthly_payment: float
    term_months: int
    total_payments: float
    total_interest: float
    formatted_rate: str


@router.post("/interest-rate", response_model=InterestRateResponse)
async def calculate_interest_rate(inputs: InterestRateInput):
    """Solve for the annual rate implied by a loan's payment."""
    try:
        result = rate_solver.calculate_interest_rate(
            principal=form_value("interest_rate", "loan_amount", inputs.loan_amount),
            years=form_value("interest_rate", "loan_years", inputs.loan_years),
            months=form_value("interest_rate", "loan_months", inputs.loan_months),
            payment=form_value("interest_rate", "monthly_payment", inputs.monthly_payment),
        )
    except CalculationError as e:
        raise _bad_request("interest rate", e)

    return InterestRateResponse(
        annual_rate_percent=result.annual_rate_percent,
        converged=result.converged,
        iterations=result.solution.iterations,
        loan_amount=result.loan_amount,
        monthly_payment=result.monthly_payment,
        term_months=result.term_months,
        total_payments=result.total_payments,
        total_interest=result.total_interest,
        formatted_rate=format_percent(result.annual_rate_percent / 100, 3),
    )


# ============================================================================
# TIME VALUE OF MONEY
# ============================================================================


class FutureValueInput(BaseModel):
    """Input for future value calculation."""

    present_value: RawField = None
    periodic_deposit: RawField = None
    interest_rate: RawField = None  # percent per period
    number_of_periods: RawField = None
    deposit_timing: annuity.PaymentTiming = annuity.PaymentTiming.END


@router.post("/future-value")
async def calculate_future_value(inputs: FutureValueInput):
    """Future value of a starting balance plus periodic deposits."""
    try:
        result = annuity.calculate_future_value(
            present_value=form_value("future_value", "present_value", inputs.present_value),
            payment=form_value("future_value", "periodic_deposit", inputs.periodic_deposit),
            rate=form_value("future_value", "interest_rate", inputs.interest_rate) / 100,
            periods=int(
                form_value(
                    "future_value", "number_of_periods", inputs.number_of_periods, integer=True
                )
            ),
            timing=inputs.deposit_timing,
        )
    except CalculationError as e:
        raise _bad_request("future value", e)

    summary = asdict(result)
    summary.pop("schedule")

    return {
        "result": summary,
        "formatted": {
            "future_value": format_currency(result.future_value),
            "total_deposits": format_currency(result.total_principal),
            "total_interest": format_currency(result.total_interest),
        },
        "schedule": _schedule_payload(result.schedule),
    }


class PresentValueInput(BaseModel):
    """Input for present value calculation (lump sum and payment stream)."""

    future_value: RawField = None
    periodic_payment: RawField = None
    number_of_periods: RawField = None
    interest_rate: RawField = None  # percent per period
    payment_timing: annuity.PaymentTiming = annuity.PaymentTiming.END


@router.post("/present-value")
async def calculate_present_value(inputs: PresentValueInput):
    """Present value of a future lump sum and of a payment stream."""
    rate = form_value("present_value", "interest_rate", inputs.interest_rate) / 100
    periods = int(form_value("present_value", "number_of_periods", inputs.number_of_periods))

    try:
        lump_sum = annuity.calculate_present_value_of_lump_sum(
            future_value=form_value("present_value", "future_value", inputs.future_value),
            rate=rate,
            periods=periods,
        )
        payments = annuity.calculate_present_value_of_payments(
            payment=form_value("present_value", "periodic_payment", inputs.periodic_payment),
            rate=rate,
            periods=periods,
            timing=inputs.payment_timing,
        )
    except CalculationError as e:
        raise _bad_request("present value", e)

    response = {}
    for name, result in (("lump_sum", lump_sum), ("payments", payments)):
        summary = asdict(result)
        summary.pop("schedule")
        response[name] = {
            "result": summary,
            "formatted": {
                "present_value": format_currency(result.present_value),
                "future_value": format_currency(result.future_value),
                "total_interest": format_currency(result.total_interest),
            },
            "schedule": _schedule_payload(result.schedule),
        }
    return response


# ============================================================================
# TAX AND RETIREMENT
# ============================================================================


class IncomeTaxInput(BaseModel):
    """Input for income tax calculation."""

    annual_income: RawField = None
    filing_status: tax.FilingStatus = tax.FilingStatus.SINGLE
    deductions: RawField = None
    state_rate: RawField = None  # percent


@router.post("/income-tax")
async def calculate_income_tax(inputs: IncomeTaxInput):
    """Federal, state and payroll tax with take-home pay."""
    status = inputs.filing_status

    try:
        result = tax.calculate_income_tax(
            gross_income=form_value("income_tax", "annual_income", inputs.annual_income),
            status=status,
            deduction=deduction_or_standard(inputs.deductions, status),
            state_rate=form_value("income_tax", "state_rate", inputs.state_rate) / 100,
        )
    except CalculationError as e:
        raise _bad_request("income tax", e)

    return {
        "tax_year": tax.TAX_YEAR,
        "result": asdict(result),
        "formatted": {
            "federal_tax": format_currency(result.federal_tax),
            "total_tax": format_currency(result.total_tax),
            "take_home_pay": format_currency(result.take_home_pay),
            "effective_rate": format_percent(result.effective_rate),
            "marginal_rate": format_percent(result.marginal_rate),
        },
    }


class RMDInput(BaseModel):
    """Input for required minimum distribution calculation."""

    birth_year: RawField = None
    rmd_year: RawField = None
    account_balance: RawField = None
    has_spouse_beneficiary: bool = False
    spouse_birth_year: RawField = None
    return_rate: RawField = None  # percent


@router.post("/rmd")
async def calculate_rmd(inputs: RMDInput, today: date = Depends(get_today)):
    """This year's RMD and a year-by-year projection."""
    birth_year = int(form_value("rmd", "birth_year", inputs.birth_year, integer=True))
    rmd_year = year_or_current(inputs.rmd_year, today)
    age = rmd_year - birth_year

    spouse_age = None
    if inputs.has_spouse_beneficiary:
        spouse_birth_year = int(
            form_value("rmd", "spouse_birth_year", inputs.spouse_birth_year, integer=True)
        )
        spouse_age = rmd_year - spouse_birth_year

    balance = form_value("rmd", "account_balance", inputs.account_balance)
    growth = form_value("rmd", "return_rate", inputs.return_rate) / 100

    try:
        result = rmd.calculate_rmd(balance, age, spouse_age)
        projection = rmd.project_rmds(age, balance, growth, spouse_age)
    except CalculationError as e:
        raise _bad_request("rmd", e)

    return {
        "result": asdict(result),
        "formatted": {
            "rmd_amount": format_currency(result.rmd_amount),
            "remaining_balance": format_currency(result.remaining_balance),
            "distribution_period": f"{result.distribution_period:.1f}",
        },
        "projection": _schedule_payload(projection),
    }


# ============================================================================
# EVERYDAY CALCULATORS
# ============================================================================


class InflationInput(BaseModel):
    """Input for the historical CPI and flat-rate inflation calculators."""

    amount: RawField = None
    start_year: RawField = None
    end_year: RawField = None
    forward_amount: RawField = None
    forward_rate: RawField = None  # percent
    forward_years: RawField = None
    backward_amount: RawField = None
    backward_rate: RawField = None  # percent
    backward_years: RawField = None


def _flat_rate_section(project, amount: RawField, rate: RawField, years: RawField):
    """Run one flat-rate projection; a rejected input blanks only its section."""
    try:
        result = project(
            amount=form_value("inflation", "flat_amount", amount),
            rate=form_value("inflation", "flat_rate", rate) / 100,
            years=form_value("inflation", "flat_years", years),
        )
    except CalculationError as e:
        logger.info(f"inflation calculation rejected: {e}")
        return None
    return asdict(result)


@router.post("/inflation")
async def calculate_inflation(inputs: InflationInput):
    """Historical CPI adjustment plus forward and backward flat-rate projections."""
    historical = None
    try:
        cpi = inflation.calculate_cpi_inflation(
            amount=form_value("inflation", "amount", inputs.amount),
            start_year=int(form_value("inflation", "start_year", inputs.start_year, integer=True)),
            end_year=int(form_value("inflation", "end_year", inputs.end_year, integer=True)),
        )
        historical = {
            "result": asdict(cpi),
            "formatted": {
                "equivalent_value": format_currency(cpi.equivalent_value),
                "total_inflation": format_percent(cpi.total_inflation),
                "average_annual_inflation": format_percent(cpi.average_annual_inflation),
            },
        }
    except CalculationError as e:
        logger.info(f"inflation calculation rejected: {e}")

    return {
        "historical": historical,
        "forward": _flat_rate_section(
            inflation.inflate_forward,
            inputs.forward_amount,
            inputs.forward_rate,
            inputs.forward_years,
        ),
        "backward": _flat_rate_section(
            inflation.deflate_backward,
            inputs.backward_amount,
            inputs.backward_rate,
            inputs.backward_years,
        ),
    }


class DiscountInput(BaseModel):
    """Input for discount calculation."""

    original_price: RawField = None
    discount_type: discount.DiscountKind = discount.DiscountKind.PERCENT
    discount_value: RawField = None


@router.post("/discount")
async def calculate_discount(inputs: DiscountInput):
    """Sale price after a percentage or fixed discount."""
    try:
        result = discount.calculate_discount(
            price=form_value("discount", "original_price", inputs.original_price),
            value=form_value("discount", "discount_value", inputs.discount_value),
            kind=inputs.discount_type,
        )
    except CalculationError as e:
        raise _bad_request("discount", e)

    return {
        "result": asdict(result),
        "formatted": {
            "discount_amount": format_currency(result.discount_amount),
            "final_price": format_currency(result.final_price),
            "discount_percent": f"{result.discount_percent:.2f}%",
        },
    }


class ROIInput(BaseModel):
    """Input for ROI calculation."""

    amount_invested: RawField = None
    amount_returned: RawField = None
    investment_years: RawField = None


@router.post("/roi")
async def calculate_roi(inputs: ROIInput):
    """Return on investment, total and annualized."""
    try:
        result = roi.calculate_roi(
            invested=form_value("roi", "amount_invested", inputs.amount_invested),
            returned=form_value("roi", "amount_returned", inputs.amount_returned),
            years=form_value("roi", "investment_years", inputs.investment_years),
        )
    except CalculationError as e:
        raise _bad_request("roi", e)

    return {
        "result": asdict(result),
        "formatted": {
            "gain": format_currency(result.gain),
            "roi": format_percent(result.roi),
            "annualized_roi": format_percent(result.annualized_roi),
        },
    }


class SalaryInput(BaseModel):
    """Input for salary conversion."""

    amount: RawField = None
    pay_frequency: salary.PayFrequency = salary.PayFrequency.HOURLY
    hours_per_week: RawField = None
    days_per_week: RawField = None
    holidays_per_year: RawField = None
    vacation_days: RawField = None


@router.post("/salary")
async def calculate_salary(inputs: SalaryInput):
    """Convert pay between hourly, daily, weekly, monthly and annual figures."""
    try:
        result = salary.convert_salary(
            amount=form_value("salary", "amount", inputs.amount),
            frequency=inputs.pay_frequency,
            hours_per_week=form_value("salary", "hours_per_week", inputs.hours_per_week),
            days_per_week=form_value("salary", "days_per_week", inputs.days_per_week),
            holidays=form_value("salary", "holidays_per_year", inputs.holidays_per_year),
            vacation_days=form_value("salary", "vacation_days", inputs.vacation_days),
        )
    except CalculationError as e:
        raise _bad_request("salary", e)

    return asdict(result)
