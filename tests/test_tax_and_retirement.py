"""
Tests for income tax, RMD and inflation calculations.
"""

import math

import pytest

from app.calculations.errors import InvalidInput
from app.calculations.inflation import (
    CPI_TABLE,
    calculate_cpi_inflation,
    cpi_for_year,
    deflate_backward,
    inflate_forward,
)
from app.calculations.rmd import (
    JOINT_TABLE_NAME,
    UNIFORM_LIFETIME_TABLE,
    UNIFORM_TABLE_NAME,
    calculate_rmd,
    distribution_period,
    project_rmds,
    uniform_distribution_period,
)
from app.calculations.tables import interpolate_table
from app.calculations.tax import (
    FEDERAL_BRACKETS,
    FilingStatus,
    TaxBracket,
    calculate_bracket_tax,
    calculate_capped_tax,
    calculate_income_tax,
    calculate_payroll_taxes,
    calculate_surtax,
)

SINGLE = FEDERAL_BRACKETS[FilingStatus.SINGLE]


class TestBracketTax:
    """Test progressive bracket accumulation."""

    def test_single_filer_50k(self):
        tax, marginal = calculate_bracket_tax(50000, SINGLE)
        expected = 1160 + (47150 - 11600) * 0.12 + (50000 - 47150) * 0.22
        assert tax == pytest.approx(expected)
        assert tax == pytest.approx(6053.00)
        assert marginal == 0.22

    def test_zero_income(self):
        assert calculate_bracket_tax(0, SINGLE) == (0.0, 0.0)

    def test_within_first_bracket(self):
        tax, marginal = calculate_bracket_tax(10000, SINGLE)
        assert tax == pytest.approx(1000)
        assert marginal == 0.10

    def test_top_bracket_is_unbounded(self):
        tax, marginal = calculate_bracket_tax(1_000_000, SINGLE)
        below_top, _ = calculate_bracket_tax(609350, SINGLE)
        assert marginal == 0.37
        assert tax == pytest.approx(below_top + (1_000_000 - 609350) * 0.37)

    @pytest.mark.parametrize("status", list(FilingStatus))
    def test_continuous_at_boundaries(self, status):
        """Tax just below a boundary approaches tax at it; marginal rate is the lower bracket."""
        brackets = FEDERAL_BRACKETS[status]
        for bracket in brackets[:-1]:
            at_bound, marginal = calculate_bracket_tax(bracket.upper_bound, brackets)
            just_below, _ = calculate_bracket_tax(bracket.upper_bound - 0.01, brackets)
            assert at_bound - just_below == pytest.approx(0.01 * bracket.rate, abs=1e-6)
            assert marginal == bracket.rate

    @pytest.mark.parametrize("status", list(FilingStatus))
    def test_monotonic(self, status):
        brackets = FEDERAL_BRACKETS[status]
        previous = -1.0
        for income in range(0, 1_000_001, 2500):
            tax, _ = calculate_bracket_tax(income, brackets)
            assert tax >= previous
            previous = tax

    def test_custom_table(self):
        brackets = [TaxBracket(100, 0.0), TaxBracket(math.inf, 0.5)]
        assert calculate_bracket_tax(300, brackets) == (100.0, 0.5)


class TestPayrollTaxes:
    """Test flat payroll taxes."""

    def test_capped_tax(self):
        assert calculate_capped_tax(100000, 0.062, 168600) == pytest.approx(6200)
        assert calculate_capped_tax(200000, 0.062, 168600) == pytest.approx(10453.2)

    def test_surtax(self):
        assert calculate_surtax(150000, 0.009, 200000) == 0.0
        assert calculate_surtax(300000, 0.009, 200000) == pytest.approx(900)

    def test_additional_medicare_threshold_by_status(self):
        single = calculate_payroll_taxes(300000, FilingStatus.SINGLE)
        married = calculate_payroll_taxes(300000, FilingStatus.MARRIED)
        assert single.medicare == pytest.approx(300000 * 0.0145 + 100000 * 0.009)
        assert married.medicare == pytest.approx(300000 * 0.0145 + 50000 * 0.009)
        assert single.social_security == pytest.approx(168600 * 0.062)


class TestIncomeTax:
    """Test the full income tax breakdown."""

    def test_default_deduction_is_standard(self):
        result = calculate_income_tax(85000, FilingStatus.SINGLE)
        assert result.deduction == 14600
        assert result.taxable_income == 70400

    def test_totals_add_up(self):
        result = calculate_income_tax(85000, FilingStatus.MARRIED, state_rate=0.05)
        assert result.state_tax == pytest.approx(4250)
        assert result.total_tax == pytest.approx(
            result.federal_tax + result.state_tax + result.social_security + result.medicare
        )
        assert result.take_home_pay == pytest.approx(85000 - result.total_tax)
        assert result.monthly_take_home == pytest.approx(result.take_home_pay / 12)
        assert result.biweekly_take_home == pytest.approx(result.take_home_pay / 26)
        assert result.effective_rate == pytest.approx(result.total_tax / 85000)

    def test_income_below_deduction(self):
        result = calculate_income_tax(10000, FilingStatus.SINGLE, state_rate=0.0)
        assert result.taxable_income == 0
        assert result.federal_tax == 0
        assert result.marginal_rate == 0

    def test_zero_income(self):
        result = calculate_income_tax(0, FilingStatus.SINGLE)
        assert result.total_tax == 0
        assert result.effective_rate == 0

    def test_negative_income(self):
        with pytest.raises(InvalidInput):
            calculate_income_tax(-1, FilingStatus.SINGLE)


class TestTableInterpolation:
    """Test sparse table lookup."""

    def test_exact_keys_return_stored_values(self):
        for age, factor in UNIFORM_LIFETIME_TABLE.items():
            assert interpolate_table(UNIFORM_LIFETIME_TABLE, age) == factor
        for year, cpi in CPI_TABLE.items():
            assert cpi_for_year(year) == cpi

    def test_midpoint_is_mean(self):
        table = {70: 20.0, 80: 10.0}
        assert interpolate_table(table, 75) == pytest.approx(15.0)
        assert cpi_for_year(2005 - 2.5) == pytest.approx((172.2 + 195.3) / 2)

    def test_linear_between_keys(self):
        # 2001 is a fifth of the way from 2000 to 2005
        assert cpi_for_year(2001) == pytest.approx(172.2 + 0.2 * (195.3 - 172.2))

    def test_clamps_outside_range(self):
        assert uniform_distribution_period(60) == 27.4
        assert uniform_distribution_period(130) == 2.0
        assert cpi_for_year(1950) == 130.7
        assert cpi_for_year(2030) == 315.2

    def test_empty_table(self):
        with pytest.raises(ValueError):
            interpolate_table({}, 1)


class TestRMD:
    """Test required minimum distribution calculations."""

    def test_uniform_rmd(self):
        result = calculate_rmd(500000, 74)
        assert result.distribution_period == 25.5
        assert result.rmd_amount == pytest.approx(500000 / 25.5)
        assert result.remaining_balance == pytest.approx(500000 - 500000 / 25.5)
        assert result.table_used == UNIFORM_TABLE_NAME

    def test_spouse_less_than_ten_years_younger(self):
        assert distribution_period(75, 70) == (24.6, UNIFORM_TABLE_NAME)

    def test_joint_life_adjustment(self):
        period, table = distribution_period(75, 60)
        assert period == pytest.approx(24.6 + 5 * 0.5)
        assert table == JOINT_TABLE_NAME

    def test_joint_life_adjustment_is_capped(self):
        period, _ = distribution_period(80, 20)
        assert period == pytest.approx(20.2 + 20 * 0.5)

    def test_projection(self):
        projection = project_rmds(73, 500000, 0.05)
        assert len(projection) == 46
        assert [row.age for row in projection[:3]] == [73, 74, 75]
        first = projection[0]
        assert first.rmd_amount == pytest.approx(500000 / 26.5)
        assert first.end_balance == pytest.approx((500000 - 500000 / 26.5) * 1.05)
        assert projection[1].starting_balance == first.end_balance

    def test_projection_stops_when_depleted(self):
        projection = project_rmds(73, 0.0, 0.05)
        assert len(projection) == 1
        assert projection[0].end_balance == 0

    def test_projection_with_spouse_ages_together(self):
        projection = project_rmds(75, 100000, 0.0, spouse_age=60, max_years=3)
        assert projection[1].distribution_period == pytest.approx(23.7 + 2.5)

    def test_negative_balance(self):
        with pytest.raises(InvalidInput):
            calculate_rmd(-1, 75)


class TestInflation:
    """Test CPI and flat-rate inflation."""

    def test_cpi_inflation(self):
        result = calculate_cpi_inflation(100, 2000, 2024)
        assert result.equivalent_value == pytest.approx(100 * 315.2 / 172.2)
        assert result.total_inflation == pytest.approx((315.2 - 172.2) / 172.2)
        assert result.average_annual_inflation == pytest.approx(result.total_inflation / 24)
        assert result.value_change == pytest.approx(result.equivalent_value - 100)

    def test_start_must_precede_end(self):
        with pytest.raises(InvalidInput):
            calculate_cpi_inflation(100, 2024, 2024)

    def test_forward_and_backward(self):
        forward = inflate_forward(1000, 0.03, 10)
        assert forward.adjusted_value == pytest.approx(1343.92, abs=0.01)
        backward = deflate_backward(1000, 0.03, 10)
        assert backward.adjusted_value == pytest.approx(744.09, abs=0.01)
        assert forward.total_change == pytest.approx(backward.total_change)

    @pytest.mark.parametrize("rate", [-1.0, -1.5])
    def test_rate_at_or_below_minus_100_percent(self, rate):
        with pytest.raises(InvalidInput):
            inflate_forward(1000, rate, 0.5)
        with pytest.raises(InvalidInput):
            deflate_backward(1000, rate, 10)

    def test_negative_years(self):
        with pytest.raises(InvalidInput):
            inflate_forward(1000, 0.03, -1)

    def test_factor_outside_float_range(self):
        with pytest.raises(InvalidInput):
            inflate_forward(1000, 0.03, 100000)
        with pytest.raises(InvalidInput):
            deflate_backward(1000, 0.03, 100000)
        with pytest.raises(InvalidInput):
            deflate_backward(1000, -0.5, 100000)

    def test_deflation_rate_allowed(self):
        result = inflate_forward(1000, -0.5, 1)
        assert result.adjusted_value == pytest.approx(500)
        assert result.total_change == pytest.approx(-0.5)
