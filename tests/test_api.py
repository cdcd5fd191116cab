"""
Tests for the calculation API endpoints.
"""

import pytest


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestLoanAPI:
    """Test mortgage, down payment, student loan and amortization endpoints."""

    def test_mortgage(self, client):
        response = client.post(
            "/api/calculate/mortgage",
            json={
                "home_price": "1000000",
                "down_payment": "200000",
                "loan_term_years": "25",
                "interest_rate": "6.5",
                "property_tax": "800",
                "home_insurance": "250",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["result"]["loan_amount"] == 800000
        assert data["result"]["monthly_payment"] == pytest.approx(5400.33, abs=2.0)
        assert data["result"]["payoff_date"] == "2050-01-15"
        assert data["formatted"]["payoff_date"] == "January 2050"
        assert data["formatted"]["monthly_payment"].startswith("$5,40")

        schedule = data["schedule"]
        assert len(schedule["rows"]) == 12
        assert schedule["omitted"] == 288
        assert schedule["total_rows"] == 300
        assert schedule["rows"][0]["date"] == "2025-02-15"

    def test_mortgage_garbage_term_uses_default(self, client):
        response = client.post(
            "/api/calculate/mortgage",
            json={
                "home_price": 300000,
                "down_payment": 60000,
                "loan_term_years": "not a number",
                "interest_rate": 6,
            },
        )
        assert response.status_code == 200
        assert response.json()["schedule"]["total_rows"] == 360

    def test_mortgage_zero_term_rejected(self, client):
        response = client.post(
            "/api/calculate/mortgage",
            json={"home_price": 300000, "loan_term_years": 0, "interest_rate": 6},
        )
        assert response.status_code == 400

    def test_down_payment_defaults(self, client):
        response = client.post("/api/calculate/down-payment", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["result"]["down_payment"] == 90000
        assert data["formatted"]["total_upfront_cash"] == "$103,500"

    def test_student_loan(self, client):
        response = client.post(
            "/api/calculate/student-loan",
            json={
                "loan_balance": "35000",
                "loan_term_years": "10",
                "interest_rate": "4.5",
                "extra_monthly_payment": "100",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["result"]["months_saved"] > 0
        assert data["formatted"]["payoff_date"] == "January 2035"

    def test_amortization(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": 100000, "interest_rate": 6, "loan_term_years": 5},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_principal"] == pytest.approx(100000)
        assert data["schedule"]["omitted"] == 48

    def test_interest_rate(self, client):
        response = client.post(
            "/api/calculate/interest-rate",
            json={"loan_amount": "250000", "loan_years": "5", "monthly_payment": "4800"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["converged"] is True
        assert data["term_months"] == 60
        assert 5.0 < data["annual_rate_percent"] < 6.0
        assert data["formatted_rate"] == f"{data['annual_rate_percent']:.3f}%"

    @pytest.mark.parametrize(
        "body",
        [
            {"principal": 1000, "interest_rate": 12, "loan_term_years": 100000},
            {"principal": 1000, "interest_rate": 0, "loan_term_years": 100000},
            {"principal": 1000, "interest_rate": 6, "loan_term_years": "1e308"},
        ],
    )
    def test_amortization_unrepresentable_term_rejected(self, client, body):
        response = client.post("/api/calculate/amortization", json=body)
        assert response.status_code == 400

    def test_interest_rate_payment_too_low(self, client):
        response = client.post(
            "/api/calculate/interest-rate",
            json={"loan_amount": 250000, "loan_years": 5, "monthly_payment": 1000},
        )
        assert response.status_code == 400
        assert "minimum" in response.json()["detail"]


class TestTimeValueAPI:
    """Test future and present value endpoints."""

    def test_future_value(self, client):
        response = client.post(
            "/api/calculate/future-value",
            json={
                "present_value": 10000,
                "periodic_deposit": 500,
                "interest_rate": 0.5,
                "number_of_periods": 120,
                "deposit_timing": "beginning",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["result"]["total_principal"] == 60000
        assert data["schedule"]["total_rows"] == 120

    def test_future_value_without_periods_rejected(self, client):
        response = client.post("/api/calculate/future-value", json={"present_value": 100})
        assert response.status_code == 400

    def test_present_value(self, client):
        response = client.post("/api/calculate/present-value", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["lump_sum"]["result"]["present_value"] == pytest.approx(61391.33, abs=0.01)
        assert data["payments"]["result"]["present_value"] == pytest.approx(7721.73, abs=0.01)

    def test_present_value_negative_rate_rejected(self, client):
        response = client.post("/api/calculate/present-value", json={"interest_rate": "-100"})
        assert response.status_code == 400
        assert "non-negative" in response.json()["detail"]

    def test_future_value_overflowing_periods_rejected(self, client):
        response = client.post(
            "/api/calculate/future-value",
            json={"interest_rate": 5, "number_of_periods": 20000, "periodic_deposit": 1},
        )
        assert response.status_code == 400

    def test_invalid_timing(self, client):
        response = client.post(
            "/api/calculate/present-value", json={"payment_timing": "sometime"}
        )
        assert response.status_code == 422


class TestTaxAndRetirementAPI:
    """Test income tax and RMD endpoints."""

    def test_income_tax(self, client):
        response = client.post(
            "/api/calculate/income-tax",
            json={
                "annual_income": "64600",
                "filing_status": "single",
                "deductions": "14600",
                "state_rate": "0",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["tax_year"] == 2024
        assert data["result"]["federal_tax"] == pytest.approx(6053.00)
        assert data["formatted"]["marginal_rate"] == "22.00%"

    def test_income_tax_uses_status_standard_deduction(self, client):
        response = client.post(
            "/api/calculate/income-tax",
            json={"annual_income": 100000, "filing_status": "married", "deductions": "n/a"},
        )
        assert response.status_code == 200
        assert response.json()["result"]["deduction"] == 29200

    def test_rmd(self, client):
        response = client.post(
            "/api/calculate/rmd",
            json={"birth_year": "1951", "rmd_year": "2025", "account_balance": "500000"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["result"]["age"] == 74
        assert data["result"]["distribution_period"] == 25.5
        assert data["projection"]["total_rows"] == 46
        assert len(data["projection"]["rows"]) == 12

    def test_rmd_year_defaults_to_today(self, client):
        response = client.post(
            "/api/calculate/rmd", json={"birth_year": 1950, "rmd_year": "soon"}
        )
        assert response.json()["result"]["age"] == 75

    def test_rmd_with_younger_spouse(self, client):
        response = client.post(
            "/api/calculate/rmd",
            json={
                "birth_year": 1950,
                "rmd_year": 2025,
                "has_spouse_beneficiary": True,
                "spouse_birth_year": 1965,
            },
        )
        data = response.json()
        assert data["result"]["distribution_period"] == pytest.approx(24.6 + 2.5)
        assert "approximation" in data["result"]["table_used"]


class TestEverydayAPI:
    """Test inflation, discount, ROI and salary endpoints."""

    def test_inflation(self, client):
        response = client.post("/api/calculate/inflation", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["historical"]["result"]["start_year"] == 2000
        assert data["forward"]["adjusted_value"] == pytest.approx(1343.92, abs=0.01)

    def test_inflation_reversed_years_skips_historical(self, client):
        response = client.post(
            "/api/calculate/inflation", json={"start_year": 2024, "end_year": 2000}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["historical"] is None
        assert data["backward"]["adjusted_value"] == pytest.approx(744.09, abs=0.01)

    def test_inflation_rejected_flat_rate_blanks_its_section(self, client):
        response = client.post(
            "/api/calculate/inflation", json={"forward_rate": -150, "forward_years": 0.5}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["forward"] is None
        assert data["backward"]["adjusted_value"] == pytest.approx(744.09, abs=0.01)

    def test_inflation_overflowing_years(self, client):
        response = client.post(
            "/api/calculate/inflation", json={"forward_years": 100000, "backward_rate": -100}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["forward"] is None
        assert data["backward"] is None
        assert data["historical"] is not None

    def test_discount(self, client):
        response = client.post(
            "/api/calculate/discount",
            json={"original_price": "100", "discount_type": "percent", "discount_value": "20"},
        )
        data = response.json()
        assert data["formatted"]["discount_amount"] == "$20.00"
        assert data["formatted"]["final_price"] == "$80.00"

    def test_roi(self, client):
        response = client.post("/api/calculate/roi", json={})
        data = response.json()
        assert data["formatted"]["roi"] == "40.00%"
        assert data["formatted"]["annualized_roi"] == "18.32%"

    def test_salary(self, client):
        response = client.post(
            "/api/calculate/salary", json={"amount": "62400", "pay_frequency": "annual"}
        )
        data = response.json()
        assert data["unadjusted"]["hourly"] == pytest.approx(30)
        assert data["total_working_days"] == 260


class TestFormatting:
    """Test display helpers used by the endpoints."""

    def test_format_currency(self):
        from app.api.formatting import format_currency

        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(-1234.5) == "-$1,234.50"
        assert format_currency(-0.001) == "$0.00"
        assert format_currency(103499.6, 0) == "$103,500"

    def test_format_percent(self):
        from app.api.formatting import format_percent

        assert format_percent(0.18322) == "18.32%"
        assert format_percent(0.22) == "22.00%"

    def test_preview_schedule(self):
        from app.api.formatting import preview_schedule

        preview = preview_schedule(list(range(30)), limit=24)
        assert preview.rows == list(range(24))
        assert preview.omitted == 6
        assert "6 more" in preview.note

        short = preview_schedule([1, 2, 3], limit=12)
        assert short.omitted == 0
        assert short.note == ""
