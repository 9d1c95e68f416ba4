"""
Tests for the mortgage and affordability calculations.
"""

import pytest
from datetime import date

from propcalc import calculate_affordable_property, calculate_mortgage
from propcalc.calculations.mortgage import compute_mortgage_terms
from propcalc.calculations.normalize import normalize_mortgage_input
from propcalc.errors import InputValidationError
from propcalc.schemas.mortgage import FlexibleMortgageInput


class TestMortgagePayment:
    """Test monthly payment components."""

    def test_principal_and_interest(self):
        """$300k at 6% for 30 years."""
        result = calculate_mortgage(
            {
                "property_price": 300000,
                "loan_amount": 300000,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
            }
        )
        assert abs(result.principal_and_interest - 1798.65) < 0.01
        assert result.down_payment_amount == 0
        assert result.pmi == 0

    def test_twenty_percent_down_has_no_pmi(self):
        result = calculate_mortgage(
            {
                "property_price": 400000,
                "down_payment_percent": 20,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
                "auto_calculate_pmi": True,
            }
        )
        assert result.loan_amount == 320000
        assert result.down_payment_amount == 80000
        assert result.down_payment_percentage == 20
        assert result.loan_to_value == 80
        assert result.pmi == 0

    def test_ten_percent_down_has_pmi(self, mortgage_input):
        result = calculate_mortgage(mortgage_input)
        assert result.loan_amount == 360000
        # 360000 x 0.75% / 12
        assert result.pmi == 225.0

    def test_pmi_override(self, mortgage_input):
        mortgage_input["pmi_monthly"] = 150
        assert calculate_mortgage(mortgage_input).pmi == 150

    def test_pmi_disabled(self, mortgage_input):
        mortgage_input["auto_calculate_pmi"] = False
        assert calculate_mortgage(mortgage_input).pmi == 0

    def test_zero_rate(self):
        result = calculate_mortgage(
            {
                "property_price": 150000,
                "down_payment": 30000,
                "annual_interest_rate": 0,
                "loan_term_years": 10,
            }
        )
        assert result.principal_and_interest == 1000.0
        assert result.total_interest == 0

    def test_total_monthly_payment(self):
        result = calculate_mortgage(
            {
                "property_price": 400000,
                "down_payment_percent": 20,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
                "property_tax_annual": 4800,
                "home_insurance_annual": 1800,
                "hoa_monthly": 75,
            }
        )
        assert result.property_tax == 400
        assert result.home_insurance == 150
        assert result.hoa == 75
        expected = result.principal_and_interest + 400 + 150 + 75
        assert abs(result.total_monthly_payment - expected) < 0.01
        assert result.breakdown.total == result.total_monthly_payment

    def test_totals_over_term(self):
        result = calculate_mortgage(
            {
                "property_price": 300000,
                "loan_amount": 300000,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
            }
        )
        assert abs(result.total_payment - 1798.65 * 360) < 5
        assert abs(result.total_interest - (result.total_payment - 300000)) < 0.01

    def test_model_input_accepted(self):
        data = FlexibleMortgageInput(
            property_price=300000,
            loan_amount=240000,
            annual_interest_rate=5,
            loan_term_years=15,
        )
        assert calculate_mortgage(data).loan_amount == 240000

    def test_idempotent(self, mortgage_input):
        first = calculate_mortgage(mortgage_input, with_schedule=True)
        second = calculate_mortgage(mortgage_input, with_schedule=True)
        assert first == second


class TestLoanDerivation:
    """Test deriving loan amount and down payment from each other."""

    def test_down_payment_from_loan(self):
        result = calculate_mortgage(
            {
                "property_price": 400000,
                "loan_amount": 300000,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
            }
        )
        assert result.down_payment_amount == 100000
        assert result.down_payment_percentage == 25

    def test_loan_from_down_payment(self):
        result = calculate_mortgage(
            {
                "property_price": 400000,
                "down_payment": 50000,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
            }
        )
        assert result.loan_amount == 350000

    def test_neither_given_finances_full_price(self):
        result = calculate_mortgage(
            {"property_price": 250000, "annual_interest_rate": 6, "loan_term_years": 30}
        )
        assert result.loan_amount == 250000
        assert result.down_payment_amount == 0
        # No down payment at all is outside the PMI rule
        assert result.pmi == 0

    def test_conflicting_pairs_rejected(self):
        with pytest.raises(InputValidationError):
            calculate_mortgage(
                {
                    "property_price": 400000,
                    "down_payment": 80000,
                    "down_payment_percent": 20,
                    "annual_interest_rate": 6,
                    "loan_term_years": 30,
                }
            )


class TestAmortizationSchedule:
    """Test the schedule attached to a mortgage result."""

    def test_schedule_only_when_requested(self, mortgage_input):
        assert calculate_mortgage(mortgage_input).amortization_schedule is None
        schedule = calculate_mortgage(mortgage_input, with_schedule=True).amortization_schedule
        assert len(schedule) == 360

    def test_final_principal_equals_loan(self, mortgage_input):
        schedule = calculate_mortgage(mortgage_input, with_schedule=True).amortization_schedule
        assert abs(schedule[-1].total_principal_paid - 360000) < 0.05
        assert schedule[-1].remaining_balance < 0.01

    def test_pmi_drops_at_eighty_percent(self, mortgage_input):
        """PMI is removed once the balance reaches 80% of the original loan."""
        schedule = calculate_mortgage(mortgage_input, with_schedule=True).amortization_schedule
        assert schedule[0].pmi == 225.0

        for entry in schedule:
            ltv = entry.remaining_balance / 360000 * 100
            if ltv > 80.01:
                assert entry.pmi == 225.0
            elif ltv < 79.99:
                assert entry.pmi == 0

        first_without_pmi = next(e for e in schedule if e.pmi == 0)
        assert first_without_pmi.loan_to_value <= 80.01
        assert all(e.pmi == 0 for e in schedule[first_without_pmi.month - 1:])

    def test_no_schedule_pmi_with_twenty_percent_down(self):
        result = calculate_mortgage(
            {
                "property_price": 400000,
                "down_payment_percent": 20,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
                "pmi_monthly": 100,
            },
            with_schedule=True,
        )
        assert result.pmi == 100
        assert all(entry.pmi == 0 for entry in result.amortization_schedule)

    def test_escrow_in_every_entry(self):
        result = calculate_mortgage(
            {
                "property_price": 300000,
                "down_payment_percent": 25,
                "annual_interest_rate": 5,
                "loan_term_years": 15,
                "property_tax_annual": 3600,
                "home_insurance_annual": 1200,
            },
            with_schedule=True,
        )
        for entry in result.amortization_schedule:
            assert entry.property_tax == 300
            assert entry.home_insurance == 100

    def test_payment_dates(self, mortgage_input):
        mortgage_input["first_payment_date"] = "2025-03-01"
        schedule = calculate_mortgage(mortgage_input, with_schedule=True).amortization_schedule
        assert schedule[0].payment_date == date(2025, 3, 1)
        assert schedule[12].payment_date == date(2026, 3, 1)

    def test_terms_carry_first_payment_date(self, mortgage_input):
        mortgage_input["first_payment_date"] = "2025-03-01"
        data = FlexibleMortgageInput(**mortgage_input)
        terms = compute_mortgage_terms(normalize_mortgage_input(data))
        assert terms.first_payment_date == date(2025, 3, 1)


class TestAffordability:
    """Test the maximum affordable property price."""

    def test_budget_is_fully_used(self):
        result = calculate_affordable_property(
            {
                "max_monthly_payment": 2500,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
                "down_payment_percentage": 20,
                "property_tax_rate": 1.2,
                "home_insurance_annual": 1200,
            }
        )
        assert 400000 < result.max_property_price < 430000
        assert abs(result.down_payment - result.max_property_price * 0.2) < 0.01
        assert abs(result.max_loan_amount + result.down_payment - result.max_property_price) < 0.01
        assert abs(result.estimated_monthly_payment - 2500) < 0.05

    def test_defaults_applied(self):
        """Tax rate and insurance default to 1.2% and $1200."""
        explicit = calculate_affordable_property(
            {
                "max_monthly_payment": 2500,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
                "down_payment_percentage": 20,
                "property_tax_rate": 1.2,
                "home_insurance_annual": 1200,
            }
        )
        defaulted = calculate_affordable_property(
            {
                "max_monthly_payment": 2500,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
                "down_payment_percentage": 20,
            }
        )
        assert explicit == defaulted

    def test_pmi_lowers_price(self):
        base = {
            "max_monthly_payment": 2500,
            "annual_interest_rate": 6,
            "loan_term_years": 30,
        }
        with_pmi = calculate_affordable_property({**base, "down_payment_percentage": 19.9})
        without_pmi = calculate_affordable_property({**base, "down_payment_percentage": 20})
        assert with_pmi.max_property_price < without_pmi.max_property_price
        assert abs(with_pmi.estimated_monthly_payment - 2500) < 0.05

    def test_fixed_costs_exceed_budget(self):
        result = calculate_affordable_property(
            {
                "max_monthly_payment": 90,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
                "down_payment_percentage": 20,
                "hoa_monthly": 50,
            }
        )
        assert result.max_property_price == 0
        assert result.max_loan_amount == 0
        assert result.estimated_monthly_payment == 0

    def test_invalid_budget(self):
        with pytest.raises(InputValidationError) as exc_info:
            calculate_affordable_property(
                {
                    "max_monthly_payment": 0,
                    "annual_interest_rate": 6,
                    "loan_term_years": 30,
                    "down_payment_percentage": 120,
                }
            )
        assert len(exc_info.value.errors) == 2

    def test_all_cash_without_tax_is_rejected(self):
        """Nothing financed and no tax leaves no price limit."""
        with pytest.raises(InputValidationError) as exc_info:
            calculate_affordable_property(
                {
                    "max_monthly_payment": 2500,
                    "annual_interest_rate": 6,
                    "loan_term_years": 30,
                    "down_payment_percentage": 100,
                    "property_tax_rate": 0,
                }
            )
        assert exc_info.value.errors == [
            "property_tax_rate must be greater than 0 when down_payment_percentage is 100"
        ]

    def test_all_cash_with_tax_is_bounded(self):
        result = calculate_affordable_property(
            {
                "max_monthly_payment": 1100,
                "annual_interest_rate": 6,
                "loan_term_years": 30,
                "down_payment_percentage": 100,
                "property_tax_rate": 1.2,
                "home_insurance_annual": 1200,
            }
        )
        # (1100 - 100) / (0.012 / 12)
        assert abs(result.max_property_price - 1000000) < 0.01
        assert result.max_loan_amount == 0
        assert abs(result.estimated_monthly_payment - 1100) < 0.01


class TestMortgageInputErrors:
    """Test that parse failures and rule violations are reported together."""

    def test_missing_field_reported_with_rule_violations(self):
        with pytest.raises(InputValidationError) as exc_info:
            calculate_mortgage(
                {
                    "loan_amount": 1000,
                    "loan_amount_percent": 50,
                    "annual_interest_rate": 6,
                    "loan_term_years": 30,
                    "down_payment_percent": 150,
                }
            )
        errors = exc_info.value.errors
        assert "property_price: Field required" in errors
        assert "Cannot specify both loan_amount and loan_amount_percent" in errors
        assert "down_payment_percent must be between 0 and 100" in errors
        assert len(errors) == 3

    def test_unparseable_field_not_reported_twice(self):
        with pytest.raises(InputValidationError) as exc_info:
            calculate_mortgage(
                {
                    "property_price": "lots",
                    "annual_interest_rate": -1,
                    "loan_term_years": 30,
                }
            )
        errors = exc_info.value.errors
        assert sum(e.startswith("property_price") for e in errors) == 1
        assert "annual_interest_rate must be greater than or equal to 0" in errors
