"""
Tests for the investment strategy calculators.
"""

import pytest

from propcalc import (
    calculate_airbnb_metrics,
    calculate_brrrr,
    calculate_commercial_noi,
    calculate_fix_and_flip,
    calculate_hard_money_loan,
    calculate_land_development,
    calculate_maximum_allowable_offer,
    calculate_private_lending_returns,
    calculate_value_add_potential,
    calculate_wholesale_profit,
)
from propcalc.calculations.amortization import calculate_payment, calculate_remaining_balance
from propcalc.errors import InputValidationError


class TestFlips:
    """Test the maximum allowable offer and fix-and-flip."""

    def test_seventy_percent_rule(self):
        result = calculate_maximum_allowable_offer(
            {"after_repair_value": 200000, "repair_costs": 30000, "wholesale_fee": 5000}
        )
        assert result.mao == 105000
        assert result.potential_profit == 60000
        assert result.roi == 42.86

    def test_custom_margin(self):
        result = calculate_maximum_allowable_offer(
            {"after_repair_value": 200000, "repair_costs": 30000, "profit_margin": 65}
        )
        assert result.mao == 100000

    def test_offer_requires_arv(self):
        with pytest.raises(InputValidationError):
            calculate_maximum_allowable_offer({"after_repair_value": 0, "repair_costs": 1000})

    def test_fix_and_flip(self):
        result = calculate_fix_and_flip(
            {
                "purchase_price": 150000,
                "rehab_costs": 30000,
                "holding_costs": 8000,
                "holding_months": 6,
                "arv": 230000,
                "selling_costs": 15000,
                "closing_costs": 5000,
            }
        )
        assert result.total_investment == 208000
        assert result.projected_profit == 22000
        assert result.roi == 10.58
        assert result.annualized_return == 21.15
        assert result.break_even_arv == 208000
        assert result.break_even_selling_costs == 37000

    def test_flip_needs_holding_period(self):
        with pytest.raises(InputValidationError) as exc_info:
            calculate_fix_and_flip(
                {
                    "purchase_price": 150000,
                    "rehab_costs": 30000,
                    "holding_costs": 8000,
                    "holding_months": 0,
                    "arv": 230000,
                }
            )
        assert "holding_months must be greater than 0" in exc_info.value.errors


class TestWholesale:
    """Test wholesale assignment profit."""

    def test_profit_and_buyer_spread(self):
        result = calculate_wholesale_profit(
            {
                "contract_price": 100000,
                "assignment_fee": 10000,
                "marketing_costs": 1500,
                "other_costs": 500,
                "arv": 200000,
                "repair_estimate": 25000,
            }
        )
        assert result.gross_profit == 10000
        assert result.total_costs == 2000
        assert result.net_profit == 8000
        assert result.roi == 400
        assert result.end_buyer_price == 110000
        assert result.buyer_max_purchase_price == 115000
        assert result.buyer_spread == 5000

    def test_no_costs(self):
        result = calculate_wholesale_profit({"contract_price": 100000, "assignment_fee": 10000})
        assert result.net_profit == 10000
        assert result.roi == 0
        assert result.buyer_max_purchase_price is None
        assert result.buyer_spread is None


class TestBRRRR:
    """Test buy, rehab, rent, refinance, repeat."""

    @pytest.fixture
    def brrrr_input(self):
        return {
            "purchase_price": 100000,
            "rehab_costs": 30000,
            "arv": 180000,
            "refinance_ltv": 75,
            "monthly_rent": 1800,
            "closing_costs": 3000,
            "refinance_interest_rate": 7,
            "refinance_loan_term_years": 30,
            "holding_months_before_refinance": 4,
        }

    def test_all_cash_recovered(self, brrrr_input):
        result = calculate_brrrr(brrrr_input)
        assert result.refinance_loan_amount == 135000
        assert result.total_investment == 133000
        assert result.cash_recovered == 2000
        assert result.cash_left_in == 0
        assert result.equity == 45000
        assert result.monthly_cash_flow > 0
        assert result.infinite_return is True
        assert result.cash_on_cash_return == 0

    def test_cash_flow(self, brrrr_input):
        result = calculate_brrrr(brrrr_input)
        # Default 8% vacancy, no other expenses
        assert result.monthly_expenses == 0
        assert abs(
            result.monthly_cash_flow - (1800 * 0.92 - result.monthly_mortgage_payment)
        ) < 0.01
        assert result.cap_rate == 11.04

    def test_rehab_carrying_costs(self, brrrr_input):
        """12% on $130k for four months."""
        brrrr_input["interest_rate_during_rehab"] = 12
        result = calculate_brrrr(brrrr_input)
        assert result.rehab_carrying_costs == 5200
        assert result.total_investment == 138200
        assert result.cash_recovered == -3200
        assert result.cash_left_in == 3200
        assert result.infinite_return is False
        expected_coc = result.monthly_cash_flow * 12 / 3200 * 100
        assert abs(result.cash_on_cash_return - expected_coc) < 0.5

    def test_percent_of_value_uses_arv(self, brrrr_input):
        brrrr_input["expenses"] = {"vacancy_rate": 0, "maintenance_percent_of_value": 1}
        result = calculate_brrrr(brrrr_input)
        assert result.monthly_expenses == 150


class TestShortTermRental:
    """Test short-term rental income."""

    def test_monthly_income(self):
        result = calculate_airbnb_metrics(
            {
                "average_daily_rate": 150,
                "occupancy_rate": 70,
                "cleaning_fee_per_stay": 80,
                "average_stay_length": 3,
                "monthly_expenses": 1500,
                "management_fee_percent": 20,
                "property_price": 300000,
                "down_payment": 60000,
            }
        )
        assert result.average_occupied_days == 21
        assert result.monthly_stays == 7
        assert result.gross_monthly_revenue == 3710
        assert result.management_fees == 742
        assert result.net_monthly_income == 1468
        assert result.annual_net_income == 17616
        assert result.cash_on_cash_return == 29.36
        assert result.cap_rate == 5.87
        assert result.gross_yield == 14.84
        assert result.rev_par == 105

    def test_zero_stay_length(self):
        result = calculate_airbnb_metrics(
            {
                "average_daily_rate": 100,
                "occupancy_rate": 50,
                "cleaning_fee_per_stay": 75,
                "average_stay_length": 0,
                "property_price": 200000,
                "down_payment": 40000,
            }
        )
        assert result.monthly_stays == 0
        assert result.gross_monthly_revenue == 1500

    def test_occupancy_range(self):
        with pytest.raises(InputValidationError):
            calculate_airbnb_metrics(
                {
                    "average_daily_rate": 100,
                    "occupancy_rate": 110,
                    "average_stay_length": 2,
                    "property_price": 200000,
                    "down_payment": 40000,
                }
            )


class TestCommercial:
    """Test commercial NOI and value-add."""

    def test_commercial_noi(self):
        result = calculate_commercial_noi(
            {
                "gross_scheduled_income": 500000,
                "vacancy_loss": 25000,
                "other_income": 10000,
                "operating_expenses": 150000,
                "management_fees": 20000,
                "reserves": 10000,
            }
        )
        assert result.effective_gross_income == 485000
        assert result.total_expenses == 180000
        assert result.noi == 305000
        assert result.expense_ratio == 37.11

    def test_value_add(self):
        result = calculate_value_add_potential(
            {
                "current_noi": 100000,
                "projected_noi": 150000,
                "current_cap_rate": 7,
                "exit_cap_rate": 7,
                "renovation_costs": 50000,
                "current_value": 1400000,
            }
        )
        assert result.current_value_by_cap == 1428571.43
        assert result.projected_value == 2142857.14
        assert result.value_created == 692857.14
        assert result.roi == 47.78
        assert result.equity_multiple == 1.48

    def test_value_add_zero_cap_rate(self):
        result = calculate_value_add_potential(
            {
                "current_noi": 100000,
                "projected_noi": 150000,
                "current_cap_rate": 0,
                "exit_cap_rate": 0,
                "renovation_costs": 50000,
                "current_value": 1400000,
            }
        )
        assert result.current_value_by_cap == 0
        assert result.projected_value == 0


class TestLending:
    """Test hard money and private lending."""

    def test_interest_only_hard_money(self):
        result = calculate_hard_money_loan(
            {"loan_amount": 200000, "interest_rate": 12, "points": 2, "term_months": 12}
        )
        assert result.monthly_payment == 2000
        assert result.total_interest == 24000
        assert result.points_cost == 4000
        assert result.total_cost == 28000
        assert result.effective_rate == 14.0
        assert result.balloon_payment == 200000

    def test_fully_amortizing_hard_money(self):
        result = calculate_hard_money_loan(
            {
                "loan_amount": 200000,
                "interest_rate": 12,
                "points": 2,
                "term_months": 12,
                "interest_only": False,
            }
        )
        assert result.balloon_payment == 0
        payment = calculate_payment(200000, 0.12, 12)
        assert abs(result.total_interest - (payment * 12 - 200000)) < 0.01
        assert result.total_interest < 24000

    def test_amortizing_with_balloon(self):
        result = calculate_hard_money_loan(
            {
                "loan_amount": 200000,
                "interest_rate": 12,
                "points": 2,
                "term_months": 12,
                "interest_only": False,
                "amortization_months": 360,
            }
        )
        assert 190000 < result.balloon_payment < 200000
        payment = calculate_payment(200000, 0.12, 360)
        balloon = calculate_remaining_balance(200000, 0.12, 360, 12)
        expected_interest = payment * 12 - (200000 - balloon)
        assert abs(result.balloon_payment - balloon) < 0.01
        assert abs(result.total_interest - expected_interest) < 0.01

    def test_amortization_shorter_than_term(self):
        with pytest.raises(InputValidationError) as exc_info:
            calculate_hard_money_loan(
                {
                    "loan_amount": 200000,
                    "interest_rate": 12,
                    "points": 2,
                    "term_months": 12,
                    "interest_only": False,
                    "amortization_months": 6,
                }
            )
        assert "amortization_months must be at least term_months" in exc_info.value.errors

    def test_private_lending(self):
        result = calculate_private_lending_returns(
            {
                "loan_amount": 100000,
                "interest_rate": 10,
                "term_months": 12,
                "points": 2,
                "servicing_fee_monthly": 50,
            }
        )
        assert result.total_points == 2000
        assert result.monthly_income == 883.33
        assert result.total_interest == 10000
        assert result.total_return == 112600
        assert result.annualized_yield == 12.6


class TestLandDevelopment:
    """Test subdivision profit."""

    def test_land_development(self):
        result = calculate_land_development(
            {
                "land_cost": 500000,
                "development_costs": 1000000,
                "soft_costs": 200000,
                "carrying_costs": 100000,
                "number_of_lots": 20,
                "average_lot_price": 120000,
                "development_time_months": 24,
            }
        )
        assert result.total_costs == 1800000
        assert result.gross_revenue == 2400000
        assert result.net_profit == 600000
        assert result.profit_margin == 25
        assert result.profit_per_lot == 30000
        assert result.cost_per_lot == 90000
        assert result.roi == 33.33
        assert result.annualized_roi == 16.67

    def test_lots_required(self):
        with pytest.raises(InputValidationError):
            calculate_land_development(
                {
                    "land_cost": 500000,
                    "development_costs": 1000000,
                    "number_of_lots": 0,
                    "average_lot_price": 120000,
                    "development_time_months": 24,
                }
            )
