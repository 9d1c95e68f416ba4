"""
Tests for the syndication waterfall.
"""

import pytest

from propcalc import calculate_syndication_returns
from propcalc.calculations.waterfall import calculate_waterfall_distributions
from propcalc.errors import InputValidationError


@pytest.fixture
def syndication_input():
    """$1M raise, 8% pref, 70/30 split, $100k a year, $1.5M sale in year 5."""
    return {
        "lp_investment": 900000,
        "gp_investment": 100000,
        "preferred_return": 8,
        "lp_split": 70,
        "gp_split": 30,
        "annual_cash_flow": 100000,
        "sale_proceeds": 1500000,
        "hold_period": 5,
    }


class TestWaterfallDistributions:
    """Test the yearly waterfall."""

    def test_operating_years(self, syndication_input):
        distributions = calculate_waterfall_distributions(**syndication_input)
        assert len(distributions) == 5

        year1 = distributions[0]
        assert year1["lp_preferred_return"] == 72000
        assert abs(year1["lp_cash_flow_share"] - 19600) < 0.01
        assert abs(year1["gp_cash_flow_share"] - 8400) < 0.01
        assert year1["lp_return_of_capital"] == 0
        assert year1["lp_pref_unpaid"] == 0

    def test_sale_year(self, syndication_input):
        final = calculate_waterfall_distributions(**syndication_input)[-1]
        assert final["lp_return_of_capital"] == 900000
        assert final["gp_return_of_capital"] == 100000
        assert abs(final["lp_profit_share"] - 350000) < 0.01
        assert abs(final["gp_profit_share"] - 150000) < 0.01

    def test_pref_shortfall_accrues(self, syndication_input):
        syndication_input["annual_cash_flow"] = 50000
        distributions = calculate_waterfall_distributions(**syndication_input)

        assert distributions[0]["lp_preferred_return"] == 50000
        assert distributions[0]["lp_pref_unpaid"] == 22000
        assert distributions[0]["gp_cash_flow_share"] == 0
        assert distributions[3]["lp_pref_unpaid"] == 88000

        # 110k accrued pref is caught up from the sale
        final = distributions[-1]
        assert final["lp_preferred_return"] == 160000
        assert final["lp_pref_unpaid"] == 0

    def test_sale_short_of_capital(self, syndication_input):
        syndication_input["sale_proceeds"] = 500000
        final = calculate_waterfall_distributions(**syndication_input)[-1]
        assert final["lp_return_of_capital"] == 450000
        assert final["gp_return_of_capital"] == 50000
        assert final["lp_profit_share"] == 0


class TestSyndicationReturns:
    """Test LP and GP return summaries."""

    def test_totals_and_multiples(self, syndication_input):
        result = calculate_syndication_returns(syndication_input)
        assert result.lp_total_return == 1708000
        assert result.gp_total_return == 292000
        assert result.lp_multiple == 1.9
        assert result.gp_multiple == 2.92
        assert result.lp_annual_cash_flow == 91600
        assert result.gp_annual_cash_flow == 8400
        assert len(result.distributions) == 5

    def test_irr_approximation(self, syndication_input):
        """Total distributions compounded over the hold as one lump sum."""
        result = calculate_syndication_returns(syndication_input)
        expected = ((1708000 / 900000) ** (1 / 5) - 1) * 100
        assert abs(result.lp_irr - expected) < 0.01
        assert result.gp_irr > result.lp_irr

    def test_shortfall_totals(self, syndication_input):
        syndication_input["annual_cash_flow"] = 50000
        result = calculate_syndication_returns(syndication_input)
        assert result.lp_total_return == 1533000
        assert result.gp_total_return == 217000
        assert result.distributions[-1].lp_pref_unpaid == 0
        assert result.lp_annual_cash_flow == 50000
        assert result.gp_annual_cash_flow == 0

    def test_annual_cash_flow_excludes_sale(self, syndication_input):
        syndication_input["hold_period"] = 1
        result = calculate_syndication_returns(syndication_input)
        assert result.lp_annual_cash_flow == 91600
        assert result.lp_total_return > 900000

    def test_partial_splits_leave_remainder(self, syndication_input):
        syndication_input["lp_split"] = 60
        syndication_input["gp_split"] = 30
        result = calculate_syndication_returns(syndication_input)
        distributed = result.lp_total_return + result.gp_total_return
        # 10% of residual cash flow and sale profit stays undistributed
        assert distributed < 100000 * 5 + 1500000
        assert abs(distributed - (2000000 - 0.1 * (28000 * 5 + 500000))) < 0.05

    def test_splits_over_100_rejected(self, syndication_input):
        syndication_input["gp_split"] = 40
        with pytest.raises(InputValidationError) as exc_info:
            calculate_syndication_returns(syndication_input)
        assert "lp_split plus gp_split must not exceed 100" in exc_info.value.errors

    def test_no_equity_rejected(self, syndication_input):
        syndication_input["lp_investment"] = 0
        syndication_input["gp_investment"] = 0
        with pytest.raises(InputValidationError):
            calculate_syndication_returns(syndication_input)
