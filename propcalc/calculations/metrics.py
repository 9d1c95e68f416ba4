"""
Cash Flow and Investment Metrics

Derives NOI, cash flow and the investment ratios for a rental property.

Conventions used throughout:
- Monthly debt service is P&I plus PMI plus HOA.
- Cash invested is down payment plus closing costs plus rehab costs.
- Ratios over a zero or negative base are reported as 0.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from propcalc.calculations.amortization import (
    calculate_dscr,
    calculate_loan_constant,
    calculate_payment,
    replay_balance,
)
from propcalc.calculations.expenses import ExpenseBreakdown
from propcalc.calculations.mortgage import MortgageTerms
from propcalc.calculations.numbers import (
    MONTHS_PER_YEAR,
    PERCENT,
    percent_of,
    round2,
    safe_divide,
)
from propcalc.config import get_settings
from propcalc.schemas.rental import CashFlow, RentalPropertyInput

ONE_PERCENT_RULE = 0.01
TWO_PERCENT_RULE = 0.02
FIFTY_PERCENT_RULE = 0.5


@dataclass
class CashFlowFigures:
    """Unrounded monthly cash flow."""

    gross_rent: float
    effective_rent: float
    operating_expenses: float
    debt_service: float

    @property
    def noi(self) -> float:
        return self.effective_rent - self.operating_expenses

    @property
    def monthly(self) -> float:
        return self.noi - self.debt_service

    @property
    def annual(self) -> float:
        return self.monthly * MONTHS_PER_YEAR

    def to_model(self) -> CashFlow:
        return CashFlow(
            gross_rent=round2(self.gross_rent),
            effective_rent=round2(self.effective_rent),
            total_expenses=round2(self.operating_expenses),
            net_operating_income=round2(self.noi),
            debt_service=round2(self.debt_service),
            cash_flow_monthly=round2(self.monthly),
            cash_flow_annual=round2(self.annual),
        )


def calculate_cash_flow(
    monthly_rent: float,
    expenses: ExpenseBreakdown,
    terms: MortgageTerms,
) -> CashFlowFigures:
    """NOI excludes debt service; cash flow is NOI less debt service."""
    return CashFlowFigures(
        gross_rent=monthly_rent,
        effective_rent=monthly_rent - expenses.vacancy,
        operating_expenses=expenses.total_monthly,
        debt_service=terms.monthly_debt_service,
    )


def calculate_cash_invested(
    down_payment: float,
    closing_costs: Optional[float] = None,
    rehab_costs: Optional[float] = None,
) -> float:
    return down_payment + (closing_costs or 0.0) + (rehab_costs or 0.0)


def calculate_core_metrics(
    property_price: float,
    cash_flow: CashFlowFigures,
    cash_invested: float,
) -> Dict[str, float]:
    """
    Calculate cap rate, cash-on-cash, GRM, DSCR, expense ratio and
    break-even occupancy.

    Returns:
        Dict of unrounded metrics keyed like the Metrics model
    """
    settings = get_settings()

    annual_rent = cash_flow.gross_rent * MONTHS_PER_YEAR
    annual_noi = cash_flow.noi * MONTHS_PER_YEAR
    annual_expenses = cash_flow.operating_expenses * MONTHS_PER_YEAR
    annual_debt_service = cash_flow.debt_service * MONTHS_PER_YEAR

    return {
        "cap_rate": safe_divide(annual_noi, property_price) * PERCENT,
        "cash_on_cash_return": safe_divide(cash_flow.annual, cash_invested) * PERCENT,
        "gross_rent_multiplier": safe_divide(property_price, annual_rent),
        "debt_coverage_ratio": calculate_dscr(
            annual_noi, annual_debt_service, settings.dscr_debt_service_floor
        ),
        "operating_expense_ratio": safe_divide(annual_expenses, annual_rent) * PERCENT,
        "break_even_occupancy": safe_divide(
            annual_expenses + annual_debt_service, annual_rent
        )
        * PERCENT,
    }


def calculate_annual_depreciation(
    property_price: float,
    land_value: Optional[float] = None,
    depreciation_years: Optional[float] = None,
) -> float:
    """Straight-line depreciation of the building (price less land)."""
    settings = get_settings()
    if land_value is None:
        land_value = percent_of(property_price, settings.default_land_value_percent)
    if depreciation_years is None:
        depreciation_years = settings.default_depreciation_years
    return safe_divide(max(0.0, property_price - land_value), depreciation_years)


def calculate_enhanced_metrics(
    data: RentalPropertyInput,
    terms: MortgageTerms,
    expenses: ExpenseBreakdown,
    cash_flow: CashFlowFigures,
    cash_invested: float,
) -> Dict[str, object]:
    """
    Calculate return, screening, tax and equity metrics.

    Year-1 equity buildup replays twelve months of the amortization
    recurrence. Tax shelter and after-tax cash flow are present only when a
    marginal tax rate is given.

    Returns:
        Dict of unrounded metrics keyed like the EnhancedMetrics extras
    """
    settings = get_settings()
    price = data.property_price
    rent = data.monthly_rent

    annual_rent = rent * MONTHS_PER_YEAR
    annual_noi = cash_flow.noi * MONTHS_PER_YEAR
    annual_expenses = cash_flow.operating_expenses * MONTHS_PER_YEAR
    annual_debt_service = cash_flow.debt_service * MONTHS_PER_YEAR
    annual_effective_rent = cash_flow.effective_rent * MONTHS_PER_YEAR

    annual_depreciation = calculate_annual_depreciation(
        price, data.land_value, data.depreciation_years
    )

    _, equity_buildup = replay_balance(
        terms.loan_amount, terms.annual_rate, terms.principal_and_interest, MONTHS_PER_YEAR
    )
    year1_interest = terms.principal_and_interest * MONTHS_PER_YEAR - equity_buildup

    appreciation_rate = (
        data.appreciation_rate
        if data.appreciation_rate is not None
        else settings.default_appreciation_rate
    )
    appreciation_year1 = percent_of(price, appreciation_rate)
    total_equity_year1 = terms.down_payment + equity_buildup + appreciation_year1

    tax_shelter = None
    after_tax_cash_flow = None
    if data.marginal_tax_rate is not None:
        tax_shelter = percent_of(annual_depreciation, data.marginal_tax_rate)
        taxable_income = annual_noi - year1_interest - annual_depreciation
        after_tax_cash_flow = cash_flow.annual - percent_of(
            taxable_income, data.marginal_tax_rate
        )

    total_roi = safe_divide(
        cash_flow.annual + appreciation_year1 + equity_buildup + (tax_shelter or 0.0),
        cash_invested,
    ) * PERCENT

    # Annual cash flow lost to one more point of interest rate
    payment_up_one_point = calculate_payment(
        terms.loan_amount, terms.annual_rate + 0.01, terms.term_months
    )
    interest_rate_sensitivity = -(
        payment_up_one_point - terms.principal_and_interest
    ) * MONTHS_PER_YEAR

    units = max(data.number_of_units, 1)

    return {
        "total_return_on_investment": total_roi,
        "rent_to_value_ratio": safe_divide(rent, price) * PERCENT,
        "expense_to_income_ratio": safe_divide(expenses.total_monthly, rent) * PERCENT,
        "one_percent_rule": rent >= price * ONE_PERCENT_RULE,
        "two_percent_rule": rent >= price * TWO_PERCENT_RULE,
        "fifty_percent_rule": rent * FIFTY_PERCENT_RULE,
        "cash_flow_per_unit": cash_flow.monthly / units,
        "cash_flow_per_door": cash_flow.annual / units,
        "annualized_return": safe_divide(cash_flow.annual, cash_invested) * PERCENT,
        "loan_constant": calculate_loan_constant(
            terms.principal_and_interest * MONTHS_PER_YEAR, terms.loan_amount
        ),
        "debt_yield_ratio": safe_divide(annual_noi, terms.loan_amount) * PERCENT,
        "break_even_ratio": safe_divide(
            annual_expenses + annual_debt_service, annual_effective_rent
        )
        * PERCENT,
        "annual_depreciation": annual_depreciation,
        "tax_shelter_value": tax_shelter,
        "after_tax_cash_flow": after_tax_cash_flow,
        "equity_buildup_year1": equity_buildup,
        "total_equity_year1": total_equity_year1,
        "return_on_equity": safe_divide(
            cash_flow.annual + appreciation_year1 + equity_buildup, total_equity_year1
        )
        * PERCENT,
        "appreciation_year1": appreciation_year1,
        "vacancy_sensitivity": annual_rent / PERCENT,
        "interest_rate_sensitivity": interest_rate_sensitivity,
        "maintenance_reserve_ratio": safe_divide(expenses.reserves_monthly, rent)
        * PERCENT,
    }


def calculate_investment_summary(
    data: RentalPropertyInput,
    cash_flow: CashFlowFigures,
    cash_invested: float,
    total_roi: float,
) -> Dict[str, Optional[float]]:
    """Cash needed, all-in cost, income and payback period."""
    all_in_cost = data.property_price + (data.closing_costs or 0.0) + (data.rehab_costs or 0.0)
    payback = cash_invested / cash_flow.annual if cash_flow.annual > 0 else None

    return {
        "total_cash_needed": cash_invested,
        "all_in_cost": all_in_cost,
        "monthly_gross_income": cash_flow.gross_rent,
        "monthly_net_income": cash_flow.monthly,
        "annual_net_income": cash_flow.annual,
        "total_roi": total_roi,
        "payback_period": payback,
    }
