"""
Rental property analysis models.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from propcalc.schemas.mortgage import FlexibleMortgageInput, MortgageCalculationResult


class RentalPropertyExpenses(BaseModel):
    """
    Operating expense assumptions.

    Categories with several specification modes resolve by priority:
    absolute amount, then percent of rent, then percent of value.
    """

    vacancy_rate: Optional[float] = None  # percent of rent

    property_management_flat: Optional[float] = None  # monthly
    property_management_percent: Optional[float] = None  # percent of rent

    maintenance_annual: Optional[float] = None
    maintenance_percent_of_rent: Optional[float] = None
    maintenance_percent_of_value: Optional[float] = None  # annual percent

    capex_annual: Optional[float] = None
    capex_percent_of_rent: Optional[float] = None
    capex_percent_of_value: Optional[float] = None  # annual percent

    utilities_monthly: Optional[float] = None
    landscaping_monthly: Optional[float] = None
    pest_control_monthly: Optional[float] = None
    legal_fees_annual: Optional[float] = None
    landlord_insurance_annual: Optional[float] = None
    special_assessments_annual: Optional[float] = None
    advertising_annual: Optional[float] = None
    turnover_cost_per_year: Optional[float] = None


class RentalPropertyInput(FlexibleMortgageInput):
    """Mortgage input plus rent, expenses and investment assumptions."""

    monthly_rent: float
    expenses: RentalPropertyExpenses = Field(default_factory=RentalPropertyExpenses)

    closing_costs: Optional[float] = None
    rehab_costs: Optional[float] = None

    # Growth assumptions (annual percent)
    appreciation_rate: Optional[float] = None
    rent_growth_rate: Optional[float] = None
    expense_growth_rate: Optional[float] = None

    # Tax assumptions
    marginal_tax_rate: Optional[float] = None
    capital_gains_tax_rate: Optional[float] = None
    depreciation_years: Optional[float] = None
    land_value: Optional[float] = None

    holding_period_years: Optional[int] = None
    number_of_units: int = 1


class OperatingExpenses(BaseModel):
    """Monthly operating expense breakdown."""

    vacancy: float
    property_management: float
    maintenance: float
    capex: float
    utilities: float
    landscaping: float
    pest_control: float
    legal_fees: float
    landlord_insurance: float
    special_assessments: float
    advertising: float
    turnover: float
    property_tax: float
    home_insurance: float
    total_monthly: float  # excludes vacancy, includes tax and insurance


class CashFlow(BaseModel):
    gross_rent: float
    effective_rent: float
    total_expenses: float
    net_operating_income: float
    debt_service: float
    cash_flow_monthly: float
    cash_flow_annual: float


class Metrics(BaseModel):
    """Core investment ratios."""

    cap_rate: float
    cash_on_cash_return: float
    gross_rent_multiplier: float
    debt_coverage_ratio: float
    operating_expense_ratio: float
    break_even_occupancy: float


class EnhancedMetrics(Metrics):
    """Core ratios plus return, screening, tax and equity metrics."""

    total_return_on_investment: float
    internal_rate_of_return: Optional[float] = None
    equity_multiple: Optional[float] = None

    rent_to_value_ratio: float
    expense_to_income_ratio: float
    one_percent_rule: bool
    two_percent_rule: bool
    fifty_percent_rule: float

    cash_flow_per_unit: float
    cash_flow_per_door: float
    annualized_return: float

    loan_constant: float
    debt_yield_ratio: float
    break_even_ratio: float

    annual_depreciation: float
    tax_shelter_value: Optional[float] = None
    after_tax_cash_flow: Optional[float] = None

    equity_buildup_year1: float
    total_equity_year1: float
    return_on_equity: float
    appreciation_year1: float

    vacancy_sensitivity: float
    interest_rate_sensitivity: float
    maintenance_reserve_ratio: float


class InvestmentSummary(BaseModel):
    total_cash_needed: float
    all_in_cost: float
    monthly_gross_income: float
    monthly_net_income: float
    annual_net_income: float
    total_roi: float
    payback_period: Optional[float] = None  # years; None when cash flow <= 0


class YearlyProjection(BaseModel):
    year: int
    monthly_rent: float
    annual_cash_flow: float
    property_value: float
    loan_balance: float
    equity: float
    cumulative_cash_flow: float
    total_return: float


class ExitAnalysis(BaseModel):
    holding_period_years: int
    sale_price: float
    selling_costs: float
    loan_payoff: float
    net_proceeds: float
    capital_gains_tax: float
    after_tax_net_proceeds: float
    total_cash_flow: float
    total_return: float
    annualized_return: float
    internal_rate_of_return: Optional[float] = None
    equity_multiple: Optional[float] = None


class ProjectedReturns(BaseModel):
    year1: YearlyProjection
    year5: YearlyProjection
    year10: YearlyProjection
    yearly: List[YearlyProjection]
    exit_analysis: Optional[ExitAnalysis] = None


class BreakEvenAnalysis(BaseModel):
    break_even_occupancy_rate: float
    break_even_rent: float
    months_to_positive_cash_flow: Optional[int] = None
    cash_flow_break_even_point: float


class SensitivityResult(BaseModel):
    change: float
    cash_flow: float
    cap_rate: float
    cash_on_cash: float


class SensitivityAnalysis(BaseModel):
    vacancy_impact: List[SensitivityResult]
    rent_change_impact: List[SensitivityResult]
    interest_rate_impact: List[SensitivityResult]
    expense_change_impact: List[SensitivityResult]


class RentalPropertyResult(BaseModel):
    """Full rental analysis built around the mortgage result."""

    mortgage: MortgageCalculationResult
    monthly_rent: float
    effective_monthly_rent: float
    operating_expenses: OperatingExpenses
    cash_flow: CashFlow
    metrics: EnhancedMetrics
    investment_summary: InvestmentSummary
    projected_returns: Optional[ProjectedReturns] = None
    break_even_analysis: Optional[BreakEvenAnalysis] = None
    sensitivity_analysis: Optional[SensitivityAnalysis] = None
