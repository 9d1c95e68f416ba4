"""
Investment strategy models.

Each strategy takes its own input shape and returns its own result; none
shares state with another.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from propcalc.schemas.rental import (
    RentalPropertyExpenses,
    RentalPropertyInput,
    RentalPropertyResult,
)


# === Fix and flip ===


class MaximumAllowableOfferInput(BaseModel):
    after_repair_value: float
    repair_costs: float
    wholesale_fee: float = 0.0
    profit_margin: Optional[float] = None  # percent of ARV, default 70


class MaximumAllowableOfferResult(BaseModel):
    mao: float
    potential_profit: float
    roi: float


class FixAndFlipInput(BaseModel):
    purchase_price: float
    rehab_costs: float
    holding_costs: float
    holding_months: int
    arv: float
    selling_costs: float = 0.0
    closing_costs: float = 0.0
    financing_costs: float = 0.0


class FixAndFlipResult(BaseModel):
    total_investment: float
    projected_profit: float
    roi: float
    annualized_return: float
    break_even_arv: float
    break_even_selling_costs: float


# === BRRRR ===


class BRRRRInput(BaseModel):
    purchase_price: float
    rehab_costs: float
    arv: float
    refinance_ltv: float  # percent
    monthly_rent: float
    holding_months_before_refinance: int = 0
    closing_costs: float = 0.0
    refinance_closing_costs: float = 0.0
    expenses: RentalPropertyExpenses = Field(default_factory=RentalPropertyExpenses)
    interest_rate_during_rehab: Optional[float] = None  # percent, on purchase + rehab
    refinance_interest_rate: float
    refinance_loan_term_years: int


class BRRRRResult(BaseModel):
    total_investment: float
    rehab_carrying_costs: float
    arv_estimate: float
    refinance_loan_amount: float
    cash_recovered: float
    cash_left_in: float
    monthly_rent_income: float
    monthly_expenses: float
    monthly_mortgage_payment: float
    monthly_cash_flow: float
    infinite_return: bool
    cash_on_cash_return: float
    cap_rate: float
    equity: float


# === Wholesale ===


class WholesaleInput(BaseModel):
    contract_price: float
    assignment_fee: float
    marketing_costs: float = 0.0
    other_costs: float = 0.0
    arv: Optional[float] = None
    repair_estimate: float = 0.0


class WholesaleResult(BaseModel):
    gross_profit: float
    total_costs: float
    net_profit: float
    roi: float
    end_buyer_price: float
    buyer_max_purchase_price: Optional[float] = None
    buyer_spread: Optional[float] = None


# === Short-term rental ===


class AirbnbInput(BaseModel):
    average_daily_rate: float
    occupancy_rate: float  # percent
    cleaning_fee_per_stay: float = 0.0
    average_stay_length: float
    monthly_expenses: float = 0.0
    management_fee_percent: Optional[float] = None
    property_price: float
    down_payment: float


class ShortTermRentalResult(BaseModel):
    gross_monthly_revenue: float
    management_fees: float
    net_monthly_income: float
    annual_net_income: float
    cash_on_cash_return: float
    cap_rate: float
    gross_yield: float
    rev_par: float
    average_occupied_days: float
    monthly_stays: float


# === Commercial ===


class CommercialNOIInput(BaseModel):
    gross_scheduled_income: float
    vacancy_loss: float = 0.0
    other_income: float = 0.0
    operating_expenses: float = 0.0
    management_fees: float = 0.0
    reserves: float = 0.0


class CommercialNOIResult(BaseModel):
    effective_gross_income: float
    total_expenses: float
    noi: float
    expense_ratio: float


class ValueAddInput(BaseModel):
    current_noi: float
    projected_noi: float
    current_cap_rate: float  # percent
    exit_cap_rate: float  # percent
    renovation_costs: float
    current_value: float


class ValueAddResult(BaseModel):
    current_value_by_cap: float
    projected_value: float
    value_created: float
    roi: float
    equity_multiple: float


# === Syndication ===


class SyndicationInput(BaseModel):
    lp_investment: float
    gp_investment: float
    preferred_return: float  # annual percent on LP capital
    lp_split: float  # percent of residual
    gp_split: float  # percent of residual
    annual_cash_flow: float
    sale_proceeds: float
    hold_period: int  # years


class SyndicationDistribution(BaseModel):
    """Distributions for one year of the hold."""

    year: int
    cash_flow: float
    lp_preferred_return: float
    lp_cash_flow_share: float
    gp_cash_flow_share: float
    lp_return_of_capital: float
    gp_return_of_capital: float
    lp_profit_share: float
    gp_profit_share: float
    total_to_lp: float
    total_to_gp: float
    lp_pref_unpaid: float


class SyndicationResult(BaseModel):
    lp_total_return: float
    gp_total_return: float
    lp_multiple: float
    gp_multiple: float
    lp_irr: float
    gp_irr: float
    lp_annual_cash_flow: float
    gp_annual_cash_flow: float
    distributions: List[SyndicationDistribution]


# === Lending ===


class HardMoneyInput(BaseModel):
    loan_amount: float
    interest_rate: float  # annual percent
    points: float  # percent of loan
    term_months: int
    interest_only: bool = True
    amortization_months: Optional[int] = None  # defaults to term_months


class HardMoneyResult(BaseModel):
    monthly_payment: float
    points_cost: float
    total_interest: float
    total_cost: float
    effective_rate: float
    balloon_payment: float


class PrivateLendingInput(BaseModel):
    loan_amount: float
    interest_rate: float  # annual percent
    term_months: int
    points: float = 0.0
    servicing_fee_monthly: float = 0.0


class PrivateLendingResult(BaseModel):
    monthly_income: float
    total_interest: float
    total_return: float
    annualized_yield: float
    total_points: float


# === Land development ===


class LandDevelopmentInput(BaseModel):
    land_cost: float
    development_costs: float
    soft_costs: float = 0.0
    carrying_costs: float = 0.0
    number_of_lots: int
    average_lot_price: float
    development_time_months: int


class LandDevelopmentResult(BaseModel):
    total_costs: float
    gross_revenue: float
    net_profit: float
    profit_margin: float
    profit_per_lot: float
    cost_per_lot: float
    roi: float
    annualized_roi: float


# === House hacking ===


class HouseHackingInput(RentalPropertyInput):
    """
    Rental input for an owner-occupied multi-unit property.

    ``monthly_rent`` is the rent collected from the units that are let.
    """

    owner_occupied_units: int = 1
    total_units: int


class HouseHackingResult(BaseModel):
    rental: RentalPropertyResult
    total_housing_payment: float
    owner_unit_rent_value: float
    effective_living_cost: float
    percent_of_mortgage_covered: float
    net_housing_cost: float


# === Comparison ===


class ComparativeAnalysisInput(BaseModel):
    scenarios: List[RentalPropertyInput]
    scenario_names: Optional[List[str]] = None


class ScenarioComparison(BaseModel):
    best_cash_flow: float
    best_cap_rate: float
    best_cash_on_cash: float
    best_total_roi: float
    best_cash_flow_scenario: str
    best_cap_rate_scenario: str
    best_cash_on_cash_scenario: str
    best_total_roi_scenario: str


class ComparativeAnalysisResult(BaseModel):
    scenarios: List[RentalPropertyResult]
    scenario_names: List[str]
    comparison: ScenarioComparison
