"""
Projection Calculations

Multi-year projections, exit analysis, break-even analysis and the
sensitivity sweep for a rental property.

Value, rent and operating expenses compound annually. The loan balance and
the debt service of each year come from replaying the monthly amortization
recurrence, so PMI stops in the month the LTV threshold is reached.
"""

import logging
from typing import Callable, Dict, List, Optional

from propcalc.calculations.amortization import summarize_loan_by_year
from propcalc.calculations.expenses import (
    ExpenseBreakdown,
    scale_reserve_expenses,
    vacancy_rate,
)
from propcalc.calculations.irr import (
    calculate_irr,
    calculate_multiple,
    compound_annual_return,
)
from propcalc.calculations.metrics import CashFlowFigures
from propcalc.calculations.mortgage import MortgageTerms
from propcalc.calculations.numbers import (
    MONTHS_PER_YEAR,
    PERCENT,
    percent_of,
    round_fields,
    safe_divide,
)
from propcalc.config import get_settings
from propcalc.schemas.rental import (
    BreakEvenAnalysis,
    ExitAnalysis,
    ProjectedReturns,
    RentalPropertyInput,
    RentalPropertyResult,
    SensitivityAnalysis,
    SensitivityResult,
    YearlyProjection,
)

logger = logging.getLogger(__name__)

MILESTONE_YEARS = (1, 5, 10)
BREAK_EVEN_SEARCH_YEARS = 30


def _rate_or_default(value: Optional[float], default: float) -> float:
    return (value if value is not None else default) / PERCENT


def project_years(
    data: RentalPropertyInput,
    terms: MortgageTerms,
    expenses: ExpenseBreakdown,
    cash_invested: float,
    years: int,
) -> List[Dict]:
    """
    Project value, rent, cash flow and equity for years 1..``years``.

    Args:
        data: Rental input (growth assumptions)
        terms: Mortgage figures
        expenses: Year-0 monthly operating expenses
        cash_invested: Down payment plus closing and rehab costs
        years: Number of years to project

    Returns:
        One unrounded row per year, keyed like YearlyProjection
    """
    settings = get_settings()
    appreciation = _rate_or_default(data.appreciation_rate, settings.default_appreciation_rate)
    rent_growth = _rate_or_default(data.rent_growth_rate, settings.default_rent_growth_rate)
    expense_growth = _rate_or_default(
        data.expense_growth_rate, settings.default_expense_growth_rate
    )
    vacancy = vacancy_rate(data.expenses) / PERCENT

    loan_years = summarize_loan_by_year(
        principal=terms.loan_amount,
        annual_rate=terms.annual_rate,
        payment=terms.principal_and_interest,
        amortization_months=terms.term_months,
        years=years,
        monthly_pmi=terms.schedule_pmi,
        pmi_ltv_threshold=settings.pmi_ltv_threshold,
    )

    rows = []
    cumulative = 0.0
    for loan_year in loan_years:
        year = loan_year["year"]
        property_value = data.property_price * (1 + appreciation) ** year
        monthly_rent = data.monthly_rent * (1 + rent_growth) ** year
        monthly_expenses = expenses.total_monthly * (1 + expense_growth) ** year

        net_operating_income = (
            monthly_rent * (1 - vacancy) - monthly_expenses
        ) * MONTHS_PER_YEAR
        annual_cash_flow = (
            net_operating_income
            - loan_year["debt_service"]
            - loan_year["pmi_paid"]
            - terms.hoa * MONTHS_PER_YEAR
        )
        cumulative += annual_cash_flow
        equity = property_value - loan_year["ending_balance"]

        rows.append(
            {
                "year": year,
                "monthly_rent": monthly_rent,
                "annual_cash_flow": annual_cash_flow,
                "property_value": property_value,
                "loan_balance": loan_year["ending_balance"],
                "equity": equity,
                "cumulative_cash_flow": cumulative,
                "total_return": equity + cumulative - cash_invested,
            }
        )

    return rows


def calculate_exit_analysis(
    data: RentalPropertyInput,
    rows: List[Dict],
    cash_invested: float,
) -> Dict:
    """
    Sell at the end of the holding period.

    Total return is net sale proceeds plus cumulative cash flow less cash
    invested. IRR and equity multiple are taken over the yearly cash flows
    with the net proceeds added to the final year; either is None when it
    cannot be computed.

    Args:
        data: Rental input (holding period, cost basis, tax rate)
        rows: Yearly projections covering at least the holding period
        cash_invested: Down payment plus closing and rehab costs

    Returns:
        Unrounded exit figures keyed like ExitAnalysis
    """
    settings = get_settings()
    years = data.holding_period_years
    exit_year = rows[years - 1]

    sale_price = exit_year["property_value"]
    selling_costs = percent_of(sale_price, settings.selling_cost_percent)
    loan_payoff = exit_year["loan_balance"]
    net_proceeds = sale_price - selling_costs - loan_payoff

    cost_basis = data.property_price + (data.closing_costs or 0.0) + (data.rehab_costs or 0.0)
    capital_gain = max(0.0, sale_price - selling_costs - cost_basis)
    tax_rate = (
        data.capital_gains_tax_rate
        if data.capital_gains_tax_rate is not None
        else settings.default_capital_gains_tax_rate
    )
    capital_gains_tax = percent_of(capital_gain, tax_rate)

    total_cash_flow = exit_year["cumulative_cash_flow"]
    total_return = net_proceeds + total_cash_flow - cash_invested
    annualized = compound_annual_return(total_return + cash_invested, cash_invested, years)

    cash_flows = [-cash_invested] + [row["annual_cash_flow"] for row in rows[:years]]
    cash_flows[-1] += net_proceeds

    try:
        irr = calculate_irr(cash_flows) * PERCENT
    except ValueError as e:
        logger.debug(f"Exit IRR unavailable: {e}")
        irr = None

    try:
        equity_multiple = calculate_multiple(cash_flows)
    except ValueError as e:
        logger.debug(f"Exit equity multiple unavailable: {e}")
        equity_multiple = None

    return {
        "holding_period_years": years,
        "sale_price": sale_price,
        "selling_costs": selling_costs,
        "loan_payoff": loan_payoff,
        "net_proceeds": net_proceeds,
        "capital_gains_tax": capital_gains_tax,
        "after_tax_net_proceeds": net_proceeds - capital_gains_tax,
        "total_cash_flow": total_cash_flow,
        "total_return": total_return,
        "annualized_return": annualized * PERCENT,
        "internal_rate_of_return": irr,
        "equity_multiple": equity_multiple,
    }


def calculate_projected_returns(
    data: RentalPropertyInput,
    terms: MortgageTerms,
    expenses: ExpenseBreakdown,
    cash_invested: float,
) -> ProjectedReturns:
    """Project years 1, 5, 10 and every year of the holding period."""
    horizon = max(MILESTONE_YEARS[-1], data.holding_period_years or 0)
    rows = project_years(data, terms, expenses, cash_invested, horizon)
    projections = [YearlyProjection(**round_fields(row)) for row in rows]

    exit_analysis = None
    if data.holding_period_years:
        exit_analysis = ExitAnalysis(
            **round_fields(calculate_exit_analysis(data, rows, cash_invested))
        )

    return ProjectedReturns(
        year1=projections[0],
        year5=projections[4],
        year10=projections[9],
        yearly=projections,
        exit_analysis=exit_analysis,
    )


def calculate_break_even_analysis(
    data: RentalPropertyInput,
    terms: MortgageTerms,
    expenses: ExpenseBreakdown,
    cash_flow: CashFlowFigures,
    cash_invested: float,
) -> BreakEvenAnalysis:
    """
    Occupancy and rent needed to cover expenses and debt service.

    ``months_to_positive_cash_flow`` is 0 for a property that already cash
    flows, otherwise the end of the first projected year with positive cash
    flow, or None when that does not happen within thirty years.
    """
    monthly_outgoings = cash_flow.operating_expenses + cash_flow.debt_service
    vacancy = vacancy_rate(data.expenses)

    if vacancy >= PERCENT:
        break_even_rent = 0.0
    else:
        break_even_rent = monthly_outgoings / (1 - vacancy / PERCENT)

    months_to_positive = 0
    if cash_flow.monthly < 0:
        months_to_positive = None
        rows = project_years(data, terms, expenses, cash_invested, BREAK_EVEN_SEARCH_YEARS)
        for row in rows:
            if row["annual_cash_flow"] > 0:
                months_to_positive = row["year"] * MONTHS_PER_YEAR
                break

    return BreakEvenAnalysis(
        **round_fields(
            {
                "break_even_occupancy_rate": safe_divide(
                    monthly_outgoings, cash_flow.gross_rent
                )
                * PERCENT,
                "break_even_rent": break_even_rent,
                "months_to_positive_cash_flow": months_to_positive,
                "cash_flow_break_even_point": monthly_outgoings,
            }
        )
    )


# =============================================================================
# SENSITIVITY
# =============================================================================


def _sweep(
    data: RentalPropertyInput,
    steps: List[float],
    perturb: Callable[[RentalPropertyInput, float], RentalPropertyInput],
    evaluate: Callable[[RentalPropertyInput], RentalPropertyResult],
) -> List[SensitivityResult]:
    results = []
    for change in steps:
        result = evaluate(perturb(data, change))
        results.append(
            SensitivityResult(
                change=change,
                cash_flow=result.cash_flow.cash_flow_monthly,
                cap_rate=result.metrics.cap_rate,
                cash_on_cash=result.metrics.cash_on_cash_return,
            )
        )
    return results


def _shift_vacancy(data: RentalPropertyInput, change: float) -> RentalPropertyInput:
    rate = min(PERCENT, max(0.0, vacancy_rate(data.expenses) + change))
    return data.model_copy(
        update={"expenses": data.expenses.model_copy(update={"vacancy_rate": rate})}
    )


def _scale_rent(data: RentalPropertyInput, change: float) -> RentalPropertyInput:
    return data.model_copy(
        update={"monthly_rent": data.monthly_rent * (1 + change / PERCENT)}
    )


def _scale_interest_rate(data: RentalPropertyInput, change: float) -> RentalPropertyInput:
    return data.model_copy(
        update={"annual_interest_rate": data.annual_interest_rate * (1 + change / PERCENT)}
    )


def _scale_reserves(data: RentalPropertyInput, change: float) -> RentalPropertyInput:
    return data.model_copy(
        update={"expenses": scale_reserve_expenses(data.expenses, 1 + change / PERCENT)}
    )


def calculate_sensitivity_analysis(
    data: RentalPropertyInput,
    evaluate: Callable[[RentalPropertyInput], RentalPropertyResult],
) -> SensitivityAnalysis:
    """
    Re-run the rental calculation with one assumption perturbed at a time.

    Vacancy moves by absolute points (clamped to 0-100); rent, interest rate
    and the maintenance/capex reserves move by relative percent. ``evaluate``
    must not itself run a sensitivity analysis.

    Args:
        data: Validated rental input
        evaluate: Rental calculation to re-run on each perturbed input

    Returns:
        SensitivityAnalysis with one result per configured step per axis
    """
    steps = list(get_settings().sensitivity_steps)
    logger.debug(f"Sensitivity sweep over steps {steps}")

    return SensitivityAnalysis(
        vacancy_impact=_sweep(data, steps, _shift_vacancy, evaluate),
        rent_change_impact=_sweep(data, steps, _scale_rent, evaluate),
        interest_rate_impact=_sweep(data, steps, _scale_interest_rate, evaluate),
        expense_change_impact=_sweep(data, steps, _scale_reserves, evaluate),
    )
