"""
Rental property analysis service.

Composes the calculation modules into a full rental analysis:
normalize -> mortgage -> expenses -> cash flow -> metrics -> projections,
break-even and sensitivity. House hacking and scenario comparison build on
the same analysis.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from propcalc.calculations.expenses import ExpenseBreakdown, calculate_operating_expenses
from propcalc.calculations.metrics import (
    CashFlowFigures,
    calculate_cash_flow,
    calculate_cash_invested,
    calculate_core_metrics,
    calculate_enhanced_metrics,
    calculate_investment_summary,
)
from propcalc.calculations.mortgage import (
    MortgageTerms,
    build_mortgage_result,
    compute_mortgage_terms,
)
from propcalc.calculations.normalize import (
    coerce_input,
    collect_rental_errors,
    normalize_mortgage_input,
    raise_if_errors,
    validate_rental_input,
)
from propcalc.calculations.numbers import PERCENT, round2, round_fields, safe_divide
from propcalc.calculations.projections import (
    calculate_break_even_analysis,
    calculate_projected_returns,
    calculate_sensitivity_analysis,
)
from propcalc.schemas.rental import (
    EnhancedMetrics,
    InvestmentSummary,
    RentalPropertyInput,
    RentalPropertyResult,
)
from propcalc.schemas.strategies import (
    ComparativeAnalysisInput,
    ComparativeAnalysisResult,
    HouseHackingInput,
    HouseHackingResult,
    ScenarioComparison,
)

logger = logging.getLogger(__name__)


@dataclass
class RentalFigures:
    """Unrounded intermediate results of one rental calculation."""

    data: RentalPropertyInput
    terms: MortgageTerms
    expenses: ExpenseBreakdown
    cash_flow: CashFlowFigures
    cash_invested: float
    metrics: Dict[str, object]
    summary: Dict[str, Optional[float]]


def _compute(data: RentalPropertyInput) -> RentalFigures:
    """Run the core pipeline on a validated input."""
    terms = compute_mortgage_terms(normalize_mortgage_input(data))
    expenses = calculate_operating_expenses(
        data.expenses,
        monthly_rent=data.monthly_rent,
        property_price=data.property_price,
        monthly_tax=terms.property_tax,
        monthly_insurance=terms.home_insurance,
    )
    cash_flow = calculate_cash_flow(data.monthly_rent, expenses, terms)
    cash_invested = calculate_cash_invested(
        terms.down_payment, data.closing_costs, data.rehab_costs
    )

    metrics = calculate_core_metrics(data.property_price, cash_flow, cash_invested)
    metrics.update(
        calculate_enhanced_metrics(data, terms, expenses, cash_flow, cash_invested)
    )
    summary = calculate_investment_summary(
        data, cash_flow, cash_invested, metrics["total_return_on_investment"]
    )

    return RentalFigures(
        data=data,
        terms=terms,
        expenses=expenses,
        cash_flow=cash_flow,
        cash_invested=cash_invested,
        metrics=metrics,
        summary=summary,
    )


def _build_result(
    figures: RentalFigures, with_schedule: bool = False, **extras
) -> RentalPropertyResult:
    return RentalPropertyResult(
        mortgage=build_mortgage_result(figures.terms, with_schedule=with_schedule),
        monthly_rent=round2(figures.cash_flow.gross_rent),
        effective_monthly_rent=round2(figures.cash_flow.effective_rent),
        operating_expenses=figures.expenses.to_model(),
        cash_flow=figures.cash_flow.to_model(),
        metrics=EnhancedMetrics(**round_fields(figures.metrics)),
        investment_summary=InvestmentSummary(**round_fields(figures.summary)),
        **extras,
    )


def evaluate_rental_property(data: RentalPropertyInput) -> RentalPropertyResult:
    """
    Validate and run the core pipeline only.

    No schedule, projections, break-even or sensitivity; used to re-run a
    perturbed input during the sensitivity sweep.
    """
    validate_rental_input(data)
    return _build_result(_compute(data))


def _analyze(data: RentalPropertyInput, with_schedule: bool) -> RentalPropertyResult:
    validate_rental_input(data)
    figures = _compute(data)

    projected = calculate_projected_returns(
        data, figures.terms, figures.expenses, figures.cash_invested
    )
    if projected.exit_analysis is not None:
        figures.metrics["internal_rate_of_return"] = projected.exit_analysis.internal_rate_of_return
        figures.metrics["equity_multiple"] = projected.exit_analysis.equity_multiple

    break_even = calculate_break_even_analysis(
        data, figures.terms, figures.expenses, figures.cash_flow, figures.cash_invested
    )
    sensitivity = calculate_sensitivity_analysis(data, evaluate_rental_property)

    logger.debug(
        f"Rental analysis: price={data.property_price:.2f} rent={data.monthly_rent:.2f} "
        f"cash_flow={figures.cash_flow.monthly:.2f}"
    )

    return _build_result(
        figures,
        with_schedule=with_schedule,
        projected_returns=projected,
        break_even_analysis=break_even,
        sensitivity_analysis=sensitivity,
    )


def analyze_rental_property(
    data: Union[RentalPropertyInput, dict], with_schedule: bool = False
) -> RentalPropertyResult:
    """
    Analyze a rental property.

    Args:
        data: Rental input (model or dict)
        with_schedule: Include the mortgage amortization schedule

    Returns:
        RentalPropertyResult with projections, break-even and sensitivity;
        the exit analysis is present when a holding period is given

    Raises:
        InputValidationError: If the input is invalid
    """
    data = coerce_input(RentalPropertyInput, data, collect_rental_errors)
    return _analyze(data, with_schedule)


def _collect_house_hacking_errors(data: HouseHackingInput) -> List[str]:
    errors = collect_rental_errors(data)
    total = data.total_units
    owned = data.owner_occupied_units
    if total is None or total <= 0:
        errors.append("total_units must be greater than 0")
    if owned is not None and owned < 0:
        errors.append("owner_occupied_units must be greater than or equal to 0")
    elif owned is not None and total is not None and owned > total:
        errors.append("owner_occupied_units must not exceed total_units")
    return errors


def calculate_house_hacking(
    data: Union[HouseHackingInput, dict],
) -> HouseHackingResult:
    """
    Analyze an owner-occupied multi-unit property.

    ``monthly_rent`` is the rent from the units that are let. The owner's
    own units are valued at the average let-unit rent.

    Raises:
        InputValidationError: If the input is invalid
    """
    data = coerce_input(HouseHackingInput, data, _collect_house_hacking_errors)
    raise_if_errors(_collect_house_hacking_errors(data), "House hacking input")

    rental = _analyze(data, with_schedule=False)
    mortgage = rental.mortgage

    let_units = data.total_units - data.owner_occupied_units
    owner_unit_rent_value = (
        safe_divide(data.monthly_rent, let_units) * data.owner_occupied_units
    )
    effective_living_cost = -rental.cash_flow.cash_flow_monthly

    return HouseHackingResult(
        rental=rental,
        **round_fields(
            {
                "total_housing_payment": mortgage.total_monthly_payment,
                "owner_unit_rent_value": owner_unit_rent_value,
                "effective_living_cost": effective_living_cost,
                "percent_of_mortgage_covered": safe_divide(
                    rental.cash_flow.effective_rent, mortgage.total_monthly_payment
                )
                * PERCENT,
                "net_housing_cost": effective_living_cost - owner_unit_rent_value,
            }
        ),
    )


def _best(values: List[float], names: List[str]):
    index = max(range(len(values)), key=lambda i: values[i])
    return values[index], names[index]


def compare_scenarios(
    data: Union[ComparativeAnalysisInput, dict],
) -> ComparativeAnalysisResult:
    """
    Analyze several rental scenarios and pick the best of each key metric.

    Scenarios are named "Scenario 1", "Scenario 2", ... unless names are
    given. Ties go to the earlier scenario.

    Raises:
        InputValidationError: If any scenario is invalid
    """
    data = coerce_input(ComparativeAnalysisInput, data)

    errors = []
    if not data.scenarios:
        errors.append("scenarios must contain at least one scenario")
    if data.scenario_names is not None and len(data.scenario_names) != len(data.scenarios):
        errors.append("scenario_names must have one name per scenario")
    for i, scenario in enumerate(data.scenarios):
        errors += [f"scenarios[{i}]: {error}" for error in collect_rental_errors(scenario)]
    raise_if_errors(errors, "Scenario comparison input")

    names = data.scenario_names or [
        f"Scenario {i + 1}" for i in range(len(data.scenarios))
    ]
    results = [_analyze(scenario, with_schedule=False) for scenario in data.scenarios]

    best_cash_flow = _best([r.cash_flow.cash_flow_monthly for r in results], names)
    best_cap_rate = _best([r.metrics.cap_rate for r in results], names)
    best_cash_on_cash = _best([r.metrics.cash_on_cash_return for r in results], names)
    best_total_roi = _best([r.metrics.total_return_on_investment for r in results], names)

    logger.debug(f"Compared {len(results)} scenarios")

    return ComparativeAnalysisResult(
        scenarios=results,
        scenario_names=names,
        comparison=ScenarioComparison(
            best_cash_flow=best_cash_flow[0],
            best_cash_flow_scenario=best_cash_flow[1],
            best_cap_rate=best_cap_rate[0],
            best_cap_rate_scenario=best_cap_rate[1],
            best_cash_on_cash=best_cash_on_cash[0],
            best_cash_on_cash_scenario=best_cash_on_cash[1],
            best_total_roi=best_total_roi[0],
            best_total_roi_scenario=best_total_roi[1],
        ),
    )
