"""
Investment Strategy Calculations

Independent calculators for acquisition and exit strategies. Each takes its
own input model (or a dict), validates it, and returns its own result.

Rates and percentages on the inputs are percents (10 for 10%).
"""

import logging
from typing import Iterable, Union

from propcalc.calculations.amortization import (
    calculate_payment,
    calculate_remaining_balance,
)
from propcalc.calculations.expenses import calculate_operating_expenses
from propcalc.calculations.normalize import (
    check_non_negative,
    check_percentage,
    check_positive,
    coerce_input,
    collect_expense_errors,
    raise_if_errors,
)
from propcalc.calculations.numbers import (
    MONTHS_PER_YEAR,
    PERCENT,
    percent_of,
    round_fields,
    safe_divide,
)
from propcalc.config import get_settings
from propcalc.schemas.strategies import (
    AirbnbInput,
    BRRRRInput,
    BRRRRResult,
    CommercialNOIInput,
    CommercialNOIResult,
    FixAndFlipInput,
    FixAndFlipResult,
    HardMoneyInput,
    HardMoneyResult,
    LandDevelopmentInput,
    LandDevelopmentResult,
    MaximumAllowableOfferInput,
    MaximumAllowableOfferResult,
    PrivateLendingInput,
    PrivateLendingResult,
    ShortTermRentalResult,
    ValueAddInput,
    ValueAddResult,
    WholesaleInput,
    WholesaleResult,
)

logger = logging.getLogger(__name__)


def _validate(
    data,
    context: str,
    positive: Iterable[str] = (),
    non_negative: Iterable[str] = (),
    percentages: Iterable[str] = (),
) -> None:
    errors = check_positive(data, positive)
    errors += check_non_negative(data, non_negative)
    errors += check_percentage(data, percentages)
    raise_if_errors(errors, context)


def _annualize_simple(roi: float, months: float) -> float:
    """Scale a return earned over ``months`` to a yearly rate (no compounding)."""
    return safe_divide(roi, months) * MONTHS_PER_YEAR


# =============================================================================
# FLIPS
# =============================================================================


def calculate_maximum_allowable_offer(
    data: Union[MaximumAllowableOfferInput, dict],
) -> MaximumAllowableOfferResult:
    """
    Calculate the maximum allowable offer (the "70% rule").

    ``MAO = ARV x margin - repairs - wholesale fee``, with the margin
    defaulting to 70% of ARV.
    """
    settings = get_settings()
    data = coerce_input(MaximumAllowableOfferInput, data)
    _validate(
        data,
        "Maximum allowable offer input",
        positive=["after_repair_value"],
        non_negative=["repair_costs", "wholesale_fee"],
        percentages=["profit_margin"],
    )

    margin = (
        data.profit_margin
        if data.profit_margin is not None
        else settings.default_profit_margin
    )
    mao = percent_of(data.after_repair_value, margin) - data.repair_costs - data.wholesale_fee
    total_investment = mao + data.repair_costs + data.wholesale_fee
    potential_profit = data.after_repair_value - total_investment

    return MaximumAllowableOfferResult(
        **round_fields(
            {
                "mao": mao,
                "potential_profit": potential_profit,
                "roi": safe_divide(potential_profit, total_investment) * PERCENT,
            }
        )
    )


def calculate_fix_and_flip(data: Union[FixAndFlipInput, dict]) -> FixAndFlipResult:
    """
    Calculate profit and returns for a fix-and-flip.

    Break-even selling costs is the most that can be spent selling before
    the sale at ARV stops covering every other cost.
    """
    data = coerce_input(FixAndFlipInput, data)
    _validate(
        data,
        "Fix and flip input",
        positive=["purchase_price", "arv", "holding_months"],
        non_negative=[
            "rehab_costs",
            "holding_costs",
            "selling_costs",
            "closing_costs",
            "financing_costs",
        ],
    )

    costs_before_sale = (
        data.purchase_price
        + data.rehab_costs
        + data.holding_costs
        + data.closing_costs
        + data.financing_costs
    )
    total_investment = costs_before_sale + data.selling_costs
    projected_profit = data.arv - total_investment
    roi = safe_divide(projected_profit, total_investment) * PERCENT

    return FixAndFlipResult(
        **round_fields(
            {
                "total_investment": total_investment,
                "projected_profit": projected_profit,
                "roi": roi,
                "annualized_return": _annualize_simple(roi, data.holding_months),
                "break_even_arv": total_investment,
                "break_even_selling_costs": data.arv - costs_before_sale,
            }
        )
    )


def calculate_wholesale_profit(data: Union[WholesaleInput, dict]) -> WholesaleResult:
    """
    Calculate a wholesaler's profit on an assigned contract.

    When ARV is given, the end buyer's maximum price follows the buyer's
    margin rule and the spread shows the room left in the deal.
    """
    settings = get_settings()
    data = coerce_input(WholesaleInput, data)
    _validate(
        data,
        "Wholesale input",
        positive=["contract_price"],
        non_negative=["assignment_fee", "marketing_costs", "other_costs", "arv", "repair_estimate"],
    )

    total_costs = data.marketing_costs + data.other_costs
    net_profit = data.assignment_fee - total_costs
    end_buyer_price = data.contract_price + data.assignment_fee

    buyer_max = None
    buyer_spread = None
    if data.arv is not None:
        buyer_max = percent_of(data.arv, settings.wholesale_buyer_margin) - data.repair_estimate
        buyer_spread = buyer_max - end_buyer_price

    return WholesaleResult(
        **round_fields(
            {
                "gross_profit": data.assignment_fee,
                "total_costs": total_costs,
                "net_profit": net_profit,
                "roi": safe_divide(net_profit, total_costs) * PERCENT,
                "end_buyer_price": end_buyer_price,
                "buyer_max_purchase_price": buyer_max,
                "buyer_spread": buyer_spread,
            }
        )
    )


# =============================================================================
# BUY AND HOLD VARIANTS
# =============================================================================


def calculate_brrrr(data: Union[BRRRRInput, dict]) -> BRRRRResult:
    """
    Calculate a buy, rehab, rent, refinance, repeat deal.

    Interest during the rehab period, when a rate is given, is carried on
    purchase plus rehab for the months before refinancing. Operating
    expenses resolve exactly as for a rental, with percent-of-value
    categories taken of ARV.
    """
    data = coerce_input(BRRRRInput, data)
    errors = check_positive(
        data,
        ["purchase_price", "arv", "monthly_rent", "refinance_loan_term_years"],
    )
    errors += check_non_negative(
        data,
        [
            "rehab_costs",
            "holding_months_before_refinance",
            "closing_costs",
            "refinance_closing_costs",
            "interest_rate_during_rehab",
            "refinance_interest_rate",
        ],
    )
    errors += check_percentage(data, ["refinance_ltv"])
    errors += collect_expense_errors(data.expenses)
    raise_if_errors(errors, "BRRRR input")

    carrying_costs = 0.0
    if data.interest_rate_during_rehab is not None:
        carrying_costs = (
            (data.purchase_price + data.rehab_costs)
            * data.interest_rate_during_rehab
            / PERCENT
            / MONTHS_PER_YEAR
            * data.holding_months_before_refinance
        )

    total_investment = (
        data.purchase_price + data.rehab_costs + data.closing_costs + carrying_costs
    )
    refinance_loan = percent_of(data.arv, data.refinance_ltv)
    cash_recovered = refinance_loan - total_investment - data.refinance_closing_costs
    cash_left_in = max(0.0, -cash_recovered)

    monthly_payment = calculate_payment(
        refinance_loan,
        data.refinance_interest_rate / PERCENT,
        data.refinance_loan_term_years * MONTHS_PER_YEAR,
    )
    expenses = calculate_operating_expenses(data.expenses, data.monthly_rent, data.arv)
    effective_rent = data.monthly_rent - expenses.vacancy
    monthly_noi = effective_rent - expenses.total_monthly
    monthly_cash_flow = monthly_noi - monthly_payment

    infinite_return = cash_left_in <= 0 and monthly_cash_flow > 0

    return BRRRRResult(
        **round_fields(
            {
                "total_investment": total_investment,
                "rehab_carrying_costs": carrying_costs,
                "arv_estimate": data.arv,
                "refinance_loan_amount": refinance_loan,
                "cash_recovered": cash_recovered,
                "cash_left_in": cash_left_in,
                "monthly_rent_income": data.monthly_rent,
                "monthly_expenses": expenses.total_monthly,
                "monthly_mortgage_payment": monthly_payment,
                "monthly_cash_flow": monthly_cash_flow,
                "infinite_return": infinite_return,
                "cash_on_cash_return": safe_divide(
                    monthly_cash_flow * MONTHS_PER_YEAR, cash_left_in
                )
                * PERCENT,
                "cap_rate": safe_divide(monthly_noi * MONTHS_PER_YEAR, data.arv) * PERCENT,
                "equity": data.arv - refinance_loan,
            }
        )
    )


def calculate_airbnb_metrics(
    data: Union[AirbnbInput, dict],
) -> ShortTermRentalResult:
    """
    Calculate short-term rental income over a standard month.

    Revenue is nightly rate times occupied nights plus a cleaning fee per
    stay; RevPAR is the nightly rate times occupancy.
    """
    settings = get_settings()
    data = coerce_input(AirbnbInput, data)
    _validate(
        data,
        "Short-term rental input",
        positive=["property_price"],
        non_negative=[
            "average_daily_rate",
            "cleaning_fee_per_stay",
            "average_stay_length",
            "monthly_expenses",
            "down_payment",
        ],
        percentages=["occupancy_rate", "management_fee_percent"],
    )

    occupied_days = percent_of(settings.days_per_month, data.occupancy_rate)
    stays = safe_divide(occupied_days, data.average_stay_length)

    gross_revenue = (
        data.average_daily_rate * occupied_days + data.cleaning_fee_per_stay * stays
    )
    management_fees = percent_of(gross_revenue, data.management_fee_percent or 0.0)
    net_monthly = gross_revenue - data.monthly_expenses - management_fees
    annual_net = net_monthly * MONTHS_PER_YEAR

    return ShortTermRentalResult(
        **round_fields(
            {
                "gross_monthly_revenue": gross_revenue,
                "management_fees": management_fees,
                "net_monthly_income": net_monthly,
                "annual_net_income": annual_net,
                "cash_on_cash_return": safe_divide(annual_net, data.down_payment) * PERCENT,
                "cap_rate": safe_divide(annual_net, data.property_price) * PERCENT,
                "gross_yield": safe_divide(
                    gross_revenue * MONTHS_PER_YEAR, data.property_price
                )
                * PERCENT,
                "rev_par": percent_of(data.average_daily_rate, data.occupancy_rate),
                "average_occupied_days": occupied_days,
                "monthly_stays": stays,
            }
        )
    )


# =============================================================================
# COMMERCIAL
# =============================================================================


def calculate_commercial_noi(
    data: Union[CommercialNOIInput, dict],
) -> CommercialNOIResult:
    """NOI from effective gross income less expenses, management and reserves."""
    data = coerce_input(CommercialNOIInput, data)
    _validate(
        data,
        "Commercial NOI input",
        non_negative=[
            "gross_scheduled_income",
            "vacancy_loss",
            "other_income",
            "operating_expenses",
            "management_fees",
            "reserves",
        ],
    )

    effective_gross_income = (
        data.gross_scheduled_income - data.vacancy_loss + data.other_income
    )
    total_expenses = data.operating_expenses + data.management_fees + data.reserves

    return CommercialNOIResult(
        **round_fields(
            {
                "effective_gross_income": effective_gross_income,
                "total_expenses": total_expenses,
                "noi": effective_gross_income - total_expenses,
                "expense_ratio": safe_divide(total_expenses, effective_gross_income)
                * PERCENT,
            }
        )
    )


def calculate_value_add_potential(data: Union[ValueAddInput, dict]) -> ValueAddResult:
    """
    Value created by raising NOI, valued at the exit cap rate.

    Invested capital is the current value plus renovation costs.
    """
    data = coerce_input(ValueAddInput, data)
    _validate(
        data,
        "Value-add input",
        non_negative=[
            "current_noi",
            "projected_noi",
            "current_cap_rate",
            "exit_cap_rate",
            "renovation_costs",
            "current_value",
        ],
    )

    current_value_by_cap = safe_divide(data.current_noi, data.current_cap_rate / PERCENT)
    projected_value = safe_divide(data.projected_noi, data.exit_cap_rate / PERCENT)
    invested = data.current_value + data.renovation_costs
    value_created = projected_value - invested

    return ValueAddResult(
        **round_fields(
            {
                "current_value_by_cap": current_value_by_cap,
                "projected_value": projected_value,
                "value_created": value_created,
                "roi": safe_divide(value_created, invested) * PERCENT,
                "equity_multiple": safe_divide(projected_value, invested),
            }
        )
    )


# =============================================================================
# LENDING
# =============================================================================


def calculate_hard_money_loan(data: Union[HardMoneyInput, dict]) -> HardMoneyResult:
    """
    Calculate the cost of a short-term hard money loan.

    Interest-only loans repay the full principal as a balloon at the end of
    the term. Amortizing loans pay on ``amortization_months`` (the term by
    default) and balloon whatever balance remains at the end of the term.
    The effective rate spreads points and interest over the term.
    """
    data = coerce_input(HardMoneyInput, data)
    errors = check_positive(data, ["loan_amount", "term_months"])
    errors += check_non_negative(data, ["interest_rate", "points"])
    if data.amortization_months is not None and data.amortization_months < data.term_months:
        errors.append("amortization_months must be at least term_months")
    raise_if_errors(errors, "Hard money input")

    annual_rate = data.interest_rate / PERCENT
    points_cost = percent_of(data.loan_amount, data.points)

    if data.interest_only:
        monthly_payment = data.loan_amount * annual_rate / MONTHS_PER_YEAR
        total_interest = monthly_payment * data.term_months
        balloon = data.loan_amount
    else:
        amortization_months = data.amortization_months or data.term_months
        monthly_payment = calculate_payment(data.loan_amount, annual_rate, amortization_months)
        balloon = calculate_remaining_balance(
            data.loan_amount, annual_rate, amortization_months, data.term_months
        )
        principal_repaid = data.loan_amount - balloon
        total_interest = monthly_payment * data.term_months - principal_repaid

    total_cost = points_cost + total_interest
    term_years = data.term_months / MONTHS_PER_YEAR

    return HardMoneyResult(
        **round_fields(
            {
                "monthly_payment": monthly_payment,
                "points_cost": points_cost,
                "total_interest": total_interest,
                "total_cost": total_cost,
                "effective_rate": safe_divide(
                    safe_divide(total_cost, data.loan_amount), term_years
                )
                * PERCENT,
                "balloon_payment": balloon,
            }
        )
    )


def calculate_private_lending_returns(
    data: Union[PrivateLendingInput, dict],
) -> PrivateLendingResult:
    """
    Calculate a private lender's income on an interest-only note.

    Total return includes the principal repaid at the end of the term.
    """
    data = coerce_input(PrivateLendingInput, data)
    _validate(
        data,
        "Private lending input",
        positive=["loan_amount", "term_months"],
        non_negative=["interest_rate", "points", "servicing_fee_monthly"],
    )

    total_points = percent_of(data.loan_amount, data.points)
    monthly_interest = data.loan_amount * data.interest_rate / PERCENT / MONTHS_PER_YEAR
    monthly_income = monthly_interest + data.servicing_fee_monthly
    total_return = total_points + monthly_income * data.term_months + data.loan_amount
    term_years = data.term_months / MONTHS_PER_YEAR

    return PrivateLendingResult(
        **round_fields(
            {
                "monthly_income": monthly_income,
                "total_interest": monthly_interest * data.term_months,
                "total_return": total_return,
                "annualized_yield": safe_divide(
                    safe_divide(total_return - data.loan_amount, data.loan_amount),
                    term_years,
                )
                * PERCENT,
                "total_points": total_points,
            }
        )
    )


# =============================================================================
# LAND
# =============================================================================


def calculate_land_development(
    data: Union[LandDevelopmentInput, dict],
) -> LandDevelopmentResult:
    """Profit on subdividing land into lots and selling them."""
    data = coerce_input(LandDevelopmentInput, data)
    _validate(
        data,
        "Land development input",
        positive=["number_of_lots", "development_time_months"],
        non_negative=[
            "land_cost",
            "development_costs",
            "soft_costs",
            "carrying_costs",
            "average_lot_price",
        ],
    )

    total_costs = (
        data.land_cost + data.development_costs + data.soft_costs + data.carrying_costs
    )
    gross_revenue = data.number_of_lots * data.average_lot_price
    net_profit = gross_revenue - total_costs
    roi = safe_divide(net_profit, total_costs) * PERCENT

    logger.debug(
        f"Land development: {data.number_of_lots} lots, net profit {net_profit:.2f}"
    )

    return LandDevelopmentResult(
        **round_fields(
            {
                "total_costs": total_costs,
                "gross_revenue": gross_revenue,
                "net_profit": net_profit,
                "profit_margin": safe_divide(net_profit, gross_revenue) * PERCENT,
                "profit_per_lot": safe_divide(net_profit, data.number_of_lots),
                "cost_per_lot": safe_divide(total_costs, data.number_of_lots),
                "roi": roi,
                "annualized_roi": _annualize_simple(roi, data.development_time_months),
            }
        )
    )
