"""
Syndication Waterfall Calculations

Distributes a syndication's yearly cash flow and sale proceeds between the
limited partners (LP) and the general partner (GP).

Structure:
1. Preferred Return - LP receives its annual pref on LP capital first;
   any shortfall accrues and is paid ahead of later residuals
2. Cash Flow Split - Remaining yearly cash flow split LP/GP
3. Return of Capital - At sale, LP and GP equity returned pro-rata
4. Unpaid Pref - Accrued LP pref settled from sale proceeds
5. Profit Split - Remaining sale profit split LP/GP

Splits below 100% in total leave the remainder undistributed (fees,
reserves); the engine does not assign it to either party.
"""

import logging
from typing import Dict, List, Union

from propcalc.calculations.irr import compound_annual_return
from propcalc.calculations.normalize import (
    check_non_negative,
    check_percentage,
    coerce_input,
    raise_if_errors,
)
from propcalc.calculations.numbers import PERCENT, round_fields, safe_divide
from propcalc.schemas.strategies import (
    SyndicationDistribution,
    SyndicationInput,
    SyndicationResult,
)

logger = logging.getLogger(__name__)


def calculate_waterfall_distributions(
    lp_investment: float,
    gp_investment: float,
    preferred_return: float,
    lp_split: float,
    gp_split: float,
    annual_cash_flow: float,
    sale_proceeds: float,
    hold_period: int,
) -> List[Dict]:
    """
    Calculate yearly LP/GP distributions through the waterfall.

    Args:
        lp_investment: LP equity
        gp_investment: GP equity
        preferred_return: Annual LP preferred return in percent
        lp_split: LP share of residual cash flow and profit in percent
        gp_split: GP share of residual cash flow and profit in percent
        annual_cash_flow: Distributable cash flow each year
        sale_proceeds: Net proceeds at sale, distributed in the final year
        hold_period: Years held

    Returns:
        List of unrounded distribution records, one per year
    """
    distributions = []

    total_equity = lp_investment + gp_investment
    annual_pref = lp_investment * preferred_return / PERCENT
    lp_pref_unpaid = 0.0

    for year in range(1, hold_period + 1):
        # === STEP 1: Preferred Return ===
        available = max(0.0, annual_cash_flow)
        pref_owed = annual_pref + lp_pref_unpaid
        lp_pref_paid = min(available, pref_owed)
        lp_pref_unpaid = pref_owed - lp_pref_paid
        remaining = available - lp_pref_paid

        # === STEP 2: Cash Flow Split ===
        lp_cash_flow_share = remaining * lp_split / PERCENT
        gp_cash_flow_share = remaining * gp_split / PERCENT

        lp_return_of_capital = 0.0
        gp_return_of_capital = 0.0
        lp_profit_share = 0.0
        gp_profit_share = 0.0

        if year == hold_period:
            remaining = max(0.0, sale_proceeds)

            # === STEP 3: Return of Capital ===
            capital_payment = min(remaining, total_equity)
            lp_equity_pct = safe_divide(lp_investment, total_equity)
            lp_return_of_capital = capital_payment * lp_equity_pct
            gp_return_of_capital = capital_payment - lp_return_of_capital
            remaining -= capital_payment

            # === STEP 4: Unpaid Pref ===
            pref_catch_up = min(remaining, lp_pref_unpaid)
            lp_pref_paid += pref_catch_up
            lp_pref_unpaid -= pref_catch_up
            remaining -= pref_catch_up

            # === STEP 5: Profit Split ===
            lp_profit_share = remaining * lp_split / PERCENT
            gp_profit_share = remaining * gp_split / PERCENT

        total_to_lp = (
            lp_pref_paid + lp_cash_flow_share + lp_return_of_capital + lp_profit_share
        )
        total_to_gp = gp_cash_flow_share + gp_return_of_capital + gp_profit_share

        distributions.append(
            {
                "year": year,
                "cash_flow": annual_cash_flow,
                "lp_preferred_return": lp_pref_paid,
                "lp_cash_flow_share": lp_cash_flow_share,
                "gp_cash_flow_share": gp_cash_flow_share,
                "lp_return_of_capital": lp_return_of_capital,
                "gp_return_of_capital": gp_return_of_capital,
                "lp_profit_share": lp_profit_share,
                "gp_profit_share": gp_profit_share,
                "total_to_lp": total_to_lp,
                "total_to_gp": total_to_gp,
                "lp_pref_unpaid": lp_pref_unpaid,
            }
        )

    return distributions


def calculate_syndication_returns(
    data: Union[SyndicationInput, dict],
) -> SyndicationResult:
    """
    Calculate LP and GP returns for a syndication.

    IRR is approximated by compounding total distributions over the hold
    period as a single lump sum, not from dated cash flows.

    Raises:
        InputValidationError: If the input is invalid
    """
    data = coerce_input(SyndicationInput, data)

    errors = check_non_negative(
        data, ["lp_investment", "gp_investment", "preferred_return", "sale_proceeds"]
    )
    errors += check_percentage(data, ["lp_split", "gp_split"])
    if data.lp_investment + data.gp_investment <= 0:
        errors.append("lp_investment plus gp_investment must be greater than 0")
    if data.lp_split + data.gp_split > PERCENT:
        errors.append("lp_split plus gp_split must not exceed 100")
    if data.hold_period <= 0:
        errors.append("hold_period must be greater than 0")
    raise_if_errors(errors, "Syndication input")

    distributions = calculate_waterfall_distributions(
        lp_investment=data.lp_investment,
        gp_investment=data.gp_investment,
        preferred_return=data.preferred_return,
        lp_split=data.lp_split,
        gp_split=data.gp_split,
        annual_cash_flow=data.annual_cash_flow,
        sale_proceeds=data.sale_proceeds,
        hold_period=data.hold_period,
    )

    lp_total = sum(d["total_to_lp"] for d in distributions)
    gp_total = sum(d["total_to_gp"] for d in distributions)
    # Operating distributions of a typical year, before any sale
    operating = max(0.0, data.annual_cash_flow)
    lp_pref_year = min(operating, data.lp_investment * data.preferred_return / PERCENT)
    residual = operating - lp_pref_year

    logger.debug(
        f"Syndication: {data.hold_period} years, LP total {lp_total:.2f}, "
        f"GP total {gp_total:.2f}"
    )

    return SyndicationResult(
        **round_fields(
            {
                "lp_total_return": lp_total,
                "gp_total_return": gp_total,
                "lp_multiple": safe_divide(lp_total, data.lp_investment),
                "gp_multiple": safe_divide(gp_total, data.gp_investment),
                "lp_irr": compound_annual_return(
                    lp_total, data.lp_investment, data.hold_period
                )
                * PERCENT,
                "gp_irr": compound_annual_return(
                    gp_total, data.gp_investment, data.hold_period
                )
                * PERCENT,
                "lp_annual_cash_flow": lp_pref_year
                + residual * data.lp_split / PERCENT,
                "gp_annual_cash_flow": residual * data.gp_split / PERCENT,
            }
        ),
        distributions=[
            SyndicationDistribution(**round_fields(d)) for d in distributions
        ],
    )
