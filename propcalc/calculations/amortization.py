"""
Loan Amortization Calculations

Implements the fixed-rate payment formula, the month-by-month amortization
schedule (with PMI removal) and balance replay used by projections.

Rates in this module are annual decimals (0.06 for 6%).
"""

from typing import List, Dict, Optional, Tuple
from datetime import date
from dateutil.relativedelta import relativedelta

from propcalc.calculations.numbers import MONTHS_PER_YEAR, PERCENT, safe_divide


def calculate_payment(
    principal: float, annual_rate: float, amortization_months: int
) -> float:
    """
    Calculate monthly loan payment.

    Matches Excel's PMT() function.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.05 for 5%)
        amortization_months: Total amortization period in months

    Returns:
        Monthly payment amount (positive number)
    """
    if principal <= 0:
        return 0.0
    if amortization_months <= 0:
        return 0.0

    monthly_rate = annual_rate / 12

    if monthly_rate == 0:
        return principal / amortization_months

    payment = (
        principal
        * monthly_rate
        * ((1 + monthly_rate) ** amortization_months)
        / (((1 + monthly_rate) ** amortization_months) - 1)
    )

    return payment


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N payments."""
    monthly_rate = annual_rate / 12
    payment = calculate_payment(principal, annual_rate, amortization_months)

    if monthly_rate == 0:
        return max(0.0, principal - payment * payments_completed)

    balance = principal * ((1 + monthly_rate) ** payments_completed) - payment * (
        ((1 + monthly_rate) ** payments_completed - 1) / monthly_rate
    )

    return max(0.0, balance)


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    payment: Optional[float] = None,
    monthly_pmi: float = 0.0,
    pmi_ltv_threshold: float = 80.0,
    monthly_tax: float = 0.0,
    monthly_insurance: float = 0.0,
    monthly_hoa: float = 0.0,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a full amortization schedule.

    PMI is charged in a month only while the balance after that month's
    payment is above ``pmi_ltv_threshold`` percent of the original loan.
    Pass ``monthly_pmi=0`` when PMI never applies.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal
        amortization_months: Amortization period in months
        payment: Monthly P&I (computed from the other terms when omitted)
        monthly_pmi: PMI charged while the LTV is above the threshold
        pmi_ltv_threshold: LTV percent at or below which PMI stops
        monthly_tax: Monthly property tax escrow
        monthly_insurance: Monthly insurance escrow
        monthly_hoa: Monthly HOA dues
        start_date: Date of first payment (entries are undated when omitted)

    Returns:
        List of amortization rows, one per month
    """
    schedule = []
    balance = principal
    monthly_rate = annual_rate / 12

    if payment is None:
        payment = calculate_payment(principal, annual_rate, amortization_months)

    total_principal = 0.0
    total_interest = 0.0

    for period in range(1, amortization_months + 1):
        interest = balance * monthly_rate
        principal_pmt = payment - interest
        balance -= principal_pmt

        total_principal += principal_pmt
        total_interest += interest

        current_ltv = safe_divide(balance, principal) * PERCENT
        pmi = monthly_pmi if current_ltv > pmi_ltv_threshold else 0.0

        total_payment = payment + monthly_tax + monthly_insurance + pmi + monthly_hoa

        schedule.append(
            {
                "month": period,
                "payment_date": (
                    start_date + relativedelta(months=period - 1)
                    if start_date is not None
                    else None
                ),
                "principal_and_interest": round(payment, 2),
                "principal": round(principal_pmt, 2),
                "interest": round(interest, 2),
                "property_tax": round(monthly_tax, 2),
                "home_insurance": round(monthly_insurance, 2),
                "pmi": round(pmi, 2),
                "hoa": round(monthly_hoa, 2),
                "total_payment": round(total_payment, 2),
                "remaining_balance": round(max(0.0, balance), 2),
                "total_principal_paid": round(total_principal, 2),
                "total_interest_paid": round(total_interest, 2),
                "loan_to_value": round(max(0.0, current_ltv), 2),
            }
        )

    return schedule


def replay_balance(
    principal: float, annual_rate: float, payment: float, months: int
) -> Tuple[float, float]:
    """
    Advance a loan balance by replaying the monthly recurrence.

    Returns:
        Tuple of (remaining balance, principal paid over the months)
    """
    balance = principal
    monthly_rate = annual_rate / 12
    principal_paid = 0.0

    for _ in range(months):
        interest = balance * monthly_rate
        principal_pmt = payment - interest
        principal_paid += principal_pmt
        balance = max(0.0, balance - principal_pmt)

    return balance, principal_paid


def summarize_loan_by_year(
    principal: float,
    annual_rate: float,
    payment: float,
    amortization_months: int,
    years: int,
    monthly_pmi: float = 0.0,
    pmi_ltv_threshold: float = 80.0,
) -> List[Dict]:
    """
    Summarize loan activity per year by replaying the monthly recurrence.

    Payments stop once the amortization period ends; later years show no
    debt service and a zero balance.

    Returns:
        One row per year with ending balance, principal, interest, P&I paid
        and PMI paid during that year
    """
    rows = []
    balance = principal
    monthly_rate = annual_rate / 12
    month = 0

    for year in range(1, years + 1):
        principal_paid = 0.0
        interest_paid = 0.0
        payments_made = 0.0
        pmi_paid = 0.0

        for _ in range(MONTHS_PER_YEAR):
            month += 1
            if month > amortization_months:
                break
            interest = balance * monthly_rate
            principal_pmt = payment - interest
            balance = max(0.0, balance - principal_pmt)

            principal_paid += principal_pmt
            interest_paid += interest
            payments_made += payment
            if safe_divide(balance, principal) * PERCENT > pmi_ltv_threshold:
                pmi_paid += monthly_pmi

        rows.append(
            {
                "year": year,
                "ending_balance": balance,
                "principal_paid": principal_paid,
                "interest_paid": interest_paid,
                "debt_service": payments_made,
                "pmi_paid": pmi_paid,
            }
        )

    return rows


def calculate_dscr(noi: float, debt_service: float, floor: float = 0.01) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        noi: Net Operating Income for the period
        debt_service: Debt service for the period
        floor: Debt service below this is treated as no debt

    Returns:
        DSCR ratio, or 0 when there is no meaningful debt service
    """
    if debt_service < floor:
        return 0.0
    return noi / debt_service


def calculate_loan_constant(annual_debt_service: float, principal: float) -> float:
    """Calculate loan constant (annual debt service / loan amount) in percent."""
    return safe_divide(annual_debt_service, principal) * PERCENT
