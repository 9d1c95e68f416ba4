"""
Mortgage Calculations

Computes the monthly housing payment (P&I, property tax, insurance, PMI and
HOA), loan totals, and the optional amortization schedule, plus the
maximum property price a monthly budget supports.

Rates on the inputs are annual percentages (6.5 for 6.5%).
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from propcalc.calculations.amortization import (
    calculate_payment,
    generate_amortization_schedule,
)
from propcalc.calculations.normalize import (
    check_non_negative,
    check_percentage,
    coerce_input,
    collect_mortgage_errors,
    normalize_mortgage_input,
    raise_if_errors,
)
from propcalc.calculations.numbers import (
    MONTHS_PER_YEAR,
    PERCENT,
    annual_to_monthly,
    round2,
    safe_divide,
)
from propcalc.config import get_settings
from propcalc.schemas.mortgage import (
    AffordabilityInput,
    AffordabilityResult,
    AmortizationEntry,
    FlexibleMortgageInput,
    MortgageCalculationInput,
    MortgageCalculationResult,
    PaymentBreakdown,
)

logger = logging.getLogger(__name__)


@dataclass
class MortgageTerms:
    """Unrounded mortgage figures shared with the rental pipeline."""

    property_price: float
    loan_amount: float
    down_payment: float
    down_payment_percentage: float
    annual_rate: float  # decimal
    term_months: int
    principal_and_interest: float
    property_tax: float
    home_insurance: float
    pmi: float
    hoa: float
    pmi_removable: bool  # PMI stops at the LTV threshold
    first_payment_date: Optional[date] = None

    @property
    def total_monthly_payment(self) -> float:
        return (
            self.principal_and_interest
            + self.property_tax
            + self.home_insurance
            + self.pmi
            + self.hoa
        )

    @property
    def monthly_debt_service(self) -> float:
        """P&I plus PMI and HOA; taxes and insurance are operating expenses."""
        return self.principal_and_interest + self.pmi + self.hoa

    @property
    def schedule_pmi(self) -> float:
        """PMI carried into the schedule; zero when the down payment avoids it."""
        return self.pmi if self.pmi_removable else 0.0


def pmi_required(down_payment_percentage: float) -> bool:
    """PMI applies to a financed purchase with less than the no-PMI down payment."""
    settings = get_settings()
    return 0 < down_payment_percentage < settings.min_down_payment_for_no_pmi


def _resolve_loan_and_down(data: MortgageCalculationInput):
    price = data.property_price
    if data.loan_amount is not None and data.down_payment is not None:
        return data.loan_amount, data.down_payment
    if data.loan_amount is not None:
        return data.loan_amount, max(0.0, price - data.loan_amount)
    if data.down_payment is not None:
        return max(0.0, price - data.down_payment), data.down_payment
    return price, 0.0


def compute_mortgage_terms(data: MortgageCalculationInput) -> MortgageTerms:
    """
    Compute unrounded mortgage figures from a canonical input.

    Args:
        data: Normalized mortgage input

    Returns:
        MortgageTerms with monthly components
    """
    settings = get_settings()

    loan_amount, down_payment = _resolve_loan_and_down(data)
    down_payment_percentage = safe_divide(down_payment, data.property_price) * PERCENT

    annual_rate = data.annual_interest_rate / PERCENT
    term_months = data.loan_term_years * MONTHS_PER_YEAR
    principal_and_interest = calculate_payment(loan_amount, annual_rate, term_months)

    if data.pmi_monthly is not None:
        pmi = data.pmi_monthly
    elif data.auto_calculate_pmi and pmi_required(down_payment_percentage):
        pmi = loan_amount * settings.pmi_annual_rate / PERCENT / MONTHS_PER_YEAR
    else:
        pmi = 0.0

    return MortgageTerms(
        property_price=data.property_price,
        loan_amount=loan_amount,
        down_payment=down_payment,
        down_payment_percentage=down_payment_percentage,
        annual_rate=annual_rate,
        term_months=term_months,
        principal_and_interest=principal_and_interest,
        property_tax=annual_to_monthly(data.property_tax_annual),
        home_insurance=annual_to_monthly(data.home_insurance_annual),
        pmi=pmi,
        hoa=data.hoa_monthly,
        pmi_removable=down_payment_percentage < settings.min_down_payment_for_no_pmi,
        first_payment_date=data.first_payment_date,
    )


def build_mortgage_result(
    terms: MortgageTerms, with_schedule: bool = False
) -> MortgageCalculationResult:
    """Round mortgage figures into a result, optionally with the full schedule."""
    settings = get_settings()

    total_payment = terms.principal_and_interest * terms.term_months
    total_interest = total_payment - terms.loan_amount

    schedule = None
    if with_schedule:
        rows = generate_amortization_schedule(
            principal=terms.loan_amount,
            annual_rate=terms.annual_rate,
            amortization_months=terms.term_months,
            payment=terms.principal_and_interest,
            monthly_pmi=terms.schedule_pmi,
            pmi_ltv_threshold=settings.pmi_ltv_threshold,
            monthly_tax=terms.property_tax,
            monthly_insurance=terms.home_insurance,
            monthly_hoa=terms.hoa,
            start_date=terms.first_payment_date,
        )
        schedule = [AmortizationEntry(**row) for row in rows]

    return MortgageCalculationResult(
        principal_and_interest=round2(terms.principal_and_interest),
        property_tax=round2(terms.property_tax),
        home_insurance=round2(terms.home_insurance),
        pmi=round2(terms.pmi),
        hoa=round2(terms.hoa),
        total_monthly_payment=round2(terms.total_monthly_payment),
        total_payment=round2(total_payment),
        total_interest=round2(total_interest),
        loan_amount=round2(terms.loan_amount),
        down_payment_amount=round2(terms.down_payment),
        down_payment_percentage=round2(terms.down_payment_percentage),
        loan_to_value=round2(
            safe_divide(terms.loan_amount, terms.property_price) * PERCENT
        ),
        breakdown=PaymentBreakdown(
            principal_and_interest=round2(terms.principal_and_interest),
            property_tax=round2(terms.property_tax),
            home_insurance=round2(terms.home_insurance),
            pmi=round2(terms.pmi),
            hoa=round2(terms.hoa),
            total=round2(terms.total_monthly_payment),
        ),
        amortization_schedule=schedule,
    )


def calculate_mortgage(
    data: Union[FlexibleMortgageInput, dict], with_schedule: bool = False
) -> MortgageCalculationResult:
    """
    Calculate the monthly mortgage payment from a flexible input.

    Args:
        data: Mortgage input (model or dict)
        with_schedule: Include the month-by-month amortization schedule

    Returns:
        MortgageCalculationResult

    Raises:
        InputValidationError: If the input is invalid
    """
    data = coerce_input(FlexibleMortgageInput, data, collect_mortgage_errors)
    terms = compute_mortgage_terms(normalize_mortgage_input(data))
    logger.debug(
        f"Mortgage: loan={terms.loan_amount:.2f} rate={terms.annual_rate:.4f} "
        f"months={terms.term_months} schedule={with_schedule}"
    )
    return build_mortgage_result(terms, with_schedule=with_schedule)


def calculate_affordable_property(
    data: Union[AffordabilityInput, dict],
) -> AffordabilityResult:
    """
    Calculate the highest property price a monthly budget supports.

    Solves ``budget = price x (tax rate / 12 + loan share x (payment rate +
    PMI rate)) + insurance / 12 + HOA`` for the price, where the payment rate
    is the P&I per dollar borrowed.

    Args:
        data: Affordability input (model or dict)

    Returns:
        AffordabilityResult

    Raises:
        InputValidationError: If the input is invalid
    """
    settings = get_settings()
    data = coerce_input(AffordabilityInput, data)

    errors = []
    if data.max_monthly_payment <= 0:
        errors.append("max_monthly_payment must be greater than 0")
    if data.loan_term_years <= 0:
        errors.append("loan_term_years must be greater than 0")
    errors += check_percentage(data, ["down_payment_percentage"])
    errors += check_non_negative(
        data,
        ["annual_interest_rate", "property_tax_rate", "home_insurance_annual", "hoa_monthly"],
    )
    tax_rate = (
        data.property_tax_rate
        if data.property_tax_rate is not None
        else settings.default_property_tax_rate
    )
    # With nothing financed and no tax, the price never touches the budget
    if data.down_payment_percentage == PERCENT and tax_rate == 0:
        errors.append(
            "property_tax_rate must be greater than 0 "
            "when down_payment_percentage is 100"
        )
    raise_if_errors(errors, "Affordability input")

    insurance_annual = (
        data.home_insurance_annual
        if data.home_insurance_annual is not None
        else settings.default_home_insurance_annual
    )

    term_months = data.loan_term_years * MONTHS_PER_YEAR
    payment_rate = calculate_payment(1.0, data.annual_interest_rate / PERCENT, term_months)
    pmi_rate = (
        settings.pmi_annual_rate / PERCENT / MONTHS_PER_YEAR
        if pmi_required(data.down_payment_percentage)
        else 0.0
    )
    tax_factor = tax_rate / PERCENT / MONTHS_PER_YEAR
    loan_share = 1 - data.down_payment_percentage / PERCENT

    monthly_insurance = annual_to_monthly(insurance_annual)
    available = data.max_monthly_payment - monthly_insurance - data.hoa_monthly
    price_factor = tax_factor + loan_share * (payment_rate + pmi_rate)

    max_price = safe_divide(available, price_factor) if available > 0 else 0.0
    down_payment = max_price * data.down_payment_percentage / PERCENT
    max_loan = max_price - down_payment

    estimated_payment = (
        max_loan * payment_rate
        + max_price * tax_factor
        + max_loan * pmi_rate
        + (monthly_insurance + data.hoa_monthly if max_price > 0 else 0.0)
    )

    return AffordabilityResult(
        max_property_price=round2(max_price),
        max_loan_amount=round2(max_loan),
        down_payment=round2(down_payment),
        estimated_monthly_payment=round2(estimated_payment),
    )
