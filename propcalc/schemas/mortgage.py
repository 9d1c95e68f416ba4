"""
Mortgage and affordability models.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class FlexibleMortgageInput(BaseModel):
    """
    Mortgage input where amounts may be given in absolute terms or as a
    percentage of the property price.

    Each absolute/percent pair is mutually exclusive.
    """

    property_price: float

    # Loan amount - absolute or percent of price
    loan_amount: Optional[float] = None
    loan_amount_percent: Optional[float] = None

    # Down payment - absolute or percent of price
    down_payment: Optional[float] = None
    down_payment_percent: Optional[float] = None

    annual_interest_rate: float  # percent, e.g. 6.5
    loan_term_years: int

    # Property tax - annual amount or percent of price per year
    property_tax_annual: Optional[float] = None
    property_tax_percent: Optional[float] = None

    # Home insurance - annual amount or percent of price per year
    home_insurance_annual: Optional[float] = None
    home_insurance_percent: Optional[float] = None

    hoa_monthly: Optional[float] = None
    pmi_monthly: Optional[float] = None  # overrides the PMI estimate
    auto_calculate_pmi: bool = True

    first_payment_date: Optional[date] = None


class MortgageCalculationInput(BaseModel):
    """Canonical mortgage input with every amount resolved to dollars."""

    property_price: float
    loan_amount: Optional[float] = None  # None: derive from down payment
    down_payment: Optional[float] = None  # None: derive from loan amount
    annual_interest_rate: float
    loan_term_years: int
    property_tax_annual: float = 0.0
    home_insurance_annual: float = 0.0
    hoa_monthly: float = 0.0
    pmi_monthly: Optional[float] = None
    auto_calculate_pmi: bool = True
    first_payment_date: Optional[date] = None


class PaymentBreakdown(BaseModel):
    """Monthly payment components."""

    principal_and_interest: float
    property_tax: float
    home_insurance: float
    pmi: float
    hoa: float
    total: float


class AmortizationEntry(BaseModel):
    """One month of the amortization schedule."""

    month: int
    payment_date: Optional[date] = None
    principal_and_interest: float
    principal: float
    interest: float
    property_tax: float
    home_insurance: float
    pmi: float
    hoa: float
    total_payment: float
    remaining_balance: float
    total_principal_paid: float
    total_interest_paid: float
    loan_to_value: float  # remaining balance / original loan x 100


class MortgageCalculationResult(BaseModel):
    """Monthly payment, loan totals and optional amortization schedule."""

    principal_and_interest: float
    property_tax: float
    home_insurance: float
    pmi: float
    hoa: float
    total_monthly_payment: float
    total_payment: float
    total_interest: float
    loan_amount: float
    down_payment_amount: float
    down_payment_percentage: float
    loan_to_value: float
    breakdown: PaymentBreakdown
    amortization_schedule: Optional[List[AmortizationEntry]] = None


class AffordabilityInput(BaseModel):
    """Input for the maximum affordable property price."""

    max_monthly_payment: float
    annual_interest_rate: float
    loan_term_years: int
    down_payment_percentage: float
    property_tax_rate: Optional[float] = None  # annual percent of value
    home_insurance_annual: Optional[float] = None
    hoa_monthly: float = 0.0


class AffordabilityResult(BaseModel):
    """Maximum price supported by a monthly budget."""

    max_property_price: float
    max_loan_amount: float
    down_payment: float
    estimated_monthly_payment: float
