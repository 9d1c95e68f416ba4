"""
Result field documentation.

Pure data describing what each result field means, its unit, a display
format hint and how it is derived. Nothing here takes part in a
calculation.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class FieldMetadata:
    key: str
    description: str
    unit: Optional[str] = None  # dollars, percent, months, years, ratio
    format: Optional[str] = None  # currency, percentage, number, integer, ratio, boolean
    formula: Optional[str] = None
    category: Optional[str] = None  # mortgage, cash_flow, expenses, metrics, income


MORTGAGE_RESULT_FIELDS: Tuple[FieldMetadata, ...] = (
    FieldMetadata(
        "principal_and_interest",
        "Monthly principal and interest payment, excluding taxes, insurance, PMI and HOA",
        "dollars",
        "currency",
        "L * r * (1 + r)^n / ((1 + r)^n - 1), r = rate / 12, n = years * 12",
        "mortgage",
    ),
    FieldMetadata(
        "property_tax",
        "Monthly property tax",
        "dollars",
        "currency",
        "(property_tax_annual or property_tax_percent * property_price) / 12",
        "mortgage",
    ),
    FieldMetadata(
        "home_insurance",
        "Monthly home insurance premium",
        "dollars",
        "currency",
        "(home_insurance_annual or home_insurance_percent * property_price) / 12",
        "mortgage",
    ),
    FieldMetadata(
        "pmi",
        "Monthly private mortgage insurance, charged when the down payment is under 20% of the price",
        "dollars",
        "currency",
        "loan_amount * 0.75% / 12",
        "mortgage",
    ),
    FieldMetadata("hoa", "Monthly homeowners association dues", "dollars", "currency", None, "mortgage"),
    FieldMetadata(
        "total_monthly_payment",
        "Full monthly housing payment",
        "dollars",
        "currency",
        "principal_and_interest + property_tax + home_insurance + pmi + hoa",
        "mortgage",
    ),
    FieldMetadata(
        "total_payment",
        "Principal and interest paid over the full term",
        "dollars",
        "currency",
        "principal_and_interest * term months",
        "mortgage",
    ),
    FieldMetadata(
        "total_interest",
        "Interest paid over the full term",
        "dollars",
        "currency",
        "total_payment - loan_amount",
        "mortgage",
    ),
    FieldMetadata("loan_amount", "Amount borrowed", "dollars", "currency", None, "mortgage"),
    FieldMetadata("down_payment_amount", "Cash paid toward the price at purchase", "dollars", "currency", None, "mortgage"),
    FieldMetadata(
        "down_payment_percentage",
        "Down payment as a share of the price",
        "percent",
        "percentage",
        "down_payment_amount / property_price * 100",
        "mortgage",
    ),
    FieldMetadata(
        "loan_to_value",
        "Loan as a share of the price",
        "percent",
        "percentage",
        "loan_amount / property_price * 100",
        "mortgage",
    ),
)


CASH_FLOW_FIELDS: Tuple[FieldMetadata, ...] = (
    FieldMetadata("gross_rent", "Monthly rent before vacancy", "dollars", "currency", "monthly_rent", "cash_flow"),
    FieldMetadata(
        "effective_rent",
        "Monthly rent after vacancy",
        "dollars",
        "currency",
        "monthly_rent * (1 - vacancy_rate / 100)",
        "cash_flow",
    ),
    FieldMetadata(
        "total_expenses",
        "Monthly operating expenses, including property tax and insurance; excludes debt service",
        "dollars",
        "currency",
        "operating_expenses.total_monthly",
        "cash_flow",
    ),
    FieldMetadata(
        "net_operating_income",
        "Monthly income before debt service",
        "dollars",
        "currency",
        "effective_rent - total_expenses",
        "cash_flow",
    ),
    FieldMetadata(
        "debt_service",
        "Monthly loan payments",
        "dollars",
        "currency",
        "principal_and_interest + pmi + hoa",
        "cash_flow",
    ),
    FieldMetadata(
        "cash_flow_monthly",
        "Monthly cash left after expenses and debt service",
        "dollars",
        "currency",
        "net_operating_income - debt_service",
        "cash_flow",
    ),
    FieldMetadata("cash_flow_annual", "Yearly cash flow", "dollars", "currency", "cash_flow_monthly * 12", "cash_flow"),
)


EXPENSE_FIELDS: Tuple[FieldMetadata, ...] = (
    FieldMetadata(
        "vacancy",
        "Monthly rent lost to vacancy; reduces rent rather than adding to expenses",
        "dollars",
        "currency",
        "monthly_rent * vacancy_rate / 100",
        "expenses",
    ),
    FieldMetadata(
        "property_management",
        "Monthly property management fee",
        "dollars",
        "currency",
        "property_management_flat or monthly_rent * property_management_percent / 100",
        "expenses",
    ),
    FieldMetadata(
        "maintenance",
        "Monthly maintenance reserve",
        "dollars",
        "currency",
        "maintenance_annual / 12 or rent * percent_of_rent / 100 or price * percent_of_value / 100 / 12",
        "expenses",
    ),
    FieldMetadata(
        "capex",
        "Monthly capital expenditure reserve",
        "dollars",
        "currency",
        "capex_annual / 12 or rent * percent_of_rent / 100 or price * percent_of_value / 100 / 12",
        "expenses",
    ),
    FieldMetadata(
        "total_monthly",
        "All monthly operating expenses including property tax and insurance",
        "dollars",
        "currency",
        "sum of categories + property_tax + home_insurance",
        "expenses",
    ),
)


METRIC_FIELDS: Tuple[FieldMetadata, ...] = (
    FieldMetadata(
        "cap_rate",
        "Unleveraged yield on the purchase price",
        "percent",
        "percentage",
        "annual NOI / property_price * 100",
        "metrics",
    ),
    FieldMetadata(
        "cash_on_cash_return",
        "Yearly cash flow on the cash invested",
        "percent",
        "percentage",
        "annual cash flow / (down payment + closing costs + rehab costs) * 100",
        "metrics",
    ),
    FieldMetadata(
        "gross_rent_multiplier",
        "Price as a multiple of yearly gross rent",
        "ratio",
        "ratio",
        "property_price / annual rent",
        "metrics",
    ),
    FieldMetadata(
        "debt_coverage_ratio",
        "How many times NOI covers debt service; 0 when there is no debt service",
        "ratio",
        "ratio",
        "annual NOI / annual debt service",
        "metrics",
    ),
    FieldMetadata(
        "operating_expense_ratio",
        "Operating expenses as a share of gross rent",
        "percent",
        "percentage",
        "annual operating expenses / annual rent * 100",
        "metrics",
    ),
    FieldMetadata(
        "break_even_occupancy",
        "Occupancy needed to cover expenses and debt service",
        "percent",
        "percentage",
        "(annual operating expenses + annual debt service) / annual rent * 100",
        "metrics",
    ),
    FieldMetadata(
        "total_return_on_investment",
        "First-year return from cash flow, appreciation, principal paydown and tax savings",
        "percent",
        "percentage",
        "(cash flow + appreciation + equity buildup + tax shelter) / cash invested * 100",
        "metrics",
    ),
    FieldMetadata(
        "one_percent_rule",
        "Monthly rent is at least 1% of the price",
        None,
        "boolean",
        "monthly_rent >= property_price * 0.01",
        "metrics",
    ),
    FieldMetadata(
        "two_percent_rule",
        "Monthly rent is at least 2% of the price",
        None,
        "boolean",
        "monthly_rent >= property_price * 0.02",
        "metrics",
    ),
    FieldMetadata(
        "fifty_percent_rule",
        "Rule-of-thumb monthly operating expense estimate",
        "dollars",
        "currency",
        "monthly_rent * 0.5",
        "metrics",
    ),
    FieldMetadata(
        "loan_constant",
        "Yearly principal and interest as a share of the loan",
        "percent",
        "percentage",
        "annual P&I / loan_amount * 100",
        "metrics",
    ),
    FieldMetadata(
        "debt_yield_ratio",
        "NOI as a share of the loan",
        "percent",
        "percentage",
        "annual NOI / loan_amount * 100",
        "metrics",
    ),
    FieldMetadata(
        "annual_depreciation",
        "Straight-line depreciation of the building",
        "dollars",
        "currency",
        "(property_price - land_value) / depreciation_years",
        "metrics",
    ),
    FieldMetadata(
        "equity_buildup_year1",
        "Principal paid down in the first twelve payments",
        "dollars",
        "currency",
        "sum of the principal portion of payments 1-12",
        "metrics",
    ),
    FieldMetadata(
        "vacancy_sensitivity",
        "Yearly cash flow lost per point of vacancy",
        "dollars",
        "currency",
        "annual rent / 100",
        "metrics",
    ),
    FieldMetadata(
        "interest_rate_sensitivity",
        "Change in yearly cash flow if the interest rate were one point higher",
        "dollars",
        "currency",
        "-(P&I at rate + 1 - P&I) * 12",
        "metrics",
    ),
)


FIELD_TABLES: Dict[str, Tuple[FieldMetadata, ...]] = {
    "mortgage": MORTGAGE_RESULT_FIELDS,
    "cash_flow": CASH_FLOW_FIELDS,
    "expenses": EXPENSE_FIELDS,
    "metrics": METRIC_FIELDS,
}


def get_field_metadata(table: str, key: str) -> Optional[FieldMetadata]:
    """Look up one field's documentation, or None if it is not documented."""
    for field in FIELD_TABLES.get(table, ()):
        if field.key == key:
            return field
    return None
