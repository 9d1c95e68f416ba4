"""
Operating Expense Calculations

Resolves each rental expense category to a monthly dollar amount. A
category given several ways resolves by priority: absolute amount, then
percent of rent, then percent of value.

Property tax and insurance come from the mortgage calculation and are
folded into the total here rather than entered twice.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from propcalc.calculations.normalize import (
    Absolute,
    AmountSpec,
    PercentOfRent,
    PercentOfValue,
    first_specified,
    resolve_amount,
)
from propcalc.calculations.numbers import MONTHS_PER_YEAR, percent_of, round2
from propcalc.config import get_settings
from propcalc.schemas.rental import OperatingExpenses, RentalPropertyExpenses

# Categories entered as one monthly amount
MONTHLY_FIELDS = {
    "utilities": "utilities_monthly",
    "landscaping": "landscaping_monthly",
    "pest_control": "pest_control_monthly",
}

# Categories entered as one annual amount
ANNUAL_FIELDS = {
    "legal_fees": "legal_fees_annual",
    "landlord_insurance": "landlord_insurance_annual",
    "special_assessments": "special_assessments_annual",
    "advertising": "advertising_annual",
    "turnover": "turnover_cost_per_year",
}

# Reserve categories: annual amount, percent of rent, or percent of value
RESERVE_PREFIXES = ("maintenance", "capex")


@dataclass
class ExpenseBreakdown:
    """Unrounded monthly operating expenses."""

    vacancy: float
    categories: Dict[str, float]
    property_tax: float
    home_insurance: float

    @property
    def total_monthly(self) -> float:
        """Operating expenses; vacancy reduces rent instead."""
        return sum(self.categories.values()) + self.property_tax + self.home_insurance

    @property
    def reserves_monthly(self) -> float:
        return self.categories["maintenance"] + self.categories["capex"]

    def to_model(self) -> OperatingExpenses:
        return OperatingExpenses(
            vacancy=round2(self.vacancy),
            property_tax=round2(self.property_tax),
            home_insurance=round2(self.home_insurance),
            total_monthly=round2(self.total_monthly),
            **{name: round2(amount) for name, amount in self.categories.items()},
        )


def _optional(factory, value: Optional[float]) -> Optional[AmountSpec]:
    return factory(value) if value is not None else None


def reserve_spec(expenses: RentalPropertyExpenses, prefix: str) -> Optional[AmountSpec]:
    """Specification for maintenance or capex, by priority."""
    annual = getattr(expenses, f"{prefix}_annual")
    return first_specified(
        _optional(Absolute, annual / MONTHS_PER_YEAR if annual is not None else None),
        _optional(PercentOfRent, getattr(expenses, f"{prefix}_percent_of_rent")),
        _optional(PercentOfValue, getattr(expenses, f"{prefix}_percent_of_value")),
    )


def management_spec(expenses: RentalPropertyExpenses) -> Optional[AmountSpec]:
    return first_specified(
        _optional(Absolute, expenses.property_management_flat),
        _optional(PercentOfRent, expenses.property_management_percent),
    )


def vacancy_rate(expenses: RentalPropertyExpenses) -> float:
    """Vacancy rate in percent, defaulting to the configured rate."""
    if expenses.vacancy_rate is not None:
        return expenses.vacancy_rate
    return get_settings().default_vacancy_rate


def calculate_vacancy_loss(monthly_rent: float, rate: float) -> float:
    return percent_of(monthly_rent, rate)


def calculate_operating_expenses(
    expenses: RentalPropertyExpenses,
    monthly_rent: float,
    property_price: float,
    monthly_tax: float = 0.0,
    monthly_insurance: float = 0.0,
) -> ExpenseBreakdown:
    """
    Resolve every expense category to a monthly amount.

    Args:
        expenses: Expense assumptions
        monthly_rent: Gross monthly rent (percent-of-rent base)
        property_price: Property price (percent-of-value base)
        monthly_tax: Monthly property tax from the mortgage calculation
        monthly_insurance: Monthly home insurance from the mortgage calculation

    Returns:
        ExpenseBreakdown with unrounded monthly amounts
    """
    categories = {
        "property_management": resolve_amount(
            management_spec(expenses), property_price, monthly_rent
        )
    }
    for prefix in RESERVE_PREFIXES:
        categories[prefix] = resolve_amount(
            reserve_spec(expenses, prefix), property_price, monthly_rent
        )
    for name, field in MONTHLY_FIELDS.items():
        categories[name] = getattr(expenses, field) or 0.0
    for name, field in ANNUAL_FIELDS.items():
        categories[name] = (getattr(expenses, field) or 0.0) / MONTHS_PER_YEAR

    return ExpenseBreakdown(
        vacancy=calculate_vacancy_loss(monthly_rent, vacancy_rate(expenses)),
        categories=categories,
        property_tax=monthly_tax,
        home_insurance=monthly_insurance,
    )


def scale_reserve_expenses(
    expenses: RentalPropertyExpenses, factor: float
) -> RentalPropertyExpenses:
    """
    Scale maintenance and capex by ``factor`` in whichever mode each uses.

    Only the mode that wins the priority order is scaled, so the resolved
    amount scales by exactly ``factor``. Unspecified categories stay unset.
    """
    update = {}
    for prefix in RESERVE_PREFIXES:
        for suffix in ("annual", "percent_of_rent", "percent_of_value"):
            field = f"{prefix}_{suffix}"
            value = getattr(expenses, field)
            if value is not None:
                update[field] = value * factor
                break
    return expenses.model_copy(update=update)
