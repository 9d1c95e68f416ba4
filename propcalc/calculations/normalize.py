"""
Input Normalization

Validates calculation inputs and resolves fields that may be given either as
an absolute amount or as a percentage into plain dollar amounts.

Validation always runs first and reports every violation at once.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from propcalc.calculations.numbers import MONTHS_PER_YEAR, percent_of
from propcalc.errors import InputValidationError
from propcalc.schemas.mortgage import FlexibleMortgageInput, MortgageCalculationInput
from propcalc.schemas.rental import RentalPropertyExpenses, RentalPropertyInput

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# AMOUNT SPECIFICATIONS
# =============================================================================


@dataclass(frozen=True)
class Absolute:
    """A dollar amount used as-is."""

    amount: float


@dataclass(frozen=True)
class PercentOfPrice:
    """A percentage of the property price (loan, down payment, annual tax)."""

    percent: float


@dataclass(frozen=True)
class PercentOfRent:
    """A percentage of monthly rent, giving a monthly amount."""

    percent: float


@dataclass(frozen=True)
class PercentOfValue:
    """An annual percentage of property value, spread over twelve months."""

    percent: float


AmountSpec = Union[Absolute, PercentOfPrice, PercentOfRent, PercentOfValue]


def first_specified(*candidates: Optional[AmountSpec]) -> Optional[AmountSpec]:
    """Return the first candidate that is specified, in priority order."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def resolve_amount(
    spec: Optional[AmountSpec],
    property_price: float = 0.0,
    monthly_rent: float = 0.0,
) -> float:
    """
    Resolve an amount specification to dollars.

    Args:
        spec: Specification to resolve (None resolves to 0)
        property_price: Price used by percent-of-price/value specifications
        monthly_rent: Rent used by percent-of-rent specifications

    Returns:
        Dollar amount
    """
    if spec is None:
        return 0.0
    if isinstance(spec, Absolute):
        return spec.amount
    if isinstance(spec, PercentOfPrice):
        return percent_of(property_price, spec.percent)
    if isinstance(spec, PercentOfRent):
        return percent_of(monthly_rent, spec.percent)
    if isinstance(spec, PercentOfValue):
        return percent_of(property_price, spec.percent) / MONTHS_PER_YEAR
    raise TypeError(f"Unknown amount specification: {spec!r}")


def price_spec(
    absolute: Optional[float], percent: Optional[float]
) -> Optional[AmountSpec]:
    """Build the specification for an absolute-or-percent-of-price pair."""
    return first_specified(
        Absolute(absolute) if absolute is not None else None,
        PercentOfPrice(percent) if percent is not None else None,
    )


# =============================================================================
# VALIDATION
# =============================================================================


def _partial_model(model_cls: Type[ModelT], data: dict, failed: Set[str]) -> ModelT:
    """Build an unvalidated model with every field that failed parsing set to None."""
    values = {}
    for name, field in model_cls.model_fields.items():
        if name in failed:
            values[name] = None
        elif name in data:
            values[name] = TypeAdapter(field.annotation).validate_python(data[name])
    return model_cls.model_construct(**values)


def coerce_input(
    model_cls: Type[ModelT],
    data: Union[ModelT, dict],
    collect_errors: Optional[Callable[[ModelT], List[str]]] = None,
) -> ModelT:
    """
    Return ``data`` as an instance of ``model_cls``.

    Dicts are parsed through the model; parsing failures are reported as a
    single InputValidationError listing every field problem. When
    ``collect_errors`` is given, it also runs over the fields that did
    parse, so rule violations are reported alongside type errors.
    """
    if isinstance(data, model_cls):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        errors = []
        failed = set()
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"])
            errors.append(f"{location}: {err['msg']}" if location else err["msg"])
            if err["loc"]:
                failed.add(str(err["loc"][0]))

        if collect_errors is not None and isinstance(data, dict) and failed:
            partial = _partial_model(model_cls, data, failed)
            # Skip rule messages for fields already reported as unparseable
            errors += [
                message
                for message in collect_errors(partial)
                if message.split(" ", 1)[0] not in failed
            ]

        raise_if_errors(errors, model_cls.__name__)
        raise


def raise_if_errors(errors: List[str], context: str) -> None:
    """Raise InputValidationError if any errors were collected."""
    if errors:
        logger.warning(f"{context} rejected: {'; '.join(errors)}")
        raise InputValidationError(errors)


def check_non_negative(model: BaseModel, fields: Iterable[str]) -> List[str]:
    """Collect errors for fields that are present and negative."""
    errors = []
    for name in fields:
        value = getattr(model, name)
        if value is not None and value < 0:
            errors.append(f"{name} must be greater than or equal to 0")
    return errors


def check_positive(model: BaseModel, fields: Iterable[str]) -> List[str]:
    """Collect errors for fields that are missing, zero or negative."""
    errors = []
    for name in fields:
        value = getattr(model, name)
        if value is None or value <= 0:
            errors.append(f"{name} must be greater than 0")
    return errors


def check_percentage(model: BaseModel, fields: Iterable[str]) -> List[str]:
    """Collect errors for percentages outside 0-100."""
    errors = []
    for name in fields:
        value = getattr(model, name)
        if value is not None and (value < 0 or value > 100):
            errors.append(f"{name} must be between 0 and 100")
    return errors


def _check_exclusive(model: BaseModel, first: str, second: str) -> List[str]:
    if getattr(model, first) is not None and getattr(model, second) is not None:
        return [f"Cannot specify both {first} and {second}"]
    return []


def collect_mortgage_errors(data: FlexibleMortgageInput) -> List[str]:
    """Collect every problem with a flexible mortgage input."""
    errors: List[str] = []

    if data.property_price is None or data.property_price <= 0:
        errors.append("property_price is required and must be greater than 0")

    errors += _check_exclusive(data, "loan_amount", "loan_amount_percent")
    errors += _check_exclusive(data, "down_payment", "down_payment_percent")
    errors += _check_exclusive(data, "property_tax_annual", "property_tax_percent")
    errors += _check_exclusive(data, "home_insurance_annual", "home_insurance_percent")

    errors += check_percentage(data, ["loan_amount_percent", "down_payment_percent"])
    errors += check_non_negative(
        data,
        [
            "annual_interest_rate",
            "loan_amount",
            "down_payment",
            "property_tax_annual",
            "property_tax_percent",
            "home_insurance_annual",
            "home_insurance_percent",
            "hoa_monthly",
            "pmi_monthly",
        ],
    )
    errors += check_positive(data, ["loan_term_years"])

    return errors


def collect_expense_errors(expenses: RentalPropertyExpenses) -> List[str]:
    """Collect every problem with a rental expense block."""
    percentage_fields = [
        "vacancy_rate",
        "property_management_percent",
        "maintenance_percent_of_rent",
        "maintenance_percent_of_value",
        "capex_percent_of_rent",
        "capex_percent_of_value",
    ]
    errors = check_percentage(expenses, percentage_fields)
    amount_fields = [
        name
        for name in RentalPropertyExpenses.model_fields
        if name not in percentage_fields
    ]
    errors += check_non_negative(expenses, amount_fields)
    return errors


def collect_rental_errors(data: RentalPropertyInput) -> List[str]:
    """Collect every problem with a rental property input."""
    errors = collect_mortgage_errors(data)

    if data.monthly_rent is None or data.monthly_rent <= 0:
        errors.append("monthly_rent is required and must be greater than 0")

    if data.expenses is not None:
        errors += collect_expense_errors(data.expenses)
    errors += check_non_negative(
        data,
        [
            "closing_costs",
            "rehab_costs",
            "land_value",
            "depreciation_years",
        ],
    )
    errors += check_percentage(data, ["marginal_tax_rate", "capital_gains_tax_rate"])
    errors += check_positive(data, ["number_of_units"])
    if data.holding_period_years is not None and data.holding_period_years <= 0:
        errors.append("holding_period_years must be greater than 0")

    return errors


def validate_mortgage_input(data: FlexibleMortgageInput) -> None:
    raise_if_errors(collect_mortgage_errors(data), "Mortgage input")


def validate_rental_input(data: RentalPropertyInput) -> None:
    raise_if_errors(collect_rental_errors(data), "Rental input")


# =============================================================================
# NORMALIZATION
# =============================================================================


def normalize_mortgage_input(data: FlexibleMortgageInput) -> MortgageCalculationInput:
    """
    Resolve a flexible mortgage input into its canonical form.

    Absolute amounts win; percentages are taken of the property price.
    Loan amount and down payment stay None when neither form is given so
    the mortgage engine can derive one from the other.

    Raises:
        InputValidationError: If the input is invalid
    """
    validate_mortgage_input(data)
    price = data.property_price

    loan_spec = price_spec(data.loan_amount, data.loan_amount_percent)
    down_spec = price_spec(data.down_payment, data.down_payment_percent)
    tax_spec = price_spec(data.property_tax_annual, data.property_tax_percent)
    insurance_spec = price_spec(data.home_insurance_annual, data.home_insurance_percent)

    return MortgageCalculationInput(
        property_price=price,
        loan_amount=resolve_amount(loan_spec, price) if loan_spec else None,
        down_payment=resolve_amount(down_spec, price) if down_spec else None,
        annual_interest_rate=data.annual_interest_rate,
        loan_term_years=data.loan_term_years,
        property_tax_annual=resolve_amount(tax_spec, price),
        home_insurance_annual=resolve_amount(insurance_spec, price),
        hoa_monthly=data.hoa_monthly or 0.0,
        pmi_monthly=data.pmi_monthly,
        auto_calculate_pmi=data.auto_calculate_pmi,
        first_payment_date=data.first_payment_date,
    )
