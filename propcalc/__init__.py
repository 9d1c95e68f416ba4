"""
Real estate financing and investment calculation engine.

Every operation takes a pydantic input model (or a dict in its shape) and
returns a pydantic result model.
"""

from propcalc.calculations.mortgage import (
    calculate_affordable_property,
    calculate_mortgage,
)
from propcalc.calculations.strategies import (
    calculate_airbnb_metrics,
    calculate_brrrr,
    calculate_commercial_noi,
    calculate_fix_and_flip,
    calculate_hard_money_loan,
    calculate_land_development,
    calculate_maximum_allowable_offer,
    calculate_private_lending_returns,
    calculate_value_add_potential,
    calculate_wholesale_profit,
)
from propcalc.calculations.waterfall import calculate_syndication_returns
from propcalc.errors import CalculationError, InputValidationError
from propcalc.services.rental_analysis import (
    analyze_rental_property,
    calculate_house_hacking,
    compare_scenarios,
)

__version__ = "0.1.0"

__all__ = [
    "CalculationError",
    "InputValidationError",
    "analyze_rental_property",
    "calculate_affordable_property",
    "calculate_airbnb_metrics",
    "calculate_brrrr",
    "calculate_commercial_noi",
    "calculate_fix_and_flip",
    "calculate_hard_money_loan",
    "calculate_house_hacking",
    "calculate_land_development",
    "calculate_maximum_allowable_offer",
    "calculate_mortgage",
    "calculate_private_lending_returns",
    "calculate_syndication_returns",
    "calculate_value_add_potential",
    "calculate_wholesale_profit",
    "compare_scenarios",
]
