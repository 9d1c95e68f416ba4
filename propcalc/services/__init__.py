from propcalc.services.rental_analysis import (
    analyze_rental_property,
    calculate_house_hacking,
    compare_scenarios,
)

__all__ = ["analyze_rental_property", "calculate_house_hacking", "compare_scenarios"]
