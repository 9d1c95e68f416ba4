"""
Numeric helpers shared by the calculation modules.
"""

MONTHS_PER_YEAR = 12
PERCENT = 100.0


def round2(value: float) -> float:
    """Round to cents. Applied only when a value leaves the engine."""
    return round(value, 2)


def safe_divide(numerator: float, denominator: float) -> float:
    """
    Divide, returning 0 when the denominator is zero or negative.

    Ratios over a degenerate base (no cash invested, no rent, no loan)
    are reported as 0 rather than raising.
    """
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def percent_of(base: float, percent: float) -> float:
    """Return ``percent`` percent of ``base``."""
    return base * percent / PERCENT


def annual_to_monthly(annual_amount: float) -> float:
    return annual_amount / MONTHS_PER_YEAR


def round_fields(values: dict) -> dict:
    """Round every float in a result dict; flags, counts and None pass through."""
    return {
        key: round2(value) if isinstance(value, float) else value
        for key, value in values.items()
    }
