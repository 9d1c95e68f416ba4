"""
Financial Calculation Engine

Core calculation modules for real estate financing and investment analysis.
"""

from propcalc.calculations import (
    amortization,
    expenses,
    irr,
    metrics,
    mortgage,
    normalize,
    projections,
    strategies,
    waterfall,
)

__all__ = [
    "amortization",
    "expenses",
    "irr",
    "metrics",
    "mortgage",
    "normalize",
    "projections",
    "strategies",
    "waterfall",
]
