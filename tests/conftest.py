"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from propcalc.config import get_settings


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings around each test so env overrides do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rental_input():
    """
    $200k single-family rental, 20% down at 6% for 30 years.

    Monthly: rent 2000, vacancy 5% (100), management 8% (160),
    maintenance 5% (100), capex 5% (100), tax 200, insurance 100.
    P&I on the 160k loan is 959.28, so cash flow is 280.72.
    """
    return {
        "property_price": 200000,
        "down_payment_percent": 20,
        "annual_interest_rate": 6,
        "loan_term_years": 30,
        "property_tax_annual": 2400,
        "home_insurance_annual": 1200,
        "monthly_rent": 2000,
        "closing_costs": 5000,
        "expenses": {
            "vacancy_rate": 5,
            "property_management_percent": 8,
            "maintenance_percent_of_rent": 5,
            "capex_percent_of_rent": 5,
        },
    }


@pytest.fixture
def mortgage_input():
    """$400k purchase with 10% down at 6% for 30 years."""
    return {
        "property_price": 400000,
        "down_payment_percent": 10,
        "annual_interest_rate": 6,
        "loan_term_years": 30,
        "auto_calculate_pmi": True,
    }
