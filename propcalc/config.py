"""
Engine configuration using Pydantic Settings.

Holds the default assumptions applied when a calculation input leaves a
value unspecified.
"""

import os
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("PROPCALC_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Calculation assumptions loaded from environment variables."""

    # Rental operations (percent)
    default_vacancy_rate: float = 8.0
    default_appreciation_rate: float = 3.0
    default_rent_growth_rate: float = 3.0
    default_expense_growth_rate: float = 2.5

    # Tax treatment
    default_depreciation_years: float = 27.5
    default_land_value_percent: float = 20.0

    # PMI
    pmi_annual_rate: float = 0.75  # percent of loan amount per year
    pmi_ltv_threshold: float = 80.0
    min_down_payment_for_no_pmi: float = 20.0

    # Ratios
    dscr_debt_service_floor: float = 0.01

    # Exit
    selling_cost_percent: float = 8.0
    default_capital_gains_tax_rate: float = 15.0

    # Strategy defaults (percent)
    default_profit_margin: float = 70.0
    wholesale_buyer_margin: float = 70.0

    # Affordability defaults
    default_property_tax_rate: float = 1.2
    default_home_insurance_annual: float = 1200.0

    # Short-term rental
    days_per_month: int = 30

    # Sensitivity sweep (percent / points)
    sensitivity_steps: List[float] = [-10.0, -5.0, 0.0, 5.0, 10.0]

    model_config = SettingsConfigDict(
        env_prefix="PROPCALC_",
        env_file=get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
