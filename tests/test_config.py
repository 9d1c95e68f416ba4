"""
Tests for engine settings.
"""

import pytest
from pydantic import ValidationError

from propcalc.config import Settings, get_settings


class TestSettings:

    def test_defaults(self):
        settings = get_settings()
        assert settings.default_vacancy_rate == 8.0
        assert settings.pmi_annual_rate == 0.75
        assert settings.pmi_ltv_threshold == 80.0
        assert settings.selling_cost_percent == 8.0
        assert settings.sensitivity_steps == [-10.0, -5.0, 0.0, 5.0, 10.0]

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PROPCALC_DEFAULT_VACANCY_RATE", "10")
        get_settings.cache_clear()
        assert get_settings().default_vacancy_rate == 10.0

    def test_frozen(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.default_vacancy_rate = 5.0
