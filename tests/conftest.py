"""Pytest configuration and shared fixtures."""

import pytest

from lotsize_app.catalog.instruments import select
from lotsize_app.engine import CalculatorSession
from lotsize_app.models.calculation import CalculationInput, Settings
from lotsize_app.persistence.settings_store import SettingsStore


@pytest.fixture
def default_settings() -> Settings:
    """Account settings matching the store defaults."""
    return Settings(initial_capital=10000.0, stop_loss_percentage=1.0, leverage=20)


@pytest.fixture
def settings_store(tmp_path) -> SettingsStore:
    """Settings store backed by a temporary SQLite file."""
    return SettingsStore(str(tmp_path / "settings.db"))


@pytest.fixture
def session(settings_store) -> CalculatorSession:
    """Calculator session with default settings."""
    return CalculatorSession(settings_store)


@pytest.fixture
def make_input():
    """Factory for calculation inputs with default account settings."""
    def _make(symbol: str, entry: float, stop: float, contract_size=None,
              exchange_rate=None, capital: float = 10000.0,
              risk_percent: float = 1.0, leverage: int = 20) -> CalculationInput:
        instrument = select(symbol)
        return CalculationInput(
            instrument=instrument,
            entry_price=entry,
            stop_price=stop,
            contract_size=(instrument.default_contract_size
                           if contract_size is None else contract_size),
            capital=capital,
            risk_percent=risk_percent,
            leverage=leverage,
            exchange_rate=exchange_rate,
        )
    return _make
