"""Unit tests for the calculator session."""

import pytest
import yaml

from lotsize_app.engine import (
    SETTINGS_INVALID,
    SETTINGS_SAVED,
    CalculatorSession,
    DisplayState,
)
from lotsize_app.errors import InvalidInputError, MissingRateError, NotFoundError
from lotsize_app.models.calculation import LimitingFactor


class TestSessionInitialization:
    """Test suite for session start-up state."""

    def test_initial_state(self, session) -> None:
        assert session.instrument.symbol == "XAU/USD"
        assert session.contract_size_text == "100"
        assert session.entry_text == ""
        assert session.exchange_rate_text == ""
        assert session.display.lot_size_text == "0.00"
        assert session.display.margin_text == ""

    def test_lists_catalog(self, session) -> None:
        symbols = [i.symbol for i in session.list_instruments()]
        assert "EUR/USD" in symbols
        assert "GER40.cash" in symbols

    def test_create_with_overrides(self, tmp_path) -> None:
        with open(tmp_path / "instruments.yaml", "w") as f:
            yaml.safe_dump({"instruments": {"XAU/USD": {"default_contract_size": 10}}}, f)

        session = CalculatorSession.create(
            db_path=str(tmp_path / "settings.db"), config_dir=str(tmp_path)
        )

        assert session.contract_size_text == "10"
        assert session.settings_store.get_leverage() == 20

    def test_create_uses_app_config(self, tmp_path) -> None:
        with open(tmp_path / "app.yaml", "w") as f:
            yaml.safe_dump({
                "settings": {"initial_capital": 20000.0},
                "sizing": {"lot_step": 0.1, "display_decimals": 1},
                "store": {"db_path": str(tmp_path / "configured.db")},
            }, f)

        session = CalculatorSession.create(config_dir=str(tmp_path))
        assert session.settings_store.db_path == tmp_path / "configured.db"
        assert session.settings_store.get_initial_capital() == 20000.0

        session.select_instrument("EUR/USD")
        session.set_entry_price("1.1000")
        state = session.set_stop_price("1.0950")

        # 200 USD at risk over 500 USD per lot, floored to the 0.1 step
        assert state.lot_size_text == "0.4"
        assert state.margin_text == "Margin per lot: $5500.0"

    def test_create_with_call_overrides(self, tmp_path) -> None:
        session = CalculatorSession.create(
            db_path=str(tmp_path / "settings.db"),
            config_dir=str(tmp_path),
            overrides={"settings": {"leverage": 50}},
        )
        assert session.settings_store.get_leverage() == 50
        assert "Leverage 50x" in session.settings_summary()


class TestInstrumentSelection:
    """Test suite for selection side effects."""

    def test_contract_size_reset_to_default(self, session) -> None:
        session.set_contract_size("50")
        session.select_instrument("EUR/USD")
        assert session.contract_size_text == "100000"

    def test_exchange_rate_cleared(self, session) -> None:
        session.select_instrument("GER40.cash")
        session.set_exchange_rate("1.08")
        session.select_instrument("UK100.cash")
        assert session.exchange_rate_text == ""

    def test_prices_kept_across_selection(self, session) -> None:
        session.set_entry_price("2350")
        session.select_instrument("XPT/USD")
        assert session.entry_text == "2350"

    def test_unknown_symbol(self, session) -> None:
        with pytest.raises(NotFoundError):
            session.select_instrument("NOPE")
        assert session.instrument.symbol == "XAU/USD"

    def test_exchange_rate_prompt(self, session) -> None:
        assert session.exchange_rate_prompt is None
        session.select_instrument("GER40.cash")
        assert "EURUSD" in session.exchange_rate_prompt
        session.select_instrument("AUD/CAD")
        assert "USDCAD" in session.exchange_rate_prompt


class TestRecalculation:
    """Test suite for display rendering on each edit."""

    def test_incomplete_fields(self, session) -> None:
        state = session.set_entry_price("2350")
        assert isinstance(state, DisplayState)
        assert state.lot_size_text == "0.00"
        assert state.status_message == "Enter entry price, stop price and contract size"
        assert isinstance(state.result.error, InvalidInputError)

    def test_unparseable_price(self, session) -> None:
        session.set_entry_price("1.1.0")
        state = session.set_stop_price("1.0950")
        assert state.status_message == "Enter entry price, stop price and contract size"
        assert state.result.error.field == "entry_price"

    def test_risk_limited_display(self, session) -> None:
        session.select_instrument("EUR/USD")
        session.set_entry_price("1.1000")
        state = session.set_stop_price("1.0950")

        assert state.lot_size_text == "0.20"
        assert state.margin_text == "Margin per lot: $5500.00"
        assert state.status_message == "Sized by risk limit"
        assert state.result.limiting_factor is LimitingFactor.RISK
        assert session.display is state

    def test_margin_limited_display(self, session) -> None:
        session.select_instrument("BTC/USD")
        session.set_entry_price("60000")
        state = session.set_stop_price("59990")

        assert state.lot_size_text == "3.33"
        assert state.margin_text == "Margin per lot: $3000.00"
        assert state.status_message == "Limited by leverage (max 3.33 lots)"

    def test_missing_rate_then_rate_entered(self, session) -> None:
        session.select_instrument("GER40.cash")
        session.set_entry_price("18000")
        state = session.set_stop_price("17950")

        assert isinstance(state.result.error, MissingRateError)
        assert "EURUSD" in state.status_message
        assert state.lot_size_text == "0.00"

        state = session.set_exchange_rate("1.08")
        assert state.lot_size_text == "1.85"
        assert state.margin_text == "Margin per lot: $972.00"

    def test_error_after_success_clears_numbers(self, session) -> None:
        session.select_instrument("EUR/USD")
        session.set_entry_price("1.1000")
        session.set_stop_price("1.0950")
        state = session.set_stop_price("1.1000")

        assert state.lot_size_text == "0.00"
        assert state.margin_text == ""
        assert state.status_message == "Stop price cannot equal entry price"

    def test_overflowing_lot_count_is_reported(self, session) -> None:
        session.set_contract_size("1e-20")
        session.set_entry_price("1e-300")
        state = session.set_stop_price("2e-300")

        assert state.lot_size_text == "0.00"
        assert state.margin_text == ""
        assert state.status_message == "final lots evaluated to inf"

    def test_contract_size_override(self, session) -> None:
        session.select_instrument("US500.cash")
        session.set_entry_price("5000")
        session.set_stop_price("4990")
        assert session.display.lot_size_text == "10.00"

        state = session.set_contract_size("10")
        assert state.lot_size_text == "1.00"

    def test_settings_are_read_on_each_calculation(self, session) -> None:
        session.select_instrument("EUR/USD")
        session.set_entry_price("1.1000")
        session.set_stop_price("1.0950")

        session.settings_store.set_initial_capital(20000.0)
        assert session.recalculate().lot_size_text == "0.40"


class TestSettings:
    """Test suite for the settings form."""

    def test_summary_defaults(self, session) -> None:
        assert session.settings_summary() == "Capital $10000.00 | Stop loss 1.0% | Leverage 20x"

    def test_save_valid_settings(self, session) -> None:
        assert session.save_settings("25000", "2.5", "50") == SETTINGS_SAVED

        store = session.settings_store
        assert store.get_initial_capital() == 25000.0
        assert store.get_stop_loss_percentage() == 2.5
        assert store.get_leverage() == 50

    @pytest.mark.parametrize("capital,risk,leverage", [
        ("abc", "1", "20"),
        ("10000", "", "20"),
        ("10000", "1", "20.5"),
        ("10000", "150", "20"),
        ("-1", "1", "20"),
        ("10000", "1", "0"),
    ])
    def test_invalid_settings_not_saved(self, session, capital, risk, leverage) -> None:
        assert session.save_settings(capital, risk, leverage) == SETTINGS_INVALID

        store = session.settings_store
        assert store.get_initial_capital() == 10000.0
        assert store.get_stop_loss_percentage() == 1.0
        assert store.get_leverage() == 20
