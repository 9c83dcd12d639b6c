"""
Calculator session coordinator.

Owns the mutable state a calculator screen is bound to (selected instrument
and raw text fields), recomputes on every edit, and renders the result as
the strings the screen displays:

    Text fields → CalculationInput → LotSizeCalculator → DisplayState
"""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from .catalog.instruments import (
    Instrument,
    default_instrument,
    format_contract_size,
    list_instruments,
    select,
)
from .config.defaults import DefaultConfig, get_default_config
from .config.loader import ConfigLoader
from .errors import CalculationError, InvalidInputError
from .models.calculation import (
    CalculationInput,
    CalculationResult,
    LimitingFactor,
    Settings,
)
from .persistence.settings_store import SettingsStore
from .sizing.calculator import LotSizeCalculator
from .sizing.resolver import rate_prompt
from .utils.numbers import format_amount, parse_int, parse_number

logger = structlog.get_logger(__name__)

SETTINGS_SAVED = "Settings saved"
SETTINGS_INVALID = "Please enter valid numbers"


@dataclass(frozen=True)
class DisplayState:
    """What the calculator screen shows after a recomputation."""
    lot_size_text: str
    margin_text: str
    status_message: str
    result: Optional[CalculationResult] = None


class CalculatorSession:
    """
    State behind one calculator screen.

    Each setter stores the raw text and recomputes; the latest call always
    supersedes earlier ones.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        config: Optional[DefaultConfig] = None,
        instruments: Optional[tuple[Instrument, ...]] = None,
    ) -> None:
        self.config = config or get_default_config()
        self.settings_store = settings_store
        self.calculator = LotSizeCalculator(self.config)
        self.instruments = instruments if instruments is not None else list_instruments()

        self.instrument = self._initial_instrument()
        self.entry_text = ""
        self.stop_text = ""
        self.contract_size_text = format_contract_size(self.instrument.default_contract_size)
        self.exchange_rate_text = ""

        self.display = DisplayState(
            lot_size_text=format_amount(0.0, self.config.sizing.display_decimals),
            margin_text="",
            status_message="",
        )

    @classmethod
    def create(cls, db_path: Optional[str] = None,
               config_dir: Optional[str] = None,
               overrides: Optional[dict[str, Any]] = None) -> "CalculatorSession":
        """
        Build a session from the config directory and a SQLite store.

        app.yaml and per-call overrides set the settings defaults, sizing
        parameters and store location; instruments.yaml adjusts the catalog.
        An explicit db_path wins over the configured one.
        """
        loader = ConfigLoader.create(config_dir)
        config = loader.load_config(overrides)
        store = SettingsStore(
            db_path or config.store.db_path,
            defaults=config.settings,
            timeout=config.store.timeout_seconds,
        )
        return cls(store, config=config, instruments=loader.load_catalog())

    def _initial_instrument(self) -> Instrument:
        default = default_instrument()
        try:
            return select(default.symbol, self.instruments)
        except CalculationError:
            return self.instruments[0]

    # Instrument selection

    def list_instruments(self) -> tuple[Instrument, ...]:
        return self.instruments

    def select_instrument(self, symbol: str) -> DisplayState:
        """
        Switch instrument.

        The contract size resets to the new instrument's default and any
        entered exchange rate is cleared.

        Raises:
            NotFoundError: If the symbol is not in the catalog
        """
        self.instrument = select(symbol, self.instruments)
        self.contract_size_text = format_contract_size(self.instrument.default_contract_size)
        self.exchange_rate_text = ""
        logger.debug("Instrument selected", symbol=symbol,
                     category=self.instrument.category.value)
        return self.recalculate()

    @property
    def exchange_rate_prompt(self) -> Optional[str]:
        """Label for the exchange-rate field, None when it should be hidden."""
        return rate_prompt(self.instrument)

    # Text field edits

    def set_entry_price(self, text: str) -> DisplayState:
        self.entry_text = text
        return self.recalculate()

    def set_stop_price(self, text: str) -> DisplayState:
        self.stop_text = text
        return self.recalculate()

    def set_contract_size(self, text: str) -> DisplayState:
        self.contract_size_text = text
        return self.recalculate()

    def set_exchange_rate(self, text: str) -> DisplayState:
        self.exchange_rate_text = text
        return self.recalculate()

    # Computation

    def build_input(self) -> CalculationInput:
        """Parse the current fields; raises InvalidInputError on missing prices."""
        return CalculationInput.from_text(
            self.instrument,
            self.entry_text,
            self.stop_text,
            self.contract_size_text,
            self.settings_store.get_settings(),
            exchange_rate_text=self.exchange_rate_text,
        )

    def recalculate(self) -> DisplayState:
        """Recompute from the current fields and settings."""
        try:
            calculation_input = self.build_input()
        except InvalidInputError as e:
            result = CalculationResult.failure(e)
        else:
            result = self.calculator.compute(calculation_input)

        self.display = self.render(result)
        return self.display

    def render(self, result: CalculationResult) -> DisplayState:
        """Turn a result into the screen's strings."""
        decimals = self.config.sizing.display_decimals

        if not result.ok:
            return DisplayState(
                lot_size_text=format_amount(0.0, decimals),
                margin_text="",
                status_message=result.error.message,
                result=result,
            )

        if result.limiting_factor is LimitingFactor.MARGIN:
            status = f"Limited by leverage (max {format_amount(result.margin_lots, decimals)} lots)"
        else:
            status = "Sized by risk limit"

        return DisplayState(
            lot_size_text=format_amount(result.lot_size, decimals),
            margin_text=f"Margin per lot: ${format_amount(result.margin_per_lot, decimals)}",
            status_message=status,
            result=result,
        )

    # Settings

    def settings_summary(self) -> str:
        settings = self.settings_store.get_settings()
        return (
            f"Capital ${format_amount(settings.initial_capital, self.config.sizing.display_decimals)}"
            f" | Stop loss {settings.stop_loss_percentage}%"
            f" | Leverage {settings.leverage}x"
        )

    def save_settings(self, capital_text: str, risk_text: str, leverage_text: str) -> str:
        """
        Parse and persist all three settings, or none of them.

        Returns:
            Message for the settings screen
        """
        capital = parse_number(capital_text)
        risk_percent = parse_number(risk_text)
        leverage = parse_int(leverage_text)

        if capital is None or risk_percent is None or leverage is None:
            logger.warning("Settings not saved: unparseable input",
                           capital=capital_text, risk=risk_text, leverage=leverage_text)
            return SETTINGS_INVALID

        try:
            self.settings_store.save_settings(Settings(
                initial_capital=capital,
                stop_loss_percentage=risk_percent,
                leverage=leverage,
            ))
        except InvalidInputError as e:
            logger.warning("Settings not saved: invalid value", field=e.field, value=e.value)
            return SETTINGS_INVALID

        return SETTINGS_SAVED
