"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

from ..catalog.instruments import INSTRUMENTS, Instrument, QuoteCategory
from .defaults import (
    DefaultConfig,
    SettingsDefaults,
    SizingParams,
    StoreParams,
    get_default_config,
)
from .validation import ConfigValidator, ValidationError

logger = structlog.get_logger(__name__)


def _describe(errors: list[ValidationError]) -> list[str]:
    return [f"{err.field}: {err.message} (got: {err.value})" for err in errors]


@dataclass(frozen=True)
class ConfigLoader:
    """
    Manages configuration loading with 3-tier precedence.

    Tiers, lowest first: built-in defaults, the files in config_dir
    (app.yaml for settings/sizing/store, instruments.yaml per symbol),
    per-call overrides.
    """

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        """Read a config file; a missing file or a non-mapping document is empty."""
        path = self.config_dir / filename

        if not path.exists():
            return {}

        with open(path) as f:
            document = yaml.safe_load(f) or {}

        if not isinstance(document, dict):
            logger.warning("Ignoring config file without a top-level mapping",
                           file=str(path), got=type(document).__name__)
            return {}
        return document

    def _load_instruments_file(self) -> dict[str, Any]:
        instruments = self._load_yaml("instruments.yaml").get("instruments") or {}

        if not isinstance(instruments, dict):
            logger.warning("Ignoring instruments section that is not a mapping",
                           got=type(instruments).__name__)
            return {}
        return instruments

    def load_app_config(self) -> dict[str, Any]:
        """Load the global settings/sizing/store sections from app.yaml."""
        return self._load_yaml("app.yaml")

    def load_instrument_config(self, symbol: str) -> dict[str, Any]:
        """Load broker-specific overrides for one symbol."""
        params = self._load_instruments_file().get(symbol)
        if not isinstance(params, dict):
            return {}
        return dict(params)

    def load_config(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Build the effective global configuration.

        Sections of app.yaml that fail validation are logged and ignored.
        Per-call overrides are applied last.

        Raises:
            ValueError: If the per-call overrides are invalid
        """
        # Start with global defaults
        config = self._dataclass_to_dict(self.defaults)

        # Apply app.yaml sections
        for section, params in self.load_app_config().items():
            errors = ConfigValidator.validate_section(section, params)
            if errors:
                logger.warning("Ignoring invalid config section",
                               section=section, errors=_describe(errors))
                continue
            config = self._deep_merge(config, {section: params})

        # Apply per-call overrides
        if overrides:
            errors = [
                err
                for section, params in overrides.items()
                for err in ConfigValidator.validate_section(section, params)
            ]
            if errors:
                raise ValueError("Invalid configuration overrides: " + "; ".join(_describe(errors)))
            config = self._deep_merge(config, overrides)

        settings = config["settings"]
        sizing = config["sizing"]
        store = config["store"]
        return DefaultConfig(
            settings=SettingsDefaults(
                initial_capital=float(settings["initial_capital"]),
                stop_loss_percentage=float(settings["stop_loss_percentage"]),
                leverage=settings["leverage"],
            ),
            sizing=SizingParams(
                lot_step=float(sizing["lot_step"]),
                display_decimals=sizing["display_decimals"],
            ),
            store=StoreParams(
                db_path=store["db_path"],
                timeout_seconds=float(store["timeout_seconds"]),
            ),
        )

    def merge_config(
        self,
        symbol: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence, as a plain dict.

        Priority order:
        1. Per-call overrides (highest priority)
        2. app.yaml, and instruments.yaml under the "instrument" key
        3. Global defaults (lowest priority)

        Unlike load_config the result is not validated.
        """
        config = self._dataclass_to_dict(self.load_config())

        instrument_config = self.load_instrument_config(symbol)
        if instrument_config:
            config = self._deep_merge(config, {"instrument": instrument_config})

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_catalog(self) -> tuple[Instrument, ...]:
        """
        Build the instrument catalog with instruments.yaml overrides applied.

        Invalid override blocks are logged and ignored; the built-in entry
        is used for that symbol.
        """
        overrides = self._load_instruments_file()
        catalog = []

        for instrument in INSTRUMENTS:
            params = overrides.get(instrument.symbol)
            if params is None or params == {}:
                catalog.append(instrument)
                continue

            errors = ConfigValidator.validate_instrument_overrides(params)
            if errors:
                logger.warning(
                    "Ignoring invalid instrument override",
                    symbol=instrument.symbol,
                    errors=_describe(errors)
                )
                catalog.append(instrument)
                continue

            changes: dict[str, Any] = {}
            if "default_contract_size" in params:
                changes["default_contract_size"] = float(params["default_contract_size"])
            if "quote_currency" in params:
                changes["quote_currency"] = params["quote_currency"].upper()
            if "category" in params:
                changes["category"] = QuoteCategory(params["category"])

            catalog.append(replace(instrument, **changes))
            logger.debug("Applied instrument override", symbol=instrument.symbol, **changes)

        return tuple(catalog)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
