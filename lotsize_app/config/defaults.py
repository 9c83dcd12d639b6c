"""Default configuration parameters for the position sizing engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SettingsDefaults:
    """Values returned by the settings store before the user saves anything."""
    initial_capital: float = 10000.0                 # Account capital in USD
    stop_loss_percentage: float = 1.0                # Risk per trade, % of capital
    leverage: int = 20                               # Account leverage (x:1)


@dataclass(frozen=True)
class SizingParams:
    """Lot quantization and display parameters."""
    lot_step: float = 0.01                           # Platform order size increment
    display_decimals: int = 2                        # Decimals for lots and money


@dataclass(frozen=True)
class StoreParams:
    """Settings persistence parameters."""
    db_path: str = "settings.db"
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    settings: SettingsDefaults
    sizing: SizingParams
    store: StoreParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        settings=SettingsDefaults(),
        sizing=SizingParams(),
        store=StoreParams(),
    )
