"""Account settings persistence (capital, risk percentage, leverage)."""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import orjson
import structlog

from ..config.defaults import SettingsDefaults
from ..config.validation import ConfigValidator
from ..errors import InvalidInputError, PersistenceError
from ..models.calculation import Settings

KEY_INITIAL_CAPITAL = "initial_capital"
KEY_STOP_LOSS_PERCENTAGE = "stop_loss_percentage"
KEY_LEVERAGE = "leverage"


class SettingsStore:
    """
    SQLite-backed key/value store for the three account settings.

    Every setter writes through immediately; settings that were never saved
    read back as their defaults.
    """

    def __init__(self, db_path: str = "settings.db",
                 defaults: Optional[SettingsDefaults] = None,
                 timeout: float = 30.0):
        self.db_path = Path(db_path)
        self.defaults = defaults or SettingsDefaults()
        self.timeout = timeout
        self.logger = structlog.get_logger("settings.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str):
        """Get database connection, translating sqlite errors."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise PersistenceError(
                f"Settings {operation} failed: {e}",
                operation=operation,
                target=str(self.db_path),
            ) from e
        finally:
            if conn:
                conn.close()

    def _read(self, key: str, default: Any) -> Any:
        with self._get_connection("read") as conn:
            row = conn.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            ).fetchone()

        if row is None:
            return default
        return orjson.loads(row["value"])

    def _write(self, values: dict[str, Any]) -> None:
        errors = ConfigValidator.validate_settings(values)
        if errors:
            first = errors[0]
            raise InvalidInputError(
                f"{first.field}: {first.message}",
                field=first.field,
                value=first.value,
                context={"errors": [f"{err.field}: {err.message}" for err in errors]},
            )

        now = datetime.now(timezone.utc).isoformat()
        with self._lock:
            with self._get_connection("write") as conn:
                conn.executemany(
                    "INSERT OR REPLACE INTO settings (key, value, updated_at) VALUES (?, ?, ?)",
                    [(key, orjson.dumps(value).decode(), now) for key, value in values.items()]
                )
                conn.commit()

        self.logger.info("Settings saved", **values)

    def get_initial_capital(self) -> float:
        return float(self._read(KEY_INITIAL_CAPITAL, self.defaults.initial_capital))

    def get_stop_loss_percentage(self) -> float:
        return float(self._read(KEY_STOP_LOSS_PERCENTAGE, self.defaults.stop_loss_percentage))

    def get_leverage(self) -> int:
        return int(self._read(KEY_LEVERAGE, self.defaults.leverage))

    def set_initial_capital(self, value: float) -> None:
        self._write({KEY_INITIAL_CAPITAL: value})

    def set_stop_loss_percentage(self, value: float) -> None:
        self._write({KEY_STOP_LOSS_PERCENTAGE: value})

    def set_leverage(self, value: int) -> None:
        self._write({KEY_LEVERAGE: value})

    def get_settings(self) -> Settings:
        """Read all three settings."""
        return Settings(
            initial_capital=self.get_initial_capital(),
            stop_loss_percentage=self.get_stop_loss_percentage(),
            leverage=self.get_leverage(),
        )

    def save_settings(self, settings: Settings) -> None:
        """
        Persist all three settings in one transaction.

        Raises:
            InvalidInputError: If any value is invalid; nothing is written
        """
        self._write({
            KEY_INITIAL_CAPITAL: settings.initial_capital,
            KEY_STOP_LOSS_PERCENTAGE: settings.stop_loss_percentage,
            KEY_LEVERAGE: settings.leverage,
        })

    def reset(self) -> None:
        """Forget saved values so every getter returns its default."""
        with self._lock:
            with self._get_connection("reset") as conn:
                conn.execute("DELETE FROM settings")
                conn.commit()
        self.logger.info("Settings reset to defaults")
