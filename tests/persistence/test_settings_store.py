"""Tests for settings persistence layer."""

import os
import sqlite3
import tempfile
from unittest.mock import patch

import pytest

from lotsize_app.config.defaults import SettingsDefaults
from lotsize_app.errors import InvalidInputError, PersistenceError
from lotsize_app.models.calculation import Settings
from lotsize_app.persistence.settings_store import SettingsStore


class TestSettingsStore:
    """Test SettingsStore class."""

    def setup_method(self):
        """Setup test database."""
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.temp_dir, "test_settings.db")
        self.store = SettingsStore(self.db_path)

    def teardown_method(self):
        """Cleanup test database."""
        import shutil
        shutil.rmtree(self.temp_dir)

    def test_init_database(self):
        """Test database initialization."""
        assert os.path.exists(self.db_path)

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='settings'"
            )
            assert cursor.fetchone() is not None

    def test_defaults_before_any_save(self):
        assert self.store.get_initial_capital() == 10000.0
        assert self.store.get_stop_loss_percentage() == 1.0
        assert self.store.get_leverage() == 20

    def test_getter_types(self):
        assert isinstance(self.store.get_initial_capital(), float)
        assert isinstance(self.store.get_leverage(), int)

    def test_setters_are_independent(self):
        self.store.set_leverage(100)

        assert self.store.get_leverage() == 100
        assert self.store.get_initial_capital() == 10000.0
        assert self.store.get_stop_loss_percentage() == 1.0

    def test_values_survive_reopen(self):
        self.store.set_initial_capital(5000.5)
        self.store.set_stop_loss_percentage(0.5)

        reopened = SettingsStore(self.db_path)
        assert reopened.get_initial_capital() == 5000.5
        assert reopened.get_stop_loss_percentage() == 0.5

    def test_overwrite(self):
        self.store.set_leverage(50)
        self.store.set_leverage(30)
        assert self.store.get_leverage() == 30

    def test_get_settings(self):
        self.store.set_initial_capital(25000.0)
        assert self.store.get_settings() == Settings(
            initial_capital=25000.0, stop_loss_percentage=1.0, leverage=20
        )

    def test_save_settings(self):
        self.store.save_settings(Settings(initial_capital=3000.0,
                                          stop_loss_percentage=2.0,
                                          leverage=500))
        assert self.store.get_settings() == Settings(3000.0, 2.0, 500)

    def test_save_settings_is_all_or_nothing(self):
        with pytest.raises(InvalidInputError):
            self.store.save_settings(Settings(initial_capital=3000.0,
                                              stop_loss_percentage=2.0,
                                              leverage=0))
        assert self.store.get_initial_capital() == 10000.0

    @pytest.mark.parametrize("setter,value,field", [
        ("set_initial_capital", 0.0, "initial_capital"),
        ("set_initial_capital", -10.0, "initial_capital"),
        ("set_stop_loss_percentage", 0.0, "stop_loss_percentage"),
        ("set_stop_loss_percentage", 101.0, "stop_loss_percentage"),
        ("set_leverage", 0, "leverage"),
        ("set_leverage", 1.5, "leverage"),
    ])
    def test_invalid_values_rejected(self, setter, value, field):
        with pytest.raises(InvalidInputError) as exc_info:
            getattr(self.store, setter)(value)
        assert exc_info.value.field == field

    def test_reset(self):
        self.store.set_leverage(100)
        self.store.set_initial_capital(1.0)
        self.store.reset()
        assert self.store.get_settings() == Settings(10000.0, 1.0, 20)

    def test_custom_defaults(self):
        store = SettingsStore(
            os.path.join(self.temp_dir, "custom.db"),
            defaults=SettingsDefaults(initial_capital=500.0, leverage=30),
        )
        assert store.get_initial_capital() == 500.0
        assert store.get_leverage() == 30
        assert store.get_stop_loss_percentage() == 1.0

    def test_database_error_raises_persistence_error(self):
        with patch("sqlite3.connect", side_effect=sqlite3.OperationalError("disk I/O error")):
            with pytest.raises(PersistenceError) as exc_info:
                self.store.get_leverage()

        assert exc_info.value.operation == "read"
        assert exc_info.value.recoverable is False

    def test_unwritable_location(self):
        with pytest.raises(PersistenceError):
            SettingsStore(os.path.join(self.temp_dir, "missing", "dir", "settings.db"))
