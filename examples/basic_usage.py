#!/usr/bin/env python3
"""
Basic Usage Example - Lot Size Calculator

This script sizes a few positions across the quote categories, first
through the plain compute() call and then through a calculator session
backed by a throwaway settings database.

Run: python examples/basic_usage.py
"""

import tempfile
from pathlib import Path

from lotsize_app import compute
from lotsize_app.catalog.instruments import select
from lotsize_app.engine import CalculatorSession
from lotsize_app.logging import configure_logging
from lotsize_app.models.calculation import CalculationInput, Settings


def size_directly() -> None:
    """Size positions without a session."""
    settings = Settings(initial_capital=10000.0, stop_loss_percentage=1.0, leverage=20)
    requests = [
        ("EUR/USD", "1.1000", "1.0950", "100000", None),
        ("USD/JPY", "150.00", "149.50", "100000", None),
        ("BTC/USD", "60000", "59990", "1", None),
        ("GER40.cash", "18000", "17950", "1", "1.08"),
        ("GER40.cash", "18000", "17950", "1", None),
    ]

    print("=== compute() ===")
    for symbol, entry, stop, contract_size, rate in requests:
        calculation_input = CalculationInput.from_text(
            select(symbol), entry, stop, contract_size, settings, exchange_rate_text=rate
        )
        result = compute(calculation_input)
        print(f"{symbol:<12} {result.to_json().decode()}")


def size_with_session(db_path: str) -> None:
    """Drive a session the way a calculator screen would."""
    session = CalculatorSession.create(db_path=db_path)
    print("\n=== CalculatorSession ===")
    print(session.settings_summary())

    session.select_instrument("AUD/CAD")
    print(session.exchange_rate_prompt)
    session.set_entry_price("0.9000")
    state = session.set_stop_price("0.8950")
    print(f"{state.lot_size_text} lots - {state.status_message}")

    state = session.set_exchange_rate("1.36")
    print(f"{state.lot_size_text} lots - {state.status_message} - {state.margin_text}")

    print(session.save_settings("50000", "0.5", "100"))
    print(session.settings_summary())
    state = session.recalculate()
    print(f"{state.lot_size_text} lots - {state.status_message}")


def main():
    configure_logging(level="WARNING")
    size_directly()
    with tempfile.TemporaryDirectory() as temp_dir:
        size_with_session(str(Path(temp_dir) / "settings.db"))


if __name__ == "__main__":
    main()
