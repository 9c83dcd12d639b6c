"""Instrument catalog: symbols, contract sizes and quote conventions."""

from .instruments import (
    DEFAULT_SYMBOL,
    INSTRUMENTS,
    Instrument,
    QuoteCategory,
    default_instrument,
    format_contract_size,
    list_instruments,
    select,
)

__all__ = [
    "DEFAULT_SYMBOL",
    "INSTRUMENTS",
    "Instrument",
    "QuoteCategory",
    "default_instrument",
    "format_contract_size",
    "list_instruments",
    "select",
]
