"""
Lot Size App - Position Sizing Engine

Computes the largest trade size, in lots, that a leveraged account can open
on forex pairs, metals, indices, energy, agricultural and crypto CFDs while
respecting both a fixed percentage risk per trade and the available margin.
"""

from .catalog.instruments import list_instruments
from .sizing.calculator import compute

__version__ = "0.1.0"
__author__ = "Lot Size App Team"

__all__ = ["compute", "list_instruments"]
