"""Quote conversion and lot-size calculation"""

from .calculator import LotSizeCalculator, compute
from .resolver import loss_per_lot, notional_per_lot, rate_pair, rate_prompt

__all__ = [
    "LotSizeCalculator",
    "compute",
    "loss_per_lot",
    "notional_per_lot",
    "rate_pair",
    "rate_prompt",
]
