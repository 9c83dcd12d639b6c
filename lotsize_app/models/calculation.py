"""Data models for position sizing requests and results"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import orjson

from ..catalog.instruments import Instrument
from ..errors import CalculationError, InvalidInputError
from ..utils.numbers import parse_number


class LimitingFactor(str, Enum):
    """Which budget bounds the recommended size."""
    RISK = "risk"
    MARGIN = "margin"


@dataclass(frozen=True)
class Settings:
    """Account settings read from the settings store"""
    initial_capital: float
    stop_loss_percentage: float
    leverage: int


@dataclass(frozen=True)
class CalculationInput:
    """Everything one sizing request needs"""
    instrument: Instrument
    entry_price: float
    stop_price: float
    contract_size: float
    capital: float
    risk_percent: float
    leverage: int
    exchange_rate: Optional[float] = None

    @classmethod
    def from_text(
        cls,
        instrument: Instrument,
        entry_text: Optional[str],
        stop_text: Optional[str],
        contract_size_text: Optional[str],
        settings: Settings,
        exchange_rate_text: Optional[str] = None,
    ) -> "CalculationInput":
        """
        Build an input from raw text fields.

        Blank or unparseable exchange-rate text is treated as absent.

        Raises:
            InvalidInputError: If entry, stop or contract size do not parse
        """
        entry = parse_number(entry_text)
        stop = parse_number(stop_text)
        contract_size = parse_number(contract_size_text)

        fields = (
            ("entry_price", entry, entry_text),
            ("stop_price", stop, stop_text),
            ("contract_size", contract_size, contract_size_text),
        )
        missing = [(name, text) for name, value, text in fields if value is None]
        if missing:
            raise InvalidInputError(
                "Enter entry price, stop price and contract size",
                field=missing[0][0],
                value=missing[0][1],
                context={"missing": [name for name, _ in missing]},
            )

        return cls(
            instrument=instrument,
            entry_price=entry,
            stop_price=stop,
            contract_size=contract_size,
            capital=settings.initial_capital,
            risk_percent=settings.stop_loss_percentage,
            leverage=settings.leverage,
            exchange_rate=parse_number(exchange_rate_text),
        )


@dataclass(frozen=True)
class CalculationResult:
    """
    Outcome of one sizing request.

    Either the numeric fields are populated and error is None, or error is
    set and every numeric field is None.
    """
    lot_size: Optional[float] = None
    margin_per_lot: Optional[float] = None
    limiting_factor: Optional[LimitingFactor] = None

    # Unrounded intermediate values
    risk_budget: Optional[float] = None
    loss_per_lot: Optional[float] = None
    notional_per_lot: Optional[float] = None
    risk_lots: Optional[float] = None
    margin_lots: Optional[float] = None

    error: Optional[CalculationError] = None

    @classmethod
    def failure(cls, error: CalculationError) -> "CalculationResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Plain representation for handing the result to a UI bridge"""
        if self.error is not None:
            return {
                "ok": False,
                "error": {
                    "kind": self.error.kind,
                    "message": self.error.message,
                    "hint": self.error.hint,
                },
            }
        return {
            "ok": True,
            "lot_size": self.lot_size,
            "margin_per_lot": self.margin_per_lot,
            "limiting_factor": self.limiting_factor.value if self.limiting_factor else None,
            "risk_budget": self.risk_budget,
            "loss_per_lot": self.loss_per_lot,
            "notional_per_lot": self.notional_per_lot,
            "risk_lots": self.risk_lots,
            "margin_lots": self.margin_lots,
        }

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())
