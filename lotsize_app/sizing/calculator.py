"""Lot-size calculator combining the risk budget and the margin budget"""

import math
from typing import Optional

from ..config.defaults import DefaultConfig, get_default_config
from ..errors import CalculationError, DivisionByZeroError, InvalidInputError
from ..logging.config import get_sizing_logger, log_calculation
from ..models.calculation import CalculationInput, CalculationResult, LimitingFactor
from ..utils.numbers import floor_to_step, require_positive
from . import resolver

logger = get_sizing_logger(__name__)


class LotSizeCalculator:
    """
    Computes the largest position allowed by both the fixed-risk rule and
    the available margin.

    The calculator holds no per-request state; the same input always gives
    the same result.
    """

    def __init__(self, config: Optional[DefaultConfig] = None):
        self.config = config or get_default_config()

    def calculate(self, calculation_input: CalculationInput) -> CalculationResult:
        """
        Size a position.

        Args:
            calculation_input: Instrument, prices, contract size, optional
                exchange rate and account settings

        Returns:
            CalculationResult with lot_size floored to the configured lot step

        Raises:
            InvalidInputError: Non-positive prices, size or settings, or entry == stop
            MissingRateError: Rate-requiring category without an exchange rate
            DivisionByZeroError: Degenerate loss-per-lot or margin-per-lot
        """
        self._validate_input(calculation_input)

        instrument = calculation_input.instrument
        capital = calculation_input.capital

        risk_budget = capital * (calculation_input.risk_percent / 100.0)

        loss = resolver.loss_per_lot(
            instrument.category,
            calculation_input.contract_size,
            calculation_input.entry_price,
            calculation_input.stop_price,
            calculation_input.exchange_rate,
            instrument.quote_currency,
        )
        self._require_divisor(loss, "loss_per_lot")
        risk_lots = risk_budget / loss

        notional = resolver.notional_per_lot(
            instrument.category,
            calculation_input.contract_size,
            calculation_input.entry_price,
            calculation_input.exchange_rate,
            instrument.quote_currency,
        )
        margin_per_lot = notional / calculation_input.leverage
        self._require_divisor(margin_per_lot, "margin_per_lot")
        margin_lots = capital / margin_per_lot

        final_lots = min(risk_lots, margin_lots)
        if not math.isfinite(final_lots):
            raise DivisionByZeroError(
                f"final lots evaluated to {final_lots}",
                hint="Check the contract size, prices and exchange rate",
                quantity="final_lots",
            )
        limiting_factor = LimitingFactor.MARGIN if margin_lots < risk_lots else LimitingFactor.RISK

        return CalculationResult(
            lot_size=floor_to_step(final_lots, self.config.sizing.lot_step),
            margin_per_lot=round(margin_per_lot, self.config.sizing.display_decimals),
            limiting_factor=limiting_factor,
            risk_budget=risk_budget,
            loss_per_lot=loss,
            notional_per_lot=notional,
            risk_lots=risk_lots,
            margin_lots=margin_lots,
        )

    def compute(self, calculation_input: CalculationInput) -> CalculationResult:
        """
        Size a position without raising.

        Calculation errors are returned as a failed result carrying the
        error; the numeric fields are then None.
        """
        instrument = calculation_input.instrument
        try:
            result = self.calculate(calculation_input)
        except CalculationError as e:
            log_calculation(
                logger,
                symbol=instrument.symbol,
                category=instrument.category.value,
                error_kind=e.kind,
                context={"message": e.message, **e.context},
            )
            return CalculationResult.failure(e)

        log_calculation(
            logger,
            symbol=instrument.symbol,
            category=instrument.category.value,
            lot_size=result.lot_size,
            limiting_factor=result.limiting_factor.value,
        )
        return result

    def _validate_input(self, calculation_input: CalculationInput) -> None:
        """Validate prices, size and account settings."""
        require_positive(calculation_input.entry_price, "entry_price")
        require_positive(calculation_input.stop_price, "stop_price")
        require_positive(calculation_input.contract_size, "contract_size")
        require_positive(calculation_input.capital, "capital")

        risk_percent = require_positive(calculation_input.risk_percent, "risk_percent")
        if risk_percent > 100:
            raise InvalidInputError(
                "risk percent must not exceed 100",
                field="risk_percent",
                value=risk_percent,
            )

        leverage = calculation_input.leverage
        if isinstance(leverage, bool) or not isinstance(leverage, int) or leverage <= 0:
            raise InvalidInputError(
                "leverage must be a positive integer",
                field="leverage",
                value=leverage,
            )

        rate = calculation_input.exchange_rate
        if rate is not None and (isinstance(rate, bool) or not isinstance(rate, (int, float))
                                 or not math.isfinite(rate)):
            raise InvalidInputError(
                "exchange rate must be a finite number",
                field="exchange_rate",
                value=rate,
            )

    def _require_divisor(self, value: float, quantity: str) -> None:
        """Reject zero or non-finite per-lot quantities before dividing by them."""
        if value == 0 or not math.isfinite(value):
            raise DivisionByZeroError(
                f"{quantity.replace('_', ' ')} evaluated to {value}",
                hint="Check the contract size, prices and exchange rate",
                quantity=quantity,
            )


_default_calculator = LotSizeCalculator()


def compute(calculation_input: CalculationInput) -> CalculationResult:
    """Size a position with the default configuration; never raises."""
    return _default_calculator.compute(calculation_input)
