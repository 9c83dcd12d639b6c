"""
Quote-conversion rules.

Converts a price move and a lot's notional value into USD according to the
instrument's quote category:

    FOREX_DIRECT   EUR/USD   loss = cs * |entry - stop|            notional = cs * entry
    FOREX_INVERSE  USD/JPY   loss = cs * |entry - stop| / stop     notional = cs
    FOREX_CROSS    AUD/CAD   loss = cs * |entry - stop| / USDCAD   notional = cs * entry
    CFD_USD        XAU/USD   loss = cs * |entry - stop|            notional = cs * entry
    CFD_NON_USD    GER40     loss = cs * |entry - stop| * EURUSD   notional = cs * entry * EURUSD

The FOREX_CROSS notional is an approximation: the entry price stands in for
the base currency's USD value.

No rounding happens here.
"""

from typing import Callable, Optional

from ..catalog.instruments import RATE_CATEGORIES, Instrument, QuoteCategory
from ..errors import InvalidInputError, MissingRateError
from ..utils.numbers import price_difference

# (contract_size, price_diff, stop_price, exchange_rate) -> USD
LossRule = Callable[[float, float, float, Optional[float]], float]
# (contract_size, entry_price, exchange_rate) -> USD
NotionalRule = Callable[[float, float, Optional[float]], float]


LOSS_RULES: dict[QuoteCategory, LossRule] = {
    QuoteCategory.FOREX_DIRECT: lambda cs, diff, stop, rate: cs * diff,
    QuoteCategory.FOREX_INVERSE: lambda cs, diff, stop, rate: cs * diff / stop,
    QuoteCategory.FOREX_CROSS: lambda cs, diff, stop, rate: cs * diff / rate,
    QuoteCategory.CFD_USD: lambda cs, diff, stop, rate: cs * diff,
    QuoteCategory.CFD_NON_USD: lambda cs, diff, stop, rate: cs * diff * rate,
}

NOTIONAL_RULES: dict[QuoteCategory, NotionalRule] = {
    QuoteCategory.FOREX_DIRECT: lambda cs, entry, rate: cs * entry,
    QuoteCategory.FOREX_INVERSE: lambda cs, entry, rate: cs,
    QuoteCategory.FOREX_CROSS: lambda cs, entry, rate: cs * entry,
    QuoteCategory.CFD_USD: lambda cs, entry, rate: cs * entry,
    QuoteCategory.CFD_NON_USD: lambda cs, entry, rate: cs * entry * rate,
}


def rate_pair(category: QuoteCategory, quote_currency: str = "USD") -> Optional[str]:
    """
    Name of the market whose price must be entered as the exchange rate.

    Crosses need USD/quote (USDCAD for AUD/CAD); non-USD CFDs need
    quote/USD (EURUSD for GER40). None when no rate is needed.
    """
    if category is QuoteCategory.FOREX_CROSS:
        return f"USD{quote_currency}"
    if category is QuoteCategory.CFD_NON_USD:
        return f"{quote_currency}USD"
    return None


def rate_prompt(instrument: Instrument) -> Optional[str]:
    """Label for the host's exchange-rate field, None when the field is hidden."""
    pair = rate_pair(instrument.category, instrument.quote_currency)
    if pair is None:
        return None
    return f"Enter the current {pair} price ({instrument.quote_currency} -> USD)"


def _require_rate(category: QuoteCategory, exchange_rate: Optional[float],
                  quote_currency: str) -> None:
    if category not in RATE_CATEGORIES:
        return

    pair = rate_pair(category, quote_currency)
    if exchange_rate is None or exchange_rate == 0:
        raise MissingRateError(
            f"Enter the {pair} exchange rate",
            hint=f"{category.value} instruments quoted in {quote_currency} "
                 f"need the current {pair} price to convert to USD",
            currency=quote_currency,
            pair=pair,
        )
    if exchange_rate < 0:
        raise InvalidInputError(
            f"The {pair} exchange rate must be positive",
            field="exchange_rate",
            value=exchange_rate,
        )


def loss_per_lot(
    category: QuoteCategory,
    contract_size: float,
    entry_price: float,
    stop_price: float,
    exchange_rate: Optional[float] = None,
    quote_currency: str = "USD",
) -> float:
    """
    USD lost by one lot when price moves from entry to stop.

    Raises:
        InvalidInputError: If entry equals stop
        MissingRateError: If the category needs a rate and none was given
    """
    price_diff = price_difference(entry_price, stop_price)
    if price_diff == 0:
        raise InvalidInputError(
            "Stop price cannot equal entry price",
            field="stop_price",
            value=stop_price,
        )

    _require_rate(category, exchange_rate, quote_currency)
    return LOSS_RULES[category](contract_size, price_diff, stop_price, exchange_rate)


def notional_per_lot(
    category: QuoteCategory,
    contract_size: float,
    entry_price: float,
    exchange_rate: Optional[float] = None,
    quote_currency: str = "USD",
) -> float:
    """
    USD value of one lot at the entry price.

    Raises:
        MissingRateError: If the category needs a rate and none was given
    """
    _require_rate(category, exchange_rate, quote_currency)
    return NOTIONAL_RULES[category](contract_size, entry_price, exchange_rate)
