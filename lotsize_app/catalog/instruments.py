"""
Instrument catalog.

Every tradeable symbol the calculator knows about, in display order, with
the contract size of one lot and the quote convention that decides how a
price move converts to USD.
"""

from dataclasses import dataclass
from enum import Enum

from ..errors import NotFoundError


class QuoteCategory(str, Enum):
    """How an instrument's quote currency relates to the USD account."""
    FOREX_DIRECT = "forex_direct"      # USD listed second: EUR/USD
    FOREX_INVERSE = "forex_inverse"    # USD listed first: USD/JPY
    FOREX_CROSS = "forex_cross"        # no USD leg: AUD/CAD
    CFD_USD = "cfd_usd"                # USD-denominated CFD: gold, US indices
    CFD_NON_USD = "cfd_non_usd"        # CFD quoted in another currency: GER40


RATE_CATEGORIES = frozenset({QuoteCategory.FOREX_CROSS, QuoteCategory.CFD_NON_USD})


@dataclass(frozen=True)
class Instrument:
    """A catalog entry."""
    symbol: str
    default_contract_size: float       # Base units per 1.0 lot
    category: QuoteCategory
    quote_currency: str = "USD"

    def __post_init__(self):
        if self.default_contract_size <= 0:
            raise ValueError(
                f"default_contract_size must be positive for {self.symbol}: "
                f"{self.default_contract_size}"
            )

    @property
    def requires_exchange_rate(self) -> bool:
        """True when sizing needs a user-supplied conversion rate."""
        return self.category in RATE_CATEGORIES


_D = QuoteCategory.FOREX_DIRECT
_I = QuoteCategory.FOREX_INVERSE
_X = QuoteCategory.FOREX_CROSS
_U = QuoteCategory.CFD_USD
_N = QuoteCategory.CFD_NON_USD

# Contract sizes vary between brokers; check them against the trading platform.
INSTRUMENTS: tuple[Instrument, ...] = (
    # Forex
    Instrument("EUR/USD", 100000.0, _D),
    Instrument("GBP/USD", 100000.0, _D),
    Instrument("AUD/USD", 100000.0, _D),
    Instrument("NZD/USD", 100000.0, _D),
    Instrument("USD/CAD", 100000.0, _I),
    Instrument("USD/CHF", 100000.0, _I),
    Instrument("USD/CNH", 100000.0, _I),
    Instrument("USD/JPY", 100000.0, _I),
    Instrument("USD/SGD", 100000.0, _I),
    Instrument("EUR/GBP", 100000.0, _X, "GBP"),
    Instrument("AUD/CAD", 100000.0, _X, "CAD"),
    Instrument("EUR/JPY", 100000.0, _X, "JPY"),

    # Metals (ounces, copper in pounds)
    Instrument("XAU/USD", 100.0, _U),
    Instrument("XAGUSD", 5000.0, _U),
    Instrument("XCU/USD", 25000.0, _U),
    Instrument("XPT/USD", 50.0, _U),
    Instrument("XPD/USD", 100.0, _U),

    # Indices
    Instrument("US500.cash", 1.0, _U),
    Instrument("US30.cash", 1.0, _U),
    Instrument("US100.cash", 1.0, _U),
    Instrument("GER40.cash", 1.0, _N, "EUR"),
    Instrument("UK100.cash", 1.0, _N, "GBP"),

    # Energy
    Instrument("Heatoil.c", 42000.0, _U),       # gallons
    Instrument("NatGas.cash", 10000.0, _U),     # mmBtu

    # Agriculture; entry and stop must use the same price unit (cents vs dollars)
    Instrument("Coffee.c", 37500.0, _U),
    Instrument("Wheat.c", 5000.0, _U),
    Instrument("Corn.c", 5000.0, _U),
    Instrument("Soybean.c", 5000.0, _U),
    Instrument("Sugar.c", 112000.0, _U),
    Instrument("Cotton.c", 50000.0, _U),
    Instrument("Cocoa.c", 10.0, _U),            # metric tonnes

    # Crypto
    Instrument("BTC/USD", 1.0, _U),
    Instrument("ETH/USD", 1.0, _U),
    Instrument("SOL/USD", 1.0, _U),
)

DEFAULT_SYMBOL = "XAU/USD"


def list_instruments() -> tuple[Instrument, ...]:
    """All instruments in display order."""
    return INSTRUMENTS


def select(symbol: str, instruments: tuple[Instrument, ...] = INSTRUMENTS) -> Instrument:
    """
    Look up an instrument by symbol.

    Raises:
        NotFoundError: If the symbol is not in the catalog
    """
    for instrument in instruments:
        if instrument.symbol == symbol:
            return instrument
    raise NotFoundError(
        f"Unknown instrument: {symbol}",
        hint=f"Instrument {symbol!r} is not in the catalog",
        symbol=symbol,
    )


def default_instrument() -> Instrument:
    """Instrument selected when the calculator first opens."""
    return select(DEFAULT_SYMBOL)


def format_contract_size(value: float) -> str:
    """Render a contract size for the text field, dropping a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
