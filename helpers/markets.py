# helpers/markets.py — closed set of BTC Markets currency pairs
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import ConfigurationError

SEPARATOR = "_"

MARKET_IDS: Tuple[str, ...] = (
    "btc_aud",
    "ltc_aud",
    "eth_aud",
    "etc_aud",
    "xrp_aud",
    "bch_aud",
    "ltc_btc",
    "eth_btc",
    "etc_btc",
    "xrp_btc",
    "bch_btc",
)


@dataclass(frozen=True)
class Market:
    market_id: str
    base_currency: str
    counter_currency: str

    @property
    def instrument(self) -> str:
        return f"{self.base_currency}/{self.counter_currency}"

    @classmethod
    def from_id(cls, market_id: str) -> "Market":
        base, _, counter = market_id.partition(SEPARATOR)
        return cls(market_id, base.upper(), counter.upper())


class MarketRegistry:
    """Lookup from market id (e.g. ``btc_aud``) to its currencies and instrument."""

    def __init__(self, market_ids: Tuple[str, ...] = MARKET_IDS):
        self._markets: Dict[str, Market] = {m: Market.from_id(m) for m in market_ids}

    def find(self, market_id: str) -> Optional[Market]:
        return self._markets.get(market_id)

    def lookup(self, market_id: str) -> Market:
        market = self.find(market_id)
        if market is None:
            raise ConfigurationError(f"Market ID [{market_id}] not found")
        return market

    def market_ids(self) -> Tuple[str, ...]:
        return tuple(self._markets)


REGISTRY = MarketRegistry()
