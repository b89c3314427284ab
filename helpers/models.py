# helpers/models.py — normalized entities returned by adapters
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class MarketOrder:
    side: OrderSide
    price: Decimal
    quantity: Decimal
    total: Decimal


@dataclass(frozen=True)
class MarketOrderBook:
    market_id: str
    sell_orders: List[MarketOrder]
    buy_orders: List[MarketOrder]


@dataclass(frozen=True)
class Ticker:
    """high/low/open/vwap are not supplied by the exchange and stay None."""
    last: Decimal
    bid: Decimal
    ask: Decimal
    volume: Decimal
    timestamp: int
    low: Optional[Decimal] = None
    high: Optional[Decimal] = None
    open: Optional[Decimal] = None
    vwap: Optional[Decimal] = None


@dataclass(frozen=True)
class OpenOrder:
    id: str
    creation_date: datetime
    market_id: str
    side: OrderSide
    price: Decimal
    quantity: Decimal
    remaining_quantity: Decimal
    total: Decimal


@dataclass(frozen=True)
class BalanceInfo:
    available: Dict[str, Decimal] = field(default_factory=dict)
    on_hold: Dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class TradeConfirmation:
    order_id: str
