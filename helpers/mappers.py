# helpers/mappers.py — BTC Markets JSON payloads -> normalized entities
import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List

from .codec import NumericCodec, fee_fraction
from .errors import ProtocolError, TradingError
from .models import (
    BalanceInfo, MarketOrder, MarketOrderBook, OpenOrder, OrderSide, Ticker, TradeConfirmation,
)

BUY_TOKEN = "Bid"
SELL_TOKEN = "Ask"


def parse_payload(payload: str) -> Any:
    """Parse a response body, keeping every JSON number exact."""
    try:
        return json.loads(payload, parse_float=Decimal)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"Response is not valid JSON: {payload!r}", e) from e


def _require_object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ProtocolError(f"Expected a JSON object for {what}, got: {data!r}")
    return data


def _field(data: Dict[str, Any], name: str) -> Any:
    try:
        return data[name]
    except KeyError as e:
        raise ProtocolError(f"Missing field '{name}' in {data!r}", e) from e


def _int_field(data: Dict[str, Any], name: str) -> int:
    value = _field(data, name)
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ProtocolError(f"Field '{name}' is not an integer: {value!r}")
    try:
        return int(value)
    except ValueError as e:
        raise ProtocolError(f"Field '{name}' is not an integer: {value!r}", e) from e


def _succeeded(data: Dict[str, Any]) -> bool:
    return data.get("success") is True


def _describe_failure(data: Dict[str, Any]) -> str:
    return f"errorCode={data.get('errorCode')} errorMessage={data.get('errorMessage')}"


def side_from_token(token: Any) -> OrderSide:
    if token == BUY_TOKEN:
        return OrderSide.BUY
    if token == SELL_TOKEN:
        return OrderSide.SELL
    raise TradingError(f"Unrecognised order type received in get_your_open_orders(). Value: {token}")


def side_to_token(side: OrderSide) -> str:
    if side == OrderSide.BUY:
        return BUY_TOKEN
    if side == OrderSide.SELL:
        return SELL_TOKEN
    raise ValueError(f"Invalid order type: {side} - Can only be BUY or SELL")


def epoch_millis_to_datetime(millis: int) -> datetime:
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=millis)


# ---------------- Market data ---------------- #

def _market_orders(side: OrderSide, entries: Any, codec: NumericCodec) -> List[MarketOrder]:
    if not isinstance(entries, list):
        raise ProtocolError(f"Expected a list of [price, quantity] pairs, got: {entries!r}")
    orders = []
    for entry in entries:
        if not isinstance(entry, list) or len(entry) < 2:
            raise ProtocolError(f"Malformed orderbook entry: {entry!r}")
        price = codec.decode(entry[0])
        quantity = codec.decode(entry[1])
        orders.append(MarketOrder(side, price, quantity, price * quantity))
    return orders


def map_order_book(market_id: str, data: Any, codec: NumericCodec) -> MarketOrderBook:
    data = _require_object(data, "orderbook")
    buy_orders = _market_orders(OrderSide.BUY, _field(data, "bids"), codec)
    sell_orders = _market_orders(OrderSide.SELL, _field(data, "asks"), codec)

    # BTC Markets sends asks price-descending; lowest ask must come first.
    sell_orders.sort(key=lambda o: o.price)
    buy_orders.sort(key=lambda o: o.price, reverse=True)
    return MarketOrderBook(market_id, sell_orders, buy_orders)


def map_ticker(data: Any, codec: NumericCodec) -> Ticker:
    data = _require_object(data, "tick")
    return Ticker(
        last=codec.decode(_field(data, "lastPrice")),
        bid=codec.decode(_field(data, "bestBid")),
        ask=codec.decode(_field(data, "bestAsk")),
        volume=codec.decode(_field(data, "volume24h")),
        timestamp=_int_field(data, "timestamp"),
    )


# ---------------- Account & trading ---------------- #

def map_open_orders(market_id: str, data: Any, codec: NumericCodec) -> List[OpenOrder]:
    data = _require_object(data, "open orders")
    if not _succeeded(data):
        raise TradingError(f"Failed to get Open Order Info from exchange. {_describe_failure(data)}")

    orders = _field(data, "orders") or []
    if not isinstance(orders, list):
        raise ProtocolError(f"Expected a list of orders, got: {orders!r}")

    result = []
    for raw in orders:
        raw = _require_object(raw, "open order")
        price = codec.decode(_field(raw, "price"))
        quantity = codec.decode(_field(raw, "volume"))
        result.append(OpenOrder(
            id=str(_field(raw, "id")),
            creation_date=epoch_millis_to_datetime(_int_field(raw, "creationTime")),
            market_id=market_id,
            side=side_from_token(raw.get("orderSide")),
            price=price,
            quantity=quantity,
            remaining_quantity=codec.decode(_field(raw, "openVolume")),
            total=price * quantity,  # not provided by BTC Markets
        ))
    return result


def map_balance_info(data: Any, codec: NumericCodec) -> BalanceInfo:
    if not isinstance(data, list):
        raise TradingError(f"Failed to get Balance Info from exchange. Error response: {data!r}")

    available: Dict[str, Decimal] = {}
    on_hold: Dict[str, Decimal] = {}
    for raw in data:
        raw = _require_object(raw, "account balance")
        currency = str(_field(raw, "currency")).upper()
        available[currency] = codec.decode(_field(raw, "balance"))
        on_hold[currency] = codec.decode(_field(raw, "pendingFunds"))
    return BalanceInfo(available, on_hold)


def map_create_order(data: Any) -> TradeConfirmation:
    data = _require_object(data, "create order")
    if not _succeeded(data):
        raise TradingError(f"Failed to place order on exchange. {_describe_failure(data)}")
    return TradeConfirmation(str(_field(data, "id")))


def map_cancel_order(data: Any) -> bool:
    """A failed cancel is an answer, not an error: returns False."""
    data = _require_object(data, "cancel order")
    return _succeeded(data)


def map_trading_fee(data: Any, codec: NumericCodec) -> Decimal:
    data = _require_object(data, "trading fee")
    if not _succeeded(data):
        raise TradingError(f"Failed to get trading fee from exchange. {_describe_failure(data)}")
    return fee_fraction(codec.decode(_field(data, "tradingFeeRate")))
