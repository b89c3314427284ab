# adapters/btcmarkets_adapter.py — BTC Markets Exchange Adapter
import functools
import json
import logging
import time
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional

from config import AdapterSettings, ExchangeConfig
from helpers.api_methods import ApiMethod, route_for
from helpers.errors import NetworkError, TradingError
from helpers.mappers import (
    map_balance_info, map_cancel_order, map_create_order, map_open_orders, map_order_book,
    map_ticker, map_trading_fee, parse_payload, side_to_token,
)
from helpers.markets import REGISTRY, MarketRegistry
from helpers.models import BalanceInfo, MarketOrderBook, OpenOrder, OrderSide, Ticker
from helpers.signing import RequestSigner, build_query_string
from helpers.transport import HttpTransport
from .base import BaseAdapter

logger = logging.getLogger(__name__)
BASE = "https://api.btcmarkets.net"

UNEXPECTED_ERROR_MSG = "Unexpected error has occurred in BTC Markets Exchange Adapter. "

EventSink = Callable[[str, Dict[str, Any]], None]


def log_event(event: str, fields: Dict[str, Any]) -> None:
    """
    Default event sink: adapter events go to the module logger.

    NetworkError is logged at WARNING, other errors at ERROR. Unexpected
    errors (the ones carrying a cause) also get the traceback.
    """
    if event != "error_classified":
        logger.debug(f"{event} | {fields}")
    elif fields.get("error") == "NetworkError":
        logger.warning(f"{event} | {fields}")
    else:
        logger.error(f"{event} | {fields}", exc_info="cause" in fields)


def classify_errors(fn):
    """
    Single error boundary for every public operation.

    NetworkError and TradingError (incl. ProtocolError) pass through as-is.
    Anything else becomes a TradingError chained to the original exception.
    """
    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except (NetworkError, TradingError) as e:
            self._emit("error_classified", operation=fn.__name__, error=type(e).__name__, message=str(e))
            raise
        except Exception as e:
            self._emit("error_classified", operation=fn.__name__, error="TradingError",
                       cause=f"{type(e).__name__}: {e}")
            raise TradingError(UNEXPECTED_ERROR_MSG, e) from e
    return wrapper


class BtcMarketsAdapter(BaseAdapter):
    """
    BTC Markets Developer API adapter.

    Every call is signed (see helpers.signing), sent through the transport and
    mapped back into helpers.models entities. Instances hold only the
    immutable AdapterSettings, so concurrent calls on one instance are safe.
    """

    def __init__(self, settings: AdapterSettings, transport, registry: MarketRegistry = REGISTRY,
                 event_sink: Optional[EventSink] = None, clock: Callable[[], float] = time.time):
        super().__init__(settings)
        self.signer = RequestSigner(settings.key, settings.secret, clock=clock)
        self.transport = transport
        self.registry = registry
        self.event_sink = event_sink or log_event
        logger.info(f"BTC Markets adapter ready: {settings!r}")

    @classmethod
    def from_config(cls, cfg: ExchangeConfig, transport=None, registry: MarketRegistry = REGISTRY,
                    event_sink: Optional[EventSink] = None,
                    clock: Callable[[], float] = time.time) -> "BtcMarketsAdapter":
        settings = AdapterSettings.from_config(cfg, clock=clock)
        transport = transport or HttpTransport.from_network_config(cfg.network)
        return cls(settings, transport, registry=registry, event_sink=event_sink, clock=clock)

    def _emit(self, event: str, **fields) -> None:
        self.event_sink(event, fields)

    def _send(self, method: ApiMethod, instrument: Optional[str] = None,
              body: Optional[Mapping[str, Any]] = None, params: Optional[Mapping[str, str]] = None) -> Any:
        route = route_for(method)
        path = route.path(instrument)
        query_string = build_query_string(params)
        body_str = json.dumps(body, separators=(',', ':')) if route.has_body else None
        headers = self.signer.headers(path, query_string, body_str)
        url = BASE + path + query_string

        self._emit("request_built", method=method.name, verb=route.verb, url=url, body=body_str)
        response = self.transport.send(url, route.verb, body_str, headers)
        self._emit("response_received", method=method.name, status=response.status_code,
                   reason=response.reason, payload=response.payload)
        return parse_payload(response.payload)

    # ---------------- Market data ---------------- #
    def get_impl_name(self) -> str:
        return "BTC Markets Developer API"

    @classify_errors
    def get_market_orders(self, market_id: str) -> MarketOrderBook:
        market = self.registry.lookup(market_id)
        data = self._send(ApiMethod.ORDERBOOK, market.instrument)
        return map_order_book(market_id, data, route_for(ApiMethod.ORDERBOOK).codec)

    @classify_errors
    def get_ticker(self, market_id: str) -> Ticker:
        market = self.registry.lookup(market_id)
        data = self._send(ApiMethod.TICK, market.instrument)
        return map_ticker(data, route_for(ApiMethod.TICK).codec)

    @classify_errors
    def get_latest_market_price(self, market_id: str) -> Decimal:
        market = self.registry.lookup(market_id)
        data = self._send(ApiMethod.TICK, market.instrument)
        return map_ticker(data, route_for(ApiMethod.TICK).codec).last

    # ---------------- Trading ---------------- #
    @classify_errors
    def get_your_open_orders(self, market_id: str) -> List[OpenOrder]:
        market = self.registry.lookup(market_id)
        body = {
            "currency": market.counter_currency,
            "instrument": market.base_currency,
            "limit": self.settings.orders_limit,
            "since": self.settings.orders_since,
        }
        data = self._send(ApiMethod.OPEN_ORDERS, body=body)
        return map_open_orders(market_id, data, route_for(ApiMethod.OPEN_ORDERS).codec)

    @classify_errors
    def create_order(self, market_id: str, side: OrderSide, quantity: Decimal, price: Decimal) -> str:
        market = self.registry.lookup(market_id)
        codec = route_for(ApiMethod.CREATE_ORDER).codec
        body = {
            "currency": market.counter_currency,
            "instrument": market.base_currency,
            "price": codec.encode(price),
            "volume": codec.encode(quantity),
            "orderSide": side_to_token(OrderSide(side)),
            "ordertype": self.settings.order_type,
        }
        data = self._send(ApiMethod.CREATE_ORDER, body=body)
        confirmation = map_create_order(data)
        logger.info(f"BTC Markets {OrderSide(side).value} {quantity} @ {price} id={confirmation.order_id}")
        return confirmation.order_id

    @classify_errors
    def cancel_order(self, order_id: str, market_id: str) -> bool:
        # market_id is validated even though the exchange only needs the order id
        self.registry.lookup(market_id)
        data = self._send(ApiMethod.CANCEL_ORDER, body={"orderIds": [order_id]})
        cancelled = map_cancel_order(data)
        if not cancelled:
            logger.error(f"Failed to cancel order {order_id} on exchange. Error response: {data}")
        return cancelled

    # ---------------- Account ---------------- #
    @classify_errors
    def get_balance_info(self) -> BalanceInfo:
        data = self._send(ApiMethod.ACCOUNT_BALANCE)
        return map_balance_info(data, route_for(ApiMethod.ACCOUNT_BALANCE).codec)

    def _trading_fee(self, market_id: str) -> Decimal:
        market = self.registry.lookup(market_id)
        data = self._send(ApiMethod.ACCOUNT_TRADING_FEE, market.instrument)
        return map_trading_fee(data, route_for(ApiMethod.ACCOUNT_TRADING_FEE).codec)

    @classify_errors
    def get_percentage_of_buy_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        return self._trading_fee(market_id)

    @classify_errors
    def get_percentage_of_sell_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        # the exchange reports a single trading fee per instrument
        return self._trading_fee(market_id)
