# helpers/api_methods.py — logical operation -> wire path / verb / codec
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from .codec import NumericCodec, PLAIN_CODEC, SCALED_CODEC


class ApiMethod(Enum):
    CREATE_ORDER = "create_order"
    CANCEL_ORDER = "cancel_order"
    ORDERBOOK = "orderbook"
    TICK = "tick"
    OPEN_ORDERS = "open_orders"
    ACCOUNT_BALANCE = "account_balance"
    ACCOUNT_TRADING_FEE = "account_trading_fee"


@dataclass(frozen=True)
class ApiRoute:
    path_template: str
    verb: str
    has_body: bool
    codec: NumericCodec

    def path(self, instrument: Optional[str] = None) -> str:
        if "{instrument}" in self.path_template:
            if not instrument:
                raise ValueError(f"{self.path_template} needs an instrument")
            return self.path_template.format(instrument=instrument)
        return self.path_template


API_METHODS: Mapping[ApiMethod, ApiRoute] = MappingProxyType({
    ApiMethod.CREATE_ORDER: ApiRoute("/order/create", "POST", True, SCALED_CODEC),
    ApiMethod.CANCEL_ORDER: ApiRoute("/order/cancel", "POST", True, SCALED_CODEC),
    ApiMethod.ORDERBOOK: ApiRoute("/market/{instrument}/orderbook", "GET", False, PLAIN_CODEC),
    ApiMethod.TICK: ApiRoute("/market/{instrument}/tick", "GET", False, PLAIN_CODEC),
    ApiMethod.OPEN_ORDERS: ApiRoute("/order/open", "POST", True, SCALED_CODEC),
    ApiMethod.ACCOUNT_BALANCE: ApiRoute("/account/balance", "GET", False, SCALED_CODEC),
    ApiMethod.ACCOUNT_TRADING_FEE: ApiRoute("/account/{instrument}/tradingfee", "GET", False, SCALED_CODEC),
})


def route_for(method: ApiMethod) -> ApiRoute:
    return API_METHODS[method]
