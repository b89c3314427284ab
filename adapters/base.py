# adapters/base.py
from __future__ import annotations
from decimal import Decimal
from typing import List

from helpers.models import BalanceInfo, MarketOrderBook, OpenOrder, OrderSide, Ticker


class BaseAdapter:
    def __init__(self, settings):
        self.settings = settings

    def get_impl_name(self) -> str: raise NotImplementedError
    def get_market_orders(self, market_id: str) -> MarketOrderBook: raise NotImplementedError
    def get_your_open_orders(self, market_id: str) -> List[OpenOrder]: raise NotImplementedError
    def create_order(self, market_id: str, side: OrderSide, quantity: Decimal, price: Decimal) -> str: raise NotImplementedError
    def cancel_order(self, order_id: str, market_id: str) -> bool: raise NotImplementedError
    def get_latest_market_price(self, market_id: str) -> Decimal: raise NotImplementedError
    def get_balance_info(self) -> BalanceInfo: raise NotImplementedError
    def get_ticker(self, market_id: str) -> Ticker: raise NotImplementedError
    def get_percentage_of_buy_order_taken_for_exchange_fee(self, market_id: str) -> Decimal: raise NotImplementedError
    def get_percentage_of_sell_order_taken_for_exchange_fee(self, market_id: str) -> Decimal: raise NotImplementedError
