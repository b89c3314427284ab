# main.py — one-shot BTC Markets account / market snapshot
import os
import logging

from dotenv import load_dotenv
load_dotenv()

from config import configured_markets, load_exchange_config
from adapters.btcmarkets_adapter import BtcMarketsAdapter
from helpers.errors import ConfigurationError, NetworkError, TradingError

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
)
logger = logging.getLogger("btcmarkets")


def snapshot(adapter: BtcMarketsAdapter, market_id: str) -> None:
    ticker = adapter.get_ticker(market_id)
    book = adapter.get_market_orders(market_id)
    best_bid = book.buy_orders[0].price if book.buy_orders else None
    best_ask = book.sell_orders[0].price if book.sell_orders else None
    logger.info(
        f"{market_id.upper():<8} | last={ticker.last} bid={best_bid} ask={best_ask} "
        f"vol24h={ticker.volume} | open orders={len(adapter.get_your_open_orders(market_id))}"
    )


def main() -> int:
    try:
        adapter = BtcMarketsAdapter.from_config(load_exchange_config())
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    for market_id in configured_markets():
        try:
            snapshot(adapter, market_id)
        except NetworkError as e:
            logger.warning(f"{market_id}: network error ({e}), try again later")
        except TradingError:
            logger.exception(f"Error on {market_id}")

    try:
        balances = adapter.get_balance_info()
        for currency, amount in sorted(balances.available.items()):
            logger.info(f"{currency:<4} available={amount} on hold={balances.on_hold.get(currency)}")
    except (NetworkError, TradingError) as e:
        logger.warning(f"Balance fetch failed: {e}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
