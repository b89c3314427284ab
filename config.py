# config.py — BTC Markets adapter configuration
import logging
import os
import time
from dataclasses import dataclass, field
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Callable, List, Tuple

from helpers.codec import fee_fraction
from helpers.errors import ConfigurationError
from helpers.signing import decode_secret

logger = logging.getLogger(__name__)

ENV_PREFIX = "BTCMARKETS_"


@dataclass
class AuthenticationConfig:
    key: str
    secret: str

    def __repr__(self) -> str:
        return f"AuthenticationConfig(key={self.key!r}, secret='***')"


@dataclass
class NetworkConfig:
    connection_timeout_s: int = 30
    non_fatal_error_codes: List[int] = field(default_factory=lambda: [502, 503, 504])
    non_fatal_error_messages: List[str] = field(default_factory=lambda: [
        "Connection refused",
        "Connection reset",
        "Remote host closed connection during handshake",
    ])


@dataclass
class OptionalConfig:
    buy_fee: str = "0.85"       # percent
    sell_fee: str = "0.85"      # percent
    order_type: str = "Limit"   # forwarded verbatim to the exchange
    orders_limit: int = 10
    orders_since_hours: int = 24


@dataclass
class ExchangeConfig:
    authentication: AuthenticationConfig
    network: NetworkConfig = field(default_factory=NetworkConfig)
    optional: OptionalConfig = field(default_factory=OptionalConfig)


def percent_to_fraction(percent: str) -> Decimal:
    try:
        value = Decimal(str(percent))
    except (InvalidOperation, ValueError) as e:
        raise ConfigurationError(f"Fee percentage is not a decimal: {percent!r}", e) from e
    if not value.is_finite():
        raise ConfigurationError(f"Fee percentage is not a decimal: {percent!r}")
    try:
        return fee_fraction(value)
    except DecimalException as e:
        raise ConfigurationError(f"Fee percentage out of range: {percent!r}", e) from e


@dataclass(frozen=True)
class AdapterSettings:
    """Everything the adapter needs after start-up. Built once, never mutated."""
    key: str
    secret: str
    buy_fee_percentage: Decimal
    sell_fee_percentage: Decimal
    order_type: str
    orders_limit: int
    orders_since: int  # epoch millis

    def __repr__(self) -> str:
        return (f"AdapterSettings(key={self.key!r}, buy_fee_percentage={self.buy_fee_percentage}, "
                f"sell_fee_percentage={self.sell_fee_percentage}, order_type={self.order_type!r}, "
                f"orders_limit={self.orders_limit}, orders_since={self.orders_since})")

    @classmethod
    def from_config(cls, cfg: ExchangeConfig, clock: Callable[[], float] = time.time) -> "AdapterSettings":
        auth = cfg.authentication
        if not auth.key:
            raise ConfigurationError("API key is missing")
        decode_secret(auth.secret)  # fail fast on a malformed secret

        opt = cfg.optional
        buy_fee = percent_to_fraction(opt.buy_fee)
        sell_fee = percent_to_fraction(opt.sell_fee)
        logger.info(f"Buy fee % in decimal format: {buy_fee}")
        logger.info(f"Sell fee % in decimal format: {sell_fee}")

        now_ms = int(clock() * 1000)
        orders_since = now_ms - int(opt.orders_since_hours) * 3600 * 1000

        return cls(
            key=auth.key,
            secret=auth.secret,
            buy_fee_percentage=buy_fee,
            sell_fee_percentage=sell_fee,
            order_type=opt.order_type,
            orders_limit=int(opt.orders_limit),
            orders_since=orders_since,
        )


# ---------------- Environment ---------------- #

def _env(name: str, default: str = "") -> str:
    return os.getenv(ENV_PREFIX + name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}", e) from e


def _env_list(name: str, sep: str, default: List[str]) -> List[str]:
    raw = _env(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(sep) if item.strip()]


def _env_int_list(name: str, default: List[int]) -> List[int]:
    items = _env_list(name, ",", [str(d) for d in default])
    try:
        return [int(i) for i in items]
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a comma separated list of integers", e) from e


def load_exchange_config() -> ExchangeConfig:
    """Read BTCMARKETS_* environment variables (call load_dotenv() first)."""
    network_defaults = NetworkConfig()
    optional_defaults = OptionalConfig()
    return ExchangeConfig(
        authentication=AuthenticationConfig(
            key=_env("KEY"),
            secret=_env("SECRET"),
        ),
        network=NetworkConfig(
            connection_timeout_s=_env_int("CONNECTION_TIMEOUT", network_defaults.connection_timeout_s),
            non_fatal_error_codes=_env_int_list("NON_FATAL_ERROR_CODES", network_defaults.non_fatal_error_codes),
            non_fatal_error_messages=_env_list("NON_FATAL_ERROR_MESSAGES", "|",
                                               network_defaults.non_fatal_error_messages),
        ),
        optional=OptionalConfig(
            buy_fee=_env("BUY_FEE", optional_defaults.buy_fee),
            sell_fee=_env("SELL_FEE", optional_defaults.sell_fee),
            order_type=_env("ORDER_TYPE", optional_defaults.order_type),
            orders_limit=_env_int("ORDERS_LIMIT", optional_defaults.orders_limit),
            orders_since_hours=_env_int("ORDERS_SINCE", optional_defaults.orders_since_hours),
        ),
    )


def configured_markets() -> Tuple[str, ...]:
    return tuple(_env_list("MARKETS", ",", ["btc_aud"]))
