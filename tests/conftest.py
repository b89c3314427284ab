"""Shared test fixtures."""

import base64
from pathlib import Path
from typing import List, Optional

import pytest

from adapters.btcmarkets_adapter import BtcMarketsAdapter
from config import AdapterSettings, AuthenticationConfig, ExchangeConfig, OptionalConfig
from helpers.transport import ExchangeHttpResponse

EXCHANGE_DATA = Path(__file__).parent / "exchange_data" / "btcmarkets"

KEY = "key123"
SECRET = base64.b64encode(b"notGonnaTellYa-not-even-in-tests").decode()
NOW_S = 1476243360.0


def load_payload(name: str) -> str:
    return (EXCHANGE_DATA / name).read_text(encoding="utf-8")


class FakeTransport:
    """Records every send() and replays canned responses or errors."""

    def __init__(self) -> None:
        self.calls: List[dict] = []
        self._responses: list = []

    def reply(self, payload: str, status_code: int = 200, reason: str = "OK") -> "FakeTransport":
        self._responses.append(ExchangeHttpResponse(status_code, reason, payload))
        return self

    def reply_file(self, name: str) -> "FakeTransport":
        return self.reply(load_payload(name))

    def fail(self, error: BaseException) -> "FakeTransport":
        self._responses.append(error)
        return self

    def send(self, url: str, verb: str, body: Optional[str], headers: dict) -> ExchangeHttpResponse:
        self.calls.append({"url": url, "verb": verb, "body": body, "headers": headers})
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    @property
    def last(self) -> dict:
        return self.calls[-1]


def fixed_clock() -> float:
    return NOW_S


@pytest.fixture
def exchange_config() -> ExchangeConfig:
    return ExchangeConfig(
        authentication=AuthenticationConfig(key=KEY, secret=SECRET),
        optional=OptionalConfig(buy_fee="0.2", sell_fee="0.25", order_type="Limit",
                                orders_limit=10, orders_since_hours=24),
    )


@pytest.fixture
def settings(exchange_config: ExchangeConfig) -> AdapterSettings:
    return AdapterSettings.from_config(exchange_config, clock=fixed_clock)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def adapter(settings: AdapterSettings, transport: FakeTransport, events: list) -> BtcMarketsAdapter:
    return BtcMarketsAdapter(settings, transport,
                             event_sink=lambda event, fields: events.append((event, fields)),
                             clock=fixed_clock)
