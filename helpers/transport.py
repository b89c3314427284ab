# helpers/transport.py — blocking HTTP transport with non-fatal error classification
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import requests

from .errors import NetworkError, TradingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExchangeHttpResponse:
    status_code: int
    reason: str
    payload: str

    def __str__(self) -> str:
        return f"ExchangeHttpResponse(status_code={self.status_code}, reason={self.reason!r}, payload={self.payload!r})"


class HttpTransport:
    """
    Sends one request and hands back the raw response, whatever the status.

    Raises NetworkError when the connection fails outright, or when the
    status code / error message matches the configured non-fatal lists.
    Anything else that goes wrong inside requests is a TradingError.
    """

    def __init__(self, connection_timeout_s: int = 30,
                 non_fatal_error_codes: Iterable[int] = (),
                 non_fatal_error_messages: Iterable[str] = (),
                 session: Optional[requests.Session] = None):
        self.timeout = connection_timeout_s
        self.non_fatal_error_codes = frozenset(non_fatal_error_codes)
        self.non_fatal_error_messages = tuple(non_fatal_error_messages)
        self.session = session or requests.Session()

    @classmethod
    def from_network_config(cls, network, session: Optional[requests.Session] = None) -> "HttpTransport":
        return cls(network.connection_timeout_s, network.non_fatal_error_codes,
                   network.non_fatal_error_messages, session=session)

    def _is_non_fatal_message(self, message: str) -> bool:
        return any(m in message for m in self.non_fatal_error_messages)

    def send(self, url: str, verb: str, body: Optional[str], headers: Dict[str, str]) -> ExchangeHttpResponse:
        try:
            r = self.session.request(
                verb,
                url,
                data=body.encode("utf-8") if body else None,
                headers=headers,
                timeout=self.timeout,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.warning(f"Failed to connect to exchange: {e}")
            raise NetworkError(f"Failed to connect to exchange: {e}", e) from e
        except requests.exceptions.RequestException as e:
            if self._is_non_fatal_message(str(e)):
                raise NetworkError(f"Non-fatal network error: {e}", e) from e
            raise TradingError(f"Failed to connect to exchange due to unexpected IO error: {e}", e) from e

        if r.status_code in self.non_fatal_error_codes:
            msg = f"Exchange returned non-fatal HTTP {r.status_code} {r.reason} for {url}"
            logger.warning(msg)
            raise NetworkError(msg)

        return ExchangeHttpResponse(r.status_code, r.reason or "", r.text)
