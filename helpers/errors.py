# helpers/errors.py — error taxonomy shared by the adapter pipeline
from typing import Optional


class ExchangeAdapterError(Exception):
    """Base adapter error. Keeps the original exception for diagnostics."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ConfigurationError(ExchangeAdapterError):
    """Unknown market id, bad credentials, unusable signing key. Never retried."""


class NetworkError(ExchangeAdapterError):
    """Transient transport failure. Retry policy belongs to the caller."""


class TradingError(ExchangeAdapterError):
    """Exchange said no, or the payload made no sense."""


class ProtocolError(TradingError):
    """Wire value could not be decoded."""
