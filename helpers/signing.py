# helpers/signing.py — BTC Markets request signing
"""
Authentication uses:
- apikey: API key
- timestamp: epoch millis, also part of the signed string
- signature: base64(HMAC-SHA512(base64decode(secret), string_to_sign))

string_to_sign = path + "\\n" + query_string + "\\n" + timestamp + "\\n" + body
"""
import base64
import binascii
import hashlib
import hmac
import time
from typing import Dict, Mapping, Optional
from urllib.parse import urlencode

from .errors import ConfigurationError

ENCODING = "UTF-8"

SIGNATURE_HEADER = "signature"
APIKEY_HEADER = "apikey"
TIMESTAMP_HEADER = "timestamp"


def decode_secret(secret: str) -> bytes:
    """Base64-decode the API secret, failing hard on anything unusable."""
    if not secret:
        raise ConfigurationError("API secret is empty")
    try:
        key = base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError("API secret is not valid base64", e) from e
    if not key:
        raise ConfigurationError("API secret decodes to an empty key")
    return key


def build_query_string(params: Optional[Mapping[str, str]] = None) -> str:
    """Serialize query params sorted by key. The same string is signed and sent."""
    if not params:
        return ""
    return "?" + urlencode(sorted(params.items()))


def build_string_to_sign(path: str, query_string: str, timestamp: str, body: Optional[str]) -> str:
    return f"{path}\n{query_string or ''}\n{timestamp}\n{body or ''}"


def _hmac_b64(key: bytes, message: str) -> str:
    digest = hmac.new(key, message.encode("utf-8"), hashlib.sha512).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_request(secret: str, path: str, query_string: str, body: Optional[str], timestamp: str) -> str:
    return _hmac_b64(decode_secret(secret), build_string_to_sign(path, query_string, timestamp, body))


class RequestSigner:
    def __init__(self, key: str, secret: str, clock=time.time):
        self.key = key
        self._secret_key = decode_secret(secret)
        self._clock = clock

    def timestamp(self) -> str:
        return str(int(self._clock() * 1000))

    def sign(self, path: str, query_string: str, body: Optional[str], timestamp: str) -> str:
        return _hmac_b64(self._secret_key, build_string_to_sign(path, query_string, timestamp, body))

    def headers(self, path: str, query_string: str = "", body: Optional[str] = None,
                timestamp: Optional[str] = None) -> Dict[str, str]:
        timestamp = timestamp or self.timestamp()
        return {
            "Accept": "*/*",
            "Content-Type": "application/json",
            "Accept-Charset": ENCODING,
            SIGNATURE_HEADER: self.sign(path, query_string, body, timestamp),
            APIKEY_HEADER: self.key,
            TIMESTAMP_HEADER: timestamp,
        }
