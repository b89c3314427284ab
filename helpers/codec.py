# helpers/codec.py — decimal <-> wire numeral conversion
"""
BTC Markets uses two number formats on the wire.

Market data (orderbook, tick) sends plain decimals, e.g. ``844.98``.

Account and trading endpoints send integers scaled by 1E8, e.g. ``13000000000``
for ``130.00``. Decoding divides by 1E8 and truncates to 2 decimal places
(the exchange only accepts 2); encoding multiplies by 1E8 and drops the
fraction. Both directions truncate toward zero, never round.
"""
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import Any, Union

from .errors import ProtocolError

DECIMAL_TO_INT = Decimal(100000000)
DEFAULT_SCALE = 2

ONE_HUNDRED = Decimal(100)
FEE_SCALE = 8
FEE_EXPONENT = Decimal(1).scaleb(-FEE_SCALE)

PLAIN = "plain"
SCALED = "scaled"

Numeral = Union[str, int, Decimal]


def _to_decimal(value: Any) -> Decimal:
    # bool is an int subclass; true/false is never a number on this API
    if value is None or isinstance(value, bool):
        raise ProtocolError(f"Expected a numeral, got {value!r}")
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ProtocolError(f"Expected a numeral, got {value!r}", e) from e
    if not d.is_finite():
        raise ProtocolError(f"Expected a finite numeral, got {value!r}")
    return d


def decode_plain(value: Any) -> Decimal:
    return _to_decimal(value)


def encode_plain(value: Decimal) -> str:
    return str(_to_decimal(value))


def decode_scaled(value: Any, places: int = DEFAULT_SCALE) -> Decimal:
    raw = _to_decimal(value)
    if raw != raw.to_integral_value():
        raise ProtocolError(f"Expected a scaled integer, got {value!r}")
    exponent = Decimal(1).scaleb(-places)
    try:
        return (raw / DECIMAL_TO_INT).quantize(exponent, rounding=ROUND_DOWN)
    except DecimalException as e:
        raise ProtocolError(f"Scaled integer out of range: {value!r}", e) from e


def encode_scaled(value: Decimal) -> int:
    # int() truncates toward zero
    try:
        return int(_to_decimal(value) * DECIMAL_TO_INT)
    except DecimalException as e:
        raise ProtocolError(f"Cannot scale {value!r} to an integer", e) from e


def fee_fraction(percent: Decimal) -> Decimal:
    """Percent -> multiplier, e.g. 0.85 -> 0.0085 (half-up, 8 places)."""
    return (percent / ONE_HUNDRED).quantize(FEE_EXPONENT, rounding=ROUND_HALF_UP)


class NumericCodec:
    """Profile-bound decode/encode pair."""

    def __init__(self, profile: str):
        if profile not in (PLAIN, SCALED):
            raise ValueError(f"Unknown codec profile: {profile}")
        self.profile = profile

    def decode(self, value: Any) -> Decimal:
        if self.profile == SCALED:
            return decode_scaled(value)
        return decode_plain(value)

    def encode(self, value: Decimal) -> Numeral:
        if self.profile == SCALED:
            return encode_scaled(value)
        return encode_plain(value)

    def __repr__(self) -> str:
        return f"NumericCodec({self.profile!r})"


PLAIN_CODEC = NumericCodec(PLAIN)
SCALED_CODEC = NumericCodec(SCALED)
