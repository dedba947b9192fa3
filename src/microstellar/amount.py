"""Amount codec — decimal strings <-> fixed-point stroops.

Stellar amounts are signed 64-bit integers of stroops, where one unit is
10,000,000 stroops. Amounts travel through this library as strings so
callers never do floating point arithmetic on them::

    parse_amount("2.5") == 25_000_000
    to_amount_string(25_000_000) == "2.5000000"
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from microstellar.errors.stellar_errors import ValidationError

STROOPS_PER_UNIT = 10_000_000
DECIMAL_PLACES = 7

_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)


def parse_amount(value: str) -> int:
    """Parse a decimal amount string into stroops.

    Raises:
        ValidationError: If *value* is not a finite decimal, carries more than
            seven fractional digits, or overflows int64.
    """
    try:
        dec = Decimal(value.strip())
    except (InvalidOperation, AttributeError) as exc:
        msg = f"invalid amount: {value!r}"
        raise ValidationError(msg) from exc

    if not dec.is_finite():
        msg = f"invalid amount: {value!r}"
        raise ValidationError(msg)

    scaled = dec * STROOPS_PER_UNIT
    if scaled != scaled.to_integral_value():
        msg = f"amount has more than {DECIMAL_PLACES} decimal places: {value}"
        raise ValidationError(msg)

    stroops = int(scaled)
    if not _INT64_MIN <= stroops <= _INT64_MAX:
        msg = f"amount out of range: {value}"
        raise ValidationError(msg)
    return stroops


def to_amount_string(stroops: int) -> str:
    """Render *stroops* as a decimal string with exactly seven fractional digits."""
    sign = "-" if stroops < 0 else ""
    whole, frac = divmod(abs(stroops), STROOPS_PER_UNIT)
    return f"{sign}{whole}.{frac:0{DECIMAL_PLACES}d}"
