"""
Amount primitives: plain Python ints in an asset's smallest unit.

- Non-negative domain: all amounts are ≥ 0; negative values are rejected at input.
- Upper bound: amounts are < 2^128 (mint MaxAssetAmount).
- No float or Decimal is ever used for monetary arithmetic; Python ints are
  arbitrary precision so products such as `q * base_price` cannot overflow.
"""

from __future__ import annotations

from typing import Any

from .constants import MAX_ASSET_AMOUNT
from .exc import AmountDomainError


# ----------------------------
# Integer rounding
# ----------------------------

def _ceil_div(num: int, den: int) -> int:
    """Ceiling of ``num / den`` for ``num >= 0`` and ``den > 0``."""
    if num < 0 or den <= 0:
        raise AmountDomainError(f"ceil division needs num >= 0 and den > 0, got {num}/{den}")
    return -(-num // den)


# ----------------------------
# Validation and wire parsing
# ----------------------------

def check_amount(value: int, *, what: str = "amount") -> int:
    """Return `value` if it is an int in [0, 2^128), else raise AmountDomainError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise AmountDomainError(f"{what} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise AmountDomainError(f"{what} must be >= 0, got {value}")
    if value >= MAX_ASSET_AMOUNT:
        raise AmountDomainError(f"{what} must be < 2^128, got {value}")
    return value


def parse_amount(raw: Any, *, what: str = "amount") -> int:
    """Parse a wire amount (JSON int or decimal digit string) into an int.

    The mint marshals big integers as bare JSON numbers; some proxies quote
    them. Floats are refused outright: `1e3` or `10.0` would silently lose
    precision for large values.
    """
    if isinstance(raw, str):
        s = raw.strip()
        if not s.isdigit() or not s.isascii():
            raise AmountDomainError(f"{what} is not a decimal integer: {raw!r}")
        return check_amount(int(s), what=what)
    return check_amount(raw, what=what)


def maybe_amount(raw: Any) -> int | None:
    """Lenient variant of `parse_amount`: return None instead of raising."""
    try:
        return parse_amount(raw)
    except AmountDomainError:
        return None


__all__ = [
    "check_amount",
    "parse_amount",
    "maybe_amount",
]
