"""
Trustline price (base/quote integer ratio) and quote → base conversion.

Alignment notes:
- A trustline price ``pB/pQ`` states that ``pB`` units of the base asset are
  exchanged for ``pQ`` units of the quote asset. Both are integers so no
  precision is lost on the wire.
- Converting a requested quote amount into the base amount charged to the
  payer rounds UP: the payer never under-pays relative to the trustline's
  rate. The residual fraction is the cost of crossing an incongruent price.
- Everything is integer arithmetic; no Fraction/Decimal/float round-trips.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .amounts import _ceil_div
from .constants import MAX_ASSET_AMOUNT
from .exc import AmountDomainError, MalformedTrustlineError, PriceError


#: Validates and parses a price string ``pB/pQ``.
PRICE_RE = re.compile(r"^([0-9]+)/([0-9]+)\Z")


def quote_to_base(q: int, base_price: int, quote_price: int) -> int:
    """Return the smallest `b` such that ``b * quote_price >= q * base_price``.

    >>> quote_to_base(100, 3, 2)
    150
    >>> quote_to_base(100, 1, 3)
    34
    """
    if quote_price <= 0:
        raise MalformedTrustlineError(f"quote price must be > 0, got {quote_price}")
    if q < 0:
        raise AmountDomainError(f"quote amount must be >= 0, got {q}")
    if base_price < 0:
        raise AmountDomainError(f"base price must be >= 0, got {base_price}")

    return _ceil_div(q * base_price, quote_price)


@dataclass(frozen=True)
class Price:
    """Exchange rate of a trustline as an integer pair (base_price, quote_price)."""

    base_price: int
    quote_price: int

    @classmethod
    def parse(cls, price: str) -> "Price":
        m = PRICE_RE.match(price or "") if isinstance(price, str) else None
        if m is None:
            raise PriceError(
                f"invalid price: {price!r}; prices must have the form 'pB/pQ'"
            )
        base_price, quote_price = int(m.group(1)), int(m.group(2))
        for label, v in (("base", base_price), ("quote", quote_price)):
            if v <= 0 or v >= MAX_ASSET_AMOUNT:
                raise PriceError(
                    f"invalid {label} price: {v}; prices must be integers between 1 and 2^128"
                )
        return cls(base_price, quote_price)

    def quote_to_base(self, q: int) -> int:
        """Base amount required to deliver `q` units of the quote asset."""
        return quote_to_base(q, self.base_price, self.quote_price)

    def surcharge(self, q: int) -> int:
        """Residual absorbed by rounding up, in units of (base × quote_price).

        Zero when the price divides the request evenly.
        """
        return self.quote_to_base(q) * self.quote_price - q * self.base_price

    def is_congruent(self, q: int) -> bool:
        return self.surcharge(q) == 0

    def __str__(self) -> str:
        return f"{self.base_price}/{self.quote_price}"


__all__ = [
    "PRICE_RE",
    "Price",
    "quote_to_base",
]
