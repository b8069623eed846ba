"""
Core datatypes used by the resolver, aligned with the mint resources.

These datatypes are intentionally minimal and immutable so that resolution
stays a pure, deterministic function of the fetched snapshots.

Notes:
- Amounts are Python ints in the asset's smallest unit (see `amounts.py`).
- `Trustline` keeps `pair` and `price` as received on the wire; `parse()`
  validates them lazily so that one corrupt entry can be skipped without
  failing the whole listing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Tuple

from .amounts import check_amount
from .assets import Asset, assets_from_pair, normalized_address, pair_name
from .constants import TRUSTLINE_ACTIVE
from .exc import AssetNameError, MalformedTrustlineError
from .price import Price


# ---------------------------------------------------------------------------
# Ledger resources (read-only snapshots)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Balance:
    """Quantity of `asset` (canonical name) held by `holder`."""

    id: str
    asset: str
    holder: str
    value: int
    created: Optional[int] = None


@dataclass(frozen=True)
class Trustline:
    """A canonical offer: `owner` converts its own base asset into the quote asset.

    Fields:
    - pair: raw ``base/quote`` asset pair.
    - price: raw ``pB/pQ`` price.
    - amount: maximum capacity in quote units (None if the wire value was invalid).
    - remainder: unconsumed capacity in quote units (None if invalid).
    - status: ``active``, ``closed`` or ``consumed``.
    """

    id: str
    owner: str
    pair: str
    price: str
    amount: Optional[int]
    remainder: Optional[int]
    status: str = TRUSTLINE_ACTIVE
    created: Optional[int] = None

    def is_active(self) -> bool:
        return self.status == TRUSTLINE_ACTIVE

    def parse(self) -> "ParsedTrustline":
        """Validate pair, price and capacity; raise MalformedTrustlineError otherwise."""
        try:
            base, quote = assets_from_pair(self.pair)
            price = Price.parse(self.price)
        except MalformedTrustlineError as e:
            raise MalformedTrustlineError(str(e), trustline_id=self.id) from e
        if self.remainder is None or self.amount is None:
            raise MalformedTrustlineError(
                f"trustline {self.id} has an invalid amount or remainder",
                trustline_id=self.id,
            )
        if self.remainder > self.amount:
            raise MalformedTrustlineError(
                f"trustline {self.id} remainder {self.remainder} exceeds amount {self.amount}",
                trustline_id=self.id,
            )
        try:
            owner = normalized_address(self.owner)
        except AssetNameError as e:
            raise MalformedTrustlineError(str(e), trustline_id=self.id) from e
        # Offers are asks on the owner's own asset.
        if owner != base.owner:
            raise MalformedTrustlineError(
                f"trustline {self.id} owner {owner} is not the base asset owner {base.owner}",
                trustline_id=self.id,
            )
        return ParsedTrustline(trustline=self, base=base, quote=quote, price=price)


@dataclass(frozen=True)
class ParsedTrustline:
    """Validated view of a `Trustline`."""

    trustline: Trustline
    base: Asset
    quote: Asset
    price: Price

    @property
    def remainder(self) -> int:
        return self.trustline.remainder  # type: ignore[return-value]

    def has_capacity(self, quote_amount: int) -> bool:
        return self.remainder >= quote_amount


# ---------------------------------------------------------------------------
# Request / result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PaymentRequest:
    """Pay `amount` (quote asset smallest units) of `quote_asset` to `destination`."""

    quote_asset: str
    amount: int
    destination: Optional[str] = None

    def __post_init__(self):
        check_amount(self.amount, what="request amount")
        # Fail early on unparseable names; the canonical string is what we compare.
        try:
            Asset.from_name(self.quote_asset)
        except AssetNameError as e:
            raise ValueError(str(e)) from e


@dataclass(frozen=True)
class Candidate:
    """A proposed route: zero or one trustline, the debited base asset and amount.

    `source` tells the settlement layer how the payer obtains the base asset:
    ``balance`` (held) or ``issuance`` (self-issued, own asset).
    """

    path: Tuple[Trustline, ...]
    base_asset: str
    amount: int
    source: Literal["balance", "issuance"] = "balance"

    @property
    def hops(self) -> int:
        return len(self.path)

    def path_ids(self) -> List[str]:
        return [t.id for t in self.path]

    def transaction_params(self, request: PaymentRequest) -> Dict[str, object]:
        """Form body for the settlement layer's ``POST /transactions``.

        The transaction is expressed on the pair ``base/quote`` for the
        requested quote amount; the mint recomputes per-hop amounts.
        """
        return {
            "pair": pair_name(self.base_asset, request.quote_asset),
            "amount": str(request.amount),
            "destination": request.destination,
            "path[]": self.path_ids(),
        }


__all__ = [
    "Balance",
    "Trustline",
    "ParsedTrustline",
    "PaymentRequest",
    "Candidate",
]
