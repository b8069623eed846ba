"""
Asset names, pairs and addresses.

An asset is identified by its canonical name ``owner[CODE.scale]`` where the
owner is a mint address such as ``von.neumann@ias.edu:8989``. Addresses may
carry a ``+tag`` after the username; the tag is dropped when normalising.

Pairs are written ``base/quote`` and are how trustlines declare the assets
they convert between.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from .constants import ASSET_SCALE_MIN, ASSET_SCALE_MAX
from .exc import AssetNameError


_ADDRESS = (
    r"([a-zA-Z0-9\-_.]{1,256})(\+[a-zA-Z0-9\-_.]+)?@"
    r"([a-zA-Z0-9\-]+\.[a-zA-Z0-9\-.]+(:[0-9]{1,5})?)"
)

#: Validates and parses asset names: owner[CODE.scale].
ASSET_NAME_RE = re.compile(r"^" + _ADDRESS + r"\[([A-Z0-9\-]{1,64})\.([0-9]{1,2})\]\Z")

#: Validates and parses user addresses.
ADDRESS_RE = re.compile(r"^" + _ADDRESS + r"\Z")

#: Validates a full object id including owner and token, e.g. a trustline id.
ID_RE = re.compile(r"^(.+)\[([a-z]+_[a-zA-Z0-9]+)\]\Z")


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------

def split_address(address: str) -> Tuple[str, str]:
    """Return (username, host) for a fully qualified address."""
    m = ADDRESS_RE.match(address or "")
    if m is None:
        raise AssetNameError(f"invalid address: {address!r}")
    return m.group(1), m.group(3)


def normalized_address(address: str) -> str:
    """Return the address with its ``+tag`` part removed."""
    username, host = split_address(address)
    return f"{username}@{host}"


def owner_and_token_from_id(object_id: str) -> Tuple[str, str]:
    """Split ``owner[kind_token]`` into (normalized owner, token)."""
    m = ID_RE.match(object_id or "")
    if m is None:
        raise AssetNameError(f"invalid id: {object_id!r}")
    return normalized_address(m.group(1)), m.group(2)


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Asset:
    """An issuable unit `(owner, code, scale)`; immutable once minted.

    `name` is the canonical name as received (owner part not normalised), so
    that it compares equal to the names the mint reports in balances.
    """

    owner: str
    code: str
    scale: int
    name: str

    @classmethod
    def from_name(cls, name: str) -> "Asset":
        m = ASSET_NAME_RE.match(name or "")
        if m is None:
            raise AssetNameError(f"invalid asset name: {name!r}")
        scale = int(m.group(6))
        if scale < ASSET_SCALE_MIN or scale > ASSET_SCALE_MAX:
            raise AssetNameError(f"invalid asset scale: {m.group(6)}")
        return cls(
            owner=f"{m.group(1)}@{m.group(3)}",
            code=m.group(5),
            scale=scale,
            name=name,
        )

    @property
    def host(self) -> str:
        """Mint host of the asset owner."""
        return split_address(self.owner)[1]

    def __str__(self) -> str:
        return self.name


def assets_from_pair(pair: str) -> Tuple[Asset, Asset]:
    """Parse ``base/quote`` into (base, quote) Assets."""
    parts = (pair or "").split("/")
    if len(parts) != 2:
        raise AssetNameError(f"invalid asset pair: {pair!r}")
    return Asset.from_name(parts[0]), Asset.from_name(parts[1])


def pair_name(base: str, quote: str) -> str:
    return f"{base}/{quote}"


__all__ = [
    "ASSET_NAME_RE",
    "ADDRESS_RE",
    "ID_RE",
    "Asset",
    "assets_from_pair",
    "pair_name",
    "split_address",
    "normalized_address",
    "owner_and_token_from_id",
]
