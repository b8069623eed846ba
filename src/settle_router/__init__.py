# Top-level API for settle_router (integer-domain).
"""
Top-level API for settle_router (integer-domain).

This module exposes the payment path resolution engine:
  - PathResolver / resolve: zero-hop and one-hop route discovery
  - MintClient: read-only ledger access (assets, balances, trustlines)
  - Context: identity, cancellation and deadline carried by every fetch

Core data types are integer-domain: amounts are Python ints in each asset's
smallest unit and trustline prices are integer ratios.
"""

from __future__ import annotations


# Resolution
from .resolver import PathResolver, resolve, resolve_snapshot, require_route
from .fetchers import LedgerSource, Snapshot, fetch_snapshot, fork_join
from .client import MintClient
from .context import Context, Identity

# Core data types
from .core import (
    Asset,
    Balance,
    Trustline,
    PaymentRequest,
    Candidate,
    Price,
    quote_to_base,
    TransportError,
    RemoteError,
    MalformedTrustlineError,
    NoRouteFound,
    Cancelled,
    DeadlineExceeded,
)

__all__ = [
    # resolution
    "PathResolver",
    "resolve",
    "resolve_snapshot",
    "require_route",
    "LedgerSource",
    "Snapshot",
    "fetch_snapshot",
    "fork_join",
    "MintClient",
    "Context",
    "Identity",
    # core data types
    "Asset",
    "Balance",
    "Trustline",
    "PaymentRequest",
    "Candidate",
    "Price",
    "quote_to_base",
    # errors
    "TransportError",
    "RemoteError",
    "MalformedTrustlineError",
    "NoRouteFound",
    "Cancelled",
    "DeadlineExceeded",
]
