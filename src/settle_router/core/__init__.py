"""
Settle Router Core
==================

Unified exports for integer-domain primitives used by the path resolver.
All monetary arithmetic is performed on Python ints; Decimal appears only in
the display helpers of `fmt`.
"""

# NOTE:
#   The `core` package has no network or threading dependencies. Everything
#   here is pure and may be imported by the client, fetchers and resolver.

# Integer-domain constants (mint-aligned)
from .constants import (
    MAX_ASSET_AMOUNT,
    ASSET_SCALE_MIN,
    ASSET_SCALE_MAX,
    PROPAGATION_CANONICAL,
    PROPAGATION_PROPAGATED,
    TRUSTLINE_ACTIVE,
    TRUSTLINE_CLOSED,
    TRUSTLINE_CONSUMED,
    MAX_SUPPORTED_HOPS,
)

# Amount primitives
from .amounts import (
    check_amount,
    parse_amount,
    maybe_amount,
)

# Asset names and addresses
from .assets import (
    Asset,
    assets_from_pair,
    pair_name,
    split_address,
    normalized_address,
    owner_and_token_from_id,
)

# Price converter
from .price import (
    Price,
    quote_to_base,
)

# Core datatypes
from .datatypes import (
    Balance,
    Trustline,
    ParsedTrustline,
    PaymentRequest,
    Candidate,
)

# Display helpers
from .fmt import amount_to_decimal, fmt_amount

# Core exceptions
from .exc import (
    SettleRouterError,
    AmountDomainError,
    AssetNameError,
    MalformedTrustlineError,
    PriceError,
    TransportError,
    RemoteError,
    NoRouteFound,
    Cancelled,
    DeadlineExceeded,
)

__all__ = [
    # constants
    "MAX_ASSET_AMOUNT",
    "ASSET_SCALE_MIN",
    "ASSET_SCALE_MAX",
    "PROPAGATION_CANONICAL",
    "PROPAGATION_PROPAGATED",
    "TRUSTLINE_ACTIVE",
    "TRUSTLINE_CLOSED",
    "TRUSTLINE_CONSUMED",
    "MAX_SUPPORTED_HOPS",
    # amounts
    "check_amount",
    "parse_amount",
    "maybe_amount",
    # assets
    "Asset",
    "assets_from_pair",
    "pair_name",
    "split_address",
    "normalized_address",
    "owner_and_token_from_id",
    # price
    "Price",
    "quote_to_base",
    # datatypes
    "Balance",
    "Trustline",
    "ParsedTrustline",
    "PaymentRequest",
    "Candidate",
    # fmt
    "amount_to_decimal",
    "fmt_amount",
    # exceptions
    "SettleRouterError",
    "AmountDomainError",
    "AssetNameError",
    "MalformedTrustlineError",
    "PriceError",
    "TransportError",
    "RemoteError",
    "NoRouteFound",
    "Cancelled",
    "DeadlineExceeded",
]
