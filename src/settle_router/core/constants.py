"""
Settle Router Core Constants (integer domain)
=============================================

Mint-aligned integer bounds and protocol vocabulary. Display helpers that rely
on Decimal live in `fmt.py`.
"""

# NOTE: All monetary values are Python ints (arbitrary precision). The bound
# below is the mint's MaxAssetAmount; it is a validation limit, not a width.

# ---------------------------------------------------------------------------
# Amount and price bounds
# ---------------------------------------------------------------------------

#: Exclusive upper bound for amounts and price components (2^128).
MAX_ASSET_AMOUNT: int = 2 ** 128

#: Allowed range for an asset scale (decimal digits of the smallest unit).
ASSET_SCALE_MIN: int = 0
ASSET_SCALE_MAX: int = 24


# ---------------------------------------------------------------------------
# Trustline vocabulary
# ---------------------------------------------------------------------------

#: Trustline listed from the quote asset owner's perspective.
PROPAGATION_CANONICAL: str = "canonical"
#: Reciprocal view, listed from a base asset owner's mint.
PROPAGATION_PROPAGATED: str = "propagated"
PROPAGATIONS = (PROPAGATION_CANONICAL, PROPAGATION_PROPAGATED)

TRUSTLINE_ACTIVE: str = "active"
TRUSTLINE_CLOSED: str = "closed"
TRUSTLINE_CONSUMED: str = "consumed"
TRUSTLINE_STATUSES = (TRUSTLINE_ACTIVE, TRUSTLINE_CLOSED, TRUSTLINE_CONSUMED)


# ---------------------------------------------------------------------------
# Search depth
# ---------------------------------------------------------------------------

#: Deepest path the resolver searches (number of trustline crossings).
MAX_SUPPORTED_HOPS: int = 1


# ---------------------------------------------------------------------------
# Mint endpoints (environment → default scheme / port)
# ---------------------------------------------------------------------------

ENV_PRODUCTION: str = "prod"
ENV_QA: str = "qa"

DEFAULT_PORT = {
    ENV_PRODUCTION: 2406,
    ENV_QA: 2407,
}

DEFAULT_SCHEME = {
    ENV_PRODUCTION: "https",
    ENV_QA: "http",
}


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

__all__ = [
    "MAX_ASSET_AMOUNT",
    "ASSET_SCALE_MIN",
    "ASSET_SCALE_MAX",
    "PROPAGATION_CANONICAL",
    "PROPAGATION_PROPAGATED",
    "PROPAGATIONS",
    "TRUSTLINE_ACTIVE",
    "TRUSTLINE_CLOSED",
    "TRUSTLINE_CONSUMED",
    "TRUSTLINE_STATUSES",
    "MAX_SUPPORTED_HOPS",
    "ENV_PRODUCTION",
    "ENV_QA",
    "DEFAULT_PORT",
    "DEFAULT_SCHEME",
]
