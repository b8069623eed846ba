"""
Core exception types for settle_router.

These are dependency-free and may be imported by all modules. The taxonomy
separates three user-visible outcomes: the ledger could not be reached
(`TransportError`), the ledger refused the request (`RemoteError`), and no
route exists (`NoRouteFound`). `MalformedTrustlineError` never reaches the
caller of the resolver; it is recovered by skipping the offending entry.
"""

__all__ = [
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


class SettleRouterError(Exception):
    """Base class for all errors raised by settle_router."""
    pass


class AmountDomainError(SettleRouterError, ValueError):
    """Raised when amounts violate the non-negative domain or the 2^128 bound."""
    pass


class MalformedTrustlineError(SettleRouterError):
    """Raised when a single trustline entry cannot be used.

    Attributes
    ----------
    trustline_id : str | None
        Identifier of the offending trustline, when known.
    """

    def __init__(self, message, *, trustline_id=None):
        super().__init__(message)
        self.trustline_id = trustline_id


class AssetNameError(MalformedTrustlineError, ValueError):
    """Raised when an asset name, pair or address does not parse."""
    pass


class PriceError(MalformedTrustlineError, ValueError):
    """Raised when a price is not of the form 'pB/pQ' with positive bounded ints."""
    pass


class TransportError(SettleRouterError):
    """Raised when the ledger cannot be reached or answers outside the protocol."""

    def __init__(self, cause, *, url=None):
        where = f" ({url})" if url else ""
        super().__init__(f"ledger unreachable{where}: {cause}")
        self.cause = cause
        self.url = url


class RemoteError(SettleRouterError):
    """Raised when the ledger rejected a request.

    Attributes
    ----------
    status_code : int
        HTTP status returned by the mint.
    code : str
        Machine-readable error code (e.g. ``asset_not_found``).
    message : str
        Human-readable message supplied by the mint.
    """

    def __init__(self, status_code, code, message):
        super().__init__(f"ledger rejected the request: [{status_code}] ({code}) {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


class NoRouteFound(SettleRouterError):
    """Raised by `require_route` when zero-hop and one-hop search found nothing."""

    def __init__(self, amount, asset):
        super().__init__(f"no trust path found for {amount} of {asset}")
        self.amount = amount
        self.asset = asset


class Cancelled(SettleRouterError):
    """Raised when work is attempted on a cancelled context."""
    pass


class DeadlineExceeded(Cancelled):
    """Raised when the context deadline has passed."""
    pass
