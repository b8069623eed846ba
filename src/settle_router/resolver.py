"""Path resolution: find which of the payer's assets can pay a quote amount.

Implements the shallow search policy:

- Zero-hop: the payer already holds at least the requested amount of the quote
  asset. This short-circuits; no trustline is consulted.
- One-hop: for every canonical trustline into the quote asset, convert the
  request into the base amount at the trustline price (rounded up), require
  the trustline remainder to cover the request, and emit a candidate for each
  balance of the base asset that covers the base amount and for each payer
  asset equal to the base asset (self-issuance is assumed available).

Candidates are returned unranked; all candidates at the shallowest depth that
produced any are returned together. A malformed trustline is skipped (and
logged) without affecting the others. An empty result is a legitimate
outcome, see `require_route`.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog

from .context import Context
from .core.constants import MAX_SUPPORTED_HOPS, TRUSTLINE_STATUSES
from .core.datatypes import Candidate, ParsedTrustline, PaymentRequest, Trustline
from .core.exc import MalformedTrustlineError, NoRouteFound
from .fetchers import LedgerSource, Snapshot, fetch_snapshot

log = structlog.get_logger(__name__)


# ----------------------------
# Search policies (pure)
# ----------------------------

def _zero_hop(snapshot: Snapshot, request: PaymentRequest) -> Optional[Candidate]:
    for b in snapshot.balances:
        if b.asset == request.quote_asset and b.value >= request.amount:
            return Candidate(path=(), base_asset=request.quote_asset, amount=request.amount)
    return None


def _usable_trustlines(
    trustlines: Iterable[Trustline], request: PaymentRequest
) -> Iterable[ParsedTrustline]:
    """Yield parsed trustlines into the quote asset; skip the ones that can't be used."""
    for o in trustlines:
        if o.status not in TRUSTLINE_STATUSES:
            log.warning("trustline_skipped", trustline=o.id, reason=f"unknown status {o.status!r}")
            continue
        if not o.is_active():
            log.debug("trustline_skipped", trustline=o.id, reason=f"status={o.status}")
            continue
        try:
            p = o.parse()
            if p.quote.name != request.quote_asset:
                raise MalformedTrustlineError(
                    f"trustline {o.id} quotes {p.quote.name}, expected {request.quote_asset}",
                    trustline_id=o.id,
                )
        except MalformedTrustlineError as e:
            log.warning("trustline_skipped", trustline=o.id, reason=str(e))
            continue
        yield p


def _one_hop(snapshot: Snapshot, request: PaymentRequest) -> List[Candidate]:
    out: List[Candidate] = []
    for p in _usable_trustlines(snapshot.trustlines, request):
        try:
            amt = p.price.quote_to_base(request.amount)
        except MalformedTrustlineError as e:
            log.warning("trustline_skipped", trustline=p.trustline.id, reason=str(e))
            continue

        if not p.has_capacity(request.amount):
            log.debug(
                "trustline_skipped",
                trustline=p.trustline.id,
                reason="insufficient remainder",
                remainder=p.remainder,
                requested=request.amount,
            )
            continue

        base = p.base.name
        for b in snapshot.balances:
            if b.asset == base and b.value >= amt:
                out.append(Candidate(path=(p.trustline,), base_asset=base, amount=amt))
        for a in snapshot.assets:
            if a.name == base:
                out.append(Candidate(
                    path=(p.trustline,), base_asset=base, amount=amt, source="issuance",
                ))
    return out


def resolve_snapshot(
    snapshot: Snapshot, request: PaymentRequest, *, max_hops: int = MAX_SUPPORTED_HOPS
) -> List[Candidate]:
    """Pure resolution over already-fetched snapshots.

    Deterministic: identical snapshots yield identical candidate lists.
    """
    direct = _zero_hop(snapshot, request)
    if direct is not None:
        log.debug("zero_hop_hit", asset=request.quote_asset, amount=request.amount)
        return [direct]
    if max_hops < 1:
        return []
    candidates = _one_hop(snapshot, request)
    log.debug(
        "one_hop_done",
        asset=request.quote_asset,
        amount=request.amount,
        trustlines=len(snapshot.trustlines),
        candidates=len(candidates),
    )
    return candidates


# ----------------------------
# Resolver
# ----------------------------

class PathResolver:
    """Resolve payment requests against a `LedgerSource`.

    max_hops: deepest search performed (0 = direct holdings only, 1 = one
    trustline crossing). Deeper search is not implemented.
    """

    def __init__(self, source: LedgerSource, *, max_hops: int = MAX_SUPPORTED_HOPS) -> None:
        if max_hops < 0:
            raise ValueError("max_hops must be >= 0")
        if max_hops > MAX_SUPPORTED_HOPS:
            # TODO: two-hop search needs a design for edge composition, asset
            # node deduplication and cycle avoidance over propagated trustlines.
            raise NotImplementedError(f"paths longer than {MAX_SUPPORTED_HOPS} hop are not supported")
        self.source = source
        self.max_hops = max_hops

    def resolve(self, ctx: Context, request: PaymentRequest) -> List[Candidate]:
        """Fetch snapshots and return every candidate at the shallowest depth.

        Raises TransportError / RemoteError from the fetches (no partial
        result) and Cancelled / DeadlineExceeded when `ctx` is done.
        """
        snapshot = fetch_snapshot(ctx, self.source, request.quote_asset)
        return resolve_snapshot(snapshot, request, max_hops=self.max_hops)


def resolve(ctx: Context, source: LedgerSource, request: PaymentRequest) -> List[Candidate]:
    return PathResolver(source).resolve(ctx, request)


def require_route(candidates: List[Candidate], request: PaymentRequest) -> List[Candidate]:
    """Return `candidates`, or raise NoRouteFound when there are none."""
    if not candidates:
        raise NoRouteFound(request.amount, request.quote_asset)
    return candidates


__all__ = [
    "PathResolver",
    "resolve",
    "resolve_snapshot",
    "require_route",
]
