"""Demo: payment path resolution over mint trustlines.

Offline scenarios (no network, in-memory snapshots):
S1) Direct holding covers the request (zero-hop short-circuit)
S2) One trustline EUR->USD at 100/125 (base amount rounded up)
S3) Trustline remainder below the requested amount (filtered)
S4) Malformed trustline next to a good one (skipped, others kept)
S5) Payer issues the base asset itself (issuance candidate)
S6) Nothing connects the payer to the quote asset (no route)

Live mode (--live) resolves one request against a running mint using the
acting identity given on the command line.
"""
from __future__ import annotations

from typing import Callable, List, Optional
import argparse
import sys

from settle_router import (
    Candidate,
    Context,
    Identity,
    MintClient,
    NoRouteFound,
    PathResolver,
    PaymentRequest,
    Snapshot,
    require_route,
    resolve_snapshot,
)
from settle_router.core import Asset, Balance, Trustline, fmt_amount, split_address
from settle_router.logs import configure_logging

PAYER = "alice@mint.alpha.org"
USD = "bob@mint.beta.org[USD.2]"
EUR = "carol@mint.gamma.org[EUR.2]"
GBP = "dave@mint.delta.org[GBP.2]"
AUD = "alice@mint.alpha.org[AUD.2]"

# ---------- builders ----------

def held(asset: str, value: int, idx: int = 0) -> Balance:
    return Balance(id=f"{PAYER}[balance_demo{idx}]", asset=asset, holder=PAYER, value=value)


def offer(base: str, quote: str, price: str, *, remainder: int = 100000, token: str = "offer_demo") -> Trustline:
    owner = Asset.from_name(base).owner
    return Trustline(
        id=f"{owner}[{token}]",
        owner=owner,
        pair=f"{base}/{quote}",
        price=price,
        amount=max(remainder, 100000),
        remainder=remainder,
    )


# ---------- pretty printers ----------

def brief_snapshot(snap: Snapshot) -> str:
    parts = [f"held {fmt_amount(b.value, b.asset)}" for b in snap.balances]
    parts += [f"issues {a.code}" for a in snap.assets]
    parts += [f"trustline {t.pair} @ {t.price} (remainder={t.remainder})" for t in snap.trustlines]
    return "; ".join(parts) if parts else "(empty)"


def print_candidates(request: PaymentRequest, candidates: List[Candidate]) -> None:
    print(f"- Request: {fmt_amount(request.amount, request.quote_asset)} ({request.quote_asset})")
    try:
        require_route(candidates, request)
    except NoRouteFound as e:
        print(f"- {e}")
        return
    for i, c in enumerate(candidates, 1):
        via = " -> ".join(c.path_ids()) if c.path else "direct"
        print(f"  [{i}] debit {fmt_amount(c.amount, c.base_asset)} from {c.source} via {via}")


# ---------- scenario runner ----------

def run_scenario(title: str, snap: Snapshot, request: PaymentRequest) -> None:
    print("\n" + "=" * 80)
    print(f"Scenario: {title}")
    print("Ledger")
    print("- " + brief_snapshot(snap))
    print_candidates(request, resolve_snapshot(snap, request))


class Scenario:
    def __init__(self, sid: str, fn: Callable[[], None]):
        self.sid = sid
        self.fn = fn


scenarios: List[Scenario] = []


def add(sid: str, fn: Callable[[], None]) -> None:
    scenarios.append(Scenario(sid, fn))


add("S1", lambda: run_scenario(
    "S1) Direct holding (zero-hop)",
    Snapshot((), (held(USD, 50000), held(EUR, 50000, 1)), (offer(EUR, USD, "1/1"),)),
    PaymentRequest(USD, 15000),
))
add("S2", lambda: run_scenario(
    "S2) One trustline EUR->USD at 100/125",
    Snapshot((), (held(EUR, 13000),), (offer(EUR, USD, "100/125", remainder=20000),)),
    PaymentRequest(USD, 10000),
))
add("S3", lambda: run_scenario(
    "S3) Remainder below the request",
    Snapshot((), (held(EUR, 13000),), (offer(EUR, USD, "100/125", remainder=9999),)),
    PaymentRequest(USD, 10000),
))
add("S4", lambda: run_scenario(
    "S4) Malformed trustline next to a good one",
    Snapshot(
        (),
        (held(EUR, 13000), held(GBP, 13000, 1)),
        (offer(EUR, USD, "100:125", token="offer_bad"), offer(GBP, USD, "4/5", token="offer_gbp")),
    ),
    PaymentRequest(USD, 10000),
))
add("S5", lambda: run_scenario(
    "S5) Self-issued base asset",
    Snapshot((Asset.from_name(AUD),), (), (offer(AUD, USD, "3/2"),)),
    PaymentRequest(USD, 10000),
))
add("S6", lambda: run_scenario(
    "S6) No route",
    Snapshot((), (held(GBP, 100),), (offer(EUR, USD, "1/1"),)),
    PaymentRequest(USD, 10000),
))


def run_live(user: str, password: str, asset: str, amount: int, timeout: float, env: Optional[str]) -> int:
    username, host = split_address(user)
    ctx = Context.with_timeout(Identity(username, host, password), timeout)
    client = MintClient(env=env)
    try:
        request = PaymentRequest(asset, amount)
        print_candidates(request, PathResolver(client).resolve(ctx, request))
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Mint payment path resolution demo")
    parser.add_argument("--only", type=str, default=None, help="Comma-separated scenario ids to run (e.g., S1,S4)")
    parser.add_argument("--skip", type=str, default=None, help="Comma-separated scenario ids to skip")
    parser.add_argument("--log-level", type=str, default=None, help="structlog level (default: SETTLE_LOG_LEVEL)")
    parser.add_argument("--live", action="store_true", help="Resolve against a running mint instead of the scenarios")
    parser.add_argument("--user", type=str, default=None, help="Acting address, e.g. alice@mint.alpha.org")
    parser.add_argument("--password", type=str, default="")
    parser.add_argument("--asset", type=str, default=None, help="Quote asset, e.g. bob@mint.beta.org[USD.2]")
    parser.add_argument("--amount", type=int, default=None, help="Quote amount in smallest units")
    parser.add_argument("--timeout", type=float, default=10.0, help="Resolution deadline in seconds")
    parser.add_argument("--env", choices=["prod", "qa"], default=None)
    args = parser.parse_args(sys.argv[1:])

    configure_logging(args.log_level)

    if args.live:
        if not (args.user and args.asset and args.amount is not None):
            parser.error("--live requires --user, --asset and --amount")
        sys.exit(run_live(args.user, args.password, args.asset, args.amount, args.timeout, args.env))

    # --------------- Filter & run ---------------
    only_set = None
    skip_set = None
    if args.only:
        only_set = set([s.strip() for s in args.only.split(',') if s.strip()])
    if args.skip:
        skip_set = set([s.strip() for s in args.skip.split(',') if s.strip()])

    for sc in scenarios:
        if only_set is not None and sc.sid not in only_set:
            continue
        if skip_set is not None and sc.sid in skip_set:
            continue
        sc.fn()
