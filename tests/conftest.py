from __future__ import annotations

import threading
from typing import Dict, List, Optional

import pytest

# Import project primitives
from settle_router.context import Context, Identity
from settle_router.core import Asset, Balance, Trustline


# -----------------------------
# Fixture data
# -----------------------------

PAYER = "alice@mint.alpha.org"
USD = "bob@mint.beta.org[USD.2]"
EUR = "carol@mint.gamma.org[EUR.2]"
GBP = "dave@mint.delta.org[GBP.2]"
AUD = "alice@mint.alpha.org[AUD.2]"


def balance(asset: str, value: int, *, holder: str = PAYER, idx: int = 0) -> Balance:
    return Balance(id=f"{holder}[balance_{asset.split('[')[1][:3]}{idx}]", asset=asset, holder=holder, value=value)


def trustline(
    base: str,
    quote: str,
    price: str,
    *,
    amount: Optional[int] = 1000,
    remainder: Optional[int] = 1000,
    status: str = "active",
    token: str = "offer_x",
    owner: Optional[str] = None,
) -> Trustline:
    """Canonical trustline owned by the base asset owner unless `owner` is given."""
    owner = owner if owner is not None else Asset.from_name(base).owner
    return Trustline(
        id=f"{owner}[{token}]",
        owner=owner,
        pair=f"{base}/{quote}",
        price=price,
        amount=amount,
        remainder=remainder,
        status=status,
    )


# -----------------------------
# Test helpers (stubs)
# -----------------------------


class FakeLedger:
    """In-memory LedgerSource.

    - errors: map of method name -> exception raised by that method.
    - gates: map of method name -> threading.Event the method waits on first.
    Records (method, args) in `calls` in call order.
    """

    def __init__(
        self,
        assets: List[Asset] = (),
        balances: List[Balance] = (),
        trustlines: List[Trustline] = (),
        *,
        errors: Optional[Dict[str, Exception]] = None,
        gates: Optional[Dict[str, threading.Event]] = None,
    ) -> None:
        self.assets = list(assets)
        self.balances = list(balances)
        self.trustlines = list(trustlines)
        self.errors = errors or {}
        self.gates = gates or {}
        self.calls: List[tuple] = []
        self.contexts: Dict[str, Context] = {}
        self._lock = threading.Lock()

    def _enter(self, name: str, ctx: Context, *args) -> None:
        with self._lock:
            self.calls.append((name,) + args)
            self.contexts[name] = ctx
        gate = self.gates.get(name)
        if gate is not None:
            gate.wait(timeout=5)
        ctx.check()
        if name in self.errors:
            raise self.errors[name]

    def list_assets(self, ctx: Context) -> List[Asset]:
        self._enter("list_assets", ctx)
        return list(self.assets)

    def list_balances(self, ctx: Context) -> List[Balance]:
        self._enter("list_balances", ctx)
        return list(self.balances)

    def list_trustlines(self, ctx: Context, quote_asset: str, propagation: str = "canonical") -> List[Trustline]:
        self._enter("list_trustlines", ctx, quote_asset, propagation)
        return [t for t in self.trustlines]


class FakeResponse:
    def __init__(self, status_code: int, body=None, *, raw_text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._body = body
        self._raw_text = raw_text

    def json(self):
        if self._raw_text is not None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeSession:
    """Minimal requests.Session stand-in keyed by URL path (query ignored)."""

    def __init__(self, routes: Optional[Dict[str, object]] = None) -> None:
        self.routes = routes or {}
        self.requests: List[dict] = []
        self.closed = False

    def get(self, url, headers=None, auth=None, timeout=None, verify=None):
        self.requests.append({"url": url, "headers": headers, "auth": auth, "timeout": timeout, "verify": verify})
        path = url.split("://", 1)[1].split("/", 1)[1]
        path = "/" + path.split("?", 1)[0]
        route = self.routes.get(path)
        if route is None:
            return FakeResponse(404, {"error": {"type": "not_found", "code": "not_found", "message": "no route"}})
        if isinstance(route, Exception):
            raise route
        return route

    def close(self):
        self.closed = True


# -----------------------------
# Pytest fixtures
# -----------------------------

@pytest.fixture()
def identity() -> Identity:
    return Identity(username="alice", host="mint.alpha.org", password="s3cret")


@pytest.fixture()
def ctx(identity) -> Context:
    return Context(identity)
