import threading
from urllib.parse import quote

import pytest
import requests

from settle_router.client import MintClient, trustline_from_payload
from settle_router.context import Context, Identity
from settle_router.fetchers import fetch_snapshot
from settle_router.core import (
    Asset,
    Balance,
    Cancelled,
    RemoteError,
    TransportError,
)
from settle_router.core.exc import SettleRouterError

from conftest import AUD, USD, FakeResponse, FakeSession


def offers_path(asset):
    return f"/assets/{quote(asset, safe='')}/offers"


def make_client(routes, **kw):
    session = FakeSession(routes)
    kw.setdefault("env", "qa")
    kw.setdefault("protocol_version", "0.0.1")
    kw.setdefault("timeout", 7.0)
    kw.setdefault("verify", False)
    return MintClient(lambda: session, **kw), session


# -----------------------------
# URLs, headers and auth
# -----------------------------

def test_list_assets_request_shape(ctx):
    client, session = make_client({
        "/assets": FakeResponse(200, {"assets": [{"name": AUD, "created": 1}]}),
    })
    assert client.list_assets(ctx) == [Asset.from_name(AUD)]
    req = session.requests[0]
    assert req["url"] == "http://mint.alpha.org:2407/assets"
    assert req["headers"] == {"Mint-Protocol-Version": "0.0.1"}
    assert req["auth"] == ("alice", "s3cret")
    assert req["timeout"] == 7.0
    assert req["verify"] is False


def test_prod_uses_https_and_default_port(ctx):
    client, session = make_client({"/balances": FakeResponse(200, {"balances": []})}, env="prod")
    assert client.list_balances(ctx) == []
    assert session.requests[0]["url"] == "https://mint.alpha.org:2406/balances"


def test_explicit_port_is_kept():
    ctx = Context(Identity("alice", "localhost.test:9000", "pw"))
    client, session = make_client({"/assets": FakeResponse(200, {"assets": []})})
    client.list_assets(ctx)
    assert session.requests[0]["url"] == "http://localhost.test:9000/assets"


def test_timeout_bounded_by_deadline(identity):
    ctx = Context.with_timeout(identity, 2.0)
    client, session = make_client({"/assets": FakeResponse(200, {"assets": []})})
    client.list_assets(ctx)
    assert 0 < session.requests[0]["timeout"] <= 2.0


def test_list_balances_decodes_values(ctx):
    raw = {"id": "alice@mint.alpha.org[balance_1]", "asset": USD, "holder": "alice@mint.alpha.org",
           "value": "15000", "created": 1700000000}
    client, _ = make_client({"/balances": FakeResponse(200, {"balances": [raw]})})
    assert client.list_balances(ctx) == [
        Balance(id=raw["id"], asset=USD, holder=raw["holder"], value=15000, created=1700000000)
    ]


def test_list_asset_balances(ctx):
    path = f"/assets/{quote(AUD, safe='')}/balances"
    client, session = make_client({path: FakeResponse(200, {"balances": []})})
    assert client.list_asset_balances(ctx, AUD) == []
    assert session.requests[0]["auth"] == ("alice", "s3cret")


# -----------------------------
# Trustlines
# -----------------------------

def test_list_trustlines_goes_to_quote_owner_unauthenticated(ctx):
    offer = {
        "id": "carol@mint.gamma.org[offer_1]",
        "owner": "carol@mint.gamma.org",
        "pair": f"carol@mint.gamma.org[EUR.2]/{USD}",
        "price": "100/125",
        "amount": "500",
        "remainder": "200",
        "status": "active",
    }
    client, session = make_client({offers_path(USD): FakeResponse(200, {"offers": [offer]})})
    [o] = client.list_trustlines(ctx, USD)
    assert o.price == "100/125"
    assert (o.amount, o.remainder) == (500, 200)
    req = session.requests[0]
    assert req["url"] == f"http://mint.beta.org:2407{offers_path(USD)}?propagation=canonical"
    assert req["auth"] is None


def test_list_trustlines_on_own_asset_is_authenticated(ctx):
    client, session = make_client({offers_path(AUD): FakeResponse(200, {"offers": []})})
    client.list_trustlines(ctx, AUD, "propagated")
    req = session.requests[0]
    assert req["url"].startswith("http://mint.alpha.org:2407/")
    assert req["url"].endswith("?propagation=propagated")
    assert req["auth"] == ("alice", "s3cret")


def test_list_trustlines_rejects_unknown_propagation(ctx):
    client, session = make_client({})
    with pytest.raises(ValueError):
        client.list_trustlines(ctx, USD, "sideways")
    assert session.requests == []


def test_trustline_payload_is_decoded_leniently():
    o = trustline_from_payload({"id": "x", "owner": "y", "pair": 5, "amount": "lots", "remainder": -3})
    assert o.pair == ""
    assert o.price == ""
    assert o.amount is None and o.remainder is None
    assert o.is_active()
    with pytest.raises(TransportError):
        trustline_from_payload(["not", "an", "object"])


# -----------------------------
# Failures
# -----------------------------

def test_remote_error_carries_code(ctx):
    body = {"error": {"type": "authentication_error", "code": "authentication_failed", "message": "bad password"}}
    client, _ = make_client({"/balances": FakeResponse(401, body)})
    with pytest.raises(RemoteError) as ei:
        client.list_balances(ctx)
    assert ei.value.status_code == 401
    assert ei.value.code == "authentication_failed"
    assert "bad password" in str(ei.value)


@pytest.mark.parametrize(
    "route",
    [
        requests.exceptions.ConnectionError("connection refused"),
        requests.exceptions.Timeout("read timed out"),
        FakeResponse(200, raw_text="<html>"),
        FakeResponse(200, ["assets"]),
        FakeResponse(200, {"something": []}),
        FakeResponse(200, {"assets": {"name": AUD}}),
        FakeResponse(200, {"assets": [{"name": "not an asset"}]}),
        FakeResponse(502, {"detail": "bad gateway"}),
    ],
)
def test_transport_failures(ctx, route):
    client, _ = make_client({"/assets": route})
    with pytest.raises(TransportError):
        client.list_assets(ctx)


def test_transport_error_names_url(ctx):
    client, _ = make_client({"/assets": requests.exceptions.ConnectionError("refused")})
    with pytest.raises(TransportError) as ei:
        client.list_assets(ctx)
    assert ei.value.url == "http://mint.alpha.org:2407/assets"


def test_malformed_balance_is_a_transport_error(ctx):
    raw = {"id": "b", "asset": USD, "holder": "alice@mint.alpha.org", "value": "-4"}
    client, _ = make_client({"/balances": FakeResponse(200, {"balances": [raw]})})
    with pytest.raises(TransportError):
        client.list_balances(ctx)


def test_requires_identity_for_own_resources():
    client, session = make_client({})
    with pytest.raises(SettleRouterError, match="not logged in"):
        client.list_assets(Context())
    assert session.requests == []


def test_cancelled_context_sends_nothing(ctx):
    ctx.cancel()
    client, session = make_client({"/assets": FakeResponse(200, {"assets": []})})
    with pytest.raises(Cancelled):
        client.list_assets(ctx)
    assert session.requests == []


# -----------------------------
# Retrieval
# -----------------------------

def test_retrieve_asset_not_found_is_none(ctx):
    body = {"error": {"type": "invalid_request", "code": "asset_not_found", "message": "unknown"}}
    client, session = make_client({f"/assets/{quote(USD, safe='')}": FakeResponse(404, body)})
    assert client.retrieve_asset(ctx, USD) is None
    assert session.requests[0]["url"].startswith("http://mint.beta.org:2407/")


def test_retrieve_asset_other_errors_propagate(ctx):
    body = {"error": {"type": "api_error", "code": "internal_error", "message": "oops"}}
    client, _ = make_client({f"/assets/{quote(USD, safe='')}": FakeResponse(500, body)})
    with pytest.raises(RemoteError):
        client.retrieve_asset(ctx, USD)


def test_retrieve_trustline(ctx):
    oid = "bob@mint.beta.org[offer_1]"
    offer = {"id": oid, "owner": "bob@mint.beta.org", "pair": f"{USD}/{AUD}",
             "price": "1/1", "amount": "10", "remainder": "10", "status": "closed"}
    path = f"/offers/{quote(oid, safe='')}"
    client, session = make_client({path: FakeResponse(200, {"offer": offer})})
    o = client.retrieve_trustline(ctx, oid)
    assert o.id == oid and not o.is_active()
    assert session.requests[0]["auth"] is None


def test_retrieve_trustline_not_found_is_none(ctx):
    body = {"error": {"type": "invalid_request", "code": "offer_not_found", "message": "unknown"}}
    oid = "alice@mint.alpha.org[offer_9]"
    client, session = make_client({f"/offers/{quote(oid, safe='')}": FakeResponse(404, body)})
    assert client.retrieve_trustline(ctx, oid) is None
    assert session.requests[0]["auth"] == ("alice", "s3cret")


def test_close_closes_opened_sessions(ctx):
    client, session = make_client({"/assets": FakeResponse(200, {"assets": []})})
    client.list_assets(ctx)
    client.close()
    assert session.closed


# -----------------------------
# Sessions across fork-join threads
# -----------------------------

class GatedSession(FakeSession):
    """Holds /assets and /balances until both are in flight."""

    def __init__(self, routes, barrier):
        super().__init__(routes)
        self.barrier = barrier

    def get(self, url, **kw):
        if "/offers" not in url:
            self.barrier.wait()
        return super().get(url, **kw)


def test_concurrent_fetches_use_separate_sessions(ctx):
    routes = {
        "/assets": FakeResponse(200, {"assets": []}),
        "/balances": FakeResponse(200, {"balances": []}),
        offers_path(USD): FakeResponse(200, {"offers": []}),
    }
    barrier = threading.Barrier(2, timeout=5)
    made = []

    def factory():
        s = GatedSession(routes, barrier)
        made.append(s)
        return s

    client = MintClient(factory, env="qa", protocol_version="0.0.1", timeout=7.0, verify=False)
    fetch_snapshot(ctx, client, USD)

    owner = {}
    for s in made:
        for req in s.requests:
            owner[req["url"].split("?")[0].rsplit("/", 1)[1]] = s
    assert owner["assets"] is not owner["balances"]
    # One session per thread: two pool workers and the caller.
    assert len(made) == 3

    client.close()
    assert all(s.closed for s in made)
