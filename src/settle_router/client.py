"""client.py

Thin synchronous REST wrapper around the mint API (read-only resources).

* Centralises **URL** construction (scheme and default port by environment),
  **basic-auth** identity and the ``Mint-Protocol-Version`` header.
* Maps failures onto the two fetch errors the resolver propagates:
  `TransportError` (unreachable / off-protocol) and `RemoteError` (the mint
  answered with an error object ``{"code", "message"}``).
* Decodes the `/assets`, `/balances` and `/assets/<name>/offers` payloads into
  core datatypes. Trustlines are decoded leniently: their pair and price
  are validated later, per entry, by the resolver.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote, urlencode

import requests
import structlog

from .config import settings
from .context import Context
from .core.amounts import maybe_amount, parse_amount
from .core.assets import Asset, owner_and_token_from_id, split_address
from .core.constants import (
    DEFAULT_PORT,
    DEFAULT_SCHEME,
    PROPAGATION_CANONICAL,
    PROPAGATIONS,
    TRUSTLINE_ACTIVE,
)
from .core.datatypes import Balance, Trustline
from .core.exc import (
    AmountDomainError,
    AssetNameError,
    RemoteError,
    SettleRouterError,
    TransportError,
)

log = structlog.get_logger(__name__)


# -----------------------------------------------------------------------------
# Payload decoding
# -----------------------------------------------------------------------------

def asset_from_payload(raw: Any) -> Asset:
    """Decode an AssetResource; the canonical `name` carries owner, code and scale."""
    try:
        return Asset.from_name(raw["name"])
    except (KeyError, TypeError, AssetNameError) as e:
        raise TransportError(f"malformed asset payload: {raw!r}") from e


def balance_from_payload(raw: Any) -> Balance:
    try:
        return Balance(
            id=str(raw["id"]),
            asset=str(raw["asset"]),
            holder=str(raw["holder"]),
            value=parse_amount(raw["value"], what="balance value"),
            created=raw.get("created"),
        )
    except (KeyError, TypeError, AttributeError, AmountDomainError) as e:
        raise TransportError(f"malformed balance payload: {raw!r}") from e


def trustline_from_payload(raw: Any) -> Trustline:
    """Decode an OfferResource without validating pair, price or amounts."""
    if not isinstance(raw, dict):
        raise TransportError(f"malformed offer payload: {raw!r}")
    return Trustline(
        id=str(raw.get("id", "")),
        owner=str(raw.get("owner", "")),
        pair=raw.get("pair") if isinstance(raw.get("pair"), str) else "",
        price=raw.get("price") if isinstance(raw.get("price"), str) else "",
        amount=maybe_amount(raw.get("amount")),
        remainder=maybe_amount(raw.get("remainder")),
        status=str(raw.get("status", TRUSTLINE_ACTIVE)),
        created=raw.get("created"),
    )


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------

class MintClient:
    """Read accessors on the mint of the acting identity (and of asset owners).

    Parameters
    ----------
    session_factory : Callable[[], requests.Session] | None
        Builds the HTTP session of each calling thread (`requests.Session`
        when omitted). Concurrent fetches never share a session.
    env : str | None
        ``prod`` or ``qa``; defaults to settings.
    timeout : float | None
        Per-request timeout in seconds; further bounded by the context deadline.
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        *,
        env: Optional[str] = None,
        protocol_version: Optional[str] = None,
        timeout: Optional[float] = None,
        verify: Optional[bool] = None,
    ) -> None:
        cfg = settings()
        self._session_factory = session_factory or requests.Session
        self._tls = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()
        self.env = env or cfg["ENV"]
        self.protocol_version = protocol_version or cfg["PROTOCOL_VERSION"]
        self.timeout = timeout if timeout is not None else cfg["HTTP_TIMEOUT"]
        self.verify = cfg["VERIFY_TLS"] if verify is None else verify

    # ------------- transport -------------

    @property
    def session(self) -> requests.Session:
        """HTTP session of the calling thread, created on first use."""
        sess = getattr(self._tls, "session", None)
        if sess is None:
            sess = self._session_factory()
            self._tls.session = sess
            with self._sessions_lock:
                self._sessions.append(sess)
        return sess

    def url(self, host: str, path: str, query: Optional[Dict[str, str]] = None) -> str:
        """Fully qualified mint URL, defaulting scheme and port by environment."""
        if ":" not in host:
            host = f"{host}:{DEFAULT_PORT[self.env]}"
        url = f"{DEFAULT_SCHEME[self.env]}://{host}{path}"
        if query:
            url += "?" + urlencode(query)
        return url

    def _timeout(self, ctx: Context) -> float:
        remaining = ctx.remaining()
        return self.timeout if remaining is None else min(self.timeout, remaining)

    def _get(
        self,
        ctx: Context,
        host: str,
        path: str,
        query: Optional[Dict[str, str]] = None,
        *,
        authenticated: bool = True,
    ) -> Tuple[int, Dict[str, Any]]:
        """Perform a **GET** and return (status, decoded JSON object)."""
        ctx.check()
        url = self.url(host, path, query)
        auth = None
        if authenticated and ctx.identity is not None:
            auth = (ctx.identity.username, ctx.identity.password)

        try:
            r = self.session.get(
                url,
                headers={"Mint-Protocol-Version": self.protocol_version},
                auth=auth,
                timeout=self._timeout(ctx),
                verify=self.verify,
            )
        except requests.exceptions.RequestException as e:
            log.warning("mint_request_failed", url=url, error=str(e))
            raise TransportError(e, url=url) from e

        # Drop results that arrive after a sibling failed or the deadline passed.
        ctx.check()

        try:
            body = r.json()
        except ValueError as e:
            raise TransportError(f"non-JSON response (HTTP {r.status_code})", url=url) from e
        if not isinstance(body, dict):
            raise TransportError(f"unexpected response shape: {type(body).__name__}", url=url)

        log.debug("mint_request", url=url, status=r.status_code)
        return r.status_code, body

    @staticmethod
    def _raise_remote(status: int, body: Dict[str, Any], url: str) -> None:
        err = body.get("error")
        if not isinstance(err, dict):
            raise TransportError(f"HTTP {status} without error object", url=url)
        raise RemoteError(status, str(err.get("code", "")), str(err.get("message", "")))

    @staticmethod
    def _extract(body: Dict[str, Any], key: str, url: str) -> Any:
        if key not in body or body[key] is None:
            raise TransportError(f"protocol extraction failed: {key}", url=url)
        return body[key]

    def _get_resource(
        self,
        ctx: Context,
        host: str,
        path: str,
        key: str,
        query: Optional[Dict[str, str]] = None,
        *,
        authenticated: bool = True,
    ) -> Any:
        status, body = self._get(ctx, host, path, query, authenticated=authenticated)
        if status != 200:
            self._raise_remote(status, body, self.url(host, path, query))
        return self._extract(body, key, self.url(host, path, query))

    def _own_host(self, ctx: Context) -> str:
        if ctx.identity is None:
            raise SettleRouterError("not logged in: the context carries no identity")
        return ctx.identity.host

    def _host_for_owner(self, ctx: Context, owner: str) -> Tuple[str, bool]:
        """Return (host, authenticated) for a request about `owner`'s resources."""
        if ctx.identity is not None and owner == ctx.identity.address:
            return ctx.identity.host, True
        return split_address(owner)[1], False

    @staticmethod
    def _as_list(value: Any, key: str) -> List[Any]:
        if not isinstance(value, list):
            raise TransportError(f"protocol extraction failed: {key} is not a list")
        return value

    # ------------- resources -------------

    def list_assets(self, ctx: Context) -> List[Asset]:
        """Assets issued by the acting user."""
        raw = self._get_resource(ctx, self._own_host(ctx), "/assets", "assets")
        return [asset_from_payload(a) for a in self._as_list(raw, "assets")]

    def list_balances(self, ctx: Context) -> List[Balance]:
        """Balances held by the acting user."""
        raw = self._get_resource(ctx, self._own_host(ctx), "/balances", "balances")
        return [balance_from_payload(b) for b in self._as_list(raw, "balances")]

    def list_asset_balances(self, ctx: Context, asset: str) -> List[Balance]:
        """Balances of one of the acting user's assets, across holders."""
        raw = self._get_resource(
            ctx, self._own_host(ctx), f"/assets/{quote(asset, safe='')}/balances", "balances",
        )
        return [balance_from_payload(b) for b in self._as_list(raw, "balances")]

    def list_trustlines(
        self,
        ctx: Context,
        quote_asset: str,
        propagation: str = PROPAGATION_CANONICAL,
    ) -> List[Trustline]:
        """Trustlines whose quote asset is `quote_asset`, from its owner's mint."""
        if propagation not in PROPAGATIONS:
            raise ValueError(
                f"invalid propagation {propagation!r}; expected one of {PROPAGATIONS}"
            )
        try:
            owner = Asset.from_name(quote_asset).owner
        except AssetNameError as e:
            raise ValueError(str(e)) from e
        host, authenticated = self._host_for_owner(ctx, owner)
        raw = self._get_resource(
            ctx,
            host,
            f"/assets/{quote(quote_asset, safe='')}/offers",
            "offers",
            {"propagation": propagation},
            authenticated=authenticated,
        )
        return [trustline_from_payload(o) for o in self._as_list(raw, "offers")]

    def retrieve_asset(self, ctx: Context, name: str) -> Optional[Asset]:
        """Retrieve an asset, returning None if the mint does not know it."""
        owner = Asset.from_name(name).owner
        host, authenticated = self._host_for_owner(ctx, owner)
        try:
            raw = self._get_resource(
                ctx, host, f"/assets/{quote(name, safe='')}", "asset",
                authenticated=authenticated,
            )
        except RemoteError as e:
            if e.code == "asset_not_found":
                return None
            raise
        return asset_from_payload(raw)

    def retrieve_trustline(self, ctx: Context, trustline_id: str) -> Optional[Trustline]:
        """Retrieve a trustline by id, returning None if it does not exist."""
        owner, _ = owner_and_token_from_id(trustline_id)
        host, authenticated = self._host_for_owner(ctx, owner)
        try:
            raw = self._get_resource(
                ctx, host, f"/offers/{quote(trustline_id, safe='')}", "offer",
                authenticated=authenticated,
            )
        except RemoteError as e:
            if e.code == "offer_not_found":
                return None
            raise
        return trustline_from_payload(raw)

    def close(self) -> None:
        """Close every session opened by any thread."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for sess in sessions:
            sess.close()


__all__ = [
    "MintClient",
    "asset_from_payload",
    "balance_from_payload",
    "trustline_from_payload",
]
