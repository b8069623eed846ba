"""Resource fetchers: the read-only snapshots the resolver works on.

The payer's asset list and balance list have no data dependency on one another
and are fetched concurrently (fork-join on a thread pool sharing one child
context). The quote asset's canonical trustline list is fetched afterwards.
A failure in any fetch aborts the snapshot: siblings are cancelled and the
first error is re-raised unchanged. There is no retry at this layer.
"""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Dict, List, Protocol, Tuple, TypeVar

import structlog

from .context import Context
from .core.assets import Asset
from .core.constants import PROPAGATION_CANONICAL
from .core.datatypes import Balance, Trustline

log = structlog.get_logger(__name__)

T = TypeVar("T")


class LedgerSource(Protocol):
    """Ledger-access collaborator consumed by the resolver (see `MintClient`)."""

    def list_assets(self, ctx: Context) -> List[Asset]: ...

    def list_balances(self, ctx: Context) -> List[Balance]: ...

    def list_trustlines(
        self, ctx: Context, quote_asset: str, propagation: str = PROPAGATION_CANONICAL
    ) -> List[Trustline]: ...


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time view of everything one resolution needs."""

    assets: Tuple[Asset, ...]
    balances: Tuple[Balance, ...]
    trustlines: Tuple[Trustline, ...]


# ---------------------------------------------------------------------------
# Fork-join
# ---------------------------------------------------------------------------

def fork_join(ctx: Context, tasks: Dict[str, Callable[[Context], T]]) -> Dict[str, T]:
    """Run `tasks` concurrently on a child of `ctx`; return their results by name.

    Blocks until every task completed or one failed. On the first failure the
    child context is cancelled (siblings observe it at their next check),
    queued tasks are dropped and the error is re-raised. Each task writes only
    its own result slot; slots are read after all futures are done.
    """
    if not tasks:
        return {}
    child = ctx.with_cancel()
    ex = ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="fetch")
    futures: Dict[Future, str] = {}
    try:
        for name, fn in tasks.items():
            futures[ex.submit(fn, child)] = name

        pending = set(futures)
        while pending:
            done, pending = wait(pending, return_when=FIRST_EXCEPTION)
            # Deterministic choice when several fail in the same wakeup.
            failed = [f for f in futures if f in done and f.exception() is not None]
            if failed:
                child.cancel()
                for f in pending:
                    f.cancel()
                err = failed[0].exception()
                log.debug("fork_join_aborted", task=futures[failed[0]], error=str(err))
                raise err
    finally:
        # Do not block on siblings still inside a network call; they are
        # bounded by their own timeout and their results are discarded.
        ex.shutdown(wait=False, cancel_futures=True)

    return {name: f.result() for f, name in futures.items()}


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

def fetch_snapshot(ctx: Context, source: LedgerSource, quote_asset: str) -> Snapshot:
    """Fetch assets and balances concurrently, then the quote trustlines."""
    ctx.check()
    slots = fork_join(ctx, {
        "assets": source.list_assets,
        "balances": source.list_balances,
    })
    trustlines = source.list_trustlines(ctx, quote_asset, PROPAGATION_CANONICAL)
    snap = Snapshot(
        assets=tuple(slots["assets"]),
        balances=tuple(slots["balances"]),
        trustlines=tuple(trustlines),
    )
    log.debug(
        "snapshot_fetched",
        quote_asset=quote_asset,
        assets=len(snap.assets),
        balances=len(snap.balances),
        trustlines=len(snap.trustlines),
    )
    return snap


__all__ = [
    "LedgerSource",
    "Snapshot",
    "fork_join",
    "fetch_snapshot",
]
