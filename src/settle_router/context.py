"""Request context: acting identity, cancellation and deadline.

A `Context` travels with every fetch. Children derived with `with_cancel()`
observe their parent's cancellation and deadline, and can be cancelled on
their own without affecting the parent (fork-join semantics: the first failing
task cancels its siblings, never the caller).
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from .core.exc import Cancelled, DeadlineExceeded


@dataclass(frozen=True)
class Identity:
    """Authenticated user on a mint: ``username@host`` plus its password."""

    username: str
    host: str
    password: str = field(default="", repr=False)

    @property
    def address(self) -> str:
        return f"{self.username}@{self.host}"


class Context:
    """Cancellation-aware request context.

    deadline: absolute `time.monotonic()` value, or None for no deadline.
    """

    def __init__(
        self,
        identity: Optional[Identity] = None,
        *,
        deadline: Optional[float] = None,
        parent: Optional["Context"] = None,
    ) -> None:
        self.identity = identity
        self.deadline = deadline
        self._parent = parent
        self._event = threading.Event()

    @classmethod
    def background(cls, identity: Optional[Identity] = None) -> "Context":
        return cls(identity)

    @classmethod
    def with_timeout(cls, identity: Optional[Identity], seconds: float) -> "Context":
        return cls(identity, deadline=time.monotonic() + seconds)

    def with_cancel(self) -> "Context":
        """Derive a child sharing identity and deadline."""
        return Context(self.identity, deadline=self.deadline, parent=self)

    # ------------- cancellation -------------

    def cancel(self) -> None:
        self._event.set()

    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled()

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self) -> None:
        """Raise if the context is cancelled or past its deadline."""
        if self.cancelled():
            raise Cancelled("context cancelled")
        if self.expired():
            raise DeadlineExceeded("context deadline exceeded")

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (None when unbounded)."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())


__all__ = ["Identity", "Context"]
