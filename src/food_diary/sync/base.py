"""Shared behaviour of the client-side sync stores.

A store keeps a transient local copy of one backend collection. Loads are
numbered; only the most recently started load may write state, so a slow
response for an earlier dependency never overwrites a newer one. After
``close()`` every pending response is dropped.

The local copy is assumed to match the backend after each successful
mutation. It is not re-fetched unless a store says otherwise.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from food_diary.adapters.backend_gateway import BackendGateway
from food_diary.domain.results import ApiResult, ErrorKind
from food_diary.sync.notifications import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StoreBase:
    """Loading/error flags, load sequencing and failure reporting."""

    gateway: BackendGateway
    notifier: Notifier = field(default_factory=LoggingNotifier)
    is_loading: bool = field(default=False, init=False)
    error: str | None = field(default=None, init=False)
    closed: bool = field(default=False, init=False)
    _load_seq: int = field(default=0, init=False, repr=False)

    def close(self) -> None:
        """Stop applying responses, as when the owning view goes away."""
        self.closed = True

    def _begin_load(self) -> int:
        self._load_seq += 1
        self.is_loading = True
        self.error = None
        return self._load_seq

    def _is_current(self, seq: int) -> bool:
        if self.closed:
            logger.debug("Dropping response for closed %s", type(self).__name__)
            return False
        if seq != self._load_seq:
            logger.debug("Dropping stale load %s for %s", seq, type(self).__name__)
            return False
        return True

    def _cancel_loads(self) -> None:
        self._load_seq += 1
        self.is_loading = False

    async def _call(self, call: Callable[[], Awaitable[ApiResult]]) -> ApiResult:
        try:
            return await call()
        except Exception as exc:
            logger.exception("Backend call failed in %s", type(self).__name__)
            return ApiResult.failure(str(exc), ErrorKind.TRANSPORT)

    def _fail(self, message: str, detail: object | None) -> None:
        if self.closed:
            return
        self.error = message
        self.notifier.error(message, detail)

    async def _mutate(
        self, call: Callable[[], Awaitable[ApiResult]], failure_message: str
    ) -> ApiResult:
        result = await self._call(call)
        if not result.ok:
            self._fail(failure_message, result.error)
        elif not self.closed:
            self.error = None
        return result


@dataclass
class CollectionStore(StoreBase, Generic[T]):
    """A store holding a single list of items."""

    items: list[T] = field(default_factory=list, init=False)

    async def _load_items(
        self,
        fetch: Callable[[], Awaitable[ApiResult]],
        decode: Callable[[object], T],
        failure_message: str,
    ) -> bool:
        seq = self._begin_load()
        result = await self._call(fetch)
        if not self._is_current(seq):
            return False
        self.is_loading = False
        result = result.map(lambda rows: [decode(row) for row in rows])
        if not result.ok:
            self.items = []
            self._fail(failure_message, result.error)
            return False
        self.items = result.data or []
        return True

    def _apply(self, update: Callable[[list[T]], list[T]]) -> None:
        if self.closed:
            return
        self.items = update(self.items)
