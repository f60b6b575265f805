"""
Optimistic reconciliation of an in-memory paginated list.

After a successful status change or delete the affected item is patched in
place instead of re-fetching the whole list. A failed mutation leaves the
list untouched and forces a resync of the first page.
"""
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, List, Optional, TypeVar

from pydantic import BaseModel

from ekraf_admin import config
from ekraf_admin.common.errors import ApiError
from ekraf_admin.common.schemas import PaginatedResponse

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)

# Overlay marker for an item deleted while a fetch was in flight
_DELETED = object()


def _patched(item: T, changes: Dict[str, Any]) -> T:
    """Shallow-merge ``changes`` into ``item`` and run the model's validators on the result."""
    return type(item).model_validate({**item.model_dump(), **changes})


class OptimisticList(Generic[T]):
    """
    A list of records loaded page by page and patched optimistically.

    Args:
        fetch_page: Coroutine function returning one page, given a 1-indexed page number
        key: Returns the identity of an item, ``item.id`` by default
        guard_window: Seconds after an optimistic patch during which ``on_focus`` does not refetch
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        fetch_page: Callable[[int], Awaitable[PaginatedResponse]],
        key: Callable[[T], Hashable] = lambda item: item.id,
        guard_window: float = config.OPTIMISTIC_GUARD_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch_page = fetch_page
        self._key = key
        self.guard_window = guard_window
        self._clock = clock

        self.items: List[T] = []
        self.page = 0
        self.total_pages = 0
        self.error: Optional[ApiError] = None

        self._guard_until = 0.0
        self._issued: Dict[Hashable, int] = {}
        self._applied: Dict[Hashable, int] = {}
        self._inflight_fetches = 0
        self._overlay: Dict[Hashable, Any] = {}

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages

    def index_of(self, item_id: Hashable) -> int:
        for index, item in enumerate(self.items):
            if self._key(item) == item_id:
                return index
        return -1

    def get(self, item_id: Hashable) -> Optional[T]:
        index = self.index_of(item_id)
        return self.items[index] if index >= 0 else None

    async def _fetch(self, page: int) -> PaginatedResponse:
        self._inflight_fetches += 1
        try:
            result = await self._fetch_page(page)
            # Patches applied while this fetch was running win over its stale data
            items = self._with_overlay(list(result.data))
        finally:
            self._inflight_fetches -= 1
            if not self._inflight_fetches:
                self._overlay.clear()
        return result.model_copy(update={"data": items})

    def _with_overlay(self, items: List[T]) -> List[T]:
        if not self._overlay:
            return items
        patched = []
        for item in items:
            change = self._overlay.get(self._key(item))
            if change is _DELETED:
                continue
            patched.append(_patched(item, change) if change else item)
        return patched

    async def refresh(self) -> List[T]:
        """
        Load the first page and replace the current items with it.

        Raises:
            ApiError: If the fetch fails; the current items are kept
        """
        try:
            result = await self._fetch(1)
        except ApiError as exc:
            self.error = exc
            raise
        self.error = None
        self.items = list(result.data)
        self.page = result.current_page
        self.total_pages = result.total_pages
        return self.items

    async def load_more(self) -> List[T]:
        """Append the next page, if any; returns the newly added items."""
        if not self.has_more:
            return []
        try:
            result = await self._fetch(self.page + 1)
        except ApiError as exc:
            self.error = exc
            raise
        self.error = None
        known = {self._key(item) for item in self.items}
        added = [item for item in result.data if self._key(item) not in known]
        self.items.extend(added)
        self.page = result.current_page
        self.total_pages = result.total_pages
        return added

    def within_guard_window(self) -> bool:
        return self._clock() < self._guard_until

    async def on_focus(self) -> bool:
        """
        Refetch because the list became visible again.

        Returns:
            False when the refetch was skipped because an optimistic patch was
            applied within the guard window, True otherwise
        """
        if self.within_guard_window():
            logger.debug("Skipping focus refetch inside the optimistic guard window")
            return False
        await self.refresh()
        return True

    def _next_sequence(self, item_id: Hashable) -> int:
        sequence = self._issued.get(item_id, 0) + 1
        self._issued[item_id] = sequence
        return sequence

    def _is_stale(self, item_id: Hashable, sequence: int) -> bool:
        return sequence < self._applied.get(item_id, 0)

    def _mark_applied(self, item_id: Hashable, sequence: int, change: Any) -> None:
        self._applied[item_id] = sequence
        self._guard_until = self._clock() + self.guard_window
        if self._inflight_fetches:
            self._overlay[item_id] = change

    async def _resync_after_failure(self, exc: ApiError) -> None:
        logger.warning("Optimistic mutation failed (%s), resyncing first page", exc.context)
        try:
            await self.refresh()
        except ApiError as resync_exc:
            logger.error("Resync after failed mutation also failed: %s", resync_exc.message)

    async def apply_update(
        self,
        item_id: Hashable,
        mutation: Callable[[], Awaitable[Any]],
        changes: Dict[str, Any],
    ) -> bool:
        """
        Run ``mutation`` and, once it succeeds, merge ``changes`` into the item in place.

        Args:
            item_id: Identity of the item to patch
            mutation: Coroutine function performing the backend call
            changes: Field values to shallow-merge into the item

        Returns:
            True if the patch was applied, False if the item is not loaded or a
            later mutation on the same item was already applied

        Raises:
            ApiError: If the mutation fails; the list is left unchanged and the
                first page is re-fetched before the error is re-raised
        """
        sequence = self._next_sequence(item_id)
        try:
            await mutation()
        except ApiError as exc:
            await self._resync_after_failure(exc)
            raise

        if self._is_stale(item_id, sequence):
            logger.debug("Discarding out-of-order update #%d for %s", sequence, item_id)
            return False

        self._mark_applied(item_id, sequence, dict(changes))
        index = self.index_of(item_id)
        if index < 0:
            return False
        self.items[index] = _patched(self.items[index], changes)
        return True

    async def apply_delete(self, item_id: Hashable, mutation: Callable[[], Awaitable[Any]]) -> bool:
        """
        Run ``mutation`` and, once it succeeds, remove the item from the list.

        Raises:
            ApiError: If the mutation fails; the list is left unchanged and the
                first page is re-fetched before the error is re-raised
        """
        sequence = self._next_sequence(item_id)
        try:
            await mutation()
        except ApiError as exc:
            await self._resync_after_failure(exc)
            raise

        if self._is_stale(item_id, sequence):
            return False

        self._mark_applied(item_id, sequence, _DELETED)
        index = self.index_of(item_id)
        if index < 0:
            return False
        del self.items[index]
        return True
