"""
Cancellation scopes for in-flight requests.

A scope is owned by whatever drives the calls (a screen, a CLI command). When
it is cancelled every request still running under it is abandoned and raises
``RequestCancelledError``; new requests on a cancelled scope fail immediately.
"""
import asyncio
import logging
from typing import Awaitable, Set, TypeVar

from ekraf_admin.common.errors import RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RequestScope:
    def __init__(self, name: str = "scope"):
        self.name = name
        self._cancelled = False
        self._tasks: Set[asyncio.Task] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def run(self, awaitable: Awaitable[T], context: str) -> T:
        """
        Run ``awaitable`` as a task tracked by this scope.

        Args:
            awaitable: The request coroutine
            context: Description of the operation, used in the raised error

        Raises:
            RequestCancelledError: If the scope is or becomes cancelled
        """
        if self._cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelledError(f"Request cancelled while {context}.", context=context)

        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled() and self._cancelled:
                raise RequestCancelledError(
                    f"Request cancelled while {context}.", context=context
                ) from None
            # The caller itself was cancelled, take the request down with it
            task.cancel()
            raise
        finally:
            self._tasks.discard(task)

    def cancel(self) -> int:
        """Cancel the scope and every request still running in it; returns how many were cancelled."""
        self._cancelled = True
        count = 0
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
                count += 1
        if count:
            logger.debug("Cancelled %d in-flight request(s) in %s", count, self.name)
        return count

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cancel()
        return False
