"""
Latest-only fetching for list views and dependent dropdowns.

Every view that loads data in reaction to a dependency change (filters,
page, an ancestor dropdown) goes through a LatestOnlyFetcher:

    trigger(key_1) ──debounce──► request_1 ─────────────► result_1 (dropped)
    trigger(key_2) ──debounce──► request_2 ──► result_2 (applied)

A superseded request that is still waiting out its debounce delay is
cancelled outright. One that has already reached the network is left to
finish, but its result (or error) is dropped.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Hashable, Mapping, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def delay_for(filters: Mapping[str, Any], debounce_seconds: float) -> float:
    """Debounce only while some filter is set; an empty filter set loads at once."""
    if any(value not in (None, "") for value in filters.values()):
        return debounce_seconds
    return 0.0


@dataclass
class _Request:
    generation: int
    key: Hashable
    task: asyncio.Task | None = None
    started: bool = False


@dataclass
class FetchOutcome(Generic[T]):
    """What happened to one triggered request."""

    key: Hashable
    applied: bool
    result: T | None = None
    error: Exception | None = field(default=None)


class LatestOnlyFetcher(Generic[T]):
    """
    Runs loaders so that only the most recent trigger's outcome is applied.

    Callbacks:
        on_result: receives the latest request's result
        on_error: receives the latest request's exception
        on_loading: toggled around the latest request's network phase
    """

    def __init__(
        self,
        name: str,
        on_result: Callable[[T], None],
        on_error: Callable[[Exception], None] | None = None,
        on_loading: Callable[[bool], None] | None = None,
    ):
        self.name = name
        self._on_result = on_result
        self._on_error = on_error
        self._on_loading = on_loading
        self._generation = 0
        self._current: _Request | None = None
        self._closed = False
        self.applied_key: Hashable = None

    # =========================================================================
    # TRIGGERING
    # =========================================================================

    def trigger(
        self,
        load: Callable[[], Awaitable[T]],
        key: Hashable = None,
        delay: float = 0.0,
    ) -> asyncio.Task:
        """
        Schedule ``load`` as the newest request, superseding any earlier one.

        Must be called from a running event loop.
        """
        if self._closed:
            raise RuntimeError(f"Fetcher {self.name} is closed")

        previous = self._current
        if previous and previous.task and not previous.task.done() and not previous.started:
            # Still inside its debounce window: clear the timer
            previous.task.cancel()

        self._generation += 1
        request = _Request(generation=self._generation, key=key)
        request.task = asyncio.get_running_loop().create_task(
            self._run(request, load, delay),
            name=f"{self.name}:{self._generation}",
        )
        self._current = request
        return request.task

    def is_stale(self, request: _Request) -> bool:
        return self._closed or request.generation != self._generation

    @property
    def pending(self) -> bool:
        return self._current is not None and self._current.task is not None and not self._current.task.done()

    async def wait(self) -> None:
        """Wait until the newest request (including any that supersede it) settles."""
        while self.pending:
            await asyncio.wait({self._current.task})

    def cancel(self) -> None:
        """Supersede the outstanding request without scheduling a new one."""
        self._generation += 1
        current = self._current
        if current is None or current.task is None or current.task.done():
            return
        if current.started:
            # In flight: its result is dropped and nothing will clear loading
            if self._on_loading is not None:
                self._on_loading(False)
        else:
            current.task.cancel()

    def close(self) -> None:
        """Drop every outstanding result, as when the owning view goes away."""
        self._closed = True
        self.cancel()

    # =========================================================================
    # EXECUTION
    # =========================================================================

    async def _run(
        self,
        request: _Request,
        load: Callable[[], Awaitable[T]],
        delay: float,
    ) -> FetchOutcome[T]:
        if delay > 0:
            await asyncio.sleep(delay)

        request.started = True
        self._set_loading(request, True)

        try:
            result = await load()
        except Exception as e:
            if self.is_stale(request):
                logger.debug(f"{self.name}: dropped error from superseded request {request.key!r}")
                return FetchOutcome(key=request.key, applied=False, error=e)
            self._set_loading(request, False)
            if self._on_error is None:
                raise
            self._on_error(e)
            return FetchOutcome(key=request.key, applied=True, error=e)

        if self.is_stale(request):
            logger.debug(f"{self.name}: dropped result from superseded request {request.key!r}")
            return FetchOutcome(key=request.key, applied=False, result=result)

        self._set_loading(request, False)
        self.applied_key = request.key
        self._on_result(result)
        return FetchOutcome(key=request.key, applied=True, result=result)

    def _set_loading(self, request: _Request, loading: bool) -> None:
        if self._on_loading is not None and not self.is_stale(request):
            self._on_loading(loading)
