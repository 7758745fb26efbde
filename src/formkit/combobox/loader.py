"""
Debounced, cancellable asynchronous option loading.

Each request bumps a generation counter.  A completion is applied only
if its generation is still the current one, so a slow response to an old
query can never overwrite the result of a newer query, even when the
loader ignores its abort signal.

Example:
    async def search(query: str, abort_signal: asyncio.Event) -> list[Option]:
        return await api.search(query)

    loader = AsyncOptionLoader(
        search,
        on_result=lambda query, options: print(options),
        on_error=lambda exc: print(exc),
        debounce_ms=250,
    )
    loader.request("app")
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from formkit.combobox.options import Option, OptionValue, coerce_options
from formkit.logging import get_logger

logger = get_logger("combobox.loader")

LoadResult = Iterable[Option | Mapping[str, Any] | OptionValue]
LoadOptions = Callable[[str, asyncio.Event], Awaitable[LoadResult]]

DEFAULT_DEBOUNCE_MS = 300


class LoadCancelledError(Exception):
    """Raised by a loader to report that it stopped because it was aborted."""

    pass


class AsyncOptionLoader:
    """
    Runs a user-supplied ``load(query, abort_signal)`` coroutine behind a
    debounce timer.

    Parameters
    ----------
    load:
        Coroutine function returning the options for a query.  It receives
        an :class:`asyncio.Event` that is set once the call is superseded.
    on_result:
        Called with ``(query, options)`` for the current generation only.
    on_error:
        Called with the exception when the current generation fails.
    on_cancel:
        Called when the current generation stops without a result because
        the loader itself gave up (raised a cancellation).
    debounce_ms:
        Quiet period before the loader is invoked.
    min_search_length:
        Queries shorter than this never reach the loader.
    """

    def __init__(
        self,
        load: LoadOptions,
        *,
        on_result: Callable[[str, list[Option]], None],
        on_error: Callable[[Exception], None],
        on_cancel: Callable[[], None] | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        min_search_length: int = 0,
    ) -> None:
        self._load = load
        self._on_result = on_result
        self._on_error = on_error
        self._on_cancel = on_cancel
        self.debounce_ms = debounce_ms
        self.min_search_length = min_search_length

        self._generation = 0
        self._task: asyncio.Task[None] | None = None
        self._abort_signal: asyncio.Event | None = None

    @property
    def generation(self) -> int:
        """Id of the most recent request; older completions are stale."""
        return self._generation

    @property
    def is_pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def accepts(self, query: str) -> bool:
        """Whether *query* is long enough to be sent to the loader."""
        return len(query) >= self.min_search_length

    def request(self, query: str) -> bool:
        """
        Supersede any pending load and, if *query* is long enough, schedule
        a new one.  Must be called from a running event loop.

        Returns ``True`` when a load was scheduled.
        """
        self.cancel()
        if not self.accepts(query):
            logger.debug("Query %r below minimum length %d, not loading", query, self.min_search_length)
            return False

        abort_signal = asyncio.Event()
        self._abort_signal = abort_signal
        self._task = asyncio.get_running_loop().create_task(
            self._run(query, self._generation, abort_signal)
        )
        logger.debug("Scheduled load for %r (generation %d)", query, self._generation)
        return True

    def cancel(self) -> None:
        """Invalidate the current generation and abort whatever is in flight."""
        self._generation += 1
        if self._abort_signal is not None:
            self._abort_signal.set()
            self._abort_signal = None
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
            self._task = None

    async def wait(self) -> None:
        """Wait until the currently scheduled load (if any) has finished."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self, query: str, generation: int, abort_signal: asyncio.Event) -> None:
        try:
            # sleep(0) still yields, so requests made in the same tick coalesce
            await asyncio.sleep(self.debounce_ms / 1000 if self.debounce_ms > 0 else 0)
            logger.debug("Loading options for %r (generation %d)", query, generation)
            result = await self._load(query, abort_signal)
        except (asyncio.CancelledError, LoadCancelledError):
            logger.debug("Load for %r cancelled (generation %d)", query, generation)
            if not self._is_stale(generation):
                self._finish(generation)
                if self._on_cancel is not None:
                    self._on_cancel()
            return
        except Exception as exc:
            if self._is_stale(generation):
                logger.debug("Discarding stale failure for %r: %s", query, exc)
                return
            self._finish(generation)
            logger.warning("Loading options for %r failed: %s", query, exc)
            self._on_error(exc)
            return

        if self._is_stale(generation):
            logger.debug("Discarding stale result for %r (generation %d)", query, generation)
            return
        self._finish(generation)
        self._on_result(query, coerce_options(result))

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    def _finish(self, generation: int) -> None:
        if generation == self._generation:
            self._task = None
            self._abort_signal = None
