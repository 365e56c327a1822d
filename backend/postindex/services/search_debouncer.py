"""Search Debouncer — coalesces rapid search input into one recomputation.

Invariants:
    - Only the last term submitted within the delay window fires
    - submit() and cancel() invalidate every earlier pending completion
      (task cancelled AND generation bumped, so a wake-up racing the cancel is dropped)
    - Intermediate terms are discarded, never queued
    - on_fire runs on the event loop, never concurrently with itself

Design Decisions:
    - Cancellable asyncio task per pending term plus a generation counter
    - delay_ms == 0 still goes through the loop (sleep(0)): callers see the same
      async ordering in tests and production
"""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class SearchDebouncer:
    """Debounces one input stream of search terms."""

    def __init__(self, on_fire: Callable[[str], None], delay_ms: int = 300):
        self._on_fire = on_fire
        self._delay = delay_ms / 1000
        self._generation = 0
        self._task: asyncio.Task | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, term: str) -> int:
        """Schedule term, superseding any pending one. Returns its generation."""
        self.cancel()
        generation = self._generation
        self._task = asyncio.get_running_loop().create_task(
            self._fire_later(term, generation),
        )
        return generation

    def cancel(self) -> None:
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def drain(self) -> None:
        """Wait for the pending term (if any) to fire or be cancelled."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    async def _fire_later(self, term: str, generation: int) -> None:
        await asyncio.sleep(self._delay)
        if generation != self._generation:
            logger.debug("Dropped stale search", extra={"search_term": term})
            return
        self._task = None
        self._on_fire(term)
