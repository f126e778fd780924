"""Elapsed-time projector.

While a song plays, the server stays silent until something changes, so the
displayed clock would freeze between idle returns. The projector advances a
private copy of the cache once per second and redraws it. It is cancelled as
soon as idle returns and is never joined; one late redraw is harmless because
the authoritative redraw follows it.
"""

import threading
from typing import Callable, Optional

from loguru import logger

from .cache import StateCache

TICK_SECONDS = 1


class ElapsedProjector:
    """Ticks a detached StateCache until cancelled."""

    def __init__(
        self,
        cache: StateCache,
        interval: float = TICK_SECONDS,
        on_tick: Optional[Callable[[StateCache], None]] = None,
    ):
        # Must be a detached copy: the owning loop keeps mutating its own cache
        self.cache = cache
        self.interval = interval
        self.on_tick = on_tick if on_tick is not None else StateCache.draw
        self._cancelled = threading.Event()
        self.ticks = 0

    @classmethod
    def start(cls, cache: StateCache, interval: float = TICK_SECONDS) -> "ElapsedProjector":
        """Copy ``cache`` and start ticking the copy on a daemon thread."""
        projector = cls(cache.detached_copy(), interval)
        thread = threading.Thread(target=projector.run, daemon=True, name="ElapsedProjector")
        thread.start()
        return projector

    def cancel(self) -> None:
        """One-shot, best-effort stop signal."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def tick(self) -> None:
        self.cache.increment_elapsed(TICK_SECONDS)
        self.ticks += 1
        self.on_tick(self.cache)

    def run(self) -> None:
        while not self._cancelled.wait(self.interval):
            self.tick()
        logger.debug(f"Projector stopped after {self.ticks} ticks")
