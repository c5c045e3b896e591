"""Countdown task bound to one GameSession.

The clock owns a single asyncio.Task per session generation. It starts the
task when the session enters playing, cancels it when the session ends or is
restarted, and drops any tick whose generation no longer matches the
session's. Everything runs on one event loop, so ticks and player commands
never interleave. The clock must be created inside that running loop.

Usage:
    session = GameSession()
    clock = SessionClock(session)
    session.start()          # inside a running event loop
    ...
    clock.close()
"""

import asyncio
import logging

from .game_state import GameSession, SessionEvent

logger = logging.getLogger(__name__)


class SessionClock:
    """Drives session.tick() every interval seconds while the session plays."""

    def __init__(self, session: GameSession, interval: float | None = None) -> None:
        self.session = session
        self.interval = interval if interval is not None else session.config.tick_interval
        # Fails fast with RuntimeError when no event loop is running.
        self._loop = asyncio.get_running_loop()
        self._task: asyncio.Task | None = None
        self._unsubscribe = session.subscribe(self._on_event)
        if session.is_playing:
            self._schedule()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _on_event(self, session: GameSession, event: SessionEvent) -> None:
        if event is SessionEvent.STARTED:
            self._schedule()
        elif event is SessionEvent.ENDED:
            self.cancel()

    def _schedule(self) -> None:
        self.cancel()
        self._task = self._loop.create_task(self._run(self.session.generation))

    async def _run(self, generation: int) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if self.session.generation != generation or not self.session.is_playing:
                logger.debug("Dropping stale tick for generation %d", generation)
                return
            self.session.tick()

    def cancel(self) -> None:
        """Stop the pending countdown task, if any."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    def close(self) -> None:
        """Cancel the countdown and detach from the session."""
        self.cancel()
        self._unsubscribe()
