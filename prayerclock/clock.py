"""Once-per-second tick source running on the tkinter event loop."""

import datetime
import logging

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class ClockDriver:
    """
    Call on_tick(now) every interval_ms until stopped.

    scheduler is anything offering tkinter's after(ms, func) and
    after_cancel(id), normally the Tk root. Ticks never overlap because each
    one re-arms the timer only after on_tick returns.
    """

    def __init__(self, scheduler, on_tick, interval_ms: int = TICK_INTERVAL_MS, now=datetime.datetime.now):
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._interval_ms = interval_ms
        self._now = now
        self._after_id = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.debug("Clock driver started (%d ms)", self._interval_ms)
        self._tick()

    def stop(self) -> None:
        """Cancel the pending tick. Safe to call more than once."""
        if not self._running:
            return
        self._running = False
        if self._after_id is not None:
            self._scheduler.after_cancel(self._after_id)
            self._after_id = None
        logger.debug("Clock driver stopped")

    def _tick(self) -> None:
        self._after_id = None
        if not self._running:
            return
        try:
            self._on_tick(self._now())
        except Exception:
            logger.exception("Tick handler failed")
        # on_tick may have called stop()
        if self._running:
            self._after_id = self._scheduler.after(self._interval_ms, self._tick)
