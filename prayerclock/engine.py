"""
Per-tick evaluation of the prayer clock.

evaluate() is a pure function from (schedule, now, previous TickState) to a
TickView, the next TickState and any notifications to send. PrayerClock wraps
it with the mutable bits the window needs: the schedule holder and the
latest state.
"""

import datetime
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from prayerclock.display_mode import DisplayMode, ModeState, select_mode, toggle_mode
from prayerclock.duration import Duration, elapsed_since, remaining_until
from prayerclock.errors import NoScheduleAvailable
from prayerclock.notifier import ONE_MINUTE_MS, evaluate_notification
from prayerclock.resolver import ResolvedReference, find_next, find_previous
from prayerclock.schedule import ScheduleHolder

logger = logging.getLogger(__name__)

_ZERO = Duration.from_milliseconds(0)


@dataclass(frozen=True)
class TickState:
    mode_state: ModeState = field(default_factory=ModeState)
    last_fired_key: Optional[str] = None


@dataclass(frozen=True)
class TickView:
    """Everything derived for one tick. None means not applicable."""

    now: datetime.datetime
    next_reference: Optional[ResolvedReference] = None
    previous_reference: Optional[ResolvedReference] = None
    remaining: Optional[Duration] = None
    elapsed: Optional[Duration] = None
    mode: Optional[DisplayMode] = None
    pinned: bool = False

    @property
    def available(self) -> bool:
        return self.mode is not None

    @property
    def shown_reference(self):
        if self.mode == DisplayMode.NEXT:
            return self.next_reference
        if self.mode == DisplayMode.PREVIOUS:
            return self.previous_reference
        return None

    @property
    def shown_duration(self):
        if self.mode == DisplayMode.NEXT:
            return self.remaining
        if self.mode == DisplayMode.PREVIOUS:
            return self.elapsed
        return None


def _arrival_event(previous, elapsed, last_fired_key):
    """
    Fire the "now" milestone for a prayer that has just been reached.

    find_next() moves on the instant a prayer arrives, so its zero-remaining
    milestone is taken from the previous reference instead. It fires only
    within a minute of the prayer and only when its countdown milestones
    were the last ones fired.
    """
    if elapsed is None or elapsed.total_milliseconds > ONE_MINUTE_MS:
        return None, last_fired_key
    name = previous.name.value
    if last_fired_key not in (f"{name}-5min", f"{name}-1min"):
        return None, last_fired_key
    return evaluate_notification(previous, _ZERO, last_fired_key)


def evaluate(schedule, now: datetime.datetime, state: TickState):
    """
    Derive one tick.

    Returns (view, new_state, events). With no schedule the view is empty,
    the state is unchanged and no notifications are evaluated.
    """
    if schedule is None:
        return TickView(now=now, pinned=state.mode_state.pinned), state, []

    next_ref = find_next(schedule, now)
    previous_ref = find_previous(schedule, now)
    remaining = remaining_until(next_ref.instant, now)
    elapsed = elapsed_since(previous_ref.instant, now)
    mode = select_mode(state.mode_state, elapsed)

    events = []
    key = state.last_fired_key
    event, key = _arrival_event(previous_ref, elapsed, key)
    if event is not None:
        events.append(event)
    if remaining is not None:
        event, key = evaluate_notification(next_ref, remaining, key)
        if event is not None:
            events.append(event)

    view = TickView(
        now=now,
        next_reference=next_ref,
        previous_reference=previous_ref,
        remaining=remaining,
        elapsed=elapsed,
        mode=mode,
        pinned=state.mode_state.pinned,
    )
    return view, replace(state, last_fired_key=key), events


class PrayerClock:
    """Holds the schedule and tick state between ticks of the ClockDriver."""

    def __init__(self, on_view=None, on_notify=None):
        self.schedules = ScheduleHolder()
        self.state = TickState()
        self.view = None
        self._on_view = on_view
        self._on_notify = on_notify

    def apply_schedule(self, raw: dict, date: Optional[datetime.date] = None):
        """Swap in a new schedule; a ParseError keeps the current one."""
        return self.schedules.apply(raw, date)

    def begin_fetch(self) -> None:
        """Suspend evaluation while a new schedule is being fetched."""
        self.schedules.suspend()

    def fetch_failed(self) -> None:
        """Fall back to the last valid schedule."""
        self.schedules.resume()

    def tick(self, now: datetime.datetime) -> TickView:
        try:
            schedule = self.schedules.require()
        except NoScheduleAvailable:
            schedule = None
        self.view, self.state, events = evaluate(schedule, now, self.state)
        for event in events:
            logger.info("Notification %s: %s", event.key, event.title)
            if self._on_notify:
                self._on_notify(event)
        if self._on_view:
            self._on_view(self.view)
        return self.view

    def toggle_mode(self) -> ModeState:
        """Pin the display to the opposite of what is currently shown."""
        if self.state.mode_state.pinned or self.view is None or self.view.mode is None:
            shown = select_mode(self.state.mode_state, None)
        else:
            shown = self.view.mode
        mode_state = toggle_mode(self.state.mode_state, shown)
        self.state = replace(self.state, mode_state=mode_state)
        if self.view is not None and self.view.available:
            # re-derive the shown mode only; notifications wait for the next tick
            self.view = replace(self.view, mode=select_mode(mode_state, self.view.elapsed), pinned=True)
        logger.info("Display mode pinned to %s", mode_state.mode.value)
        return mode_state
