"""Choose between showing the next prayer or the one just passed."""

import enum
from dataclasses import dataclass
from typing import Optional

# Past this much time since the previous prayer, switch to the next one.
AUTO_SWITCH_THRESHOLD_MS = 35 * 60 * 1000


class DisplayMode(enum.Enum):
    NEXT = "next"
    PREVIOUS = "previous"


@dataclass(frozen=True)
class ModeState:
    """Auto when not pinned; once pinned, mode is what the user chose."""

    pinned: bool = False
    mode: Optional[DisplayMode] = None


def select_mode(state: ModeState, elapsed) -> DisplayMode:
    """
    Return the mode to show.

    A pinned state always wins. In auto mode the previous prayer stays on
    screen until more than AUTO_SWITCH_THRESHOLD_MS has elapsed since it.
    """
    if state.pinned:
        return state.mode
    if elapsed is None:
        return DisplayMode.NEXT
    if elapsed.total_milliseconds > AUTO_SWITCH_THRESHOLD_MS:
        return DisplayMode.NEXT
    return DisplayMode.PREVIOUS


def toggle_mode(state: ModeState, shown: DisplayMode) -> ModeState:
    """Pin the opposite of what is currently shown."""
    flipped = DisplayMode.PREVIOUS if shown == DisplayMode.NEXT else DisplayMode.NEXT
    return ModeState(pinned=True, mode=flipped)
