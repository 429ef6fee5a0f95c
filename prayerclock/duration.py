"""Countdown and elapsed-time values between two instants."""

import datetime
from dataclasses import dataclass

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


@dataclass(frozen=True)
class Duration:
    hours: int
    minutes: int
    seconds: int
    total_milliseconds: int

    @classmethod
    def from_milliseconds(cls, total_ms: int) -> "Duration":
        hours, rest = divmod(total_ms, MS_PER_HOUR)
        minutes, rest = divmod(rest, MS_PER_MINUTE)
        seconds = rest // MS_PER_SECOND
        return cls(hours, minutes, seconds, total_ms)

    def format_clock(self) -> str:
        """Format as an HH:MM:SS countdown string."""
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


def _between(start: datetime.datetime, end: datetime.datetime):
    delta = end - start
    # timedelta floor division keeps whole milliseconds without float rounding
    total_ms = delta // datetime.timedelta(milliseconds=1)
    if total_ms < 0:
        return None
    return Duration.from_milliseconds(total_ms)


def remaining_until(target: datetime.datetime, now: datetime.datetime):
    """Return the Duration from now until target, or None if target has passed."""
    return _between(now, target)


def elapsed_since(reference: datetime.datetime, now: datetime.datetime):
    """Return the Duration from reference until now, or None if reference is ahead."""
    return _between(reference, now)
