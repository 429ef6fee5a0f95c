"""The day's six prayer times as comparable local instants."""

import datetime
import enum
import logging
import re
from typing import Optional

from prayerclock.errors import NoScheduleAvailable, ParseError

logger = logging.getLogger(__name__)


class PrayerName(enum.Enum):
    """The six daily prayers, declared in liturgical order."""

    FAJR = "Fajr"
    SUNRISE = "Sunrise"
    DUHUR = "Duhur"
    ASR = "Asr"
    MAGHRIB = "Maghrib"
    ISHA = "Isha"


PRAYER_NAMES = tuple(PrayerName)

_CLOCK_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2})")


def parse_clock_time(text: str) -> tuple:
    """
    Parse a zero-padded 24-hour 'HH:MM' string into (hour, minute).

    Raises ParseError for anything else, including out-of-range fields.
    """
    match = _CLOCK_TIME_RE.fullmatch(text) if isinstance(text, str) else None
    if not match:
        raise ParseError(f"Invalid prayer time {text!r}, expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ParseError(f"Prayer time {text!r} is out of range")
    return hour, minute


class PrayerSchedule:
    """
    One calendar day's prayer times.

    Built with from_mapping(); every prayer is present and already parsed, so
    a PrayerSchedule never holds a time it cannot turn into an instant.
    """

    def __init__(self, times: dict, clock_times: dict, date: Optional[datetime.date] = None):
        self._times = times
        self._clock_times = clock_times
        self.date = date

    @classmethod
    def from_mapping(cls, raw: dict, date: Optional[datetime.date] = None) -> "PrayerSchedule":
        """
        Build a schedule from {prayer name: 'HH:MM'}.

        Keys may be PrayerName members or their string values. Extra keys are
        ignored; a missing prayer or malformed time raises ParseError.
        """
        lookup = {
            (key.value if isinstance(key, PrayerName) else key): value
            for key, value in raw.items()
        }
        times = {}
        clock_times = {}
        for name in PRAYER_NAMES:
            if name.value not in lookup:
                raise ParseError(f"Schedule is missing {name.value}")
            clock_time = lookup[name.value]
            times[name] = parse_clock_time(clock_time)
            clock_times[name] = clock_time
        return cls(times, clock_times, date)

    def __iter__(self):
        return iter(PRAYER_NAMES)

    def __eq__(self, other):
        if not isinstance(other, PrayerSchedule):
            return NotImplemented
        return self._clock_times == other._clock_times and self.date == other.date

    def __repr__(self):
        times = ", ".join(f"{n.value}={self._clock_times[n]}" for n in PRAYER_NAMES)
        return f"PrayerSchedule({times}, date={self.date})"

    def time_of(self, name: PrayerName) -> str:
        """Return the 'HH:MM' string for a prayer."""
        return self._clock_times[name]

    def instant_of(self, name: PrayerName, reference_date: datetime.date) -> datetime.datetime:
        """Combine reference_date with the prayer's hour and minute (seconds = 0)."""
        hour, minute = self._times[name]
        return datetime.datetime.combine(reference_date, datetime.time(hour, minute))

    def as_dict(self) -> dict:
        return {name.value: self._clock_times[name] for name in PRAYER_NAMES}


class ScheduleHolder:
    """
    Keeps the schedule currently in effect.

    While a fetch is outstanding (suspend() until apply() or resume()) no
    schedule is in effect; the last valid one is kept to fall back on.
    """

    def __init__(self):
        self._last_valid = None
        self._suspended = False

    @property
    def schedule(self):
        return None if self._suspended else self._last_valid

    @property
    def last_valid(self):
        return self._last_valid

    @property
    def suspended(self) -> bool:
        return self._suspended

    def apply(self, raw: dict, date: Optional[datetime.date] = None) -> PrayerSchedule:
        # Parse before swapping so a bad payload keeps the old schedule.
        schedule = PrayerSchedule.from_mapping(raw, date)
        self._last_valid = schedule
        self._suspended = False
        logger.info("Applied schedule for %s: %s", date or "today", schedule.as_dict())
        return schedule

    def suspend(self) -> None:
        """A fetch has started; evaluation is suspended until it settles."""
        self._suspended = True

    def resume(self) -> None:
        """The fetch failed; put the last valid schedule back in effect."""
        self._suspended = False
        if self._last_valid is not None:
            logger.info("Keeping previous schedule for %s", self._last_valid.date or "today")

    def require(self) -> PrayerSchedule:
        if self._suspended:
            raise NoScheduleAvailable("Prayer schedule fetch is in progress")
        if self._last_valid is None:
            raise NoScheduleAvailable("No prayer schedule has been loaded yet")
        return self._last_valid
