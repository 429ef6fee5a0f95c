"""Exceptions raised by the prayer clock."""


class PrayerClockError(Exception):
    """Base class for prayer clock errors."""


class ParseError(PrayerClockError, ValueError):
    """A schedule time string is malformed or a prayer is missing."""


class NoScheduleAvailable(PrayerClockError):
    """Evaluation was attempted before any schedule was applied."""


class FetchError(PrayerClockError):
    """The prayer time API could not be reached or reported an error."""
