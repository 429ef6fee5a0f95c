"""Find the next and previous prayer for a given moment."""

import datetime
from dataclasses import dataclass

from prayerclock.schedule import PrayerName, PrayerSchedule


@dataclass(frozen=True)
class ResolvedReference:
    """A schedule entry placed on a concrete calendar day."""

    name: PrayerName
    instant: datetime.datetime
    clock_time: str


def _resolve(schedule: PrayerSchedule, name: PrayerName, day: datetime.date) -> ResolvedReference:
    return ResolvedReference(name, schedule.instant_of(name, day), schedule.time_of(name))


def find_next(schedule: PrayerSchedule, now: datetime.datetime) -> ResolvedReference:
    """
    Return the first prayer strictly after now.

    After today's last prayer (or exactly on it) this is tomorrow's Fajr.
    """
    today = now.date()
    for name in schedule:
        if schedule.instant_of(name, today) > now:
            return _resolve(schedule, name, today)
    return _resolve(schedule, PrayerName.FAJR, today + datetime.timedelta(days=1))


def find_previous(schedule: PrayerSchedule, now: datetime.datetime) -> ResolvedReference:
    """
    Return the last prayer at or before now.

    Before today's Fajr this is yesterday's Isha.
    """
    today = now.date()
    found = None
    for name in schedule:
        if schedule.instant_of(name, today) > now:
            break
        found = name
    if found is None:
        return _resolve(schedule, PrayerName.ISHA, today - datetime.timedelta(days=1))
    return _resolve(schedule, found, today)
