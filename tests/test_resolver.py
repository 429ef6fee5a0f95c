"""Tests for the resolver module."""

import datetime
import unittest

from prayerclock.duration import remaining_until
from prayerclock.resolver import find_next, find_previous
from prayerclock.schedule import PRAYER_NAMES, PrayerName, PrayerSchedule

TIMINGS = {
    "Fajr": "05:00",
    "Sunrise": "06:20",
    "Duhur": "12:15",
    "Asr": "15:45",
    "Maghrib": "18:30",
    "Isha": "20:00",
}
DAY = datetime.date(2025, 3, 1)


def at(hour, minute, second=0, day=DAY):
    return datetime.datetime.combine(day, datetime.time(hour, minute, second))


class TestFindNext(unittest.TestCase):
    def setUp(self):
        self.schedule = PrayerSchedule.from_mapping(TIMINGS)

    def test_evening_before_maghrib(self):
        ref = find_next(self.schedule, at(18, 26))
        self.assertEqual(ref.name, PrayerName.MAGHRIB)
        self.assertEqual(ref.instant, at(18, 30))
        self.assertEqual(ref.clock_time, "18:30")

    def test_countdown_before_maghrib(self):
        ref = find_next(self.schedule, at(18, 26))
        remaining = remaining_until(ref.instant, at(18, 26))
        self.assertEqual((remaining.hours, remaining.minutes, remaining.seconds), (0, 4, 0))
        remaining = remaining_until(ref.instant, at(18, 26, 1))
        self.assertEqual((remaining.hours, remaining.minutes, remaining.seconds), (0, 3, 59))

    def test_before_fajr_is_todays_fajr(self):
        ref = find_next(self.schedule, at(4, 0))
        self.assertEqual(ref.name, PrayerName.FAJR)
        self.assertEqual(ref.instant, at(5, 0))

    def test_exactly_on_isha_wraps_to_tomorrow(self):
        ref = find_next(self.schedule, at(20, 0))
        self.assertEqual(ref.name, PrayerName.FAJR)
        self.assertEqual(ref.instant, at(5, 0, day=DAY + datetime.timedelta(days=1)))

    def test_after_isha_wraps_to_tomorrow(self):
        ref = find_next(self.schedule, at(23, 59, 59))
        self.assertEqual(ref.name, PrayerName.FAJR)
        self.assertEqual(ref.instant.date(), DAY + datetime.timedelta(days=1))

    def test_includes_sunrise(self):
        ref = find_next(self.schedule, at(5, 30))
        self.assertEqual(ref.name, PrayerName.SUNRISE)


class TestFindPrevious(unittest.TestCase):
    def setUp(self):
        self.schedule = PrayerSchedule.from_mapping(TIMINGS)

    def test_evening_before_maghrib(self):
        ref = find_previous(self.schedule, at(18, 26))
        self.assertEqual(ref.name, PrayerName.ASR)
        self.assertEqual(ref.instant, at(15, 45))

    def test_before_fajr_is_yesterdays_isha(self):
        ref = find_previous(self.schedule, at(4, 0))
        self.assertEqual(ref.name, PrayerName.ISHA)
        self.assertEqual(ref.instant, at(20, 0, day=DAY - datetime.timedelta(days=1)))

    def test_exactly_on_isha_is_isha(self):
        ref = find_previous(self.schedule, at(20, 0))
        self.assertEqual(ref.name, PrayerName.ISHA)
        self.assertEqual(ref.instant, at(20, 0))

    def test_exactly_on_fajr_is_fajr(self):
        ref = find_previous(self.schedule, at(5, 0))
        self.assertEqual(ref.name, PrayerName.FAJR)
        self.assertEqual(ref.instant, at(5, 0))


class TestResolverProperties(unittest.TestCase):
    def setUp(self):
        self.schedule = PrayerSchedule.from_mapping(TIMINGS)
        start = at(0, 0)
        # every 7 minutes plus each prayer instant and the second around it
        self.instants = [start + datetime.timedelta(minutes=7 * i) for i in range(206)]
        for name in PRAYER_NAMES:
            instant = self.schedule.instant_of(name, DAY)
            self.instants += [instant - datetime.timedelta(seconds=1), instant, instant + datetime.timedelta(seconds=1)]
        self.instants.sort()

    def test_next_and_previous_differ_except_on_boundary(self):
        for now in self.instants:
            with self.subTest(now=now):
                nxt = find_next(self.schedule, now)
                prev = find_previous(self.schedule, now)
                self.assertLess(prev.instant, nxt.instant)
                self.assertLessEqual(prev.instant, now)
                self.assertGreater(nxt.instant, now)

    def test_pure(self):
        now = at(13, 0)
        self.assertEqual(find_next(self.schedule, now), find_next(self.schedule, now))
        self.assertEqual(find_previous(self.schedule, now), find_previous(self.schedule, now))

    def test_next_is_monotonic(self):
        order = {name: i for i, name in enumerate(PRAYER_NAMES)}
        last = None
        wrapped = False
        for now in self.instants:
            ref = find_next(self.schedule, now)
            key = (ref.instant.date(), order[ref.name])
            if last is not None:
                self.assertGreaterEqual(key, last)
            if ref.instant.date() > DAY:
                wrapped = True
            last = key
        self.assertTrue(wrapped)


if __name__ == "__main__":
    unittest.main()
