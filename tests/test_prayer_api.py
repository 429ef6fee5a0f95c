"""Tests for the prayer_api module."""

import copy
import datetime
import unittest
from unittest.mock import MagicMock, patch

import requests

from prayerclock.errors import FetchError
from prayerclock.prayer_api import ALADHAN_ENDPOINTS, fetch_prayer_times
from prayerclock.schedule import PrayerSchedule

MOCK_RESPONSE = {
    "code": 200,
    "status": "OK",
    "data": {
        "timings": {
            "Fajr": "04:30",
            "Sunrise": "05:55",
            "Dhuhr": "12:00",
            "Asr": "15:30",
            "Maghrib": "18:15",
            "Isha": "19:30",
            "Midnight": "00:00",
            "Imsak": "04:20",
        },
        "date": {
            "gregorian": {
                "date": "01-03-2025",
                "weekday": {"en": "Saturday"},
            },
            "hijri": {
                "day": "1",
                "month": {"en": "Ramadan", "ar": "رَمَضان"},
                "year": "1446",
            },
        },
    },
}


def _response(body):
    mock_resp = MagicMock()
    mock_resp.json.return_value = body
    mock_resp.raise_for_status = MagicMock()
    return mock_resp


class TestFetchPrayerTimes(unittest.TestCase):
    @patch("prayerclock.prayer_api.requests.get")
    def test_returns_timings_and_hijri(self, mock_get):
        mock_get.return_value = _response(MOCK_RESPONSE)

        result = fetch_prayer_times("Jakarta", "Indonesia", datetime.date(2025, 3, 1))

        self.assertEqual(result["timings"]["Fajr"], "04:30")
        self.assertEqual(result["timings"]["Duhur"], "12:00")
        self.assertNotIn("Dhuhr", result["timings"])
        self.assertNotIn("Midnight", result["timings"])
        self.assertEqual(result["hijri"]["month_name"], "Ramadan")
        self.assertEqual(result["hijri"]["year"], "1446")
        self.assertEqual(result["gregorian"]["weekday"], "Saturday")

        url = mock_get.call_args[0][0]
        self.assertEqual(url, f"{ALADHAN_ENDPOINTS[0]}/timingsByCity/01-03-2025")
        params = mock_get.call_args[1]["params"]
        self.assertEqual(params["city"], "Jakarta")
        self.assertEqual(params["country"], "Indonesia")

    @patch("prayerclock.prayer_api.requests.get")
    def test_result_builds_a_schedule(self, mock_get):
        mock_get.return_value = _response(MOCK_RESPONSE)
        result = fetch_prayer_times("Jakarta", "Indonesia")
        schedule = PrayerSchedule.from_mapping(result["timings"])
        self.assertEqual(schedule.as_dict()["Isha"], "19:30")

    @patch("prayerclock.prayer_api.requests.get")
    def test_strips_timezone_suffix(self, mock_get):
        response = copy.deepcopy(MOCK_RESPONSE)
        response["data"]["timings"]["Fajr"] = "04:30 (WIB)"
        mock_get.return_value = _response(response)

        result = fetch_prayer_times("Jakarta", "Indonesia")
        self.assertEqual(result["timings"]["Fajr"], "04:30")

    @patch("prayerclock.prayer_api.requests.get")
    def test_falls_back_to_next_endpoint(self, mock_get):
        mock_get.side_effect = [
            requests.ConnectionError("TLS handshake failed"),
            _response(MOCK_RESPONSE),
        ]
        with self.assertLogs("prayerclock.prayer_api", level="WARNING"):
            result = fetch_prayer_times("Jakarta", "Indonesia")
        self.assertEqual(result["timings"]["Maghrib"], "18:15")
        self.assertEqual(mock_get.call_count, 2)
        self.assertTrue(mock_get.call_args[0][0].startswith(ALADHAN_ENDPOINTS[1]))

    @patch("prayerclock.prayer_api.requests.get")
    def test_raises_when_all_endpoints_fail(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")
        with self.assertRaises(FetchError):
            fetch_prayer_times("Jakarta", "Indonesia")
        self.assertEqual(mock_get.call_count, len(ALADHAN_ENDPOINTS))

    @patch("prayerclock.prayer_api.requests.get")
    def test_raises_on_api_error(self, mock_get):
        mock_get.return_value = _response({"code": 400, "status": "Bad Request"})
        with self.assertRaises(FetchError):
            fetch_prayer_times("Nowhere", "Atlantis")
        self.assertEqual(mock_get.call_count, 1)

    @patch("prayerclock.prayer_api.requests.get")
    def test_raises_on_missing_prayer(self, mock_get):
        response = copy.deepcopy(MOCK_RESPONSE)
        del response["data"]["timings"]["Asr"]
        mock_get.return_value = _response(response)
        with self.assertRaises(FetchError):
            fetch_prayer_times("Jakarta", "Indonesia")

    @patch("prayerclock.prayer_api.requests.get")
    def test_raises_on_unexpected_shape(self, mock_get):
        response = copy.deepcopy(MOCK_RESPONSE)
        del response["data"]["date"]
        mock_get.return_value = _response(response)
        with self.assertRaises(FetchError):
            fetch_prayer_times("Jakarta", "Indonesia")


if __name__ == "__main__":
    unittest.main()
