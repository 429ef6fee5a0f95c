"""Fetch prayer times and Hijri date from the Aladhan API."""

import datetime
import logging
from typing import Optional

import requests

from prayerclock.errors import FetchError
from prayerclock.schedule import PRAYER_NAMES, PrayerName

logger = logging.getLogger(__name__)

# Tried in order; the plain HTTP host covers networks that break TLS.
ALADHAN_ENDPOINTS = (
    "https://api.aladhan.com/v1",
    "http://api.aladhan.com/v1",
)

# Aladhan spells a few prayers differently
API_NAMES = {PrayerName.DUHUR: "Dhuhr"}

PRAYER_DISPLAY = {
    PrayerName.FAJR: "Subuh / Fajr",
    PrayerName.SUNRISE: "Sunrise / Syuruq",
    PrayerName.DUHUR: "Dzuhur / Duhur",
    PrayerName.ASR: "Ashar / Asr",
    PrayerName.MAGHRIB: "Maghrib",
    PrayerName.ISHA: "Isya / Isha",
}

# Calculation method: 11 = Egyptian GAES (common in many countries)
# 2 = ISNA, 3 = MWL, 4 = Mecca, 5 = Karachi, 11 = Egypt, 15 = Dubai, 20 = Turkey
DEFAULT_METHOD = 11

REQUEST_TIMEOUT = 10


def _get_json(path: str, params: dict) -> dict:
    last_exc = None
    for base in ALADHAN_ENDPOINTS:
        url = f"{base}/{path}"
        try:
            resp = requests.get(url, params=params, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Aladhan request to %s failed: %s", url, exc)
            last_exc = exc
    raise FetchError(f"Could not reach the prayer time API: {last_exc}") from last_exc


def fetch_prayer_times(city: str, country: str, date: Optional[datetime.date] = None, method: int = DEFAULT_METHOD) -> dict:
    """
    Fetch prayer times and Hijri date for a city on a given date.

    Returns a dict with:
        timings: {prayer name: "HH:MM"} for the six prayers
        hijri: {day, month_name, month_ar, year}  Hijri date components
        gregorian: {date_str, weekday}
    Raises FetchError when every endpoint fails or the API reports an error.
    """
    if date is None:
        date = datetime.date.today()
    date_str = date.strftime("%d-%m-%Y")
    params = {
        "city": city,
        "country": country,
        "method": method,
    }
    logger.info("Fetching prayer times for %s, %s on %s", city, country, date_str)
    body = _get_json(f"timingsByCity/{date_str}", params)
    if not isinstance(body, dict) or body.get("code") != 200:
        status = body.get("status") if isinstance(body, dict) else body
        raise FetchError(f"Aladhan API error: {status}")

    try:
        return _parse_body(body["data"], date_str)
    except (KeyError, TypeError, AttributeError) as exc:
        raise FetchError(f"Unexpected Aladhan response: {exc!r}") from exc


def _parse_body(data: dict, date_str: str) -> dict:
    raw_timings = data["timings"]

    # Keep only the six prayer times, dropping suffixes like " (WIB)"
    timings = {}
    for name in PRAYER_NAMES:
        raw = raw_timings.get(API_NAMES.get(name, name.value))
        if raw is None:
            raise FetchError(f"Aladhan response is missing {name.value}")
        timings[name.value] = raw.strip()[:5]

    hijri_data = data["date"]["hijri"]
    hijri = {
        "day": hijri_data["day"],
        "month_name": hijri_data["month"]["en"],
        "month_ar": hijri_data["month"]["ar"],
        "year": hijri_data["year"],
    }

    greg_data = data["date"]["gregorian"]
    gregorian = {
        "date_str": greg_data.get("date", date_str),
        "weekday": greg_data.get("weekday", {}).get("en", ""),
    }

    return {"timings": timings, "hijri": hijri, "gregorian": gregorian}
