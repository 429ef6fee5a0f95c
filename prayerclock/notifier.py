"""Desktop notifications for approaching and arriving prayer times."""

import logging
from dataclasses import dataclass

try:
    from plyer import notification as plyer_notification
    _PLYER_AVAILABLE = True
except ImportError:
    _PLYER_AVAILABLE = False

from prayerclock.duration import MS_PER_MINUTE

logger = logging.getLogger(__name__)

APP_NAME = "Prayer Clock"
APP_ICON = ""  # Path to icon file; empty = default

ONE_MINUTE_MS = MS_PER_MINUTE
FIVE_MINUTES_MS = 5 * MS_PER_MINUTE

# Desktop notification timeout in seconds, per milestone
_TIMEOUTS = {"now": 30, "1min": 15, "5min": 15}


@dataclass(frozen=True)
class NotificationEvent:
    title: str
    body: str
    key: str = ""


def milestone_key(name: str, remaining_ms: int):
    """
    Return the milestone key for a remaining time, or None above five minutes.

    Checked in order, first match wins: at or past zero, within one minute,
    within five minutes.
    """
    if remaining_ms <= 0:
        return f"{name}-now"
    if remaining_ms <= ONE_MINUTE_MS:
        return f"{name}-1min"
    if remaining_ms <= FIVE_MINUTES_MS:
        return f"{name}-5min"
    return None


def _build_event(name: str, key: str) -> NotificationEvent:
    milestone = key.rsplit("-", 1)[1]
    if milestone == "now":
        title = f"🕌 {name}: Time to Pray!"
        body = f"It is now time for {name}. Allahu Akbar!"
    else:
        minutes = 1 if milestone == "1min" else 5
        unit = "minute" if minutes == 1 else "minutes"
        title = f"🕌 {name} in {minutes} {unit}"
        body = f"{name} starts in {minutes} {unit}. Prepare for prayer."
    return NotificationEvent(title, body, key)


def evaluate_notification(reference, remaining, last_fired_key):
    """
    Decide whether this tick should notify about reference.

    reference is a ResolvedReference and remaining its Duration. Returns
    (event, last_fired_key); event is None when nothing new was crossed.
    """
    name = reference.name.value
    key = milestone_key(name, remaining.total_milliseconds)
    if key is None or key == last_fired_key:
        return None, last_fired_key
    return _build_event(name, key), key


def send_notification(event: NotificationEvent) -> None:
    """Send a desktop notification via plyer (cross-platform)."""
    if not _PLYER_AVAILABLE:
        logger.debug("plyer not installed, skipping desktop notification %s", event.key)
        return
    milestone = event.key.rsplit("-", 1)[-1]
    kwargs = dict(
        app_name=APP_NAME,
        title=event.title,
        message=event.body,
        timeout=_TIMEOUTS.get(milestone, 10),
    )
    if APP_ICON:
        kwargs["app_icon"] = APP_ICON
    try:
        plyer_notification.notify(**kwargs)
    except Exception as exc:
        # plyer raises NotImplementedError or backend errors on unsupported platforms
        logger.warning("Desktop notification failed: %s", exc)
