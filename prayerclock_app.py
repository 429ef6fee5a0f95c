#!/usr/bin/env python3
"""
Prayer Clock Desktop Widget
Islamic pixel-art themed always-on-top window showing:
  - Gregorian and Hijri date with a live clock
  - The day's six prayer times
  - Countdown to the next prayer, or time since the previous one for the
    first 35 minutes after it (toggle to pin either view)
  - Desktop notifications 5 minutes and 1 minute before each prayer and
    when it arrives
"""

import datetime
import logging
import os
import sys
import threading
import tkinter as tk
from tkinter import messagebox

from prayerclock.clock import ClockDriver
from prayerclock.config import load_settings, save_settings
from prayerclock.display_mode import DisplayMode
from prayerclock.engine import PrayerClock
from prayerclock.errors import PrayerClockError
from prayerclock.notifier import send_notification
from prayerclock.prayer_api import PRAYER_DISPLAY, fetch_prayer_times
from prayerclock.schedule import PRAYER_NAMES

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────────────
# Theme constants: pixel-art Islamic palette
# ──────────────────────────────────────────────────────────────────────────────
BG_DARK = "#0d1117"
BG_CARD = "#161b22"
BG_HIGHLIGHT = "#1a3a2a"
BG_BANNER = "#2d1b00"
BORDER_COLOR = "#2ea043"
ACCENT_GOLD = "#f0c040"
ACCENT_GREEN = "#3fb950"
TEXT_WHITE = "#e6edf3"
TEXT_DIM = "#8b949e"
TEXT_RED = "#ff6b6b"

FONT_PIXEL = ("Courier", 10, "bold")
FONT_PIXEL_SM = ("Courier", 8)
FONT_PIXEL_LG = ("Courier", 14, "bold")
FONT_TITLE = ("Courier", 12, "bold")
FONT_CLOCK = ("Courier", 22, "bold")

WINDOW_W = 420
WINDOW_H = 560

BANNER_MS = 15000
DIVIDER = "◇ ─────────────────────────── ◇"


def setup_logging() -> None:
    """Log to stdout; level comes from PRAYERCLOCK_LOG_LEVEL (default INFO)."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    root_logger.addHandler(handler)
    level = os.environ.get("PRAYERCLOCK_LOG_LEVEL", "INFO").upper()
    root_logger.setLevel(getattr(logging, level, logging.INFO))


# ──────────────────────────────────────────────────────────────────────────────
# Main App
# ──────────────────────────────────────────────────────────────────────────────
class PrayerClockApp:
    def __init__(self, root: tk.Tk):
        self.root = root
        self.settings = load_settings()
        self.hijri = {}
        self._loading = False
        self._rollover_date = None

        self.clock = PrayerClock(on_view=self._render, on_notify=self._on_notification)
        self.driver = ClockDriver(root, self.clock.tick)

        self._setup_window()
        self._build_ui()
        self._reload_data()
        self.driver.start()

    # ──────────────────────────────────────────────────────────────────────
    # Window setup
    # ──────────────────────────────────────────────────────────────────────
    def _setup_window(self):
        root = self.root
        root.title("Prayer Clock")
        root.configure(bg=BG_DARK)
        root.resizable(False, False)
        root.attributes("-topmost", True)
        x = root.winfo_screenwidth() - WINDOW_W - 40
        y = (root.winfo_screenheight() - WINDOW_H) // 2
        root.geometry(f"{WINDOW_W}x{WINDOW_H}+{x}+{y}")
        root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _on_close(self):
        self.driver.stop()
        self.root.destroy()

    # ──────────────────────────────────────────────────────────────────────
    # UI construction
    # ──────────────────────────────────────────────────────────────────────
    def _build_ui(self):
        outer = tk.Frame(self.root, bg=BORDER_COLOR, bd=0)
        outer.pack(fill=tk.BOTH, expand=True, padx=2, pady=2)
        inner = tk.Frame(outer, bg=BG_DARK, bd=0)
        inner.pack(fill=tk.BOTH, expand=True, padx=1, pady=1)

        # ── header: location + refresh/settings ──────────────────────────
        header = tk.Frame(inner, bg=BG_CARD, height=32)
        header.pack(fill=tk.X)
        header.pack_propagate(False)

        self.lbl_location = tk.Label(header, text="", font=FONT_PIXEL, fg=ACCENT_GOLD, bg=BG_CARD)
        self.lbl_location.pack(side=tk.LEFT, padx=6)

        for text, command in ((" ⚙ ", self._show_settings_dialog), (" ⟳ ", self._reload_data)):
            tk.Button(
                header, text=text, font=FONT_PIXEL_SM, fg=ACCENT_GREEN, bg=BG_CARD,
                activeforeground=TEXT_WHITE, activebackground=BG_HIGHLIGHT,
                bd=0, cursor="hand2", command=command,
            ).pack(side=tk.RIGHT, padx=2, pady=4)

        # ── dates and live clock ─────────────────────────────────────────
        self.lbl_date = tk.Label(inner, text="", font=FONT_PIXEL, fg=TEXT_WHITE, bg=BG_DARK)
        self.lbl_date.pack(pady=(8, 0))
        self.lbl_hijri = tk.Label(inner, text="", font=FONT_PIXEL, fg=ACCENT_GOLD, bg=BG_DARK)
        self.lbl_hijri.pack()
        self.lbl_clock = tk.Label(inner, text="00:00:00", font=FONT_CLOCK, fg=ACCENT_GOLD, bg=BG_DARK, pady=4)
        self.lbl_clock.pack()

        tk.Label(inner, text=DIVIDER, font=("Courier", 9), fg=BORDER_COLOR, bg=BG_DARK).pack(pady=2)

        # ── prayer rows ──────────────────────────────────────────────────
        prayer_frame = tk.Frame(inner, bg=BG_DARK)
        prayer_frame.pack(fill=tk.X, padx=10, pady=4)
        self.prayer_rows = {}
        for name in PRAYER_NAMES:
            row = tk.Frame(prayer_frame, bg=BG_CARD, pady=2)
            row.pack(fill=tk.X, pady=1)
            lbl_name = tk.Label(
                row, text=f"  {PRAYER_DISPLAY[name]}", font=FONT_PIXEL,
                fg=TEXT_WHITE, bg=BG_CARD, anchor="w", width=24,
            )
            lbl_name.pack(side=tk.LEFT, padx=4)
            lbl_time = tk.Label(
                row, text="--:--", font=FONT_PIXEL_LG,
                fg=TEXT_WHITE, bg=BG_CARD, anchor="e", width=8,
            )
            lbl_time.pack(side=tk.RIGHT, padx=4)
            self.prayer_rows[name] = (row, lbl_name, lbl_time)

        tk.Label(inner, text=DIVIDER, font=("Courier", 9), fg=BORDER_COLOR, bg=BG_DARK).pack(pady=2)

        # ── shown reference + countdown / elapsed ────────────────────────
        self.lbl_caption = tk.Label(inner, text="NEXT PRAYER", font=FONT_PIXEL, fg=TEXT_DIM, bg=BG_DARK)
        self.lbl_caption.pack()
        self.lbl_ref_name = tk.Label(inner, text="—", font=FONT_PIXEL_LG, fg=ACCENT_GREEN, bg=BG_DARK)
        self.lbl_ref_name.pack()
        self.lbl_countdown = tk.Label(inner, text="--:--:--", font=FONT_CLOCK, fg=ACCENT_GOLD, bg=BG_DARK)
        self.lbl_countdown.pack()

        self.btn_toggle = tk.Button(
            inner, text="⇄ next / previous", font=FONT_PIXEL_SM, fg=BG_DARK, bg=ACCENT_GOLD,
            activebackground="#c0a030", bd=0, cursor="hand2", command=self._on_toggle,
        )
        self.btn_toggle.pack(pady=6)

        # ── notification banner (packed only while showing) ──────────────
        self.notif_frame = tk.Frame(inner, bg=BG_BANNER, bd=1, relief=tk.RIDGE)
        self.lbl_notif_title = tk.Label(self.notif_frame, text="", font=FONT_PIXEL, fg=ACCENT_GOLD, bg=BG_BANNER)
        self.lbl_notif_title.pack(pady=2)
        self.lbl_notif_msg = tk.Label(
            self.notif_frame, text="", font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_BANNER, wraplength=380,
        )
        self.lbl_notif_msg.pack(pady=(0, 4))
        self._banner_after = None

        self._update_location_label()

    def _update_location_label(self, text=None, fg=ACCENT_GOLD):
        if text is None:
            text = f"📍 {self.settings['city']}, {self.settings['country']}"
        self.lbl_location.config(text=text, fg=fg)

    # ──────────────────────────────────────────────────────────────────────
    # Data loading (fetch runs in a background thread)
    # ──────────────────────────────────────────────────────────────────────
    def _reload_data(self) -> bool:
        if self._loading:
            return False
        self._loading = True
        self._update_location_label("📍 Loading prayer times…", TEXT_DIM)
        self.clock.begin_fetch()
        settings = dict(self.settings)
        today = datetime.date.today()
        t = threading.Thread(target=self._load_data, args=(settings, today), daemon=True)
        t.start()
        return True

    def _load_data(self, settings, today):
        try:
            result = fetch_prayer_times(settings["city"], settings["country"], today, settings["method"])
        except PrayerClockError as exc:
            logger.error("Could not load prayer times: %s", exc)
            self.root.after(0, self._on_data_error, str(exc))
            return
        self.root.after(0, self._on_data_loaded, result, today)

    def _on_data_loaded(self, result, today):
        """Called in main thread once data is ready."""
        self._loading = False
        try:
            schedule = self.clock.apply_schedule(result["timings"], today)
        except PrayerClockError as exc:
            logger.error("Rejected prayer times %s: %s", result["timings"], exc)
            self._on_data_error(str(exc))
            return
        self.hijri = result["hijri"]
        self._update_location_label()
        for name, (_, _, lbl_time) in self.prayer_rows.items():
            lbl_time.config(text=schedule.time_of(name))

    def _on_data_error(self, message):
        self._loading = False
        self.clock.fetch_failed()
        self._update_location_label(f"⚠ {message[:50]}  (⟳ to retry)", TEXT_RED)

    # ──────────────────────────────────────────────────────────────────────
    # Tick rendering
    # ──────────────────────────────────────────────────────────────────────
    def _render(self, view):
        now = view.now
        self.lbl_clock.config(text=now.strftime("%H:%M:%S"))
        self.lbl_date.config(text=f"📅 {now.strftime('%A, %d %B %Y')}")
        if self.hijri:
            hijri = self.hijri
            self.lbl_hijri.config(text=f"☪  {hijri['day']} {hijri['month_name']} {hijri['year']} H")
        else:
            self.lbl_hijri.config(text="☪  Loading Hijri date…")

        # fetch the new day's schedule once the local date moves past it
        schedule = self.clock.schedules.last_valid
        if schedule is not None and schedule.date != now.date() and self._rollover_date != now.date():
            if self._reload_data():
                self._rollover_date = now.date()

        shown = view.shown_reference
        for name, (row, lbl_name, lbl_time) in self.prayer_rows.items():
            active = shown is not None and shown.name == name
            bg = BG_HIGHLIGHT if active else BG_CARD
            fg = ACCENT_GREEN if active else TEXT_WHITE
            row.config(bg=bg)
            lbl_name.config(bg=bg, fg=fg)
            lbl_time.config(bg=bg, fg=fg)

        if not view.available:
            self.lbl_caption.config(text="NEXT PRAYER")
            self.lbl_ref_name.config(text="—")
            self.lbl_countdown.config(text="--:--:--", fg=ACCENT_GOLD)
            return

        duration = view.shown_duration
        pin = "  📌" if view.pinned else ""
        if view.mode == DisplayMode.NEXT:
            self.lbl_caption.config(text=f"NEXT PRAYER{pin}")
            color = TEXT_RED if duration and duration.total_milliseconds < 300_000 else ACCENT_GOLD
        else:
            self.lbl_caption.config(text=f"SINCE{pin}")
            color = ACCENT_GREEN
        self.lbl_ref_name.config(text=PRAYER_DISPLAY[shown.name])
        self.lbl_countdown.config(
            text=duration.format_clock() if duration else "--:--:--",
            fg=color,
        )

    def _on_toggle(self):
        self.clock.toggle_mode()
        if self.clock.view is not None:
            self._render(self.clock.view)

    # ──────────────────────────────────────────────────────────────────────
    # Notifications
    # ──────────────────────────────────────────────────────────────────────
    def _on_notification(self, event):
        self._show_notif_banner(event.title, event.body)
        self.root.bell()
        if self.settings.get("notifications", True):
            send_notification(event)

    def _show_notif_banner(self, title: str, message: str):
        self.lbl_notif_title.config(text=title)
        self.lbl_notif_msg.config(text=message)
        self.notif_frame.pack(fill=tk.X, padx=14, pady=4)
        if self._banner_after is not None:
            self.root.after_cancel(self._banner_after)
        self._banner_after = self.root.after(BANNER_MS, self._hide_notif_banner)

    def _hide_notif_banner(self):
        self._banner_after = None
        self.notif_frame.pack_forget()

    # ──────────────────────────────────────────────────────────────────────
    # Settings dialog
    # ──────────────────────────────────────────────────────────────────────
    def _show_settings_dialog(self):
        dlg = tk.Toplevel(self.root)
        dlg.title("Settings")
        dlg.configure(bg=BG_DARK)
        dlg.resizable(False, False)
        dlg.attributes("-topmost", True)
        dlg.transient(self.root)
        dlg.grab_set()

        tk.Label(dlg, text="📍 Prayer Times Location", font=FONT_TITLE, fg=ACCENT_GOLD, bg=BG_DARK).pack(pady=(10, 6))

        fields_frame = tk.Frame(dlg, bg=BG_DARK)
        fields_frame.pack(fill=tk.X, padx=20, pady=4)
        entries = {}
        for i, (label, key) in enumerate((("City:", "city"), ("Country:", "country"), ("Method:", "method"))):
            tk.Label(
                fields_frame, text=label, font=FONT_PIXEL_SM,
                fg=TEXT_WHITE, bg=BG_DARK, anchor="w", width=10,
            ).grid(row=i, column=0, sticky="w", pady=2)
            ent = tk.Entry(
                fields_frame, font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_CARD,
                insertbackground=TEXT_WHITE, width=28, relief=tk.FLAT,
            )
            ent.grid(row=i, column=1, sticky="ew", pady=2, padx=(4, 0))
            ent.insert(0, str(self.settings[key]))
            entries[key] = ent

        notify_var = tk.BooleanVar(value=self.settings["notifications"])
        tk.Checkbutton(
            fields_frame, text="Desktop notifications", variable=notify_var, font=FONT_PIXEL_SM,
            fg=TEXT_WHITE, bg=BG_DARK, selectcolor=BG_CARD, activebackground=BG_DARK,
        ).grid(row=3, column=0, columnspan=2, sticky="w", pady=4)
        fields_frame.columnconfigure(1, weight=1)

        def _apply():
            try:
                method = int(entries["method"].get().strip())
            except ValueError:
                messagebox.showerror("Invalid input", "Method must be a number.", parent=dlg)
                return
            city = entries["city"].get().strip()
            country = entries["country"].get().strip()
            if not city or not country:
                messagebox.showerror("Invalid input", "City and country are required.", parent=dlg)
                return
            self.settings.update(city=city, country=country, method=method, notifications=notify_var.get())
            save_settings(self.settings)
            dlg.destroy()
            self._reload_data()

        btn_frame = tk.Frame(dlg, bg=BG_DARK)
        btn_frame.pack(pady=10)
        tk.Button(
            btn_frame, text="  Save  ", font=FONT_PIXEL_SM, fg=BG_DARK, bg=ACCENT_GREEN,
            activebackground=BORDER_COLOR, bd=0, cursor="hand2", command=_apply,
        ).pack(side=tk.LEFT, padx=6)
        tk.Button(
            btn_frame, text="  Cancel  ", font=FONT_PIXEL_SM, fg=TEXT_WHITE, bg=BG_CARD,
            activebackground=BG_HIGHLIGHT, bd=0, cursor="hand2", command=dlg.destroy,
        ).pack(side=tk.LEFT, padx=6)


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────
def main():
    setup_logging()
    root = tk.Tk()
    PrayerClockApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
