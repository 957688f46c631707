"""System tray icon showing the running countdown."""

import logging
import threading
from dataclasses import dataclass
from typing import Callable

from PIL import Image
from pystray import Icon, Menu, MenuItem

from .icon import create_timer_icon_image, get_tray_color
from .timer import CountdownTimer, TimerPhase, format_duration

logger = logging.getLogger(__name__)


@dataclass
class TrayState:
    """State displayed in the tray icon."""

    subject: str = ""
    remaining_seconds: int = 0
    progress: float = 0.0
    phase: TimerPhase = TimerPhase.IDLE
    today_minutes: int = 0


class TrayManager:
    """Manages the system tray icon."""

    def __init__(
        self,
        on_toggle: Callable[[], None] | None = None,
        on_stop: Callable[[], None] | None = None,
        on_reset: Callable[[], None] | None = None,
    ):
        self._state = TrayState()
        self._icon: Icon | None = None
        self._on_toggle = on_toggle
        self._on_stop = on_stop
        self._on_reset = on_reset
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start the tray icon in a background thread."""
        self._icon = Icon(
            name="Study Planner",
            icon=self._create_icon(),
            title=self._get_tooltip(),
            menu=self._create_menu(),
        )
        thread = threading.Thread(target=self._icon.run, daemon=True)
        thread.start()
        logger.info("Tray icon started")

    def stop(self) -> None:
        if self._icon:
            self._icon.stop()
            self._icon = None
            logger.info("Tray icon stopped")

    def update(self, timer: CountdownTimer, subject: str, today_minutes: int) -> None:
        """Update the tray icon from the timer's current state."""
        with self._lock:
            self._state = TrayState(
                subject=subject,
                remaining_seconds=timer.remaining_seconds,
                progress=timer.progress_fraction,
                phase=timer.phase,
                today_minutes=today_minutes,
            )

        if self._icon:
            self._icon.icon = self._create_icon()
            self._icon.title = self._get_tooltip()
            self._icon.menu = self._create_menu()

    def _create_icon(self) -> Image.Image:
        with self._lock:
            color = get_tray_color(
                self._state.progress,
                self._state.phase == TimerPhase.RUNNING,
            )
            return create_timer_icon_image(
                self._state.remaining_seconds, self._state.progress, color
            )

    def _get_tooltip(self) -> str:
        with self._lock:
            left = format_duration(self._state.remaining_seconds)
            if self._state.phase == TimerPhase.PAUSED:
                return f"{self._state.subject}: {left} left (paused)"
            if self._state.phase == TimerPhase.EXPIRED:
                return f"{self._state.subject}: time's up"
            return f"{self._state.subject}: {left} left"

    def _create_menu(self) -> Menu:
        with self._lock:
            state = self._state

        time_text = f"{format_duration(state.remaining_seconds)} left ({state.phase})"
        today_text = f"Today: {state.today_minutes} min studied"
        toggle_text = "Pause" if state.phase == TimerPhase.RUNNING else "Resume"

        return Menu(
            MenuItem(state.subject or "No subject", None, enabled=False),
            MenuItem(time_text, None, enabled=False),
            MenuItem(today_text, None, enabled=False),
            Menu.SEPARATOR,
            MenuItem(
                toggle_text,
                lambda: self._call(self._on_toggle),
                enabled=state.phase != TimerPhase.EXPIRED,
            ),
            MenuItem("Stop and Save", lambda: self._call(self._on_stop)),
            MenuItem("Reset", lambda: self._call(self._on_reset)),
        )

    def _call(self, callback: Callable[[], None] | None) -> None:
        if callback:
            callback()
