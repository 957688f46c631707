"""Foreground loop for a single timed study session."""

import logging
import threading

from .models import StudySession
from .session import SessionController
from .timer import TimerPhase

logger = logging.getLogger(__name__)


def run_timer_loop(
    controller: SessionController,
    enable_tray: bool = True,
    poll_seconds: float = 0.5,
) -> StudySession | None:
    """Run the countdown until it expires or the user stops it.

    Returns the recorded session, or None if the run was discarded or too
    short to record.
    """
    timer = controller.timer
    stop_requested = threading.Event()
    discard = False

    def request_reset() -> None:
        """Callback for reset from tray: end the run without saving."""
        nonlocal discard
        discard = True
        stop_requested.set()

    tray = None
    if enable_tray:
        from .tray import TrayManager

        tray = TrayManager(
            on_toggle=controller.toggle,
            on_stop=stop_requested.set,
            on_reset=request_reset,
        )
        tray.start()

    controller.start()
    logger.info(
        "Studying %s for %s (Ctrl+C to stop and save)",
        controller.subject,
        timer.formatted_time,
    )

    last_logged_minute = timer.remaining_seconds // 60
    try:
        while not stop_requested.is_set():
            if tray:
                tray.update(timer, controller.subject, controller.today_minutes())

            if timer.phase == TimerPhase.EXPIRED:
                logger.info("Countdown finished")
                break

            minute = timer.remaining_seconds // 60
            if minute != last_logged_minute and timer.running:
                last_logged_minute = minute
                logger.info("%s left", timer.formatted_time)

            stop_requested.wait(poll_seconds)
    except KeyboardInterrupt:
        logger.info("Timer interrupted")
    finally:
        if tray:
            tray.stop()

    if discard:
        controller.reset()
        logger.info("Run discarded")
        return None
    return controller.stop()
