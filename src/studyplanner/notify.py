"""Toast notification when a countdown finishes."""

import logging
import sys

from .models import Subject

logger = logging.getLogger(__name__)


def finish_title(subject: Subject) -> str:
    """Get notification title for a finished countdown."""
    return f"⏰ {subject} session complete"


def finish_message(minutes: int) -> str:
    """Get notification message for a finished countdown."""
    if minutes <= 0:
        return "Time's up! Stop the timer to save your session."
    if minutes == 1:
        return "You studied for 1 minute. Stop the timer to save your session."
    return f"You studied for {minutes} minutes. Stop the timer to save your session."


def show_timer_finished(subject: Subject, minutes: int) -> bool:
    """Show a toast notification for a finished countdown.

    Returns True if notification was shown successfully.
    """
    if sys.platform != "win32":
        logger.info("%s: %s", finish_title(subject), finish_message(minutes))
        return False

    from winotify import Notification, audio

    try:
        toast = Notification(
            app_id="Study Planner",
            title=finish_title(subject),
            msg=finish_message(minutes),
            duration="short",
        )
        toast.set_audio(audio.Default, loop=False)
        toast.show()
        logger.info("Showed finish notification for %s", subject)
        return True
    except Exception:
        logger.exception("Failed to show notification")
        return False
