"""Countdown icon rendering for the system tray."""

from enum import Enum

from PIL import Image, ImageDraw, ImageFont


class TrayColor(Enum):
    """Color states for the tray icon."""

    GREEN = (76, 175, 80)    # < 50% elapsed
    YELLOW = (255, 193, 7)   # 50-90% elapsed
    RED = (244, 67, 54)      # >= 90% elapsed
    GRAY = (158, 158, 158)   # Idle/paused


def get_tray_color(progress: float, is_running: bool) -> TrayColor:
    """Determine tray icon color based on how much of the run has elapsed."""
    if not is_running:
        return TrayColor.GRAY
    if progress < 0.5:
        return TrayColor.GREEN
    if progress < 0.9:
        return TrayColor.YELLOW
    return TrayColor.RED


def icon_label(remaining_seconds: int) -> str:
    """Whole minutes left, rounded up, or seconds during the last minute."""
    remaining = max(0, int(remaining_seconds))
    if remaining < 60:
        return f"{remaining}s" if remaining else "0"
    mins = -(-remaining // 60)
    return str(mins) if mins < 100 else "99+"


def create_timer_icon_image(
    remaining_seconds: int,
    progress: float,
    color: TrayColor,
    size: int = 64,
) -> Image.Image:
    """Create a tray icon with a progress ring around the time left."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    padding = 2
    box = [padding, padding, size - padding, size - padding]
    ring = max(2, size // 10)

    # Track, then the elapsed arc from 12 o'clock
    draw.ellipse(box, fill=(48, 48, 48))
    progress = min(1.0, max(0.0, progress))
    if progress > 0:
        draw.pieslice(box, start=-90, end=-90 + 360 * progress, fill=color.value)
    inner = [padding + ring, padding + ring, size - padding - ring, size - padding - ring]
    draw.ellipse(inner, fill=color.value if progress >= 1 else (32, 32, 32))

    text = icon_label(remaining_seconds)
    font_size = size // 2 if len(text) <= 2 else size // 3
    try:
        font = ImageFont.truetype("arial.ttf", font_size)
    except OSError:
        font = ImageFont.load_default()

    bbox = draw.textbbox((0, 0), text, font=font)
    text_width = bbox[2] - bbox[0]
    text_height = bbox[3] - bbox[1]
    x = (size - text_width) // 2
    y = (size - text_height) // 2 - bbox[1]

    draw.text((x, y), text, fill=(255, 255, 255), font=font)

    return img
