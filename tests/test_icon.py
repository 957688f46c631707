"""Tests for tray icon rendering."""

from studyplanner.icon import TrayColor, create_timer_icon_image, get_tray_color, icon_label


class TestGetTrayColor:
    def test_gray_when_not_running(self) -> None:
        assert get_tray_color(progress=0.0, is_running=False) == TrayColor.GRAY
        assert get_tray_color(progress=0.95, is_running=False) == TrayColor.GRAY

    def test_green_in_first_half(self) -> None:
        assert get_tray_color(progress=0.0, is_running=True) == TrayColor.GREEN
        assert get_tray_color(progress=0.49, is_running=True) == TrayColor.GREEN

    def test_yellow_until_ninety_percent(self) -> None:
        assert get_tray_color(progress=0.5, is_running=True) == TrayColor.YELLOW
        assert get_tray_color(progress=0.89, is_running=True) == TrayColor.YELLOW

    def test_red_near_the_end(self) -> None:
        assert get_tray_color(progress=0.9, is_running=True) == TrayColor.RED
        assert get_tray_color(progress=1.0, is_running=True) == TrayColor.RED


class TestIconLabel:
    def test_minutes_round_up(self) -> None:
        assert icon_label(1500) == "25"
        assert icon_label(61) == "2"
        assert icon_label(60) == "1"

    def test_last_minute_in_seconds(self) -> None:
        assert icon_label(59) == "59s"
        assert icon_label(0) == "0"
        assert icon_label(-3) == "0"

    def test_large_values(self) -> None:
        assert icon_label(120 * 60) == "99+"


class TestCreateTimerIconImage:
    def test_creates_image_with_correct_size(self) -> None:
        img = create_timer_icon_image(1500, 0.0, TrayColor.GREEN, size=64)
        assert img.size == (64, 64)

    def test_creates_image_with_custom_size(self) -> None:
        img = create_timer_icon_image(1500, 0.3, TrayColor.GREEN, size=32)
        assert img.size == (32, 32)

    def test_handles_complete_progress(self) -> None:
        img = create_timer_icon_image(0, 1.0, TrayColor.RED)
        assert img is not None

    def test_clamps_out_of_range_progress(self) -> None:
        img = create_timer_icon_image(30, 1.7, TrayColor.RED)
        assert img is not None
