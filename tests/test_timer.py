"""Tests for the countdown timer state machine."""

import pytest

from studyplanner.scheduler import ManualScheduler
from studyplanner.timer import (
    CountdownTimer,
    TimerPhase,
    find_preset,
    format_duration,
)


class LeakyScheduler(ManualScheduler):
    """Scheduler whose cancel() never stops the callbacks."""

    def cancel(self, handle: object) -> None:
        pass


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def timer(scheduler: ManualScheduler) -> CountdownTimer:
    return CountdownTimer(scheduler, total_seconds=1500)


def test_new_timer_is_idle_with_full_duration(timer: CountdownTimer) -> None:
    assert timer.phase == TimerPhase.IDLE
    assert timer.remaining_seconds == 1500
    assert timer.total_seconds == 1500
    assert not timer.running
    assert not timer.paused
    assert timer.progress_fraction == 0.0
    assert timer.formatted_time == "25:00"


def test_runs_to_expiry(scheduler: ManualScheduler, timer: CountdownTimer) -> None:
    timer.start()
    scheduler.advance(1500)

    assert timer.phase == TimerPhase.EXPIRED
    assert timer.remaining_seconds == 0
    assert timer.progress_fraction == 1.0
    assert not timer.running
    assert scheduler.active_count == 0


def test_pause_and_resume(scheduler: ManualScheduler, timer: CountdownTimer) -> None:
    timer.start()
    scheduler.advance(600)
    timer.pause()

    assert timer.remaining_seconds == 900
    assert timer.phase == TimerPhase.PAUSED
    assert scheduler.active_count == 0

    # Paused time does not count down
    scheduler.advance(120)
    assert timer.remaining_seconds == 900

    timer.start()
    scheduler.advance(900)
    assert timer.phase == TimerPhase.EXPIRED
    assert timer.remaining_seconds == 0


def test_double_start_keeps_one_tick_source(
    scheduler: ManualScheduler, timer: CountdownTimer
) -> None:
    timer.start()
    timer.start()

    assert scheduler.active_count == 1
    scheduler.advance(1)
    assert timer.remaining_seconds == 1499
    scheduler.advance(10)
    assert timer.remaining_seconds == 1489


def test_stale_ticks_are_ignored() -> None:
    scheduler = LeakyScheduler()
    timer = CountdownTimer(scheduler, total_seconds=100)

    timer.start()
    timer.pause()
    timer.start()
    # Both tick sources are still firing, only the current one counts
    assert scheduler.active_count == 2
    scheduler.advance(5)
    assert timer.remaining_seconds == 95

    timer.pause()
    scheduler.advance(5)
    assert timer.remaining_seconds == 95


def test_reset_restores_full_duration(
    scheduler: ManualScheduler, timer: CountdownTimer
) -> None:
    timer.start()
    scheduler.advance(300)
    timer.pause()
    timer.start()
    scheduler.advance(200)
    timer.reset()

    assert timer.remaining_seconds == timer.total_seconds
    assert timer.phase == TimerPhase.IDLE
    assert scheduler.active_count == 0

    scheduler.advance(50)
    assert timer.remaining_seconds == 1500


def test_reset_after_expiry(scheduler: ManualScheduler, timer: CountdownTimer) -> None:
    timer.start()
    scheduler.advance(2000)
    timer.reset()

    assert timer.phase == TimerPhase.IDLE
    assert timer.remaining_seconds == 1500


def test_start_after_expiry_is_noop(scheduler: ManualScheduler, timer: CountdownTimer) -> None:
    timer.start()
    scheduler.advance(1500)
    timer.start()

    assert timer.phase == TimerPhase.EXPIRED
    assert scheduler.active_count == 0


def test_remaining_stays_within_bounds(scheduler: ManualScheduler) -> None:
    timer = CountdownTimer(scheduler, total_seconds=30)
    steps = [
        timer.start, timer.start, timer.pause, timer.start, timer.reset,
        timer.pause, timer.start, timer.start, timer.pause, timer.pause,
        timer.start, timer.reset, timer.start,
    ]
    for step in steps:
        step()
        for _ in range(7):
            scheduler.advance(1)
            assert 0 <= timer.remaining_seconds <= timer.total_seconds
            assert scheduler.active_count <= 1


def test_callbacks(scheduler: ManualScheduler) -> None:
    ticks: list[int] = []
    expired: list[CountdownTimer] = []
    timer = CountdownTimer(
        scheduler,
        total_seconds=3,
        on_tick=lambda t: ticks.append(t.remaining_seconds),
        on_expire=expired.append,
    )

    timer.start()
    scheduler.advance(10)

    assert ticks == [2, 1, 0]
    assert expired == [timer]


def test_rejects_non_positive_initial_duration(scheduler: ManualScheduler) -> None:
    with pytest.raises(ValueError):
        CountdownTimer(scheduler, total_seconds=0)


class TestSetDuration:
    def test_sets_both_counters(self, timer: CountdownTimer) -> None:
        assert timer.set_duration(300) is True
        assert timer.total_seconds == 300
        assert timer.remaining_seconds == 300
        assert timer.formatted_time == "05:00"

    def test_rejected_while_running(
        self, scheduler: ManualScheduler, timer: CountdownTimer
    ) -> None:
        timer.start()
        scheduler.advance(10)

        assert timer.set_duration(300) is False
        assert timer.total_seconds == 1500
        assert timer.remaining_seconds == 1490
        assert timer.running

    def test_rejects_non_positive(self, timer: CountdownTimer) -> None:
        assert timer.set_duration(0) is False
        assert timer.set_duration(-60) is False
        assert timer.total_seconds == 1500
        assert timer.remaining_seconds == 1500

    def test_rejects_fraction_below_one_second(self, timer: CountdownTimer) -> None:
        assert timer.set_duration(0.5) is False
        assert timer.total_seconds == 1500
        assert timer.progress_fraction == 0.0

    def test_fractional_seconds_truncate(self, timer: CountdownTimer) -> None:
        assert timer.set_duration(90.9) is True
        assert timer.total_seconds == 90
        assert timer.remaining_seconds == 90

    def test_constructor_rejects_fraction_below_one_second(
        self, scheduler: ManualScheduler
    ) -> None:
        with pytest.raises(ValueError):
            CountdownTimer(scheduler, total_seconds=0.5)

    def test_allowed_while_paused(
        self, scheduler: ManualScheduler, timer: CountdownTimer
    ) -> None:
        timer.start()
        scheduler.advance(10)
        timer.pause()

        assert timer.set_duration(600) is True
        assert timer.phase == TimerPhase.IDLE
        assert timer.remaining_seconds == 600


class TestFormatDuration:
    def test_minutes_and_seconds(self) -> None:
        assert format_duration(0) == "00:00"
        assert format_duration(59) == "00:59"
        assert format_duration(61) == "01:01"
        assert format_duration(1500) == "25:00"

    def test_one_hour_stays_in_minutes(self) -> None:
        assert format_duration(3600) == "60:00"

    def test_above_one_hour(self) -> None:
        assert format_duration(3601) == "01:00:01"
        assert format_duration(2 * 3600 + 5 * 60 + 9) == "02:05:09"

    def test_negative_clamps_to_zero(self) -> None:
        assert format_duration(-5) == "00:00"


class TestFindPreset:
    def test_by_label(self) -> None:
        preset = find_preset("Pomodoro")
        assert preset is not None
        assert preset.seconds == 1500

    def test_ignores_case_and_separators(self) -> None:
        preset = find_preset("focus-block")
        assert preset is not None
        assert preset.minutes == 45
        assert find_preset("STUDY HOUR") is not None

    def test_unknown(self) -> None:
        assert find_preset("marathon") is None
