import asyncio
from datetime import datetime, timedelta

import pytest

from core.exceptions import InvalidInputError
from core.timewindow import (
    ALLOWED_DURATIONS,
    AsyncioScheduler,
    EXPIRED_LABEL,
    CountdownState,
    CountdownTimer,
    compute_checkout,
    countdown,
    parse_hhmm,
    validate_duration,
)
from factories import FakeClock


class ManualJob:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Fires periodic jobs only when the test says so."""

    def __init__(self):
        self.jobs = []

    def call_every(self, interval, callback):
        job = ManualJob(callback)
        self.jobs.append(job)
        return job

    @property
    def active(self):
        return [job for job in self.jobs if not job.cancelled]

    def fire(self):
        for job in self.active:
            job.callback()


@pytest.mark.parametrize(
    "check_in, duration, expected",
    [
        ("10:00", 60, "11:00"),
        ("09:45", 30, "10:15"),
        ("13:20", 105, "15:05"),
        ("00:00", 120, "02:00"),
        ("08:05", 45, "08:50"),
    ],
)
def test_compute_checkout(check_in, duration, expected):
    assert compute_checkout(check_in, duration) == expected


@pytest.mark.parametrize("duration", ALLOWED_DURATIONS)
def test_checkout_is_later_the_same_day(duration):
    for check_in in ("00:00", "09:30", "12:59", "21:59"):
        assert compute_checkout(check_in, duration) > check_in


def test_checkout_wraps_past_midnight():
    assert compute_checkout("23:30", 60) == "00:30"


def test_checkout_accepts_seconds_and_truncates():
    assert compute_checkout("10:00:59", 30) == "10:30"


@pytest.mark.parametrize(
    "bad",
    ["", "9:00", "10-00", "24:00", "12:60", "ab:cd", "10:00:00:00", None, "²3:00", "1²:00", "10:0¹", "１０:００"],
)
def test_malformed_times_are_invalid_input(bad):
    with pytest.raises(InvalidInputError) as exc:
        compute_checkout(bad, 60)
    assert exc.value.code == "INVALID_INPUT"


def test_negative_duration_is_invalid_input():
    with pytest.raises(InvalidInputError):
        compute_checkout("10:00", -5)


def test_validate_duration():
    assert validate_duration(75) == 75
    with pytest.raises(InvalidInputError):
        validate_duration(50)
    with pytest.raises(InvalidInputError):
        validate_duration(True)


def test_parse_hhmm():
    parsed = parse_hhmm("07:05")
    assert (parsed.hour, parsed.minute, parsed.second) == (7, 5, 0)


def test_countdown_label():
    state = countdown("11:30", datetime(2024, 1, 1, 10, 0, 0))
    assert state.label == "1h 30m 0s"
    assert not state.expired


def test_countdown_partial_seconds_round_down():
    state = countdown("10:01", datetime(2024, 1, 1, 10, 0, 0, 500000))
    assert state.label == "0h 0m 59s"


def test_countdown_expired_exactly_at_target():
    state = countdown("10:00", datetime(2024, 1, 1, 10, 0, 0))
    assert state.expired
    assert state.label == EXPIRED_LABEL


def test_timer_expired_target_stops_after_one_tick():
    scheduler = ManualScheduler()
    seen = []
    timer = CountdownTimer(
        "10:00",
        seen.append,
        now_provider=FakeClock(datetime(2024, 1, 1, 10, 0, 1)),
        scheduler=scheduler,
    )

    timer.start()
    scheduler.fire()
    scheduler.fire()

    assert [s.label for s in seen] == [EXPIRED_LABEL]
    assert not timer.running
    assert scheduler.active == []


def test_timer_counts_down_then_latches():
    clock = FakeClock(datetime(2024, 1, 1, 9, 59, 58))
    scheduler = ManualScheduler()
    seen = []
    timer = CountdownTimer("10:00", seen.append, now_provider=clock, scheduler=scheduler)

    timer.start()
    for _ in range(4):
        clock.now += timedelta(seconds=1)
        scheduler.fire()

    assert [s.label for s in seen] == ["0h 0m 2s", "0h 0m 1s", EXPIRED_LABEL]
    assert timer.expired

    timer.start()
    assert scheduler.active == []
    assert len(seen) == 3


def test_timer_restart_keeps_a_single_job():
    scheduler = ManualScheduler()
    timer = CountdownTimer(
        "18:00",
        lambda state: None,
        now_provider=FakeClock(datetime(2024, 1, 1, 10, 0, 0)),
        scheduler=scheduler,
    )

    timer.start()
    timer.start()
    assert len(scheduler.active) == 1

    for _ in range(3):
        timer.stop()
        timer.stop()
        timer.start()
    assert len(scheduler.active) == 1

    timer.stop()
    assert scheduler.active == []
    assert not timer.running


def test_stale_tick_after_stop_is_ignored():
    scheduler = ManualScheduler()
    seen = []
    timer = CountdownTimer(
        "18:00",
        seen.append,
        now_provider=FakeClock(datetime(2024, 1, 1, 10, 0, 0)),
        scheduler=scheduler,
    )
    timer.start()
    job = scheduler.jobs[0]
    timer.stop()

    job.callback()
    assert len(seen) == 1


def test_independent_timers_do_not_share_state():
    scheduler = ManualScheduler()
    clock = FakeClock(datetime(2024, 1, 1, 10, 0, 0))
    first, second = [], []
    a = CountdownTimer("10:00", first.append, now_provider=clock, scheduler=scheduler)
    b = CountdownTimer("11:00", second.append, now_provider=clock, scheduler=scheduler)

    a.start()
    b.start()
    scheduler.fire()

    assert [s.expired for s in first] == [True]
    assert [s.label for s in second] == ["1h 0m 0s", "1h 0m 0s"]
    assert b.running and not a.running


def test_timer_rejects_malformed_target():
    with pytest.raises(InvalidInputError):
        CountdownTimer("noon", lambda state: None, scheduler=ManualScheduler())


def test_asyncio_timer_goes_quiet_after_stop():
    clock = FakeClock(datetime(2024, 1, 1, 9, 0, 0))
    states = []

    async def run():
        timer = CountdownTimer("10:00", states.append, now_provider=clock,
                               scheduler=AsyncioScheduler(), interval=0.01)
        timer.start()
        await asyncio.sleep(0.1)
        timer.stop()
        ticked = len(states)
        await asyncio.sleep(0.1)
        return timer, ticked

    timer, ticked = asyncio.run(run())

    assert ticked >= 2
    assert len(states) == ticked
    assert not timer.running
    assert states[0] == CountdownState("1h 0m 0s", False)
