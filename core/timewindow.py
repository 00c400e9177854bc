"""
Time/window helpers for walk-in visits.

Check-out projection from a check-in time and a therapy duration, and the
per-row countdown shown while a visit is in progress.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable, Optional, Protocol

from core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

ALLOWED_DURATIONS = (30, 45, 60, 75, 90, 105, 120)
EXPIRED_LABEL = "Time's up!"
TICK_SECONDS = 1.0


def now_local() -> datetime:
    """Current local time. Wrapped so tests can swap the clock."""
    return datetime.now()


def today_iso() -> str:
    """Today's date as YYYY-MM-DD in local time."""
    return now_local().date().isoformat()


def parse_hhmm(value: str) -> time:
    """Parse 'HH:MM' (or 'HH:MM:SS') into a time, raising INVALID_INPUT otherwise."""
    if not isinstance(value, str):
        raise InvalidInputError(f"Time must be a string in HH:MM format, got {value!r}")

    parts = value.strip().split(":")
    # isdigit() also admits superscripts like '²', which int() rejects
    if len(parts) not in (2, 3) or not all(len(p) == 2 and p.isascii() and p.isdecimal() for p in parts):
        raise InvalidInputError(f"Invalid time '{value}', expected HH:MM")

    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        raise InvalidInputError(f"Invalid time '{value}', expected HH:MM")

    return time(hours, minutes, seconds)


def validate_duration(duration_minutes: int) -> int:
    if isinstance(duration_minutes, bool) or duration_minutes not in ALLOWED_DURATIONS:
        raise InvalidInputError(
            f"Unsupported therapy duration {duration_minutes!r}; "
            f"choose one of {', '.join(str(d) for d in ALLOWED_DURATIONS)}"
        )
    return duration_minutes


def compute_checkout(check_in_time: str, duration_minutes: int) -> str:
    """
    Project the check-out time for a visit.

    Same-day wall-clock arithmetic: a window running past midnight wraps to
    the early hours rather than rolling the date.
    """
    check_in = parse_hhmm(check_in_time)
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) or duration_minutes < 0:
        raise InvalidInputError(f"Duration must be a non-negative number of minutes, got {duration_minutes!r}")

    total = (check_in.hour * 60 + check_in.minute + duration_minutes) % (24 * 60)
    return f"{total // 60:02d}:{total % 60:02d}"


@dataclass(frozen=True)
class CountdownState:
    label: str
    expired: bool


def countdown(target_time: str, now: datetime) -> CountdownState:
    """Remaining time until target_time on now's calendar day."""
    target = parse_hhmm(target_time)
    target_at = now.replace(hour=target.hour, minute=target.minute, second=0, microsecond=0)

    diff = target_at - now
    if diff <= timedelta(0):
        return CountdownState(label=EXPIRED_LABEL, expired=True)

    seconds_left = int(diff.total_seconds())
    hours, remainder = divmod(seconds_left, 3600)
    minutes, seconds = divmod(remainder, 60)
    return CountdownState(label=f"{hours}h {minutes}m {seconds}s", expired=False)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class _PeriodicCall:
    """Re-arms loop.call_later until cancelled."""

    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._pending = loop.call_later(interval, self._run)

    def _run(self):
        if self._cancelled:
            return
        self._pending = self._loop.call_later(self._interval, self._run)
        self._callback()

    def cancel(self):
        self._cancelled = True
        self._pending.cancel()


class AsyncioScheduler:
    """Periodic callbacks on the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _PeriodicCall(loop, interval, callback)


class CountdownTimer:
    """
    One countdown per observed visit row.

    start() arms a single periodic job and emits the current state right
    away. Each tick pushes a fresh CountdownState to on_tick; the first
    expired state is emitted once and the job cancels itself for good.
    stop() cancels the job and may be called any number of times.
    """

    def __init__(
        self,
        target_time: str,
        on_tick: Callable[[CountdownState], None],
        now_provider: Optional[Callable[[], datetime]] = None,
        scheduler: Optional[Scheduler] = None,
        interval: float = TICK_SECONDS,
    ):
        parse_hhmm(target_time)
        self.target_time = target_time
        self._on_tick = on_tick
        self._now = now_provider or now_local
        self._scheduler = scheduler or AsyncioScheduler()
        self._interval = interval
        self._handle: Optional[TimerHandle] = None
        self.last_state: Optional[CountdownState] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def expired(self) -> bool:
        return self.last_state is not None and self.last_state.expired

    def start(self):
        if self._handle is not None or self.expired:
            return
        self._handle = self._scheduler.call_every(self._interval, self.tick)
        self.tick()

    def tick(self):
        # Late ticks from an already cancelled job are dropped.
        if self._handle is None:
            return

        state = countdown(self.target_time, self._now())
        self.last_state = state
        if state.expired:
            logger.debug(f"Countdown to {self.target_time} expired")
            self.stop()
        self._on_tick(state)

    def stop(self):
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
