"""
Change detection by light polling.

The page gives us no way to subscribe to odds updates, so we sample: take a
baseline, then keep sampling until the text differs or the window closes.
"""
import asyncio
import enum
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .errors import StaleReference
from .extract import Signal

ReadFn = Callable[[], Awaitable[Optional[Signal]]]


class OutcomeState(str, enum.Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Outcome:
    state: OutcomeState
    baseline: Optional[Signal] = None
    current: Optional[Signal] = None
    polls: int = 0
    elapsed: float = 0.0

    @property
    def changed(self) -> bool:
        return self.state is OutcomeState.CHANGED


@dataclass
class Poller:
    """Poll counter and start time for one observation."""
    read: ReadFn
    poll_interval: float
    clock: Callable[[], float]
    sleep: Callable[[float], Awaitable[None]]
    polls: int = 0
    started: float = 0.0

    async def sample(self) -> Optional[Signal]:
        self.polls += 1
        try:
            return await self.read()
        except StaleReference:
            return None

    def elapsed(self) -> float:
        return self.clock() - self.started


async def _acquire(p: Poller, timeout: float) -> Optional[Signal]:
    deadline = p.clock() + timeout
    while True:
        sig = await p.sample()
        if sig is not None:
            return sig
        if p.clock() >= deadline:
            return None
        await p.sleep(min(p.poll_interval, max(0.0, deadline - p.clock())))


async def acquire_signal(
    read: ReadFn,
    timeout: float,
    poll_interval: float = 0.5,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Optional[Signal]:
    """Poll `read` until it yields a Signal or `timeout` runs out."""
    p = Poller(read, poll_interval, clock, sleep)
    p.started = clock()
    return await _acquire(p, timeout)


async def observe_change(
    read: ReadFn,
    baseline_timeout: float = 12.0,
    change_window: float = 60.0,
    poll_interval: float = 0.5,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Outcome:
    """
    Watch `read` for a change.

    Values are compared as text: "2.10" vs "2.1" counts as a change because
    that is what the user sees. If the window closes without a change, one
    last read is taken right away so a tick that landed between the final
    poll and the deadline is not missed.
    """
    p = Poller(read, poll_interval, clock, sleep)
    p.started = clock()

    baseline = await _acquire(p, baseline_timeout)
    if baseline is None:
        return Outcome(OutcomeState.UNAVAILABLE, polls=p.polls, elapsed=p.elapsed())

    deadline = clock() + change_window
    while clock() < deadline:
        await sleep(min(poll_interval, max(0.0, deadline - clock())))
        current = await p.sample()
        if current is not None and current.text != baseline.text:
            return Outcome(OutcomeState.CHANGED, baseline, current, p.polls, p.elapsed())

    current = await p.sample()
    if current is not None and current.text != baseline.text:
        return Outcome(OutcomeState.CHANGED, baseline, current, p.polls, p.elapsed())
    return Outcome(OutcomeState.UNCHANGED, baseline, current, p.polls, p.elapsed())


async def wait_until(
    pred: Callable[[], Awaitable[bool]],
    timeout: float,
    poll_interval: float = 0.5,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> bool:
    """Poll `pred` until it holds or `timeout` runs out."""
    async def read():
        return True if await pred() else None

    p = Poller(read, poll_interval, clock, sleep)
    p.started = clock()
    return await _acquire(p, timeout) is not None
