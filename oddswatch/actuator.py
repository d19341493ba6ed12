import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .errors import AllAttemptsExhausted, InteractionIntercepted, StaleReference
from .view import CLICK, ViewHandle, ViewProvider

# Failures that mean "the page moved under us, look again".
TRANSIENT = (StaleReference, InteractionIntercepted)


@dataclass
class AttemptState:
    max_attempts: int
    attempt: int = 0
    errors: List[BaseException] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts

    def begin(self) -> int:
        self.attempt += 1
        return self.attempt

    def fail(self, err: BaseException):
        self.errors.append(err)


@dataclass(frozen=True)
class ClickResult:
    attempts: int
    visible_pick: bool


class NothingToClick(StaleReference):
    """The lookup came back empty; counts as a transient miss."""


async def pick_target(view: ViewProvider, query: str, fallback_to_first: bool = True) -> Tuple[ViewHandle, bool]:
    """
    First visible match for `query`. When nothing reports visible, fall back to
    the first match and let the click decide.
    """
    handles = await view.locate(query)
    if not handles:
        raise NothingToClick(f"no element matches {query!r}")
    for h in handles:
        try:
            if await h.is_visible():
                return h, True
        except StaleReference:
            continue
    if not fallback_to_first:
        raise NothingToClick(f"no visible element matches {query!r}")
    return handles[0], False


async def settle(handle: ViewHandle, timeout: float, poll_interval: float = 0.1,
                 clock: Callable[[], float] = time.monotonic, sleep=asyncio.sleep) -> str:
    """
    Give the page a moment after a click: it either replaces the node ("stale")
    or keeps it ("visible"). Running out of time counts as settled too.
    """
    deadline = clock() + timeout
    while True:
        try:
            if await handle.is_visible():
                return "visible"
        except StaleReference:
            return "stale"
        if clock() >= deadline:
            return "timeout"
        await sleep(poll_interval)


async def click_first_available(
    view: ViewProvider,
    query: str,
    max_attempts: int = 3,
    per_attempt_timeout: float = 20.0,
    pause: float = 0.15,
    settle_timeout: Optional[float] = None,
    fallback_to_first: bool = True,
    log: Optional[Callable[[str], None]] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep=asyncio.sleep,
) -> ClickResult:
    """
    Click the first available element matching `query`, re-running the lookup
    on every attempt. Stale or intercepted clicks are retried up to
    `max_attempts` times, anything else propagates.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    if settle_timeout is None:
        settle_timeout = per_attempt_timeout

    state = AttemptState(max_attempts=max_attempts)
    while not state.exhausted:
        n = state.begin()
        try:
            target, visible = await pick_target(view, query, fallback_to_first)
            await target.wait_until_interactable(per_attempt_timeout)
            await target.interact(CLICK, pause=pause, timeout=per_attempt_timeout)
        except TRANSIENT as e:
            state.fail(e)
            if log:
                log(f"click {query!r}: attempt {n}/{max_attempts} failed: {e!r}")
            continue

        how = await settle(target, settle_timeout, clock=clock, sleep=sleep)
        if log:
            log(f"click {query!r}: done on attempt {n} (visible={visible}, settled={how})")
        return ClickResult(attempts=n, visible_pick=visible)

    raise AllAttemptsExhausted(query, state.attempt, state.errors)
