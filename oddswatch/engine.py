import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from .actuator import ClickResult, click_first_available
from .classifier import CONTAINER_QUERY, is_excluded_context
from .errors import StaleReference
from .extract import Signal
from .observer import Outcome, acquire_signal, observe_change
from .reader import DEFAULT_DESCENDANTS, DEFAULT_SOURCES, read_signal
from .view import ViewHandle, ViewProvider


@dataclass
class Candidate:
    handle: ViewHandle
    visible: bool
    excluded: bool = False


async def scan_candidates(
    view: ViewProvider,
    query: str,
    excluded_tokens: Optional[Iterable[str]] = None,
    container_query: str = CONTAINER_QUERY,
) -> List[Candidate]:
    """
    One poll cycle worth of candidates, in document order. Rebuilt from
    scratch every call; stale nodes are dropped.
    """
    tokens = list(excluded_tokens or ())
    out: List[Candidate] = []
    try:
        handles = await view.locate(query)
    except StaleReference:
        # page navigated mid-query; nothing to offer this cycle
        return out
    for h in handles:
        try:
            visible = await h.is_visible()
        except StaleReference:
            continue
        excluded = False
        if visible and tokens:
            excluded = await is_excluded_context(h, tokens, container_query)
        out.append(Candidate(h, visible, excluded))
    return out


class OddsEngine:
    """
    Read, watch and click against one live view.

    The view provider is passed in; nothing here is global, so independent
    pages can each get their own engine.
    """

    def __init__(
        self,
        view: ViewProvider,
        sources: Sequence[str] = DEFAULT_SOURCES,
        descendant_query: Optional[str] = DEFAULT_DESCENDANTS,
        container_query: str = CONTAINER_QUERY,
        max_attempts: int = 3,
        per_attempt_timeout: float = 20.0,
        click_pause: float = 0.15,
        settle_timeout: Optional[float] = None,
        fallback_to_first: bool = True,
        log: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep=asyncio.sleep,
    ):
        self.view = view
        self.sources = tuple(sources)
        self.descendant_query = descendant_query
        self.container_query = container_query
        self.max_attempts = max_attempts
        self.per_attempt_timeout = per_attempt_timeout
        self.click_pause = click_pause
        self.settle_timeout = settle_timeout
        self.fallback_to_first = fallback_to_first
        self.log = log
        self.clock = clock
        self.sleep = sleep

    @classmethod
    def from_cfg(cls, view: ViewProvider, cfg: dict, log: Optional[Callable[[str], None]] = None) -> "OddsEngine":
        w = cfg["watch"]
        return cls(
            view,
            max_attempts=int(w["max_attempts"]),
            per_attempt_timeout=float(w["per_attempt_timeout"]),
            click_pause=float(w["click_pause"]),
            settle_timeout=float(w["settle_timeout"]),
            fallback_to_first=bool(w["fallback_to_first"]),
            log=log,
        )

    async def click_first_available(self, query: str) -> ClickResult:
        return await click_first_available(
            self.view,
            query,
            max_attempts=self.max_attempts,
            per_attempt_timeout=self.per_attempt_timeout,
            pause=self.click_pause,
            settle_timeout=self.settle_timeout,
            fallback_to_first=self.fallback_to_first,
            log=self.log,
            clock=self.clock,
            sleep=self.sleep,
        )

    async def read_signal_now(self, query: str, excluded_tokens: Optional[Iterable[str]] = None) -> Optional[Signal]:
        """Odds of the first visible, non-excluded match right now (no waiting)."""
        for c in await scan_candidates(self.view, query, excluded_tokens, self.container_query):
            if not c.visible or c.excluded:
                continue
            sig = await read_signal(c.handle, self.sources, self.descendant_query)
            if sig is not None:
                return sig
        return None

    def _reader(self, query: str, excluded_tokens: Optional[Iterable[str]]):
        tokens = list(excluded_tokens or ())

        async def read() -> Optional[Signal]:
            return await self.read_signal_now(query, tokens)
        return read

    async def wait_for_signal(
        self,
        query: str,
        excluded_tokens: Optional[Iterable[str]] = None,
        timeout: float = 10.0,
        poll_interval: float = 0.5,
    ) -> Optional[Signal]:
        return await acquire_signal(
            self._reader(query, excluded_tokens), timeout, poll_interval, clock=self.clock, sleep=self.sleep
        )

    async def observe_change(
        self,
        query: str,
        excluded_tokens: Optional[Iterable[str]] = None,
        baseline_timeout: float = 12.0,
        change_window: float = 60.0,
        poll_interval: float = 0.5,
    ) -> Outcome:
        outcome = await observe_change(
            self._reader(query, excluded_tokens),
            baseline_timeout=baseline_timeout,
            change_window=change_window,
            poll_interval=poll_interval,
            clock=self.clock,
            sleep=self.sleep,
        )
        if self.log:
            self.log(
                f"observe {query!r}: {outcome.state.value} "
                f"({outcome.baseline} -> {outcome.current}, {outcome.polls} polls, {outcome.elapsed:.1f}s)"
            )
        return outcome
