"""
Page objects for the live betting site.

Thin glue over the engine: the interesting retry/observation logic lives in
actuator.py, reader.py and observer.py.
"""
import re
import unicodedata
from typing import Callable, Optional

from . import locators as L
from .engine import OddsEngine
from .errors import InteractionIntercepted, StaleReference, ViewError, WaitTimeout
from .extract import Signal
from .observer import Outcome
from .view import CLICK, ENTER, ViewProvider

POLICIES = ("url_or_tab", "url_first", "tab_first", "url_only", "tab_only")


def _noop(msg: str):
    pass


# =============================================================================
# Cookie banner
# =============================================================================

async def accept_cookies_if_present(
    view: ViewProvider,
    timeout: float = 10.0,
    pause: float = 0.12,
    log: Callable[[str], None] = _noop,
) -> bool:
    """
    Dismiss the OneTrust banner if it shows up. Returns True when it was
    dismissed, False when there was none (or it refused to go away).
    """
    try:
        await view.find_visible(L.COOKIE_BANNER, timeout)
    except WaitTimeout:
        return False

    try:
        btn = await view.find_visible(L.COOKIE_ACCEPT, timeout)
        await btn.wait_until_interactable(timeout)
        await btn.interact(CLICK, pause=pause, timeout=timeout)
        await view.wait_for_absence(L.COOKIE_BANNER, timeout)
        return True
    except WaitTimeout:
        log("cookies: banner did not go away")
        return False
    except InteractionIntercepted:
        # something sits on top of the button; Enter still reaches it
        log("cookies: click intercepted, pressing Enter instead")
        try:
            btn = await view.wait_for_presence(L.COOKIE_ACCEPT, timeout)
            await btn.interact(ENTER, timeout=timeout)
            await view.wait_for_absence(L.COOKIE_BANNER, timeout)
            return True
        except ViewError:
            return False
    except StaleReference:
        log("cookies: button re-rendered, clicking the fresh one")
        try:
            btn = await view.find_visible(L.COOKIE_ACCEPT, timeout)
            await btn.interact(CLICK, timeout=timeout)
            await view.wait_for_absence(L.COOKIE_BANNER, timeout)
            return True
        except ViewError:
            return False


# =============================================================================
# Live betting
# =============================================================================

class LiveBettingPage:
    def __init__(self, engine: OddsEngine, cfg: dict, log: Callable[[str], None] = _noop):
        self.engine = engine
        self.view = engine.view
        self.watch = cfg["watch"]
        self.log = log

    @property
    def excluded_tokens(self):
        return self.watch["excluded_tokens"]

    async def accept_cookies(self) -> bool:
        return await accept_cookies_if_present(self.view, log=self.log)

    async def select_first_outcome(self):
        await self.accept_cookies()
        return await self.engine.click_first_available(L.OUTCOME_BUTTONS)

    async def first_odds_now(self) -> Optional[Signal]:
        return await self.engine.read_signal_now(L.OUTCOME_BUTTONS)

    async def first_non_halftime_odds_now(self) -> Optional[Signal]:
        return await self.engine.read_signal_now(L.OUTCOME_BUTTONS, self.excluded_tokens)

    async def wait_for_odds(self, timeout: float, skip_halftime: bool = True) -> Optional[Signal]:
        tokens = self.excluded_tokens if skip_halftime else None
        return await self.engine.wait_for_signal(
            L.OUTCOME_BUTTONS, tokens, timeout=timeout, poll_interval=float(self.watch["poll_interval"])
        )

    async def watch_odds(
        self,
        skip_halftime: bool = True,
        baseline_timeout: Optional[float] = None,
        change_window: Optional[float] = None,
    ) -> Outcome:
        w = self.watch
        return await self.engine.observe_change(
            L.OUTCOME_BUTTONS,
            self.excluded_tokens if skip_halftime else None,
            baseline_timeout=float(baseline_timeout if baseline_timeout is not None else w["baseline_timeout"]),
            change_window=float(change_window if change_window is not None else w["change_window"]),
            poll_interval=float(w["poll_interval"]),
        )

    async def is_any_pick_selected_now(self) -> bool:
        try:
            picks = await self.view.locate(L.SELECTED_PICK)
        except StaleReference:
            return False
        for h in picks:
            try:
                if await h.is_visible():
                    return True
            except StaleReference:
                continue
        return False


# =============================================================================
# A-Z sports navigation
# =============================================================================

def slugify(name: Optional[str]) -> str:
    """"Ice Hockey" -> "ice-hockey", diacritics stripped."""
    s = (name or "").lower().strip()
    s = unicodedata.normalize("NFD", s)
    s = "".join(c for c in s if not unicodedata.combining(c))
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")


class AZSportsPage:
    def __init__(self, engine: OddsEngine, cfg: dict, log: Callable[[str], None] = _noop):
        self.engine = engine
        self.view = engine.view
        self.sports_path = cfg["site"]["sports_path"]
        self.policy = cfg["watch"]["sport_loaded_policy"]
        self.log = log

    async def open_az_if_needed(self):
        try:
            await self.view.wait_for_presence(L.AZ_HEADER, 8.0)
            return
        except WaitTimeout:
            pass
        await self.view.find_visible(L.AZ_TAB, 6.0)
        await self.engine.click_first_available(L.AZ_TAB)
        await self.view.wait_for_presence(L.AZ_HEADER, 8.0)

    async def select_sport_by_name(self, sport: str):
        await self.open_az_if_needed()
        target = sport.strip()

        # exact visible text first
        for h in await self.view.locate(L.sport_by_text(target)):
            try:
                if await h.is_visible():
                    await h.interact(CLICK, timeout=6.0)
                    return
            except ViewError as e:
                self.log(f"A-Z: text match for {target!r} not clickable ({e!r}), trying href")

        # then the /en/sports/<slug> link
        for h in await self.view.locate(L.sport_by_href(self.sports_path, slugify(target))):
            try:
                if await h.is_visible():
                    await h.interact(CLICK, timeout=6.0)
                    return
            except StaleReference:
                continue

        raise LookupError(f"Sport not found in A-Z: {sport}")

    async def _url_ok(self, slug: str) -> bool:
        return (self.sports_path + slug) in (await self.view.current_url()).lower()

    async def _tab_ok(self, sport: str) -> bool:
        try:
            h = await self.view.wait_for_presence(L.active_sport_tab(sport), 8.0)
            return await h.is_visible()
        except ViewError:
            return False

    async def is_sport_page_loaded(self, sport: str, policy: Optional[str] = None) -> bool:
        """
        The URL contains /en/sports/<slug>, or the sport's tab/header looks
        active. `policy` decides which signals count and in which order.
        """
        policy = policy or self.policy
        if policy not in POLICIES:
            raise ValueError(f"unknown sport_loaded_policy: {policy!r}")
        slug = slugify(sport)

        if policy == "url_only":
            return await self._url_ok(slug)
        if policy == "tab_only":
            return await self._tab_ok(sport)
        if policy == "url_first":
            return await self._url_ok(slug) or await self._tab_ok(sport)
        if policy == "tab_first":
            return await self._tab_ok(sport) or await self._url_ok(slug)

        url_ok = await self._url_ok(slug)
        tab_ok = await self._tab_ok(sport)
        self.log(f"A-Z: {sport} url_ok={url_ok} tab_ok={tab_ok}")
        return url_ok or tab_ok


# =============================================================================
# Betslip
# =============================================================================

class BetslipPanel:
    def __init__(self, view: ViewProvider):
        self.view = view

    async def _present(self, query: str, timeout: float) -> bool:
        try:
            await self.view.wait_for_presence(query, timeout)
            return True
        except ViewError:
            return False

    async def is_visible(self) -> bool:
        return await self._present(L.BETSLIP_HEADER, 6.0)

    async def has_picks(self) -> bool:
        if await self._present(L.BETSLIP_COUNTER, 6.0):
            return True
        # no counter: any selection-looking row in the right rail
        return await self._present(L.BETSLIP_ANY_ROW, 3.0)

    async def is_toggle_present(self) -> bool:
        """Collapsed on mobile, so presence is enough."""
        return await self._present(L.BETSLIP_TOGGLE, 5.0)
