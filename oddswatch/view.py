"""
The live view, as the rest of the package sees it.

`ViewProvider` and `ViewHandle` are the only things the core talks to. The
Playwright adapter below is the production implementation; tests use fakes.
Every handle call may raise `StaleReference` because the page re-renders on
its own schedule. Never keep a handle around longer than one step.
"""
import asyncio
from typing import List, Optional, Protocol

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import InteractionIntercepted, StaleReference, WaitTimeout

CLICK = "click"
ENTER = "enter"

# seconds, per hover/click/press (Playwright would otherwise wait 30s)
INTERACT_TIMEOUT = 10.0


class ViewHandle(Protocol):
    async def is_visible(self) -> bool: ...
    async def text(self) -> str: ...
    async def content(self) -> str: ...
    async def attribute(self, name: str) -> Optional[str]: ...
    async def descendants(self, query: str) -> List["ViewHandle"]: ...
    async def ancestor(self, query: str) -> Optional["ViewHandle"]: ...
    async def parent(self) -> Optional["ViewHandle"]: ...
    async def wait_until_interactable(self, timeout: float) -> None: ...
    async def interact(self, kind: str = CLICK, pause: float = 0.0, timeout: float = INTERACT_TIMEOUT) -> None: ...


class ViewProvider(Protocol):
    async def locate(self, query: str) -> List[ViewHandle]: ...
    async def wait_for_presence(self, query: str, timeout: float) -> ViewHandle: ...
    async def find_visible(self, query: str, timeout: float) -> ViewHandle: ...
    async def wait_for_absence(self, query: str, timeout: float) -> None: ...
    async def current_url(self) -> str: ...


# =============================================================================
# Playwright error translation
# =============================================================================

STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "execution context was destroyed",
    "jshandle is disposed",
    "elementhandle is disposed",
    "node is detached",
    "cannot find context with specified id",
)

INTERCEPT_MARKERS = (
    "intercepts pointer events",
    "element is outside of the viewport",
)


def translate_error(exc: PlaywrightError) -> Exception:
    msg = str(exc)
    low = msg.lower()
    if any(m in low for m in INTERCEPT_MARKERS):
        return InteractionIntercepted(msg)
    if any(m in low for m in STALE_MARKERS):
        return StaleReference(msg)
    if isinstance(exc, PlaywrightTimeoutError):
        return WaitTimeout(msg)
    return exc


async def _guard(awaitable):
    try:
        return await awaitable
    except PlaywrightError as e:
        err = translate_error(e)
        if err is e:
            raise
        raise err from e


def _ms(seconds: float) -> float:
    return max(0.0, seconds) * 1000.0


# =============================================================================
# Playwright adapter
# =============================================================================

class PlaywrightHandle:
    def __init__(self, el: ElementHandle):
        self._el = el

    async def _ensure_attached(self):
        connected = await _guard(self._el.evaluate("e => e.isConnected"))
        if not connected:
            raise StaleReference("element is not attached to the DOM")

    async def is_visible(self) -> bool:
        await self._ensure_attached()
        return await _guard(self._el.is_visible())

    async def text(self) -> str:
        return (await _guard(self._el.inner_text())) or ""

    async def content(self) -> str:
        return (await _guard(self._el.text_content())) or ""

    async def attribute(self, name: str) -> Optional[str]:
        return await _guard(self._el.get_attribute(name))

    async def descendants(self, query: str) -> List["PlaywrightHandle"]:
        return [PlaywrightHandle(e) for e in await _guard(self._el.query_selector_all(query))]

    async def ancestor(self, query: str) -> Optional["PlaywrightHandle"]:
        el = await _guard(self._el.query_selector(query))
        return PlaywrightHandle(el) if el else None

    async def parent(self) -> Optional["PlaywrightHandle"]:
        el = await _guard(self._el.query_selector("xpath=.."))
        return PlaywrightHandle(el) if el else None

    async def wait_until_interactable(self, timeout: float) -> None:
        # visible + enabled + not animating; the remaining actionability
        # checks happen inside click() itself
        for state in ("visible", "enabled", "stable"):
            await _guard(self._el.wait_for_element_state(state, timeout=_ms(timeout)))

    async def interact(self, kind: str = CLICK, pause: float = 0.0, timeout: float = INTERACT_TIMEOUT) -> None:
        if kind == ENTER:
            await _guard(self._el.press("Enter", timeout=_ms(timeout)))
            return
        if kind != CLICK:
            raise ValueError(f"unknown interaction: {kind!r}")
        # real pointer sequence: move, dwell, click
        await _guard(self._el.hover(timeout=_ms(timeout)))
        if pause > 0:
            await asyncio.sleep(pause)
        await _guard(self._el.click(timeout=_ms(timeout)))

    def __repr__(self) -> str:
        return f"PlaywrightHandle({self._el!r})"


class PlaywrightView:
    def __init__(self, page: Page):
        self.page = page

    async def locate(self, query: str) -> List[PlaywrightHandle]:
        return [PlaywrightHandle(e) for e in await _guard(self.page.query_selector_all(query))]

    async def _wait(self, query: str, timeout: float, state: str) -> PlaywrightHandle:
        el = await _guard(self.page.wait_for_selector(query, state=state, timeout=_ms(timeout)))
        if el is None:
            raise WaitTimeout(f"{query!r} not {state} within {timeout}s")
        return PlaywrightHandle(el)

    async def wait_for_presence(self, query: str, timeout: float) -> PlaywrightHandle:
        return await self._wait(query, timeout, "attached")

    async def find_visible(self, query: str, timeout: float) -> PlaywrightHandle:
        return await self._wait(query, timeout, "visible")

    async def wait_for_absence(self, query: str, timeout: float) -> None:
        await _guard(self.page.wait_for_selector(query, state="hidden", timeout=_ms(timeout)))

    async def current_url(self) -> str:
        return self.page.url
