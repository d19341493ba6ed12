import contextlib
import os
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from tenacity import retry, stop_after_attempt, wait_exponential

from .view import PlaywrightView

# =============================================================================
# Playwright setup
# =============================================================================


@dataclass
class Session:
    pw: Playwright
    browser: Browser
    context: BrowserContext
    page: Page

    @property
    def view(self) -> PlaywrightView:
        return PlaywrightView(self.page)


def viewport_size(cfg: dict, name: Optional[str] = None) -> dict:
    name = name or cfg["browser"]["viewport"]
    return dict(cfg["browser"]["viewports"][name])


def launch_args(cfg: dict) -> list:
    lang = cfg["browser"]["lang"]
    args = [f"--lang={lang}", "--disable-notifications", "--disable-infobars"]
    if not cfg["browser"]["headless"]:
        args.append("--start-maximized")
    return args


@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=1, max=8))
async def open_session(cfg: dict, url: Optional[str] = None) -> Session:
    pw = await async_playwright().start()
    try:
        browser = await pw.chromium.launch(
            headless=cfg["browser"]["headless"] is True and not os.getenv("PWDEBUG"),
            args=launch_args(cfg),
        )
        lang = cfg["browser"]["lang"]
        # a fresh context is the incognito equivalent: no cookies carried over
        context = await browser.new_context(
            viewport=viewport_size(cfg),
            locale=lang,
            extra_http_headers={"Accept-Language": f"{lang},{lang}-{lang.upper()},en"},
        )
        page = await context.new_page()
        await page.goto(
            url or cfg["site"]["live_url"],
            wait_until="domcontentloaded",
            timeout=cfg["browser"]["navigation_timeout_ms"],
        )
    except Exception:
        with contextlib.suppress(Exception):
            await pw.stop()
        raise
    return Session(pw, browser, context, page)


async def resize(session: Session, cfg: dict, name: str):
    await session.page.set_viewport_size(viewport_size(cfg, name))


async def goto(session: Session, cfg: dict, url: str):
    await session.page.goto(url, wait_until="domcontentloaded", timeout=cfg["browser"]["navigation_timeout_ms"])


async def close_session(session: Optional[Session]):
    if session is None:
        return
    with contextlib.suppress(Exception):
        await session.context.close()
    with contextlib.suppress(Exception):
        await session.browser.close()
    with contextlib.suppress(Exception):
        await session.pw.stop()
