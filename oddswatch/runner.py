import asyncio
import json
import os
import sys
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Optional

from . import browser
from .config import load_cfg
from .engine import OddsEngine
from .log import bind, log
from .observer import OutcomeState, wait_until
from .pages import AZSportsPage, BetslipPanel, LiveBettingPage
from .schema import CheckResult, ObservationOut, RunReport


class CheckFailed(Exception):
    pass


class CheckSkipped(Exception):
    pass


# =============================================================================
# Utils
# =============================================================================

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def atomic_write(path: str, tmp_path: str, data: dict):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, separators=(",", ":"))
    os.replace(tmp_path, path)


# =============================================================================
# Checks
# =============================================================================

async def check_odds_update(session: browser.Session, engine: OddsEngine, cfg: dict, res: CheckResult):
    """Odds of the first non-halftime pick change within the window."""
    say = bind(cfg)
    live = LiveBettingPage(engine, cfg, say)
    await live.accept_cookies()

    outcome = await live.watch_odds(skip_halftime=True)
    if outcome.state is OutcomeState.UNAVAILABLE:
        # rare: every visible pick sits in a half-time market
        say("[OddsUpdate] no non-halftime odds, falling back to the first outcome")
        outcome = await live.watch_odds(skip_halftime=False, baseline_timeout=cfg["watch"]["fallback_timeout"])
    res.observation = ObservationOut.of(outcome)

    if outcome.state is OutcomeState.UNAVAILABLE:
        raise CheckFailed("Couldn't read initial odds from any outcome.")
    if outcome.state is OutcomeState.UNCHANGED:
        # live markets can sit still for a while; not a failure
        raise CheckSkipped(
            f"No odds change in {cfg['watch']['change_window']}s. "
            f"Initial={outcome.baseline}, final={outcome.current}"
        )
    res.detail = f"{outcome.baseline} -> {outcome.current}"


async def check_add_pick_to_betslip(session: browser.Session, engine: OddsEngine, cfg: dict, res: CheckResult):
    say = bind(cfg)
    live = LiveBettingPage(engine, cfg, say)
    betslip = BetslipPanel(engine.view)

    say("[Betslip] Clicking first available outcome...")
    await live.select_first_outcome()

    if cfg["browser"]["viewport"] == "mobile":
        async def accessible() -> bool:
            return (
                await betslip.is_toggle_present()
                or await betslip.is_visible()
                or await live.is_any_pick_selected_now()
            )

        ok = await wait_until(accessible, 6.0, clock=engine.clock, sleep=engine.sleep)
        res.detail = f"accessible={ok}"
        if not ok:
            raise CheckFailed("On mobile expect Bet Slip to be accessible (toggle or visible) or the pick selected.")
        return

    visible = await betslip.is_visible()
    has_picks = visible and await betslip.has_picks()
    res.detail = f"visible={visible}, has_picks={has_picks}"
    if not visible:
        raise CheckFailed("Bet Slip panel not visible (desktop).")
    if not has_picks:
        raise CheckFailed("No selections in Bet Slip (desktop).")


async def check_sport_navigation(session: browser.Session, engine: OddsEngine, cfg: dict, res: CheckResult):
    say = bind(cfg)
    await browser.goto(session, cfg, cfg["site"]["sports_url"])
    await LiveBettingPage(engine, cfg, say).accept_cookies()

    az = AZSportsPage(engine, cfg, say)
    await az.open_az_if_needed()
    sport = cfg["site"]["az_sport"]
    await az.select_sport_by_name(sport)
    say(f"[A-Z] Selected sport: {sport}")

    if not await az.is_sport_page_loaded(sport):
        raise CheckFailed(f"Sport page not recognized as loaded for: {sport}")
    res.detail = f"loaded {sport}"


async def check_responsive_betslip(session: browser.Session, engine: OddsEngine, cfg: dict, res: CheckResult):
    say = bind(cfg)
    live = LiveBettingPage(engine, cfg, say)
    betslip = BetslipPanel(engine.view)

    await browser.resize(session, cfg, "desktop")
    await live.select_first_outcome()
    desktop_visible = await betslip.is_visible()
    if not desktop_visible:
        raise CheckFailed("Betslip should be visible on desktop after a selection.")

    await browser.resize(session, cfg, "mobile")
    await asyncio.sleep(1.0)
    mobile_visible = await betslip.is_visible()
    mobile_toggle = await betslip.is_toggle_present()
    res.detail = f"desktop_visible={desktop_visible}, mobile_visible={mobile_visible}, toggle={mobile_toggle}"
    if mobile_visible and not mobile_toggle:
        raise CheckFailed("On mobile, betslip should be hidden or toggled.")


Check = Callable[[browser.Session, OddsEngine, dict, CheckResult], Awaitable[None]]

CHECKS: Dict[str, Check] = {
    "odds_update": check_odds_update,
    "add_pick_to_betslip": check_add_pick_to_betslip,
    "sport_navigation": check_sport_navigation,
    "responsive_betslip": check_responsive_betslip,
}


async def run_check(name: str, check: Check, session: browser.Session, cfg: dict) -> CheckResult:
    res = CheckResult(name=name, started_at=now_iso())
    t0 = time.monotonic()
    log(f"=== START: {name} [viewport={cfg['browser']['viewport']}] ===", cfg)
    try:
        await browser.resize(session, cfg, cfg["browser"]["viewport"])
        await browser.goto(session, cfg, cfg["site"]["live_url"])
        engine = OddsEngine.from_cfg(session.view, cfg, log=bind(cfg))
        await check(session, engine, cfg, res)
    except CheckSkipped as e:
        res.status, res.detail = "skip", str(e)
    except CheckFailed as e:
        res.status, res.detail = "fail", str(e)
    except Exception as e:
        res.status, res.detail = "fail", f"{e!r}"
    res.duration_s = round(time.monotonic() - t0, 3)
    log(f"=== END: {name} => {res.status.upper()} {res.detail} ===", cfg)
    return res


async def run_once(session: browser.Session, cfg: dict, names: Optional[List[str]] = None) -> RunReport:
    report = RunReport(viewport=cfg["browser"]["viewport"])
    for name in names or list(CHECKS):
        report.checks.append(await run_check(name, CHECKS[name], session, cfg))
    return report


# =============================================================================
# Main
# =============================================================================

async def main(names: Optional[List[str]] = None) -> RunReport:
    cfg = load_cfg()
    unknown = [n for n in names or [] if n not in CHECKS]
    if unknown:
        raise SystemExit(f"unknown checks: {', '.join(unknown)} (have: {', '.join(CHECKS)})")

    session = None
    try:
        session = await browser.open_session(cfg)
        report = await run_once(session, cfg, names)
    finally:
        await browser.close_session(session)

    atomic_write(cfg["io"]["report"], cfg["io"]["tempfile"], report.model_dump())
    passed = sum(c.status == "pass" for c in report.checks)
    log(f"Wrote report @ {report.fetched_at} | checks: {len(report.checks)} | passed: {passed}", cfg)
    return report


def cli():
    try:
        report = asyncio.run(main(sys.argv[1:]))
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(0 if report.ok else 1)


if __name__ == "__main__":
    cli()
