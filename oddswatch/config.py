import copy
import os

import tomli

# =============================================================================
# Config (toml optional)
# =============================================================================

HALFTIME_TOKENS = (
    "halftime", "half time", "1st half", "2nd half", "first half", "second half",
    "half-time", "ht",
    "първо полувреме", "второ полувреме", "полувреме",
)

DEFAULT_CFG = {
    "site": {
        "live_url": "https://sports.bwin.com/en/sports/live/betting",
        "sports_url": "https://sports.bwin.com/en/sports",
        "sports_path": "/en/sports/",
        "az_sport": "Football",
    },
    "watch": {
        "baseline_timeout": 12.0,
        "fallback_timeout": 8.0,
        "change_window": 60.0,
        "poll_interval": 0.5,
        "max_attempts": 3,
        "per_attempt_timeout": 20.0,
        "click_pause": 0.15,
        "settle_timeout": 20.0,
        "fallback_to_first": True,
        "excluded_tokens": list(HALFTIME_TOKENS),
        # url_or_tab | url_first | tab_first | url_only | tab_only
        "sport_loaded_policy": "url_or_tab",
    },
    "browser": {
        "headless": False,
        "lang": "en",
        "viewport": "desktop",
        "viewports": {
            "desktop": {"width": 1366, "height": 900},
            "mobile": {"width": 390, "height": 844},   # ~iPhone 12 portrait
        },
        "navigation_timeout_ms": 45000,
    },
    "io": {
        "report": "data/report.json",
        "tempfile": "data/.report.tmp",
        "log": "data/oddswatch.log",
    },
}


def load_cfg(path: str = "oddswatch.toml") -> dict:
    cfg = copy.deepcopy(DEFAULT_CFG)
    if os.path.exists(path):
        with open(path, "rb") as f:
            user = tomli.load(f)
        for k, v in user.items():
            if isinstance(v, dict) and k in cfg and isinstance(cfg[k], dict):
                cfg[k].update(v)
            else:
                cfg[k] = v
    if os.getenv("ODDSWATCH_HEADLESS"):
        cfg["browser"]["headless"] = os.environ["ODDSWATCH_HEADLESS"].lower() in ("1", "true", "yes")
    return cfg
