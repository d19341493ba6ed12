from oddswatch.browser import launch_args, viewport_size
from oddswatch.config import load_cfg


def test_viewport_size(tmp_path):
    cfg = load_cfg(str(tmp_path / "none.toml"))
    assert viewport_size(cfg) == {"width": 1366, "height": 900}
    assert viewport_size(cfg, "mobile") == {"width": 390, "height": 844}
    # callers may hand it to Playwright, which must not mutate our config
    viewport_size(cfg)["width"] = 1
    assert cfg["browser"]["viewports"]["desktop"]["width"] == 1366


def test_launch_args(tmp_path):
    cfg = load_cfg(str(tmp_path / "none.toml"))
    cfg["browser"]["lang"] = "bg"
    cfg["browser"]["headless"] = False
    args = launch_args(cfg)
    assert "--lang=bg" in args
    assert "--start-maximized" in args

    cfg["browser"]["headless"] = True
    assert "--start-maximized" not in launch_args(cfg)
