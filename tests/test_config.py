from oddswatch.config import DEFAULT_CFG, load_cfg


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.delenv("ODDSWATCH_HEADLESS", raising=False)
    cfg = load_cfg(str(tmp_path / "missing.toml"))
    assert cfg == DEFAULT_CFG
    assert cfg is not DEFAULT_CFG


def test_toml_merges_per_section(tmp_path, monkeypatch):
    monkeypatch.delenv("ODDSWATCH_HEADLESS", raising=False)
    p = tmp_path / "oddswatch.toml"
    p.write_text(
        '[watch]\nchange_window = 90\nsport_loaded_policy = "tab_first"\n'
        '[browser]\nviewport = "mobile"\n'
        '[extra]\nnote = "kept"\n',
        encoding="utf-8",
    )
    cfg = load_cfg(str(p))
    assert cfg["watch"]["change_window"] == 90
    assert cfg["watch"]["poll_interval"] == DEFAULT_CFG["watch"]["poll_interval"]
    assert cfg["watch"]["sport_loaded_policy"] == "tab_first"
    assert cfg["browser"]["viewport"] == "mobile"
    assert cfg["extra"] == {"note": "kept"}
    # defaults untouched
    assert DEFAULT_CFG["watch"]["change_window"] == 60.0


def test_headless_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("ODDSWATCH_HEADLESS", "true")
    assert load_cfg(str(tmp_path / "missing.toml"))["browser"]["headless"] is True
    monkeypatch.setenv("ODDSWATCH_HEADLESS", "0")
    assert load_cfg(str(tmp_path / "missing.toml"))["browser"]["headless"] is False
