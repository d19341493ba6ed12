import os
import time
from typing import Optional


def log(msg: str, cfg: Optional[dict] = None):
    line = f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] {msg}"
    print(line)
    if not cfg:
        return
    try:
        path = cfg["io"]["log"]
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except (KeyError, OSError):
        pass


def bind(cfg: Optional[dict]):
    """Return a one-argument logger for code that takes a `log` callable."""
    return lambda msg: log(msg, cfg)
