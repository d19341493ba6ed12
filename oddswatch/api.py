import os
import time

from fastapi import FastAPI, HTTPException, Response

from .config import load_cfg

app = FastAPI(title="oddswatch report", docs_url=None, redoc_url=None)


def report_path() -> str:
    return os.getenv("ODDSWATCH_REPORT") or load_cfg()["io"]["report"]


@app.get("/report.json")
def report_json():
    path = report_path()
    if not os.path.exists(path):
        raise HTTPException(503, "No report yet")
    with open(path, "rb") as f:
        data = f.read()
    return Response(content=data, media_type="application/json")


@app.get("/")
def health():
    return {"ok": True, "ts": int(time.time())}
