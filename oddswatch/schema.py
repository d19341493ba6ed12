from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from .extract import Signal
from .observer import Outcome


class SignalOut(BaseModel):
    text: str
    source: str = ""

    @classmethod
    def of(cls, sig: Optional[Signal]) -> Optional["SignalOut"]:
        return cls(text=sig.text, source=sig.source) if sig is not None else None


class ObservationOut(BaseModel):
    state: str  # changed|unchanged|unavailable
    baseline: Optional[SignalOut] = None
    current: Optional[SignalOut] = None
    polls: int = 0
    elapsed_s: float = 0.0

    @classmethod
    def of(cls, o: Outcome) -> "ObservationOut":
        return cls(
            state=o.state.value,
            baseline=SignalOut.of(o.baseline),
            current=SignalOut.of(o.current),
            polls=o.polls,
            elapsed_s=round(o.elapsed, 3),
        )


class CheckResult(BaseModel):
    name: str
    status: str = "pass"  # pass|fail|skip
    detail: str = ""
    started_at: str = ""
    duration_s: float = 0.0
    observation: Optional[ObservationOut] = None


class RunReport(BaseModel):
    fetched_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    viewport: str = "desktop"
    checks: List[CheckResult] = []

    @property
    def ok(self) -> bool:
        return all(c.status != "fail" for c in self.checks)
