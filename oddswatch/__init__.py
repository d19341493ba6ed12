from .actuator import ClickResult, click_first_available
from .classifier import is_excluded_context
from .config import DEFAULT_CFG, HALFTIME_TOKENS, load_cfg
from .engine import Candidate, OddsEngine, scan_candidates
from .errors import (
    AllAttemptsExhausted,
    InteractionIntercepted,
    OddsWatchError,
    StaleReference,
    ViewError,
    WaitTimeout,
)
from .extract import Signal, extract_odds, extract_signal
from .observer import Outcome, OutcomeState, acquire_signal, observe_change
from .reader import compile_sources, read_signal
from .view import PlaywrightHandle, PlaywrightView, ViewHandle, ViewProvider

__version__ = "0.1.0"
