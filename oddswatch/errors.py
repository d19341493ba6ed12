from typing import List, Optional


class OddsWatchError(Exception):
    pass


class ViewError(OddsWatchError):
    """Something went wrong while touching the live view."""


class StaleReference(ViewError):
    """The handle no longer points at a live node (the view re-rendered it)."""


class InteractionIntercepted(ViewError):
    """Another node (overlay, banner, spinner) received the click instead."""


class WaitTimeout(ViewError):
    pass


class AllAttemptsExhausted(OddsWatchError):
    def __init__(self, query: str, attempts: int, errors: Optional[List[BaseException]] = None):
        self.query = query
        self.attempts = attempts
        self.errors = list(errors or [])
        last = self.errors[-1] if self.errors else None
        super().__init__(f"could not click {query!r} after {attempts} attempts (last error: {last!r})")

    @property
    def last_error(self) -> Optional[BaseException]:
        return self.errors[-1] if self.errors else None
