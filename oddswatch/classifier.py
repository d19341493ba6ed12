from typing import Iterable, Optional

from .errors import ViewError
from .view import ViewHandle

# nearest "market-ish" wrapper around an outcome button
CONTAINER_QUERY = (
    "xpath=ancestor::*[self::ms-option-group or self::ms-market or self::section or self::div][1]"
)


async def _context_text(h: Optional[ViewHandle]) -> str:
    if h is None:
        return ""
    txt = await h.text()
    if not txt or not txt.strip():
        txt = await h.content()
    return txt or ""


async def is_excluded_context(
    handle: ViewHandle,
    tokens: Iterable[str],
    container_query: str = CONTAINER_QUERY,
) -> bool:
    """
    True if the text around `handle` mentions one of `tokens` (case-insensitive
    substring match), e.g. a half-time market.

    Looks at the nearest container ancestor, then at the direct parent. Fails
    open: if the view can't be read the candidate is not excluded.
    """
    wanted = [t.lower() for t in tokens if t]
    if not wanted:
        return False
    try:
        ctx = await _context_text(await handle.ancestor(container_query))
        if not ctx.strip():
            ctx = await _context_text(await handle.parent())
    except ViewError:
        return False

    lc = ctx.lower()
    return any(t in lc for t in wanted)
