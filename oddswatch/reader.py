from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from .errors import StaleReference
from .extract import Signal, extract_signal
from .view import ViewHandle

# Where an odds number can hide inside an outcome button.
DEFAULT_SOURCES = ("content", "attribute:aria-label")
DEFAULT_DESCENDANTS = "span,div,strong,em,b,i,small,p,button"

Reader = Callable[[ViewHandle], Awaitable[Optional[str]]]


def _attribute_reader(name: str) -> Reader:
    async def read(h: ViewHandle) -> Optional[str]:
        return await h.attribute(name)
    return read


async def _text(h: ViewHandle) -> Optional[str]:
    return await h.text()


async def _content(h: ViewHandle) -> Optional[str]:
    return await h.content()


def compile_sources(sources: Sequence[str]) -> List[Tuple[str, Reader]]:
    """
    Turn ["text", "content", "attribute:aria-label", ...] into (name, reader)
    pairs, keeping the order.
    """
    out: List[Tuple[str, Reader]] = []
    for s in sources:
        if s == "text":
            out.append((s, _text))
        elif s == "content":
            out.append((s, _content))
        elif s.startswith("attribute:") and len(s) > len("attribute:"):
            out.append((s, _attribute_reader(s[len("attribute:"):])))
        else:
            raise ValueError(f"unknown read source: {s!r}")
    return out


async def _first_signal(h: ViewHandle, readers: List[Tuple[str, Reader]]) -> Optional[Signal]:
    for _, read in readers:
        sig = extract_signal(await read(h))
        if sig is not None:
            return sig
    return None


async def read_signal(
    handle: ViewHandle,
    sources: Sequence[str] = DEFAULT_SOURCES,
    descendant_query: Optional[str] = DEFAULT_DESCENDANTS,
) -> Optional[Signal]:
    """
    Odds from `handle` itself, else from its first descendant that has some.

    Never raises StaleReference: a root that goes stale reads as absent, a
    descendant that goes stale is skipped.
    """
    readers = compile_sources(sources)
    try:
        sig = await _first_signal(handle, readers)
        if sig is not None:
            return sig
        if not descendant_query:
            return None
        descendants = await handle.descendants(descendant_query)
    except StaleReference:
        return None

    for d in descendants:
        try:
            sig = await _first_signal(d, readers)
        except StaleReference:
            continue
        if sig is not None:
            return sig
    return None
