from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from oddswatch.classifier import is_excluded_context
from oddswatch.config import HALFTIME_TOKENS
from oddswatch.errors import StaleReference
from oddswatch.view import PlaywrightHandle

from fakes import FakeNode

TOKENS = ["halftime", "1st half", "полувреме"]


@pytest.mark.asyncio
async def test_container_text_matches_case_insensitively():
    market = FakeNode(text="1st HALF - Result")
    pick = FakeNode(text="1.85", container=market)
    assert await is_excluded_context(pick, TOKENS) is True


@pytest.mark.asyncio
async def test_container_without_token():
    market = FakeNode(text="Match Result")
    pick = FakeNode(text="1.85", container=market, parent=FakeNode(text="Halftime"))
    assert await is_excluded_context(pick, TOKENS) is False


@pytest.mark.asyncio
async def test_raw_content_when_rendered_text_empty():
    market = FakeNode(text="", content="Първо полувреме")
    pick = FakeNode(text="1.85", container=market)
    assert await is_excluded_context(pick, TOKENS) is True


@pytest.mark.asyncio
async def test_parent_when_no_container():
    pick = FakeNode(text="1.85", parent=FakeNode(text="Halftime result"))
    assert await is_excluded_context(pick, TOKENS) is True


@pytest.mark.asyncio
async def test_parent_when_container_is_blank():
    market = FakeNode(text="  ", content="")
    pick = FakeNode(text="1.85", container=market, parent=FakeNode(text="", content="HALFTIME"))
    assert await is_excluded_context(pick, TOKENS) is True


@pytest.mark.asyncio
async def test_fails_open_when_nothing_is_readable():
    pick = FakeNode(text="1.85", stale_on={"*"})
    assert await is_excluded_context(pick, HALFTIME_TOKENS) is False


@pytest.mark.asyncio
async def test_fails_open_when_container_goes_stale():
    market = FakeNode(text="Halftime", stale_on={"text"})
    pick = FakeNode(text="1.85", container=market)
    assert await is_excluded_context(pick, TOKENS) is False


@pytest.mark.asyncio
async def test_no_tokens_never_excludes():
    pick = FakeNode(text="1.85", container=FakeNode(text="Halftime"))
    assert await is_excluded_context(pick, []) is False


@pytest.mark.asyncio
async def test_fault_hook_counts_as_failure():
    def boom(op):
        raise StaleReference(op)

    pick = FakeNode(text="1.85", container=FakeNode(text="Halftime"), fault=boom)
    assert await is_excluded_context(pick, TOKENS) is False


@pytest.mark.asyncio
async def test_fails_open_when_frame_context_is_gone():
    el = MagicMock()
    el.evaluate = AsyncMock(return_value=True)
    el.query_selector = AsyncMock(
        side_effect=PlaywrightError("Protocol error (DOM.describeNode): Cannot find context with specified id")
    )
    assert await is_excluded_context(PlaywrightHandle(el), TOKENS) is False
