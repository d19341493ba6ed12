import pytest

from oddswatch.actuator import AttemptState, click_first_available, pick_target, settle
from oddswatch.errors import AllAttemptsExhausted, InteractionIntercepted, StaleReference, WaitTimeout

from fakes import FakeClock, FakeNode, FakeView

Q = "ms-event-pick"


def flaky_view(fail_first: int, error=StaleReference):
    """Each lookup returns a fresh node; the first `fail_first` of them fail to click."""
    made = []

    def lookup():
        errs = [error("boom")] if len(made) < fail_first else []
        node = FakeNode(text="1.85", click_errors=errs)
        made.append(node)
        return [node]

    return FakeView({Q: lookup}), made


@pytest.mark.asyncio
async def test_first_try():
    pick = FakeNode(text="1.85")
    view = FakeView({Q: [pick]})
    res = await click_first_available(view, Q, sleep=FakeClock().sleep)
    assert res.attempts == 1
    assert res.visible_pick is True
    assert pick.interactions == ["click"]


@pytest.mark.asyncio
@pytest.mark.parametrize("k", [1, 2, 3])
@pytest.mark.parametrize("error", [StaleReference, InteractionIntercepted])
async def test_succeeds_on_attempt_k(k, error):
    view, made = flaky_view(fail_first=k - 1, error=error)
    res = await click_first_available(view, Q, max_attempts=3, sleep=FakeClock().sleep)
    assert res.attempts == k
    assert view.lookups == [Q] * k
    assert made[-1].interactions == ["click"]
    assert all(not n.interactions for n in made[:-1])


@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts", [1, 3, 5])
async def test_exhausts_after_max_attempts(max_attempts):
    view, made = flaky_view(fail_first=99, error=InteractionIntercepted)
    with pytest.raises(AllAttemptsExhausted) as ei:
        await click_first_available(view, Q, max_attempts=max_attempts, sleep=FakeClock().sleep)
    assert ei.value.attempts == max_attempts
    assert len(made) == max_attempts
    assert isinstance(ei.value.last_error, InteractionIntercepted)


@pytest.mark.asyncio
async def test_empty_lookup_is_retried():
    calls = []

    def lookup():
        calls.append(1)
        return [] if len(calls) < 2 else [FakeNode(text="2.0")]

    res = await click_first_available(FakeView({Q: lookup}), Q, sleep=FakeClock().sleep)
    assert res.attempts == 2


@pytest.mark.asyncio
async def test_other_errors_propagate_immediately():
    view, made = flaky_view(fail_first=5, error=RuntimeError)
    with pytest.raises(RuntimeError):
        await click_first_available(view, Q, sleep=FakeClock().sleep)
    assert len(made) == 1


@pytest.mark.asyncio
async def test_interactable_timeout_propagates():
    pick = FakeNode(text="1.85")

    async def never(timeout):
        raise WaitTimeout("not clickable")

    pick.wait_until_interactable = never
    with pytest.raises(WaitTimeout):
        await click_first_available(FakeView({Q: [pick]}), Q, sleep=FakeClock().sleep)


@pytest.mark.asyncio
async def test_prefers_first_visible():
    hidden = FakeNode(text="1.1", visible=False)
    stale = FakeNode(text="1.2", stale_on={"is_visible"})
    shown = FakeNode(text="1.3")
    target, visible = await pick_target(FakeView({Q: [hidden, stale, shown]}), Q)
    assert target is shown and visible


@pytest.mark.asyncio
async def test_falls_back_to_first_when_none_visible():
    a, b = FakeNode(visible=False), FakeNode(visible=False)
    view = FakeView({Q: [a, b]})
    clock = FakeClock()
    res = await click_first_available(view, Q, settle_timeout=0.3, clock=clock, sleep=clock.sleep)
    assert res.visible_pick is False
    assert a.interactions == ["click"]


@pytest.mark.asyncio
async def test_no_fallback_when_disabled():
    view = FakeView({Q: [FakeNode(visible=False)]})
    with pytest.raises(AllAttemptsExhausted):
        await click_first_available(view, Q, max_attempts=2, fallback_to_first=False, sleep=FakeClock().sleep)


@pytest.mark.asyncio
async def test_settle_outcomes():
    clock = FakeClock()
    assert await settle(FakeNode(), 5.0, clock=clock, sleep=clock.sleep) == "visible"
    assert await settle(FakeNode(stale_on={"is_visible"}), 5.0, clock=clock, sleep=clock.sleep) == "stale"

    clock = FakeClock()
    assert await settle(FakeNode(visible=False), 2.0, poll_interval=0.5, clock=clock, sleep=clock.sleep) == "timeout"
    assert 2.0 <= clock.now < 2.5


def test_attempt_state():
    st = AttemptState(max_attempts=2)
    assert st.begin() == 1 and not st.exhausted
    st.fail(StaleReference("x"))
    assert st.begin() == 2 and st.exhausted
    assert len(st.errors) == 1


@pytest.mark.asyncio
async def test_rejects_zero_attempts():
    with pytest.raises(ValueError):
        await click_first_available(FakeView(), Q, max_attempts=0)


@pytest.mark.asyncio
async def test_interaction_bounded_by_per_attempt_timeout():
    view, made = flaky_view(fail_first=1)
    clock = FakeClock()
    await click_first_available(view, Q, per_attempt_timeout=4.0, clock=clock, sleep=clock.sleep)
    assert [n.timeouts for n in made] == [[4.0], [4.0]]
