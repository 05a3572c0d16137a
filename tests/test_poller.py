import asyncio
import time

import pytest

from conftest import FakeDocument, FakeElement, FakeSession
from humanreach.errors import ConditionTimeout
from humanreach.interaction import wait_for_element_gone


def _other_tasks():
    current = asyncio.current_task()
    return [task for task in asyncio.all_tasks() if task is not current]


def captcha_page():
    widget = FakeElement("captcha", matches={"#captcha"})
    return FakeSession(FakeDocument(widget)), widget


@pytest.mark.asyncio
async def test_resolves_once_element_disappears():
    session, widget = captcha_page()

    def _solve_on_second_probe(selector):
        if session.query_count(selector) >= 2:
            widget.matches.discard(selector)

    session.query_hook = _solve_on_second_probe
    started = time.perf_counter()
    waited = await wait_for_element_gone(
        session, "#captcha", timeout=5.0, interval=0.1, probe_timeout=0.5
    )
    elapsed = time.perf_counter() - started

    assert 0.1 <= elapsed <= 0.3
    assert waited == pytest.approx(elapsed, abs=0.05)
    assert session.query_count("#captcha") == 2
    assert _other_tasks() == []

    # nothing left behind to fire later
    await asyncio.sleep(0.25)
    assert session.query_count("#captcha") == 2


@pytest.mark.asyncio
async def test_times_out_at_deadline_not_earlier():
    session, _ = captcha_page()
    started = time.perf_counter()
    with pytest.raises(ConditionTimeout) as excinfo:
        await wait_for_element_gone(
            session, "#captcha", timeout=0.3, interval=0.1, probe_timeout=0.5
        )
    elapsed = time.perf_counter() - started

    assert 0.29 <= elapsed <= 0.4
    assert excinfo.value.selector == "#captcha"
    assert _other_tasks() == []


@pytest.mark.asyncio
async def test_probe_errors_mean_still_present():
    session, _ = captcha_page()
    session.document_error = RuntimeError("target closed")
    with pytest.raises(ConditionTimeout):
        await wait_for_element_gone(
            session, "#captcha", timeout=0.25, interval=0.05, probe_timeout=0.5
        )


@pytest.mark.asyncio
async def test_slow_probe_counts_as_present_and_keeps_schedule():
    session, widget = captcha_page()
    widget.matches.clear()
    session.query_delay = 0.2  # every probe outlives its own timeout

    with pytest.raises(ConditionTimeout):
        await wait_for_element_gone(
            session, "#captcha", timeout=0.35, interval=0.05, probe_timeout=0.05
        )


@pytest.mark.asyncio
async def test_hidden_element_counts_as_gone_when_visible_only():
    widget = FakeElement("captcha", matches={"#captcha"}, state={"visibility": "hidden"})
    session = FakeSession(FakeDocument(widget))
    waited = await wait_for_element_gone(
        session, "#captcha", timeout=1.0, interval=0.05, probe_timeout=0.5
    )
    assert waited < 0.2


@pytest.mark.asyncio
async def test_rejects_non_positive_interval():
    session, _ = captcha_page()
    with pytest.raises(ValueError):
        await wait_for_element_gone(session, "#captcha", interval=0)
