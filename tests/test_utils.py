import asyncio

import pytest

from humanreach.utils import clamp, first_completed, random_duration, random_uniform


def test_clamp_and_random_helpers():
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    for _ in range(100):
        assert 2.0 <= random_uniform(5.0, 2.0) <= 5.0
        assert 0.0 <= random_duration(-1.0, 0.0) <= 0.0


@pytest.mark.asyncio
async def test_first_completed_returns_winner_and_cancels_loser():
    loser_cancelled = asyncio.Event()

    async def _slow():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            loser_cancelled.set()
            raise

    async def _fast():
        await asyncio.sleep(0.01)
        return "fast"

    assert await first_completed(_slow(), _fast()) == "fast"
    assert loser_cancelled.is_set()


@pytest.mark.asyncio
async def test_first_completed_propagates_winner_error():
    async def _boom():
        raise KeyError("boom")

    async def _never():
        await asyncio.sleep(10)

    with pytest.raises(KeyError):
        await first_completed(_never(), _boom())
