import pytest
from PIL import Image

from conftest import FakeDocument, FakeSession
from humanreach.mouse import (
    get_mouse_recorder,
    save_mouse_trajectory_jpeg,
    set_trajectory_callback,
    summarize_speeds,
)


def recorded_session():
    session = FakeSession(FakeDocument(), viewport=(320, 240))
    recorder = get_mouse_recorder(session)
    for i in range(10):
        recorder.log_move(10 + i * 20, 20 + i * 10)
    recorder.log_click(200, 110)
    return session


def test_recorder_is_per_session():
    first, second = FakeSession(FakeDocument()), FakeSession(FakeDocument())
    get_mouse_recorder(first).log_move(1, 1)
    assert get_mouse_recorder(first) is get_mouse_recorder(first)
    assert get_mouse_recorder(second).events == []


def test_summarize_speeds():
    session = FakeSession(FakeDocument())
    assert summarize_speeds(session) == "No move data"
    summary = summarize_speeds(recorded_session())
    assert summary.startswith("speed px/ms: avg=")
    assert "samples=9" in summary


def test_recorder_reset():
    session = recorded_session()
    recorder = get_mouse_recorder(session)
    recorder.reset()
    assert recorder.events == []


@pytest.mark.asyncio
async def test_trajectory_jpeg_is_rendered(tmp_path):
    seen = []

    async def _callback(path):
        seen.append(path)

    set_trajectory_callback(_callback)
    try:
        outfile = str(tmp_path / "trajectory.jpg")
        result = await save_mouse_trajectory_jpeg(recorded_session(), outfile)
    finally:
        set_trajectory_callback(None)

    assert result == outfile
    with Image.open(outfile) as image:
        assert image.format == "JPEG"
        assert image.size == (320 + 40, 240 + 40)
    assert [str(path) for path in seen] == [outfile]


@pytest.mark.asyncio
async def test_empty_trajectory_still_renders(tmp_path):
    outfile = str(tmp_path / "empty.jpg")
    await save_mouse_trajectory_jpeg(FakeSession(FakeDocument()), outfile)
    with Image.open(outfile) as image:
        assert image.size == (1280 + 40, 800 + 40)
