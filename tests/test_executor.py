import pytest

from conftest import FakeDocument, FakeElement, FakeSession
from humanreach.errors import ElementNotFound, InteractionExhausted, NotClickable
from humanreach.interaction import simulate_hover_and_click, simulate_human_typing
from humanreach.interaction.config import icfg
from humanreach.keyboard import get_keyboard_recorder
from humanreach.mouse import get_mouse_recorder


def framed_button(**kwargs):
    button = FakeElement("button", matches={"#go"}, rect=(10, 20, 80, 30), **kwargs)
    root = FakeDocument(
        FakeElement("frame", rect=(100, 50, 600, 400), frame=FakeDocument(button))
    )
    return root, button


@pytest.mark.asyncio
async def test_click_inside_frame_hits_translated_box(instant_timing):
    root, _ = framed_button()
    session = FakeSession(root)

    assert await simulate_hover_and_click(session, "#go") is True

    assert len(session.downs) == 1 and len(session.ups) == 1
    x, y = session.downs[0]
    assert 110 + 80 * 0.2 <= x <= 110 + 80 * 0.8
    assert 70 + 30 * 0.2 <= y <= 70 + 30 * 0.8
    assert session.dispatched == [("button", icfg.EVENT_SEQUENCE)]
    assert session.reloads == 0
    assert all(0 <= mx <= 1280 and 0 <= my <= 800 for mx, my in session.moves)
    kinds = [event.kind for event in get_mouse_recorder(session).events]
    assert kinds.count("click") == 1


@pytest.mark.asyncio
async def test_click_succeeds_on_third_resolution_with_one_reload(instant_timing):
    def _state(s):
        return {"occluded": s.query_count("#go") < 3}

    root = FakeDocument(FakeElement("button", matches={"#go"}, state=_state))
    session = FakeSession(root)

    assert await simulate_hover_and_click(session, "#go", max_retries=3) is True
    assert session.query_count("#go") == 3
    assert session.reloads == 1
    assert len(session.downs) == 1


@pytest.mark.asyncio
async def test_permanently_disabled_element_exhausts_retries(instant_timing):
    root = FakeDocument(FakeElement("button", matches={"#go"}, state={"disabled": True}))
    session = FakeSession(root)

    with pytest.raises(InteractionExhausted) as excinfo:
        await simulate_hover_and_click(session, "#go", max_retries=2)

    assert excinfo.value.attempts == 2
    assert isinstance(excinfo.value.last_error, NotClickable)
    assert excinfo.value.__cause__ is excinfo.value.last_error
    assert session.query_count("#go") == 2
    assert session.reloads == 0
    assert session.downs == []


@pytest.mark.asyncio
async def test_reload_every_second_failure(instant_timing):
    root = FakeDocument(FakeElement("button", matches={"#go"}, state={"occluded": True}))
    session = FakeSession(root)

    with pytest.raises(InteractionExhausted):
        await simulate_hover_and_click(session, "#go", max_retries=5)

    assert session.query_count("#go") == 5
    assert session.reloads == 2


@pytest.mark.asyncio
async def test_missing_element_exhausts_with_not_found(instant_timing, monkeypatch):
    monkeypatch.setattr(icfg, "LOCATE_TIMEOUT_S", 0.05)
    session = FakeSession(FakeDocument(FakeElement("other")))

    with pytest.raises(InteractionExhausted) as excinfo:
        await simulate_hover_and_click(session, "#go", max_retries=1)
    assert isinstance(excinfo.value.last_error, ElementNotFound)


@pytest.mark.asyncio
async def test_zero_area_element_is_not_clickable(instant_timing):
    button = FakeElement("button", matches={"#go"}, rect=(10, 10, 0, 0))
    session = FakeSession(FakeDocument(button))

    with pytest.raises(InteractionExhausted) as excinfo:
        await simulate_hover_and_click(session, "#go", max_retries=1)
    assert "zero-area" in str(excinfo.value.last_error)


@pytest.mark.asyncio
async def test_inactive_element_after_click_is_not_fatal(instant_timing):
    root, _ = framed_button()
    session = FakeSession(root)
    session.active_result = False

    assert await simulate_hover_and_click(session, "#go") is True


@pytest.mark.asyncio
async def test_typing_clicks_then_types_every_character(instant_timing):
    field = FakeElement("field", matches={"input[name=q]"}, rect=(200, 300, 240, 32))
    session = FakeSession(FakeDocument(field))

    await simulate_human_typing(session, "input[name=q]", "hello\nworld")

    assert "".join(session.typed) == "hello\nworld"
    assert get_keyboard_recorder(session).typed_text() == "hello\nworld"
    assert len(session.downs) == 1
    x, y = session.downs[0]
    assert 200 <= x <= 440 and 300 <= y <= 332


@pytest.mark.asyncio
async def test_typing_falls_back_to_programmatic_focus(instant_timing):
    field = FakeElement("field", matches={"#f"})
    session = FakeSession(FakeDocument(field))
    session.active_result = False

    await simulate_human_typing(session, "#f", "ok")
    assert session.typed == ["o", "k"]


@pytest.mark.asyncio
async def test_typing_into_unfocusable_element_fails(instant_timing):
    field = FakeElement("field", matches={"#f"})
    session = FakeSession(FakeDocument(field))
    session.active_result = False
    session.focus_result = False

    with pytest.raises(NotClickable):
        await simulate_human_typing(session, "#f", "nope")
    assert session.typed == []


@pytest.mark.asyncio
async def test_typing_into_missing_element_fails(instant_timing):
    session = FakeSession(FakeDocument())
    with pytest.raises(ElementNotFound):
        await simulate_human_typing(session, "#f", "x", timeout=0.05)
