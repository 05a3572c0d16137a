from __future__ import annotations
import asyncio
import logging
import math
from pathlib import Path as FSPath
from typing import Awaitable, Callable, List, Optional, Tuple

from PIL import Image, ImageDraw

from .telemetry import PointerEvent, get_mouse_recorder

logger = logging.getLogger(__name__)

TrajectoryCallback = Optional[Callable[[FSPath], Awaitable[None]]]
_TRAJECTORY_CALLBACK: TrajectoryCallback = None

SLOW_PX_PER_MS = 0.05
FAST_PX_PER_MS = 1.50


def set_trajectory_callback(cb: TrajectoryCallback) -> None:
    """Register an async callback invoked whenever a trajectory JPEG is saved."""
    global _TRAJECTORY_CALLBACK
    _TRAJECTORY_CALLBACK = cb
    logger.info("Mouse trajectory callback %s", "registered" if cb else "cleared")


def _speed_to_rgb(speed: float) -> Tuple[int, int, int]:
    """Map speed to a blue -> green -> red ramp."""
    span = FAST_PX_PER_MS - SLOW_PX_PER_MS
    t = max(0.0, min(1.0, (speed - SLOW_PX_PER_MS) / span))
    if t <= 0.5:
        u, start, end = t / 0.5, (0, 120, 255), (60, 205, 60)
    else:
        u, start, end = (t - 0.5) / 0.5, (60, 205, 60), (255, 60, 60)
    return tuple(int(a + (b - a) * u) for a, b in zip(start, end))


def _segments(moves: List[PointerEvent]):
    for previous, current in zip(moves, moves[1:]):
        dt_ms = max(1.0, (current.t - previous.t) * 1000.0)
        speed = math.hypot(current.x - previous.x, current.y - previous.y) / dt_ms
        yield previous, current, speed


async def save_mouse_trajectory_jpeg(
    session,
    outfile: str = "mouse_trajectory.jpg",
    *,
    background_color: Tuple[int, int, int] = (12, 12, 14),
    line_width: int = 2,
    click_ring_radius: int = 6,
    canvas_margin: int = 20,
    annotate: bool = True,
) -> str:
    """
    Render the session's recorded pointer path into a JPEG, each segment
    colored by its speed, with rings on click points. Rendering runs in a
    worker thread so the event loop keeps servicing the session.
    """
    viewport_width, viewport_height = await session.viewport()
    events = list(get_mouse_recorder(session).events)

    def _render() -> str:
        image = Image.new(
            "RGB",
            (viewport_width + canvas_margin * 2, viewport_height + canvas_margin * 2),
            background_color,
        )
        draw = ImageDraw.Draw(image)

        def _to_canvas(x: float, y: float) -> Tuple[float, float]:
            return (
                canvas_margin + max(0.0, min(viewport_width - 1.0, x)),
                canvas_margin + max(0.0, min(viewport_height - 1.0, y)),
            )

        moves = [event for event in events if event.kind == "move"]
        speeds = []
        for previous, current, speed in _segments(moves):
            speeds.append(speed)
            draw.line(
                [_to_canvas(previous.x, previous.y), _to_canvas(current.x, current.y)],
                fill=_speed_to_rgb(speed),
                width=line_width,
            )

        for event in events:
            if event.kind != "click":
                continue
            x, y = _to_canvas(event.x, event.y)
            r = click_ring_radius
            draw.ellipse([x - r, y - r, x + r, y + r], outline=(255, 200, 80), width=2)
            draw.ellipse([x - 2, y - 2, x + 2, y + 2], fill=(255, 255, 255))

        if annotate:
            if speeds:
                summary = (
                    f"moves {len(moves)} | clicks "
                    f"{sum(1 for e in events if e.kind == 'click')} | "
                    f"avg {sum(speeds) / len(speeds):.3f} px/ms | "
                    f"max {max(speeds):.3f} px/ms"
                )
            else:
                summary = "No pointer movement recorded"
            draw.text((canvas_margin, 4), summary, fill=(200, 200, 200))

        image.save(outfile, format="JPEG", quality=92, optimize=True)
        return outfile

    outfile_path = await asyncio.to_thread(_render)

    cb = _TRAJECTORY_CALLBACK
    if cb is not None:
        await cb(FSPath(outfile_path))
    else:
        logger.debug("Trajectory saved to %s (no callback registered)", outfile_path)
    return outfile_path
