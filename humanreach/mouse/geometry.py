from __future__ import annotations
import random
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from ..utils import clamp, random_uniform
from .config import cfg


class Point(NamedTuple):
    """A coordinate in the top-level viewport."""

    x: float
    y: float


class CubicPath(NamedTuple):
    """Cubic Bezier curve through four control points."""

    p0: Point
    p1: Point
    p2: Point
    p3: Point

    def point_at(self, t: float) -> Point:
        return bezier_point(self.p0, self.p1, self.p2, self.p3, t)


class TrajectoryPlan(NamedTuple):
    """Sampled path plus the delay bounds between consecutive samples."""

    points: List[Point]
    step_delay_s: Tuple[float, float]

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]


def bezier_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate a cubic Bezier at t using the polynomial coefficient form."""
    cx = 3 * (p1[0] - p0[0])
    bx = 3 * (p2[0] - p1[0]) - cx
    ax = p3[0] - p0[0] - cx - bx
    cy = 3 * (p1[1] - p0[1])
    by = 3 * (p2[1] - p1[1]) - cy
    ay = p3[1] - p0[1] - cy - by

    t_squared = t * t
    t_cubed = t_squared * t
    return Point(
        ax * t_cubed + bx * t_squared + cx * t + p0[0],
        ay * t_cubed + by * t_squared + cy * t + p0[1],
    )


def build_control_points(start: Point, end: Point) -> Tuple[Point, Point]:
    """Two control points along start->end, each pushed off the axis.

    Positions along the axis and the perpendicular deviations are drawn
    independently, so the curve is neither straight nor symmetric.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    # perpendicular to the axis, same length as the axis
    px, py = -dy, dx

    def _control(along_range: Tuple[float, float]) -> Point:
        along = random_uniform(*along_range)
        lateral = random_uniform(-cfg.CONTROL_LATERAL_FRAC, cfg.CONTROL_LATERAL_FRAC)
        return Point(
            start[0] + dx * along + px * lateral,
            start[1] + dy * along + py * lateral,
        )

    return _control(cfg.CONTROL1_ALONG_FRAC), _control(cfg.CONTROL2_ALONG_FRAC)


def plan_trajectory(
    start: Point, end: Point, *, steps: Optional[int] = None
) -> TrajectoryPlan:
    """Sample a fresh random Bezier from start to end at steps+1 points."""
    if steps is None:
        steps = random.randint(*cfg.STEPS_MINMAX)
    steps = max(1, int(steps))
    c1, c2 = build_control_points(start, end)
    path = CubicPath(Point(*start), c1, c2, Point(*end))
    points = [path.point_at(i / steps) for i in range(steps + 1)]
    return TrajectoryPlan(points, cfg.STEP_DELAY_S)


def clamp_point_to_viewport(
    x: float, y: float, viewport_width: float, viewport_height: float
) -> Point:
    """Clamp a point (x,y) into [0,viewport_width]x[0,viewport_height]."""
    return Point(clamp(x, 0.0, viewport_width), clamp(y, 0.0, viewport_height))


def quad_to_rect(quad: Sequence[float]) -> Dict[str, float]:
    """Convert an 8-number CDP quad to a bounding rect dict."""
    xs = [quad[0], quad[2], quad[4], quad[6]]
    ys = [quad[1], quad[3], quad[5], quad[7]]
    x_min, y_min = min(xs), min(ys)
    return {
        "x": x_min,
        "y": y_min,
        "width": max(0.0, max(xs) - x_min),
        "height": max(0.0, max(ys) - y_min),
    }


def offset_rect(rect: Dict[str, float], offset: Point) -> Dict[str, float]:
    """Translate a frame-local rect into top-level viewport coordinates."""
    return {
        "x": float(rect["x"]) + offset.x,
        "y": float(rect["y"]) + offset.y,
        "width": float(rect["width"]),
        "height": float(rect["height"]),
    }


def clickable_point(rect: Dict[str, float]) -> Point:
    """Pick a point inside rect, inset so it is neither centre nor edge."""
    fx = random_uniform(*cfg.CLICK_INSET_FRAC)
    fy = random_uniform(*cfg.CLICK_INSET_FRAC)
    return Point(rect["x"] + rect["width"] * fx, rect["y"] + rect["height"] * fy)


def random_viewport_point(viewport_width: float, viewport_height: float) -> Point:
    """Uniformly sample a point inside the viewport."""
    return Point(
        random_uniform(0.0, viewport_width), random_uniform(0.0, viewport_height)
    )


def rect_contains(rect: Dict[str, float], point: Point) -> bool:
    return (
        rect["x"] <= point.x <= rect["x"] + rect["width"]
        and rect["y"] <= point.y <= rect["y"] + rect["height"]
    )
