from .geometry import (
    Point,
    CubicPath,
    TrajectoryPlan,
    bezier_point,
    build_control_points,
    plan_trajectory,
)
from .player import play_trajectory, hover_settle, move_pointer_to
from .behaviors import simulate_human_behavior, drift_pointer
from .telemetry import get_mouse_recorder
from .analysis import summarize_speeds
from .render import save_mouse_trajectory_jpeg, set_trajectory_callback

__all__ = [
    "Point",
    "CubicPath",
    "TrajectoryPlan",
    "bezier_point",
    "build_control_points",
    "plan_trajectory",
    "play_trajectory",
    "hover_settle",
    "move_pointer_to",
    "simulate_human_behavior",
    "drift_pointer",
    "get_mouse_recorder",
    "summarize_speeds",
    "save_mouse_trajectory_jpeg",
    "set_trajectory_callback",
]
