from __future__ import annotations


class cfg:
    """Human-like pointer tuning"""

    # --- Bezier path generation ---
    STEPS_MINMAX = (35, 50)
    CONTROL1_ALONG_FRAC = (0.20, 0.40)
    CONTROL2_ALONG_FRAC = (0.60, 0.80)
    CONTROL_LATERAL_FRAC = 0.50  # +/- share of the axis-aligned span

    # --- Target offset rules ---
    CLICK_INSET_FRAC = (0.20, 0.80)  # click point as fraction of width/height

    # --- Player timing ---
    STEP_DELAY_S = (0.005, 0.015)
    HOVER_WINDOW_S = (0.600, 1.200)
    HOVER_INTERVAL_S = (0.020, 0.050)
    HOVER_JITTER_PX = 2.0

    # --- Ambient behavior ---
    WANDER_MOVES_MINMAX = (3, 7)
    WANDER_SETTLE_S = (0.500, 2.000)
    WANDER_SCROLL_PROB = 0.25
    WANDER_SCROLL_PX = 300
    WANDER_STEPS_MINMAX = (18, 30)

    # --- Post-click drift ---
    DRIFT_RADIUS_PX = 50
    DRIFT_STEPS_MINMAX = (10, 20)

    # --- CDP send pacing ---
    CDP_SEND_TIMEOUT_S = 0.10
    CDP_SEND_MIN_INTERVAL_S = 0.004
    CLICK_DOWN_UP_DELAY_S = (0.050, 0.150)
