from __future__ import annotations


class icfg:
    """Interaction executor and condition poller tuning"""

    # --- Hover + click ---
    DEFAULT_MAX_RETRIES = 5
    LOCATE_TIMEOUT_S = 30.0
    ATTEMPT_SETTLE_S = (1.000, 2.000)
    WARMUP_DURATION_S = (1.500, 2.500)
    WARMUP_MOVES_MINMAX = (4, 7)
    SCROLL_SETTLE_S = (0.400, 0.700)
    REPOSITION_THRESHOLD_PX = 1.0
    ACTIVE_STATE_TIMEOUT_S = 2.0
    POST_CLICK_SETTLE_S = (0.800, 1.500)

    # --- Retry / recovery ---
    BACKOFF_S = (2.000, 4.000)
    RELOAD_EVERY = 2  # reload after every N-th failed attempt
    RELOAD_TIMEOUT_S = 30.0
    POST_RELOAD_SETTLE_S = (1.000, 2.000)

    # --- Focus for typing ---
    FOCUS_TIMEOUT_S = 1.0

    # --- Condition poller ---
    CONDITION_TIMEOUT_S = 300.0
    PROBE_INTERVAL_S = 3.0
    PROBE_TIMEOUT_S = 5.0

    EVENT_SEQUENCE = (
        "mouseover",
        "mouseenter",
        "mousemove",
        "focusin",
        "pointerdown",
        "mousedown",
        "pointerup",
        "mouseup",
        "click",
        "focus",
    )
