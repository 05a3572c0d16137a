from __future__ import annotations


class wcfg:
    """Context tree walker tuning"""

    DEFAULT_TIMEOUT_S = 30.0
    POLL_INTERVAL_S = 0.25  # pause between full search passes while waiting
    MAX_FRAME_DEPTH = 16
