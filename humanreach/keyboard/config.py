from __future__ import annotations


class kcfg:
    # Per-keystroke delay
    KEY_DELAY_S = (0.050, 0.200)

    # "Thinking" pauses
    THINK_PAUSE_PROB = 0.10
    THINK_PAUSE_S = (0.400, 1.000)

    # Settles around a typing run
    FOCUS_SETTLE_S = (0.300, 0.800)
    FINAL_SETTLE_S = (0.200, 0.500)

    # Low-level timing
    KEY_DOWN_UP_GAP_S = (0.018, 0.040)

    # Timeout for CDP operations (keep input sends from blocking the loop)
    CDP_SEND_TIMEOUT_S = 0.35
