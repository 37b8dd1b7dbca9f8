"""
Peak/trough color state machine.

Transitions are EDGE-triggered from the current sine sample s and the
previous frame's sample p:

    is_peak    = s > 0.9  and p <= s
    is_trough  = s < -0.9 and p >= s
    was_peak   = p > 0.9
    was_trough = p < -0.9

Priority: peak, then trough, then "leaving a peak/trough region" → base.
Anything else leaves the color untouched, so a crest shows up as a brief
flash instead of a sustained highlight.
"""

from __future__ import annotations
from enum import Enum

import numpy as np

PEAK_THRESHOLD = 0.9
TROUGH_THRESHOLD = -0.9

# Codes used by classify_array
NO_CHANGE = -1


class ColorState(Enum):
    """Logical color of a cell."""

    BASE = 0
    PEAK = 1
    TROUGH = 2


def classify(current_sine: float, previous_sine: float) -> ColorState | None:
    """
    Decide the color transition for one cell.

    Returns the target state, or None when the color must be left as is.
    """
    is_peak = current_sine > PEAK_THRESHOLD and previous_sine <= current_sine
    is_trough = current_sine < TROUGH_THRESHOLD and previous_sine >= current_sine
    was_peak = previous_sine > PEAK_THRESHOLD
    was_trough = previous_sine < TROUGH_THRESHOLD

    if is_peak:
        return ColorState.PEAK
    if is_trough:
        return ColorState.TROUGH
    if (was_peak and not is_peak) or (was_trough and not is_trough):
        return ColorState.BASE
    return None


def classify_array(current: np.ndarray, previous: np.ndarray) -> np.ndarray:
    """
    Vectorized classify().

    Returns int8 codes: NO_CHANGE (-1) or a ColorState value.
    """
    current = np.asarray(current, dtype=np.float64)
    previous = np.asarray(previous, dtype=np.float64)

    is_peak = (current > PEAK_THRESHOLD) & (previous <= current)
    is_trough = (current < TROUGH_THRESHOLD) & (previous >= current)
    leaving = ((previous > PEAK_THRESHOLD) & ~is_peak) | ((previous < TROUGH_THRESHOLD) & ~is_trough)

    codes = np.full(current.shape, NO_CHANGE, dtype=np.int8)
    # Assign lowest priority first so higher priorities overwrite
    codes[leaving] = ColorState.BASE.value
    codes[is_trough] = ColorState.TROUGH.value
    codes[is_peak] = ColorState.PEAK.value
    return codes
