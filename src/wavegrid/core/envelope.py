"""
Shared per-frame scalars of the wave field.

These are computed once per frame (envelope) or once per row (vertical
factor, phase offset) and shared by every cell:

    E(t)   = lerp(min_amp, max_amp, 0.5 * (cos(2π t / period) + 1))
    V(row) = mod + (1 - mod) * sin(π row / (rows - 1))
    φ(row) = row * wave_density

All functions accept scalars or numpy arrays.
"""

from __future__ import annotations

import numpy as np


def temporal_envelope(
    t,
    min_amplitude: float,
    max_amplitude: float,
    envelope_period: float,
):
    """
    Slow amplitude modulation applied to the whole field.

    Oscillates between min_amplitude and max_amplitude with period
    envelope_period; E(0) == max_amplitude. envelope_period must be > 0.
    """
    blend = 0.5 * (np.cos(2.0 * np.pi * np.asarray(t, dtype=np.float64) / envelope_period) + 1.0)
    envelope = min_amplitude + (max_amplitude - min_amplitude) * blend
    if np.ndim(envelope) == 0:
        return float(envelope)
    return envelope


def vertical_amplitude(row, rows: int, vertical_amplitude_mod: float):
    """
    Per-row amplitude factor: vertical_amplitude_mod at the first and last
    rows, 1 at the middle row.

    A single-row grid has no middle; every row gets vertical_amplitude_mod.
    """
    row = np.asarray(row, dtype=np.float64)
    if rows <= 1:
        factor = np.full_like(row, vertical_amplitude_mod)
    else:
        normalized = row / (rows - 1)
        factor = vertical_amplitude_mod + (1.0 - vertical_amplitude_mod) * np.sin(normalized * np.pi)
    if np.ndim(factor) == 0:
        return float(factor)
    return factor


def row_phase_offset(row, wave_density: float):
    """Phase stagger of a row; makes the wave travel across rows."""
    offset = np.asarray(row, dtype=np.float64) * wave_density
    if np.ndim(offset) == 0:
        return float(offset)
    return offset
