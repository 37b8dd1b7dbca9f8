"""
Pytest configuration and shared fixtures.
"""

import matplotlib
matplotlib.use("Agg")

import pytest


@pytest.fixture
def small_grid_config():
    """Configuration for a small 5x7 test grid."""
    from wavegrid.core import GridConfig
    return GridConfig(rows=5, columns=7, spacing=1.0)


@pytest.fixture
def default_params():
    """Wave parameters with the stock defaults."""
    from wavegrid.core import WaveParameters
    return WaveParameters()


@pytest.fixture
def column_field():
    """
    3 rows x 1 column, frozen wave (wave_speed=0), one radian of stagger per row.

    At any t the row sines are sin(0), sin(-1), sin(-2).
    """
    from wavegrid.core import GridConfig, WaveField, WaveParameters
    params = WaveParameters(wave_speed=0.0, wave_density=1.0)
    return WaveField(GridConfig(rows=3, columns=1, spacing=1.0), params)


class RecordingTarget:
    """Render target that records every call made by the wave field."""

    def __init__(self):
        self.positions = []
        self.colors = []

    def set_position(self, position):
        self.positions.append(position.copy())

    def set_color(self, color):
        self.colors.append(color)


@pytest.fixture
def recording_target():
    return RecordingTarget()
