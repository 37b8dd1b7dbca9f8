"""
wavegrid: traveling-wave animation of a 2D grid of points

Each frame, every cell of a rows x columns grid is displaced sideways by a
sine wave whose amplitude follows a slow envelope in time and tapers toward
the first and last rows. Cells flash a peak color as they cross the crest and
a trough color as they cross the trough.

Core concepts:
- GridLayout fixes cell identities and centered positions once
- WaveField.step(t) computes displacement and color transitions per frame
- Color changes are edge-triggered, not level-triggered
"""

__version__ = "0.1.0"
