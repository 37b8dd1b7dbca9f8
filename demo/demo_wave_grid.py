"""
Demo: traveling wave over a grid of points with peak/trough flashes.

The demo:
1. Builds a 40x40 grid with the default wave parameters
2. Plots the temporal envelope and the per-row amplitude factor
3. Saves snapshot frames at a few times
4. Animates the field, the animation clock calling step() once per frame
"""

import argparse
from pathlib import Path

import matplotlib.pyplot as plt

from wavegrid.core import ColorState, GridConfig, WaveField, WaveParameters
from wavegrid.viz import animate_field, plot_envelope, plot_frame, save_figure


def main():
    """Run the wave grid demo."""
    parser = argparse.ArgumentParser(description="Traveling wave over a grid of points")
    parser.add_argument("--rows", type=int, default=40)
    parser.add_argument("--columns", type=int, default=40)
    parser.add_argument("--frames", type=int, default=240)
    parser.add_argument("--fps", type=int, default=30)
    parser.add_argument("--save", action="store_true", help="write a GIF instead of showing a window")
    args = parser.parse_args()

    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    print("=" * 60)
    print("Wave Grid Demo")
    print("=" * 60)

    config = GridConfig(rows=args.rows, columns=args.columns, spacing=1.0)
    params = WaveParameters()
    field = WaveField(config, params)

    print(f"\n1. Grid: {config.rows}x{config.columns}, spacing={config.spacing}")
    print(f"   wave_speed={params.wave_speed}, envelope_period={params.envelope_period}s")
    print(f"   amplitude in [{params.min_amplitude}, {params.max_amplitude}]")

    print("\n2. Plotting envelope...")
    fig, _ = plot_envelope(params, rows=config.rows)
    save_figure(fig, output_dir / "envelope.png")
    plt.close(fig)

    print("\n3. Saving snapshots (one per second)...")
    for k in range(4 * args.fps + 1):
        t = k / args.fps
        frames = field.step(t)
        if k % args.fps == 0:
            peaks = sum(1 for f in frames if f.transition is ColorState.PEAK)
            troughs = sum(1 for f in frames if f.transition is ColorState.TROUGH)
            print(f"   t={t:5.2f}s  E={field.envelope(t):.3f}  peaks={peaks:4d}  troughs={troughs:4d}")
            fig, _ = plot_frame(field, title=f"t = {t:.2f} s")
            save_figure(fig, output_dir / f"frame_{k:04d}.png")
            plt.close(fig)

    print("\n4. Animating...")
    field.reset()
    fig, anim = animate_field(field, n_frames=args.frames, fps=args.fps)
    if args.save:
        path = output_dir / "wave_grid.gif"
        anim.save(path, writer="pillow", fps=args.fps)
        print(f"   Saved {path}")
    else:
        plt.show()


if __name__ == "__main__":
    main()
