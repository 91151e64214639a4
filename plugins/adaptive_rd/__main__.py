"""
Adaptive Gray-Scott Viewer - Entry Point

Usage:
    python -m adaptive_rd [preset] [--size WxH] [--window WxH] [--snap N]
                          [--view MODE] [--energy MODE] [--tile]
                          [--load PATH] [--save PATH] [--out PATH]

Examples:
    python -m adaptive_rd
    python -m adaptive_rd mitosis
    python -m adaptive_rd coral --size 320x320
    python -m adaptive_rd pulse --snap 400 --view dt --out pulse_dt.png
    python -m adaptive_rd --load my_settings.json --window 1200x1200

Energy metrics (--energy):
    react   U*V^2
    time    |dU| + |dV| of the previous tick
    grad    squared central-difference gradients of U and V
    mix     blend of react and grad (mixAlpha)

Views (--view): V, U, dt, E

Use --list to see all available presets.
"""

import sys

from .config import ENERGY_ORDER, VIEW_ORDER, GRID_W, GRID_H
from .presets import PRESET_ORDER, list_presets


def _parse_wxh(text):
    parts = text.lower().split("x")
    if len(parts) != 2:
        raise ValueError(f"Expected WxH, got {text!r}")
    return int(parts[0]), int(parts[1])


def snap(preset, grid_w, grid_h, frames, view=None, energy=None, tile=False,
         load_path=None, save_path=None, out_path=None):
    """Headless mode: run N frames, save a PNG (and optionally settings), exit."""
    import os
    from .simulator import RDSimulator

    sim = RDSimulator(grid_w, grid_h, preset=preset)
    if load_path:
        sim.load_settings(load_path)
        sim.seed()
    if energy:
        sim.update_params(energy_mode=energy)
    if view:
        sim.update_session(view_mode=view)
    if tile:
        sim.update_session(tile_mode=True)

    label = preset or "custom"
    print(f"  {label}: running {frames} frames "
          f"({sim.session.steps_per_frame} ticks each)...", end="", flush=True)
    for _ in range(frames):
        sim.frame()

    if out_path is None:
        out_path = os.path.join("screenshots",
                                f"gray_scott_{label}_{sim.session.view_mode.value}.png")
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    sim.snapshot(out_path)
    print(f" saved: {out_path}")

    stats = sim.stats
    print(f"  generation {stats['generation']:,}  mass {stats['mass']:.1f}  "
          f"dt {stats['dt_min']:.3f}..{stats['dt_max']:.3f}")

    if save_path:
        sim.save_settings(save_path)
        print(f"  settings saved: {save_path}")
    return out_path


def main(argv=None):
    preset = None
    grid_w, grid_h = GRID_W, GRID_H
    win_w, win_h = 880, 880
    snap_frames = None
    view = None
    energy = None
    tile = False
    load_path = None
    save_path = None
    out_path = None

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        try:
            if arg == "--size" and i + 1 < len(args):
                grid_w, grid_h = _parse_wxh(args[i + 1])
                i += 2
                continue
            if arg == "--window" and i + 1 < len(args):
                win_w, win_h = _parse_wxh(args[i + 1])
                i += 2
                continue
            if arg == "--snap" and i + 1 < len(args):
                snap_frames = int(args[i + 1])
                i += 2
                continue
        except ValueError as e:
            print(f"Bad value for {arg}: {e}")
            return 2

        if arg == "--view" and i + 1 < len(args) and args[i + 1] in VIEW_ORDER:
            view = args[i + 1]
            i += 2
        elif arg == "--energy" and i + 1 < len(args) and args[i + 1] in ENERGY_ORDER:
            energy = args[i + 1]
            i += 2
        elif arg == "--load" and i + 1 < len(args):
            load_path = args[i + 1]
            i += 2
        elif arg == "--save" and i + 1 < len(args):
            save_path = args[i + 1]
            i += 2
        elif arg == "--out" and i + 1 < len(args):
            out_path = args[i + 1]
            i += 2
        elif arg == "--tile":
            tile = True
            i += 1
        elif arg == "--list":
            print("\nAvailable presets:")
            for key, name, desc in list_presets():
                print(f"    {key:12s} {name:14s} {desc}")
            print()
            return 0
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        elif arg in PRESET_ORDER:
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available presets, --help for options")
            return 2

    if grid_w <= 0 or grid_h <= 0:
        print(f"Grid size must be positive, got {grid_w}x{grid_h}")
        return 2

    if snap_frames is not None:
        if snap_frames <= 0:
            print(f"--snap needs a positive frame count, got {snap_frames}")
            return 2
        print(f"Headless snap mode: {preset or 'custom'} @ {grid_w}x{grid_h}, "
              f"{snap_frames} frames")
        try:
            snap(preset, grid_w, grid_h, snap_frames, view=view, energy=energy,
                 tile=tile, load_path=load_path, save_path=save_path,
                 out_path=out_path)
        except (OSError, ValueError) as e:
            print(f"Snap failed: {e}")
            return 2
        return 0

    from .viewer import Viewer

    print("Starting Adaptive Gray-Scott Viewer")
    print(f"  Preset: {preset or 'default / saved settings'}")
    print(f"  Grid: {grid_w}x{grid_h}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    viewer = Viewer(width=win_w, height=win_h, grid_w=grid_w, grid_h=grid_h,
                    start_preset=preset)
    if load_path:
        try:
            viewer.sim.load_settings(load_path)
        except (OSError, ValueError) as e:
            print(f"[RD] Failed to load settings: {e}")
            return 2
    if energy:
        viewer.sim.update_params(energy_mode=energy)
    if view:
        viewer.sim.update_session(view_mode=view)
    if tile:
        viewer.sim.update_session(tile_mode=True)
    viewer.run()
    if save_path:
        viewer.sim.save_settings(save_path)
        print(f"Settings saved: {save_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
