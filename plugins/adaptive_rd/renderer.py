"""
Field Renderer

Read-only view of a GridState as an RGB image:

  V, U    concentrations, already in [0, 1]
  dt      local timestep map, min-max normalized per frame
  E       smoothed energy, min-max normalized per frame

Tile mode repeats the (periodic) field as an 8x4 mosaic, which makes
seams or wrap-around bugs easy to spot.
"""

import numpy as np

from .config import ViewMode, TILE_COLS, TILE_ROWS
from .colormaps import get_colormap, apply_colormap


# Default colormap per view
VIEW_COLORMAPS = {
    ViewMode.V: "grayscale",
    ViewMode.U: "grayscale",
    ViewMode.dt: "ice",
    ViewMode.E: "thermal",
}


def _normalize(field):
    lo = float(field.min())
    hi = float(field.max())
    if not hi > lo:
        lo, hi = 0.0, 1.0
    span = hi - lo
    if span <= 1e-10:
        return np.zeros_like(field)
    return (field - lo) / span


def view_field(grid, view_mode=ViewMode.V):
    """2D float field in [0, 1] for the given view."""
    view_mode = ViewMode(view_mode)
    if view_mode is ViewMode.V:
        return np.clip(grid.V, 0.0, 1.0)
    if view_mode is ViewMode.U:
        return np.clip(grid.U, 0.0, 1.0)
    if view_mode is ViewMode.dt:
        return np.clip(_normalize(grid.dt_map), 0.0, 1.0)
    return np.clip(_normalize(grid.e_ema), 0.0, 1.0)


def render_rgb(grid, view_mode=ViewMode.V, lut=None, tile=False):
    """(H, W, 3) uint8 image of the view, or (ROWS*H, COLS*W, 3) when tiled."""
    view_mode = ViewMode(view_mode)
    if lut is None:
        lut = get_colormap(VIEW_COLORMAPS[view_mode])
    rgb = apply_colormap(view_field(grid, view_mode), lut)
    if tile:
        rgb = np.tile(rgb, (TILE_ROWS, TILE_COLS, 1))
    return rgb


def save_snapshot(rgb, path):
    """Save an RGB array as an image file (format from the extension)."""
    from PIL import Image
    img = Image.fromarray(np.ascontiguousarray(rgb))
    img.save(path)
    return path
