"""
Colormaps for Field Visualization

Maps float values [0, 1] to RGB colors. Each colormap is a (256, 3)
uint8 array used as a lookup table.
"""

import numpy as np


def _interpolate_colors(stops, n=256):
    """
    Build a colormap by smoothstep interpolation between color stops.

    Args:
        stops: List of (position, (r, g, b)) with positions ascending in [0, 1]
        n: Number of entries in the LUT
    """
    positions = np.array([s[0] for s in stops], dtype=np.float64)
    colors = np.array([s[1] for s in stops], dtype=np.float64)
    t = np.linspace(0.0, 1.0, n)

    # Segment index for every entry
    seg = np.clip(np.searchsorted(positions, t, side="right") - 1,
                  0, len(positions) - 2)
    span = positions[seg + 1] - positions[seg]
    frac = np.where(span > 0, (t - positions[seg]) / np.where(span > 0, span, 1), 0.0)
    frac = np.clip(frac, 0.0, 1.0)
    frac = frac * frac * (3 - 2 * frac)  # smoothstep

    lut = colors[seg] + frac[:, None] * (colors[seg + 1] - colors[seg])
    return lut.astype(np.uint8)


# --- Colormap Definitions ---

def grayscale():
    """Linear black to white."""
    return np.repeat(np.arange(256, dtype=np.uint8)[:, None], 3, axis=1)


def ink():
    """Pale paper background, deep blue-black V structures."""
    return _interpolate_colors([
        (0.00, (235, 230, 218)),
        (0.25, (170, 180, 190)),
        (0.50, (70, 100, 140)),
        (0.75, (25, 40, 80)),
        (1.00, (5, 8, 20)),
    ])


def thermal():
    """Thermal camera look - blue cold to red hot. Used for energy."""
    return _interpolate_colors([
        (0.00, (0, 0, 20)),
        (0.20, (0, 0, 120)),
        (0.40, (30, 80, 180)),
        (0.50, (60, 180, 80)),
        (0.60, (200, 200, 30)),
        (0.80, (240, 80, 0)),
        (1.00, (255, 255, 255)),
    ])


def ice():
    """Dark violet (small dt) to icy cyan (large dt)."""
    return _interpolate_colors([
        (0.00, (20, 0, 35)),
        (0.30, (70, 20, 120)),
        (0.60, (40, 120, 190)),
        (1.00, (210, 250, 255)),
    ])


# Registry of all colormaps
COLORMAPS = {
    "grayscale": grayscale,
    "ink": ink,
    "thermal": thermal,
    "ice": ice,
}

COLORMAP_ORDER = list(COLORMAPS.keys())


def get_colormap(name):
    """Get a colormap LUT (256, 3) uint8 array by name."""
    if name not in COLORMAPS:
        raise ValueError(f"Unknown colormap: {name!r}. "
                         f"Available: {', '.join(COLORMAP_ORDER)}")
    return COLORMAPS[name]()


def apply_colormap(field, lut):
    """
    Apply a colormap LUT to a 2D float field.

    Args:
        field: 2D numpy array with values in [0, 1] (NaN maps to 0)
        lut: (256, 3) uint8 colormap lookup table

    Returns:
        (H, W, 3) uint8 RGB image
    """
    values = np.nan_to_num(np.clip(field, 0, 1), nan=0.0)
    indices = (values * 255).astype(np.uint8)
    return lut[indices]
