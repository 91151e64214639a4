"""
Grid State for the Adaptive Gray-Scott Simulation

Owns every per-cell buffer of a W x H periodic grid:

  U, V        ping-pong field pair (two slots each, current/next)
  e_raw       instantaneous energy metric
  e_ema       exponentially smoothed energy (persists across ticks)
  dt_map      local timestep per cell
  du, dv      change made by the previous tick (used by the "time" metric)

Buffers are (H, W) float32 arrays, row-major, so the flat index of cell
(x, y) is x + y*W. Nothing here is ever resized after construction.
"""

import numpy as np

from .config import GRID_W, GRID_H, SEED_HALF, BrushMode, DEFAULT_PARAMS


# Fill values per brush mode: (U, V)
_BRUSH_FILL = {
    BrushMode.V: (0.0, 1.0),
    BrushMode.U: (1.0, 0.0),
    BrushMode.UV: (0.5, 0.5),
    BrushMode.erase: (1.0, 0.0),
}


class GridState:
    """Double-buffered field pair plus scratch energy/timestep/delta buffers."""

    def __init__(self, width=GRID_W, height=GRID_H, dt_fill=DEFAULT_PARAMS.dt_max):
        self.width = int(width)
        self.height = int(height)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {width}x{height}")
        self.size = self.width * self.height
        self.dt_fill = float(dt_fill)

        shape = (self.height, self.width)
        # Two slots per field; _cur selects the "current" one
        self._u = [np.ones(shape, dtype=np.float32),
                   np.ones(shape, dtype=np.float32)]
        self._v = [np.zeros(shape, dtype=np.float32),
                   np.zeros(shape, dtype=np.float32)]
        self._cur = 0

        self.e_raw = np.zeros(shape, dtype=np.float32)
        self.e_ema = np.zeros(shape, dtype=np.float32)
        self.dt_map = np.full(shape, self.dt_fill, dtype=np.float32)
        self.du = np.zeros(shape, dtype=np.float32)
        self.dv = np.zeros(shape, dtype=np.float32)

        # Periodic neighbour tables: (c - 1 + n) % n and (c + 1) % n
        self.x_minus = (np.arange(self.width) - 1 + self.width) % self.width
        self.x_plus = (np.arange(self.width) + 1) % self.width
        self.y_minus = (np.arange(self.height) - 1 + self.height) % self.height
        self.y_plus = (np.arange(self.height) + 1) % self.height

        self.seed()

    # --- Field access ---

    @property
    def shape(self):
        return (self.height, self.width)

    @property
    def U(self):
        return self._u[self._cur]

    @property
    def V(self):
        return self._v[self._cur]

    @property
    def U_next(self):
        return self._u[1 - self._cur]

    @property
    def V_next(self):
        return self._v[1 - self._cur]

    def idx(self, x, y):
        """Flat index of cell (x, y)."""
        return x + y * self.width

    def swap(self):
        """Promote next -> current. Flips the slot index, no data copy."""
        self._cur = 1 - self._cur

    # --- Reset ---

    def _fill_background(self, dt_fill):
        if dt_fill is not None:
            self.dt_fill = float(dt_fill)
        for u, v in zip(self._u, self._v):
            u.fill(1.0)
            v.fill(0.0)
        self.e_raw.fill(0.0)
        self.e_ema.fill(0.0)
        self.dt_map.fill(self.dt_fill)
        self.du.fill(0.0)
        self.dv.fill(0.0)

    def seed(self, dt_fill=None):
        """Stable background (U=1, V=0) plus a centered 25x25 square of V."""
        self._fill_background(dt_fill)
        cx = self.width // 2
        cy = self.height // 2
        offsets = np.arange(-SEED_HALF, SEED_HALF + 1)
        xs = (cx + offsets) % self.width
        ys = (cy + offsets) % self.height
        square = np.ix_(ys, xs)
        self.U[square] = 0.0
        self.V[square] = 1.0

    def clear(self, dt_fill=None):
        """Stable background with no disturbance."""
        self._fill_background(dt_fill)

    def fill_dt(self, dt_fill):
        """Reset the timestep map to a uniform value (used before the first tick)."""
        self.dt_fill = float(dt_fill)
        self.dt_map.fill(self.dt_fill)

    # --- Mutation (between ticks only) ---

    def paint(self, cx, cy, radius, mode=BrushMode.V):
        """Fill a disc of cells around (cx, cy) in the current slot.

        Cells with dx^2 + dy^2 <= radius^2 are written, wrapping at the
        grid edges. Returns the number of cells written.
        """
        r = int(radius)
        if r < 0:
            return 0
        u_val, v_val = _BRUSH_FILL[BrushMode(mode)]
        dy, dx = np.mgrid[-r:r + 1, -r:r + 1]
        inside = dx * dx + dy * dy <= r * r
        ys = (int(cy) + dy[inside]) % self.height
        xs = (int(cx) + dx[inside]) % self.width
        self.U[ys, xs] = u_val
        self.V[ys, xs] = v_val
        return int(inside.sum())

    @property
    def stats(self):
        """Summary of the current state."""
        V = self.V
        return {
            "mass": float(V.sum()),
            "mean": float(V.mean()),
            "max": float(V.max()),
            "alive_pct": float((V > 0.01).sum()) / self.size * 100,
            "energy_max": float(self.e_ema.max()),
            "dt_min": float(self.dt_map.min()),
            "dt_max": float(self.dt_map.max()),
            "dt_mean": float(self.dt_map.mean()),
        }
