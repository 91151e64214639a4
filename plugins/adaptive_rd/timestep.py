"""
Timestep Map

Turns the smoothed energy field into a local integration step:

  e  = clamp(E_ema / max(E_ema), 0, 1)
  dt = dt_min + (dt_max - dt_min) * exp(-e / T)

High energy -> small dt (resolve fast micro dynamics).
Low energy  -> large dt (quiescent regions advance faster).

The result is clamped to the unordered (dt_min, dt_max) pair, so
inverted bounds still give a bounded map.
"""

import numpy as np

from .config import ENERGY_EPS, TEMP_FLOOR


class TimestepMap:

    def __init__(self, grid):
        self.grid = grid

    def build(self, params):
        """Rebuild grid.dt_map from grid.e_ema. Returns the map."""
        ema = self.grid.e_ema
        dt = self.grid.dt_map

        e_max = float(ema.max())
        scale = 1.0 / e_max if e_max > ENERGY_EPS else 1.0

        dt_min = params.dt_min
        dt_max = params.dt_max
        T = max(params.temp_scale, TEMP_FLOOR)
        lo, hi = params.dt_bounds

        # e (normalized energy), written straight into the map buffer
        np.multiply(ema, scale, out=dt)
        np.clip(dt, 0.0, 1.0, out=dt)

        dt /= -T
        np.exp(dt, out=dt)
        dt *= dt_max - dt_min
        dt += dt_min
        np.clip(dt, lo, hi, out=dt)
        return dt
