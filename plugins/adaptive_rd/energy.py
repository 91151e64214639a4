"""
Energy Field

Computes a per-cell "energy" from the current fields and keeps an
exponential moving average of it. The smoothed energy drives the local
timestep (see timestep.py).

Metrics:
  react   U * V^2                                   (reaction rate)
  time    |dU| + |dV|                               (previous tick's activity)
  grad    ux^2 + uy^2 + vx^2 + vy^2                 (central differences * 0.5)
  mix     a * react + (1 - a) * grad

Smoothing:
  E_ema = alpha * E_ema + (1 - alpha) * E_raw

The smoothing pass runs after the whole metric pass and is element-wise,
so every cell only ever sees its own previous E_ema.
"""

import numpy as np

from .config import EnergyMode


class EnergyField:
    """Fills grid.e_raw from the selected metric, then smooths into grid.e_ema."""

    def __init__(self, grid):
        self.grid = grid
        # Scratch (allocated once)
        self._a = np.empty(grid.shape, dtype=np.float32)
        self._b = np.empty(grid.shape, dtype=np.float32)
        self._c = np.empty(grid.shape, dtype=np.float32)

    def compute(self, U, V, params):
        """Fill e_raw for params.energy_mode, then update e_ema."""
        self.compute_raw(U, V, params.energy_mode, params.mix_alpha)
        self.smooth(params.ema_alpha)
        return self.grid.e_ema

    def compute_raw(self, U, V, mode, mix_alpha=0.5):
        out = self.grid.e_raw
        try:
            mode = EnergyMode(mode)
        except ValueError:
            mode = None

        if mode is EnergyMode.react:
            self._react(U, V, out)
        elif mode is EnergyMode.time:
            np.abs(self.grid.du, out=out)
            np.abs(self.grid.dv, out=self._a)
            out += self._a
        elif mode is EnergyMode.grad:
            self._grad(U, V, out)
        elif mode is EnergyMode.mix:
            # grad into e_raw, react into _c, blend in place
            self._grad(U, V, out)
            self._react(U, V, self._c)
            a = float(mix_alpha)
            self._c *= a
            out *= 1.0 - a
            out += self._c
        else:
            # Unrecognized selector: no energy anywhere (dt -> dtMax)
            out.fill(0.0)
        return out

    def smooth(self, alpha):
        """E_ema = alpha * E_ema + (1 - alpha) * E_raw, in place."""
        ema = self.grid.e_ema
        np.multiply(self.grid.e_raw, 1.0 - alpha, out=self._a)
        ema *= alpha
        ema += self._a
        return ema

    def _react(self, U, V, out):
        np.multiply(V, V, out=out)
        out *= U

    def _grad(self, U, V, out):
        out.fill(0.0)
        self._add_grad_sq(U, out)
        self._add_grad_sq(V, out)

    def _add_grad_sq(self, field, out):
        """out += (0.5*dx)^2 + (0.5*dy)^2 of field, periodic."""
        g = self.grid
        a, b = self._a, self._b

        np.take(field, g.x_plus, axis=1, out=a)
        np.take(field, g.x_minus, axis=1, out=b)
        a -= b
        a *= 0.5
        a *= a
        out += a

        np.take(field, g.y_plus, axis=0, out=a)
        np.take(field, g.y_minus, axis=0, out=b)
        a -= b
        a *= 0.5
        a *= a
        out += a
