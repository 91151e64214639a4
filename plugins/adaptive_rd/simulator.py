"""
RDSimulator - Headless simulation host

Owns the grid and the adaptive Gray-Scott integrator, and carries the
host-side session (pacing, brush, view). Everything here is pygame-free so
it can drive headless runs (snapshots, tests) as well as the viewer.

Usage:
    from adaptive_rd.simulator import RDSimulator
    sim = RDSimulator(220, 220, preset="mitosis")
    sim.run(500)
    rgb = sim.render()          # (H, W, 3) uint8
"""

from .config import RDParams, ViewMode, GRID_W, GRID_H, param_key
from .grid import GridState
from .gray_scott import AdaptiveGrayScott
from .presets import get_preset, preset_values
from .renderer import render_rgb, save_snapshot
from .settings import (
    SessionSettings, save_settings, load_settings, DEFAULT_SETTINGS_PATH,
)


class RDSimulator:
    """Grid + integrator + session. One tick at a time, between-tick mutation."""

    def __init__(self, width=GRID_W, height=GRID_H, params=None, session=None,
                 preset=None):
        params = params if params is not None else RDParams()
        self.grid = GridState(width, height, dt_fill=params.dt_max)
        self.engine = AdaptiveGrayScott(self.grid, params)
        self.session = session if session is not None else SessionSettings()
        self.paused = False
        self.preset_key = None
        if preset is not None:
            self.apply_preset(preset)

    # --- Parameters ---

    @property
    def params(self):
        return self.engine.params

    def update_params(self, **changes):
        """Merge a subset of parameters (attribute names or serialized keys)."""
        return self.engine.set_params(**changes)

    def update_session(self, **changes):
        self.session = self.session.merged(**changes)
        return self.session

    def apply_preset(self, key, reseed=True):
        """Load a preset on top of the default parameters."""
        preset = get_preset(key)
        if preset is None:
            raise ValueError(f"Unknown preset: {key!r}")
        values = preset_values(key)
        param_changes = {k: v for k, v in values.items() if param_key(k)}
        session_changes = {k: v for k, v in values.items() if not param_key(k)}
        self.engine.params = RDParams().merged(**param_changes)
        if session_changes:
            self.update_session(**session_changes)
        self.preset_key = key
        if reseed:
            self.seed()

    # --- Ticking ---

    def tick(self):
        """Run exactly one integrator pass."""
        self.engine.step()

    def run(self, n):
        """Run n ticks."""
        self.engine.step_n(n)

    def frame(self):
        """One host frame: steps_per_frame ticks, or a diagnostics refresh
        when paused so the energy/dt views stay live."""
        if self.paused:
            self.engine.refresh()
            return 0
        n = self.session.steps_per_frame
        self.engine.step_n(n)
        return n

    def refresh(self):
        return self.engine.refresh()

    # --- Reset / mutation (between ticks only) ---

    def seed(self):
        self.engine.seed()

    def clear(self):
        self.engine.clear()

    def paint(self, gx, gy, radius=None, mode=None):
        """Paint a disc at grid cell (gx, gy) using the session brush by default."""
        if radius is None:
            radius = self.session.brush_radius
        if mode is None:
            mode = self.session.brush_mode
        return self.grid.paint(gx, gy, radius, mode)

    # --- Read interface ---

    @property
    def U(self):
        return self.grid.U

    @property
    def V(self):
        return self.grid.V

    @property
    def energy(self):
        return self.grid.e_ema

    @property
    def dt_map(self):
        return self.grid.dt_map

    @property
    def generation(self):
        return self.engine.generation

    @property
    def stats(self):
        return self.engine.stats

    def render(self, view_mode=None, tile=None, lut=None):
        """RGB uint8 image of the current view."""
        if view_mode is None:
            view_mode = self.session.view_mode
        if tile is None:
            tile = self.session.tile_mode
        return render_rgb(self.grid, ViewMode(view_mode), lut=lut, tile=tile)

    def snapshot(self, path, view_mode=None, tile=None):
        return save_snapshot(self.render(view_mode, tile), path)

    # --- Persistence ---

    def save_settings(self, path=DEFAULT_SETTINGS_PATH):
        return save_settings(path, self.params, self.session)

    def load_settings(self, path=DEFAULT_SETTINGS_PATH):
        """Load settings; values that fail validation keep their current value."""
        params, session = load_settings(path, self.params, self.session)
        self.engine.params = params
        self.session = session
        if self.generation == 0:
            # Nothing integrated yet: the map must show the loaded dtMax
            self.grid.fill_dt(params.dt_max)
        return params, session
