#!/usr/bin/env python3
"""
Tests for viewer input handling (no window is opened).
"""

from types import SimpleNamespace

import pytest

pygame = pytest.importorskip("pygame")

from adaptive_rd.config import (  # noqa: E402
    EnergyMode, ViewMode, BrushMode, BRUSH_RADIUS_MAX,
)
from adaptive_rd.viewer import Viewer  # noqa: E402


def _viewer(tmp_path, **kwargs):
    return Viewer(width=400, height=200, grid_w=40, grid_h=40,
                  settings_path=tmp_path / "settings.json", autoload=False,
                  **kwargs)


def _key(key, mod=0):
    return SimpleNamespace(key=key, mod=mod)


def test_canvas_to_grid_aspect_fit(tmp_path):
    v = _viewer(tmp_path)
    # 40x40 field in a 400x200 canvas -> 200x200 image centered at x=100
    assert v._view_rect() == (100, 0, 200, 200)
    assert v.canvas_to_grid(100, 0) == (0, 0)
    assert v.canvas_to_grid(299, 199) == (39, 39)
    assert v.canvas_to_grid(50, 100) is None, "Letterbox area is outside the field"


def test_no_painting_in_tile_mode(tmp_path):
    v = _viewer(tmp_path)
    v.sim.update_session(tile_mode=True)
    assert v.canvas_to_grid(200, 100) is None


def test_key_cycles(tmp_path):
    v = _viewer(tmp_path)
    v._handle_keydown(_key(pygame.K_v))
    assert v.sim.session.view_mode is ViewMode.U
    v._handle_keydown(_key(pygame.K_e))
    assert v.sim.params.energy_mode is EnergyMode.time
    v._handle_keydown(_key(pygame.K_b))
    assert v.sim.session.brush_mode is BrushMode.U
    v._handle_keydown(_key(pygame.K_t))
    assert v.sim.session.tile_mode is True


def test_pacing_and_brush_keys(tmp_path):
    v = _viewer(tmp_path)
    for _ in range(10):
        v._handle_keydown(_key(pygame.K_MINUS))
    assert v.sim.session.steps_per_frame == 1, "Never below one tick per frame"
    v._handle_keydown(_key(pygame.K_EQUALS))
    assert v.sim.session.steps_per_frame == 2
    for _ in range(15):
        v._handle_keydown(_key(pygame.K_LEFTBRACKET))
    assert v.sim.session.brush_radius == 0
    for _ in range(BRUSH_RADIUS_MAX + 20):
        v._handle_keydown(_key(pygame.K_RIGHTBRACKET))
    assert v.sim.session.brush_radius == BRUSH_RADIUS_MAX, "Radius stops at the cap"


def test_pause_step_and_quit(tmp_path):
    v = _viewer(tmp_path)
    v._handle_keydown(_key(pygame.K_SPACE))
    assert v.sim.paused
    v._handle_keydown(_key(pygame.K_n))
    assert v.sim.generation == v.sim.session.steps_per_frame
    v._handle_keydown(_key(pygame.K_c))
    assert v.sim.generation == 0 and not v.sim.V.any()
    v._handle_keydown(_key(pygame.K_ESCAPE))
    assert not v.running


def test_preset_keys(tmp_path):
    v = _viewer(tmp_path)
    v._handle_keydown(_key(pygame.K_2))
    assert v.sim.preset_key == "mitosis"


def test_save_and_load(tmp_path):
    v = _viewer(tmp_path)
    v.sim.update_params(F=0.042)
    v._save()
    assert (tmp_path / "settings.json").exists()
    assert list(tmp_path.glob("gray_scott_*.png")), "Screenshot written next to settings"

    other = _viewer(tmp_path)
    other._load()
    assert other.sim.params.feed == 0.042


def test_autoload(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text("{broken")
    v = Viewer(grid_w=20, grid_h=20, settings_path=path)
    assert v.sim.params.feed == 0.035, "Bad file leaves the defaults in place"
    assert "[RD] Failed to load settings" in capsys.readouterr().out
