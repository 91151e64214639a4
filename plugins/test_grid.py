#!/usr/bin/env python3
"""
Tests for the grid state: buffers, periodic tables, swap, seed/clear, paint.
"""

import numpy as np
import pytest

from adaptive_rd.config import BrushMode, DEFAULT_PARAMS
from adaptive_rd.grid import GridState


def test_rejects_empty_grid():
    """Zero or negative dimensions are a construction error."""
    for w, h in [(0, 10), (10, 0), (-3, 5), (0, 0), (0.5, 10), (10, 0.9)]:
        with pytest.raises(ValueError):
            GridState(w, h)


def test_buffers_shape_and_dtype():
    g = GridState(7, 5)
    assert g.size == 35
    assert g.shape == (5, 7)
    for buf in (g.U, g.V, g.U_next, g.V_next, g.e_raw, g.e_ema, g.dt_map, g.du, g.dv):
        assert buf.shape == (5, 7), f"Unexpected buffer shape {buf.shape}"
        assert buf.dtype == np.float32


def test_flat_index_is_row_major():
    g = GridState(6, 4)
    g.V[2, 5] = 0.5  # y=2, x=5
    assert g.idx(5, 2) == 5 + 2 * 6
    assert g.V.reshape(-1)[g.idx(5, 2)] == np.float32(0.5)


def test_periodic_tables():
    """Neighbours wrap: left of x=0 is x=W-1, right of x=W-1 is x=0."""
    g = GridState(4, 3)
    assert list(g.x_minus) == [3, 0, 1, 2]
    assert list(g.x_plus) == [1, 2, 3, 0]
    assert list(g.y_minus) == [2, 0, 1]
    assert list(g.y_plus) == [1, 2, 0]


def test_seed_square():
    """seed() writes a centered 25x25 square of V=1, U=0 on a U=1, V=0 background."""
    g = GridState(220, 220, dt_fill=1.5)
    assert int((g.V == 1.0).sum()) == 625, "Seed square should cover 25x25 cells"
    assert int((g.U == 0.0).sum()) == 625
    # Center and edges of the square
    assert g.V[110, 110] == 1.0
    assert g.V[98, 98] == 1.0 and g.V[122, 122] == 1.0
    assert g.V[97, 110] == 0.0 and g.V[123, 110] == 0.0
    # Background
    assert g.U[0, 0] == 1.0 and g.V[0, 0] == 0.0
    # Scratch buffers reset
    assert not g.e_raw.any() and not g.e_ema.any()
    assert not g.du.any() and not g.dv.any()
    assert np.all(g.dt_map == np.float32(1.5)), "dt map starts at dtMax"
    # Next slot is plain background
    assert np.all(g.U_next == 1.0) and np.all(g.V_next == 0.0)


def test_seed_wraps_on_small_grid():
    """On a grid smaller than the square every cell is covered."""
    g = GridState(5, 5)
    assert np.all(g.V == 1.0)
    assert np.all(g.U == 0.0)


def test_seed_near_edge_wraps():
    g = GridState(30, 40)
    # cx=15 -> x in 3..27, cy=20 -> y in 8..32
    assert int((g.V == 1.0).sum()) == 625
    g2 = GridState(20, 20)
    # cx=10 -> offsets wrap: x = -2..22 mod 20 covers all columns
    assert np.all(g2.V[10, :] == 1.0)


def test_clear_and_idempotence():
    g = GridState(32, 32)
    g.e_ema.fill(3.0)
    g.du.fill(0.2)
    g.clear(dt_fill=0.9)
    assert np.all(g.U == 1.0) and np.all(g.V == 0.0)
    assert np.all(g.e_ema == 0.0) and np.all(g.du == 0.0)
    assert np.all(g.dt_map == np.float32(0.9))
    g.clear()
    assert np.all(g.dt_map == np.float32(0.9)), "dt fill is remembered"

    g.seed()
    first = (g.U.copy(), g.V.copy())
    g.seed()
    assert np.array_equal(first[0], g.U) and np.array_equal(first[1], g.V)


def test_swap_exchanges_without_copy():
    g = GridState(8, 8)
    cur_u, cur_v = g.U, g.V
    nxt_u, nxt_v = g.U_next, g.V_next
    g.swap()
    assert g.U is nxt_u and g.V is nxt_v, "Next slot becomes current"
    assert g.U_next is cur_u and g.V_next is cur_v, "Old current becomes write target"
    g.swap()
    assert g.U is cur_u


def test_paint_disc_wraps():
    g = GridState(10, 10)
    g.clear()
    n = g.paint(0, 0, 1, BrushMode.V)
    assert n == 5, f"Radius-1 disc has 5 cells, got {n}"
    painted = {(y, x) for y, x in zip(*np.nonzero(g.V == 1.0))}
    assert painted == {(0, 0), (0, 1), (0, 9), (1, 0), (9, 0)}
    assert np.all(g.U[g.V == 1.0] == 0.0)
    # Only the current slot is touched
    assert np.all(g.V_next == 0.0)


def test_paint_modes_and_radius():
    g = GridState(16, 16)
    g.clear()
    assert g.paint(8, 8, 2, "UV") == 13
    assert g.U[8, 8] == 0.5 and g.V[8, 8] == 0.5
    g.paint(8, 8, 0, BrushMode.erase)
    assert g.U[8, 8] == 1.0 and g.V[8, 8] == 0.0
    assert g.U[8, 9] == 0.5, "Radius 0 paints a single cell"
    assert g.paint(8, 8, -1, BrushMode.V) == 0
    g.paint(8, 8, 3, BrushMode.U)
    assert np.all(g.U == 1.0) and np.all(g.V == 0.0)


def test_default_dt_fill_follows_default_params():
    g = GridState(6, 6)
    assert g.dt_fill == DEFAULT_PARAMS.dt_max
    assert np.allclose(g.dt_map, DEFAULT_PARAMS.dt_max)
    g.fill_dt(0.7)
    assert np.allclose(g.dt_map, 0.7)
    g.clear()
    assert np.allclose(g.dt_map, 0.7), "fill_dt value is remembered by resets"


def test_stats():
    g = GridState(20, 20)
    stats = g.stats
    assert stats["mass"] == pytest.approx(400.0)
    assert stats["dt_max"] == pytest.approx(1.5)
    assert 0 <= stats["alive_pct"] <= 100


if __name__ == "__main__":
    print("\n=== Testing GridState ===\n")
    test_rejects_empty_grid()
    test_buffers_shape_and_dtype()
    test_flat_index_is_row_major()
    test_periodic_tables()
    test_seed_square()
    test_seed_wraps_on_small_grid()
    test_seed_near_edge_wraps()
    test_clear_and_idempotence()
    test_swap_exchanges_without_copy()
    test_paint_disc_wraps()
    test_paint_modes_and_radius()
    test_default_dt_fill_follows_default_params()
    test_stats()
    print("✓ All tests passed!\n")
