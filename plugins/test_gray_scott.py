#!/usr/bin/env python3
"""
Tests for the Gray-Scott reaction-diffusion engine.

Verifies:
1. Construction, spot seeding and parameter extraction
2. Stencil weights and toroidal wrap
3. Bit-identical agreement with a per-cell scalar reference
4. Determinism, steady state and long-run regimes
"""

import dataclasses

import numpy as np
import pytest

from art_engine.engine_base import Engine
from art_engine.errors import InvalidDimensionsError
from art_engine.gray_scott import (
    DEFAULT_DIFFUSION_U, DEFAULT_DIFFUSION_V, DEFAULT_DT, DEFAULT_FEED_RATE,
    DEFAULT_KILL_RATE, GrayScott, GrayScottParams, spot_count,
)

def _reference_step(u, v, p):
    """One step computed cell by cell with Python floats."""
    h, w = u.shape
    un = np.empty_like(u)
    vn = np.empty_like(v)

    def lap(g, x, y):
        xm, xp = (x - 1) % w, (x + 1) % w
        ym, yp = (y - 1) % h, (y + 1) % h
        n, s = float(g[ym, x]), float(g[yp, x])
        we, e = float(g[y, xm]), float(g[y, xp])
        nw, ne = float(g[ym, xm]), float(g[ym, xp])
        sw, se = float(g[yp, xm]), float(g[yp, xp])
        return 0.2 * (n + s + we + e) + 0.05 * (nw + ne + sw + se) - float(g[y, x])

    f, k = p.feed_rate, p.kill_rate
    for y in range(h):
        for x in range(w):
            uc, vc = float(u[y, x]), float(v[y, x])
            reaction = uc * vc * vc
            nu = uc + p.dt * (p.diffusion_u * lap(u, x, y) - reaction + f * (1.0 - uc))
            nv = vc + p.dt * (p.diffusion_v * lap(v, x, y) + reaction - (f + k) * vc)
            un[y, x] = min(max(nu, 0.0), 1.0)
            vn[y, x] = min(max(nv, 0.0), 1.0)
    return un, vn

def test_construction():
    print("Testing GrayScott construction...")
    gs = GrayScott(64, 32, seed=42)
    assert isinstance(gs, Engine)
    for fld in (gs.u_field, gs.v_field):
        assert (fld.width, fld.height) == (64, 32)
    assert gs.field is gs.v_field, "primary output is V"
    assert gs.hue_field is None
    assert np.all(gs.u_field.data == 1.0), "U starts saturated"
    assert set(np.unique(gs.v_field.data)) <= {0.0, 1.0}
    assert gs.generation == 0

    for w, h in [(0, 10), (10, 0)]:
        with pytest.raises(InvalidDimensionsError):
            GrayScott(w, h, seed=1)
    print("  ✓ Construction working correctly")

def test_spot_seeding():
    print("Testing spot seeding...")
    assert spot_count(64, 64) == 3
    assert spot_count(1, 1) == 1
    assert spot_count(100, 100) == 5
    assert spot_count(512, 512) == 132

    # 64x64, seed 42: spots at (42, 63), (58, 40), (2, 35)
    gs = GrayScott(64, 64, seed=42)
    v = gs.v_field
    for cx, cy in [(42, 63), (58, 40), (2, 35)]:
        assert v.get(cx, cy) == 1.0
        assert v.get(cx + 3, cy) == 1.0 and v.get(cx, cy + 3) == 1.0
        assert v.get(cx + 3, cy + 1) == 0.0, "radius-3 disk excludes (3, 1)"
    # Spot at y=63 wraps onto the top rows
    assert v.get(42, 0) == 1.0 and v.get(42, 2) == 1.0
    # 29 cells per disk, no overlap
    assert int(np.count_nonzero(v.data)) == 87

    tiny = GrayScott(2, 2, seed=5)
    assert np.all(tiny.v_field.data == 1.0), "a disk covers a tiny torus"
    print("  ✓ Spot seeding matches the PRNG sequence")

def test_params_extraction():
    print("Testing parameter extraction...")
    d = GrayScottParams()
    assert (d.feed_rate, d.kill_rate, d.diffusion_u, d.diffusion_v, d.dt) == (
        DEFAULT_FEED_RATE, DEFAULT_KILL_RATE, DEFAULT_DIFFUSION_U,
        DEFAULT_DIFFUSION_V, DEFAULT_DT)
    assert (0.055, 0.062, 1.0, 0.5, 1.0) == (
        DEFAULT_FEED_RATE, DEFAULT_KILL_RATE, DEFAULT_DIFFUSION_U,
        DEFAULT_DIFFUSION_V, DEFAULT_DT)

    assert GrayScottParams.from_params({}) == d
    assert GrayScottParams.from_params(None) == d
    assert GrayScottParams.from_params("garbage") == d

    p = GrayScottParams.from_params({"feed_rate": 0.03, "kill_rate": "fast", "dt": 1})
    assert p.feed_rate == 0.03
    assert p.kill_rate == DEFAULT_KILL_RATE, "wrong type falls back to default"
    assert p.dt == 1.0 and isinstance(p.dt, float)

    alias = GrayScottParams.from_params({"diffusion_a": 0.8, "diffusion_b": 0.3})
    assert (alias.diffusion_u, alias.diffusion_v) == (0.8, 0.3)
    both = GrayScottParams.from_params({"diffusion_u": 0.9, "diffusion_a": 0.8})
    assert both.diffusion_u == 0.9, "diffusion_u wins over its alias"

    with pytest.raises(dataclasses.FrozenInstanceError):
        d.feed_rate = 0.1

    gs = GrayScott.from_params(8, 8, 1, {"feed_rate": 0.04})
    assert gs.get_params() == {
        "feed_rate": 0.04, "kill_rate": 0.062, "diffusion_u": 1.0,
        "diffusion_v": 0.5, "dt": 1.0,
    }
    assert gs.feed_rate == 0.04 and gs.kill_rate == 0.062
    assert GrayScott(8, 8, 1, {"kill_rate": 0.07}).kill_rate == 0.07
    print("  ✓ Parameter extraction working correctly")

def test_param_schema():
    schema = GrayScott(4, 4).get_param_schema()
    assert set(schema) == {"feed_rate", "kill_rate", "diffusion_u", "diffusion_v", "dt"}
    for name, entry in schema.items():
        assert set(entry) == {"type", "default", "min", "max", "description"}, name
        assert entry["type"] == "number"
        assert entry["min"] <= entry["default"] <= entry["max"], name
    assert schema["feed_rate"]["max"] == 0.1
    assert schema["dt"]["max"] == 2.0

    # Callers get a copy
    schema["dt"]["max"] = 99.0
    assert GrayScott(4, 4).get_param_schema()["dt"]["max"] == 2.0

def test_laplacian_stencil():
    """Diffusing a single impulse of U spreads it with the 9-point weights."""
    print("Testing 9-point stencil with toroidal wrap...")
    params = {"feed_rate": 0.0, "kill_rate": 0.0, "diffusion_u": 1.0,
              "diffusion_v": 0.0, "dt": 1.0}
    gs = GrayScott(6, 5, seed=3, params=params)
    gs.u_field.data[:] = 0.0
    gs.v_field.data[:] = 0.0
    gs.u_field.set(0, 0, 1.0)
    gs.step()

    u = gs.u_field
    assert u.get(0, 0) == pytest.approx(0.0, abs=1e-12), "center loses everything"
    for x, y in [(1, 0), (-1, 0), (0, 1), (0, -1)]:
        assert u.get(x, y) == pytest.approx(0.2), f"cardinal ({x}, {y})"
    for x, y in [(1, 1), (-1, 1), (1, -1), (-1, -1)]:
        assert u.get(x, y) == pytest.approx(0.05), f"diagonal ({x}, {y})"
    assert u.get(3, 2) == 0.0
    assert u.data.sum() == pytest.approx(1.0), "stencil conserves mass"
    print("  ✓ Stencil weights and wrap correct")

def test_matches_scalar_reference():
    print("Testing bit-identical agreement with the scalar reference...")
    rng = np.random.default_rng(31)
    p = GrayScottParams(feed_rate=0.037, kill_rate=0.06, diffusion_u=0.9,
                        diffusion_v=0.45, dt=0.8)
    gs = GrayScott(11, 7, seed=9, params=p)
    gs.u_field.data[:] = rng.random(77)
    gs.v_field.data[:] = rng.random(77) * 0.5

    u = gs.u_field.grid.copy()
    v = gs.v_field.grid.copy()
    for _ in range(5):
        u, v = _reference_step(u, v, p)
        gs.step()
        assert np.array_equal(gs.u_field.grid, u), "U diverged from reference"
        assert np.array_equal(gs.v_field.grid, v), "V diverged from reference"
    print("  ✓ Vectorized step is bit-identical")

def test_determinism():
    print("Testing determinism...")
    a = GrayScott(48, 40, seed=1234, params={"feed_rate": 0.04})
    b = GrayScott(48, 40, seed=1234, params={"feed_rate": 0.04})
    a.step_n(200)
    b.step_n(200)
    assert np.array_equal(a.u_field.data, b.u_field.data)
    assert np.array_equal(a.v_field.data, b.v_field.data)

    c = GrayScott(48, 40, seed=1235, params={"feed_rate": 0.04})
    assert not np.array_equal(GrayScott(48, 40, seed=1234).v_field.data, c.v_field.data)
    print("  ✓ Same inputs give bit-identical fields")

def test_steady_state():
    gs = GrayScott(16, 16, seed=42)
    gs.v_field.data[:] = 0.0
    gs.step_n(100)
    assert np.max(np.abs(gs.u_field.data - 1.0)) < 1e-8, "U should stay at 1"
    assert np.all(gs.v_field.data == 0.0), "V should stay at 0"

def test_zero_dt_is_identity():
    gs = GrayScott(20, 20, seed=8, params={"dt": 0.0})
    u0 = gs.u_field.data.copy()
    v0 = gs.v_field.data.copy()
    gs.step_n(10)
    assert np.array_equal(gs.u_field.data, u0)
    assert np.array_equal(gs.v_field.data, v0)

def test_fields_stay_in_range():
    gs = GrayScott(32, 32, seed=77, params={"dt": 2.0, "diffusion_u": 2.0})
    for _ in range(50):
        gs.step()
        assert gs.u_field.data.min() >= 0.0 and gs.u_field.data.max() <= 1.0
        assert gs.v_field.data.min() >= 0.0 and gs.v_field.data.max() <= 1.0

def test_step_n_and_stats():
    gs = GrayScott(16, 16, seed=2)
    out = gs.step_n(7)
    assert out is gs.field
    stats = gs.stats
    assert stats["generation"] == 7
    assert stats["mass"] == pytest.approx(float(gs.v_field.data.sum()))
    assert 0.0 <= stats["alive_pct"] <= 100.0

def test_coral_persists():
    print("Testing default regime persists (64x64, seed 42, 1000 steps)...")
    gs = GrayScott(64, 64, seed=42)
    gs.step_n(1000)
    assert gs.v_field.data.max() > 0.01, "pattern should not fully decay"
    print("  ✓ Pattern persists")

def test_high_kill_decays():
    print("Testing high-kill regime decays (F=0.01, k=0.09, 500 steps)...")
    gs = GrayScott(64, 64, seed=42, params={"feed_rate": 0.01, "kill_rate": 0.09})
    gs.step_n(500)
    mean_v = float(gs.v_field.data.mean())
    assert mean_v < 0.01, f"V should decay: mean {mean_v}"
    print("  ✓ Pattern decays")

if __name__ == "__main__":
    print("\n=== Testing Gray-Scott Engine ===\n")

    test_construction()
    test_spot_seeding()
    test_params_extraction()
    test_param_schema()
    test_laplacian_stencil()
    test_matches_scalar_reference()
    test_determinism()
    test_steady_state()
    test_zero_dt_is_identity()
    test_fields_stay_in_range()
    test_step_n_and_stats()
    test_coral_persists()
    test_high_kill_decays()

    print("\n✓ All tests passed!\n")
