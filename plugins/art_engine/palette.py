"""
OKLCh Palettes

A Palette is an ordered, non-empty set of OKLCh color stops sampled by
piecewise-linear interpolation over t in [0, 1]. Lightness and chroma are
interpolated linearly; hue takes the shortest arc around the color wheel,
so a red -> magenta gradient never detours through green.

Stops are evenly spaced: sample(0.0) is the first stop, sample(1.0) the last.
"""

import math
import numpy as np

from .color import (
    OkLch, Srgb, interpolate_hue, normalize_hue, oklch_to_srgb,
    oklch_to_srgb_arrays, srgb_to_oklch,
)
from .errors import InvalidColorError, InvalidPaletteError


def _clamp_t(t):
    t = float(t)
    if math.isnan(t):
        return 0.0
    return min(max(t, 0.0), 1.0)


def _with_hue(base, h):
    return OkLch(base.l, base.c, normalize_hue(h))


class Palette:
    """Immutable sequence of OKLCh stops, sampled by interpolation."""

    __slots__ = ("_colors", "_arrays")

    def __init__(self, colors):
        """
        Args:
            colors: non-empty iterable of OkLch (or (l, c, h) triples); hues are
                wrapped into [0, 360) and a non-finite hue becomes 0

        Raises:
            InvalidPaletteError: no colors given
        """
        colors = tuple(OkLch(c[0], c[1], normalize_hue(c[2])) for c in colors)
        if not colors:
            raise InvalidPaletteError("palette requires at least 1 color")
        self._colors = colors
        self._arrays = None

    @classmethod
    def from_hex(cls, hexes):
        """Build a palette from "#rrggbb" strings.

        Raises:
            InvalidPaletteError: empty list, or any string is not a valid color
        """
        hexes = list(hexes)
        if not hexes:
            raise InvalidPaletteError("palette requires at least 1 color")
        colors = []
        for i, text in enumerate(hexes):
            try:
                colors.append(srgb_to_oklch(Srgb.from_hex(text)))
            except InvalidColorError as e:
                raise InvalidPaletteError(f"color {i}: {e}") from e
        return cls(colors)

    @property
    def colors(self):
        return self._colors

    def __len__(self):
        return len(self._colors)

    def __iter__(self):
        return iter(self._colors)

    def __eq__(self, other):
        if not isinstance(other, Palette):
            return NotImplemented
        return self._colors == other._colors

    def __hash__(self):
        return hash(self._colors)

    def __repr__(self):
        return f"Palette({len(self._colors)} stops)"

    # --- Sampling ------------------------------------------------------

    def sample(self, t):
        """Color at t in [0, 1] (clamped; NaN reads as 0)."""
        t = _clamp_t(t)
        n = len(self._colors)
        if n == 1:
            return oklch_to_srgb(self._colors[0])

        scaled = t * (n - 1)
        idx = min(int(scaled), n - 2)
        frac = scaled - idx
        c0 = self._colors[idx]
        c1 = self._colors[idx + 1]
        return oklch_to_srgb(OkLch(
            c0.l + frac * (c1.l - c0.l),
            c0.c + frac * (c1.c - c0.c),
            interpolate_hue(c0.h, c1.h, frac),
        ))

    def _stop_arrays(self):
        if self._arrays is None:
            stops = np.array(self._colors, dtype=np.float64)
            self._arrays = (stops[:, 0], stops[:, 1], stops[:, 2])
        return self._arrays

    def sample_many(self, values):
        """Vectorized sample() over an array of t values.

        Returns:
            (*values.shape, 3) float64 sRGB array
        """
        t = np.asarray(values, dtype=np.float64)
        t = np.clip(np.where(np.isnan(t), 0.0, t), 0.0, 1.0)
        n = len(self._colors)
        if n == 1:
            rgb = np.array(oklch_to_srgb(self._colors[0]), dtype=np.float64)
            return np.broadcast_to(rgb, t.shape + (3,)).copy()

        L, C, H = self._stop_arrays()
        scaled = t * (n - 1)
        idx = np.minimum(scaled.astype(np.intp), n - 2)
        frac = scaled - idx

        l = L[idx] + frac * (L[idx + 1] - L[idx])
        c = C[idx] + frac * (C[idx + 1] - C[idx])
        delta = np.mod(H[idx + 1] - H[idx], 360.0)
        delta = np.where(delta > 180.0, delta - 360.0, delta)
        h = np.mod(H[idx] + frac * delta, 360.0)
        return oklch_to_srgb_arrays(l, c, h)

    # --- Generators ----------------------------------------------------

    @classmethod
    def analogous(cls, base, spread, count):
        """`count` colors spread evenly over `spread` degrees, centered on base."""
        if count <= 1:
            return cls([_with_hue(base, base.h)])
        return cls([
            _with_hue(base, base.h - spread / 2.0 + spread * i / (count - 1))
            for i in range(count)
        ])

    @classmethod
    def complementary(cls, base):
        """Base and base + 180."""
        return cls([_with_hue(base, base.h), _with_hue(base, base.h + 180.0)])

    @classmethod
    def triadic(cls, base):
        """Base, +120, +240."""
        return cls([_with_hue(base, base.h + d) for d in (0.0, 120.0, 240.0)])

    @classmethod
    def split_complementary(cls, base):
        """Base, +150, +210."""
        return cls([_with_hue(base, base.h + d) for d in (0.0, 150.0, 210.0)])

    @classmethod
    def gradient(cls, start, end, count):
        """`count` colors evenly interpolated from start to end (shortest-arc hue)."""
        if count <= 1:
            return cls([_with_hue(start, start.h)])
        colors = []
        for i in range(count):
            t = i / (count - 1)
            colors.append(OkLch(
                start.l + t * (end.l - start.l),
                start.c + t * (end.c - start.c),
                interpolate_hue(start.h, end.h, t),
            ))
        return cls(colors)
