"""
Perceptual Color Model - sRGB, linear RGB, OKLab, OKLCh

Four immutable color types and pure conversion functions between them:

    Srgb  <->  LinearRgb  <->  OkLab  <->  OkLch

OKLab is perceptually uniform, so palettes interpolated in OKLCh give even
gradients. Every conversion is total: achromatic colors get hue 0 instead
of an indeterminate atan2, and the OKLCh -> sRGB direction clamps
out-of-gamut results to [0, 1] instead of failing.

References:
  IEC 61966-2-1:1999 (sRGB transfer function)
  Björn Ottosson, "A perceptual color space for image processing" (2020)
"""

import math
import re
from collections import namedtuple

import numpy as np

from .errors import InvalidColorError


# Linear sRGB -> LMS (cone response)
_M1 = (
    (0.4122214708, 0.5363325363, 0.0514459929),
    (0.2119034982, 0.6806995451, 0.1073969566),
    (0.0883024619, 0.2817188376, 0.6299787005),
)
# Nonlinear LMS -> OKLab
_M2 = (
    (0.2104542553, 0.7936177850, -0.0040720468),
    (1.9779984951, -2.4285922050, 0.4505937099),
    (0.0259040371, 0.7827717662, -0.8086757660),
)
# OKLab -> nonlinear LMS
_M2_INV = (
    (1.0, 0.3963377774, 0.2158037573),
    (1.0, -0.1055613458, -0.0638541728),
    (1.0, -0.0894841775, -1.2914855480),
)
# LMS -> linear sRGB
_M1_INV = (
    (4.0767416621, -3.3077115913, 0.2309699292),
    (-1.2684380046, 2.6097574011, -0.3413193965),
    (-0.0041960863, -0.7034186147, 1.7076147010),
)

# Chroma below this is treated as achromatic (hue forced to 0)
ACHROMATIC_CHROMA = 1e-10

_HEX_RE = re.compile(r"#?([0-9a-fA-F]{6})")


def _mat3(m, x, y, z):
    """Row-by-row 3x3 product; works on floats and numpy arrays alike."""
    return (
        m[0][0] * x + m[0][1] * y + m[0][2] * z,
        m[1][0] * x + m[1][1] * y + m[1][2] * z,
        m[2][0] * x + m[2][1] * y + m[2][2] * z,
    )


def _clamp_channel(c):
    """Clamp to [0, 1]; NaN becomes 0."""
    if c > 1.0:
        return 1.0
    if c >= 0.0:
        return float(c)
    return 0.0


def _quantize(c):
    """[0, 1] channel -> 0..255 with round-half-up."""
    return int(math.floor(_clamp_channel(c) * 255.0 + 0.5))


# --- Color types ---------------------------------------------------------

class Srgb(namedtuple("Srgb", "r g b")):
    """sRGB color, channels in [0, 1].

    Hex strings are 8-bit, so from_hex/to_hex quantize to 1/255 steps; a
    value is stable after one round trip.
    """

    __slots__ = ()

    @classmethod
    def from_hex(cls, text):
        """Parse "#rrggbb" or "rrggbb" (case-insensitive)."""
        if not isinstance(text, str):
            raise InvalidColorError(f"expected a hex string, got {type(text).__name__}")
        m = _HEX_RE.fullmatch(text)
        if m is None:
            raise InvalidColorError(f"expected 6 hex digits like '#rrggbb', got {text!r}")
        digits = m.group(1)
        return cls(
            int(digits[0:2], 16) / 255.0,
            int(digits[2:4], 16) / 255.0,
            int(digits[4:6], 16) / 255.0,
        )

    def to_hex(self):
        """Format as lowercase "#rrggbb" (clamped, 8-bit)."""
        return "#{:02x}{:02x}{:02x}".format(
            _quantize(self.r), _quantize(self.g), _quantize(self.b)
        )

    def to_rgb8(self):
        """(r, g, b) as 0..255 ints."""
        return (_quantize(self.r), _quantize(self.g), _quantize(self.b))


class LinearRgb(namedtuple("LinearRgb", "r g b")):
    """Linear-light RGB (gamma decoded)."""

    __slots__ = ()


class OkLab(namedtuple("OkLab", "l a b")):
    """OKLab: lightness plus two opponent axes."""

    __slots__ = ()


class OkLch(namedtuple("OkLch", "l c h")):
    """OKLCh: polar OKLab. Hue in degrees, [0, 360)."""

    __slots__ = ()


# --- Hue helpers ---------------------------------------------------------

def normalize_hue(h):
    """Wrap a hue angle into [0, 360). Non-finite hues become 0."""
    if not math.isfinite(h):
        return 0.0
    h = math.fmod(h, 360.0)
    if h < 0.0:
        h += 360.0
    # -1e-20 + 360 rounds to 360
    if h >= 360.0:
        h = 0.0
    return h


def interpolate_hue(h0, h1, t):
    """Shortest-arc hue interpolation.

    The raw delta is wrapped into (-180, 180] before scaling, so 350 -> 10
    passes through 0, not 180.
    """
    delta = normalize_hue(h1 - h0)
    if delta > 180.0:
        delta -= 360.0
    return normalize_hue(h0 + t * delta)


# --- Gamma ---------------------------------------------------------------

def _decode_gamma(c):
    if c <= 0.04045:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def _encode_gamma(c):
    if c <= 0.0031308:
        return c * 12.92
    return 1.055 * c ** (1.0 / 2.4) - 0.055


def srgb_to_linear(c):
    """Inverse sRGB transfer function."""
    return LinearRgb(_decode_gamma(c.r), _decode_gamma(c.g), _decode_gamma(c.b))


def linear_to_srgb(c):
    """sRGB transfer function."""
    return Srgb(_encode_gamma(c.r), _encode_gamma(c.g), _encode_gamma(c.b))


# --- OKLab ---------------------------------------------------------------

def linear_to_oklab(c):
    lms = _mat3(_M1, c.r, c.g, c.b)
    l_, m_, s_ = (float(np.cbrt(v)) for v in lms)
    return OkLab(*_mat3(_M2, l_, m_, s_))


def oklab_to_linear(c):
    l_, m_, s_ = _mat3(_M2_INV, c.l, c.a, c.b)
    return LinearRgb(*_mat3(_M1_INV, l_ * l_ * l_, m_ * m_ * m_, s_ * s_ * s_))


def oklab_to_oklch(c):
    """Cartesian -> polar. Chroma below 1e-10 gets hue exactly 0."""
    chroma = math.sqrt(c.a * c.a + c.b * c.b)
    if chroma < ACHROMATIC_CHROMA:
        hue = 0.0
    else:
        hue = normalize_hue(math.degrees(math.atan2(c.b, c.a)))
    return OkLch(c.l, chroma, hue)


def oklch_to_oklab(c):
    """Polar -> Cartesian. A NaN (or infinite) hue is read as 0."""
    h = math.radians(c.h) if math.isfinite(c.h) else 0.0
    return OkLab(c.l, c.c * math.cos(h), c.c * math.sin(h))


# --- End-to-end ----------------------------------------------------------

def srgb_to_oklch(c):
    """sRGB -> linear -> OKLab -> OKLCh."""
    return oklab_to_oklch(linear_to_oklab(srgb_to_linear(c)))


def oklch_to_srgb(c):
    """OKLCh -> OKLab -> linear -> sRGB, clamped to the sRGB gamut."""
    s = linear_to_srgb(oklab_to_linear(oklch_to_oklab(c)))
    return Srgb(*(_clamp_channel(v) for v in s))


def oklch_to_srgb_arrays(l, c, h):
    """Vectorized oklch_to_srgb over numpy arrays.

    Args:
        l, c, h: broadcastable arrays of lightness, chroma, hue (degrees)

    Returns:
        (..., 3) float64 array of clamped sRGB
    """
    l = np.asarray(l, dtype=np.float64)
    c = np.asarray(c, dtype=np.float64)
    h = np.asarray(h, dtype=np.float64)
    h = np.radians(np.where(np.isfinite(h), h, 0.0))
    a = c * np.cos(h)
    b = c * np.sin(h)

    l_, m_, s_ = _mat3(_M2_INV, l, a, b)
    lin = _mat3(_M1_INV, l_ * l_ * l_, m_ * m_ * m_, s_ * s_ * s_)

    out = np.empty(np.broadcast(l, c, h).shape + (3,), dtype=np.float64)
    with np.errstate(invalid="ignore"):
        for i, ch in enumerate(lin):
            # Power branch sees negative inputs too; np.where drops them
            out[..., i] = np.where(
                ch <= 0.0031308,
                ch * 12.92,
                1.055 * np.power(ch, 1.0 / 2.4) - 0.055,
            )
    np.clip(out, 0.0, 1.0, out=out)
    return out
