"""
Built-in Palettes and Field Colorization

Named palettes are stored as "#rrggbb" stops and converted to OKLCh on
demand. field_to_rgba maps every cell of a Field through a Palette to an
RGBA8 image: value -> palette.sample(value) -> (r, g, b, 255), row-major.
"""

from types import MappingProxyType

import numpy as np

from .errors import InvalidPaletteError
from .palette import Palette


# --- Palette Definitions ---

PALETTES = MappingProxyType({
    # Deep blues to cyan
    "ocean": ("#001f3f", "#003366", "#005f73", "#0a9396", "#94d2bd"),
    # Vibrant pinks, greens, yellows
    "neon": ("#ff00ff", "#00ff41", "#ffff00", "#ff0080", "#00ffff"),
    # Browns, greens, golds
    "earth": ("#5c4033", "#8b6914", "#6b8e23", "#daa520", "#d2b48c"),
    # Black to white via grays
    "monochrome": ("#000000", "#404040", "#808080", "#c0c0c0", "#ffffff"),
    # Pastel purples, pinks, teals
    "vapor": ("#7b2d8e", "#c77dff", "#ff9ebb", "#80ced6", "#a0e7e5"),
    # Reds, oranges, yellows
    "fire": ("#800000", "#cc0000", "#ff4500", "#ff8c00", "#ffd700"),
})

PALETTE_ORDER = tuple(PALETTES.keys())

DEFAULT_PALETTE = "ocean"


def get_palette(name):
    """Build a built-in Palette by name.

    Raises:
        InvalidPaletteError: no palette has that name
    """
    try:
        hexes = PALETTES[name]
    except KeyError:
        raise InvalidPaletteError(
            f"unknown palette {name!r} (available: {', '.join(PALETTE_ORDER)})"
        ) from None
    return Palette.from_hex(hexes)


def field_to_rgba(field, palette):
    """
    Map a Field through a Palette to an RGBA8 image.

    Args:
        field: Field with values in [0, 1]
        palette: Palette to sample

    Returns:
        (height, width, 4) uint8 array, alpha always 255
    """
    rgb = palette.sample_many(field.grid)
    rgba = np.empty(field.shape + (4,), dtype=np.uint8)
    rgba[..., :3] = np.floor(rgb * 255.0 + 0.5).astype(np.uint8)
    rgba[..., 3] = 255
    return rgba
