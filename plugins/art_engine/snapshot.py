"""
PNG Snapshots

Renders a Field through a Palette and saves it with Pillow.
"""

import logging

from PIL import Image

from .colormaps import field_to_rgba
from .errors import EngineIOError

logger = logging.getLogger(__name__)


def render_image(field, palette):
    """Field -> RGBA PIL image (width x height)."""
    return Image.fromarray(field_to_rgba(field, palette))


def write_png(field, palette, path):
    """Write `field` as a PNG at `path`, colored by `palette`.

    Raises:
        EngineIOError: the file could not be written
    """
    img = render_image(field, palette)
    try:
        img.save(path, format="PNG")
    except OSError as e:
        raise EngineIOError(f"failed to write {path}: {e}") from e
    logger.info("wrote %dx%d snapshot to %s", field.width, field.height, path)
