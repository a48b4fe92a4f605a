"""
Scalar Field - 2D grid of [0, 1] values with toroidal addressing

A Field stores width * height float64 values in one contiguous row-major
numpy buffer (index = y * width + x). Coordinates wrap at the edges, so
negative and overflowing indices are always valid:

    field.get(-1, 0) == field.get(width - 1, 0)

Everything written through the checked API (set, filled, arithmetic) is
clamped to [0, 1]. The raw `data` / `grid` views skip clamping; engines use
them in hot loops and re-establish the invariant before publishing.
"""

import sys
import numpy as np

from .errors import DimensionMismatchError, InvalidDimensionsError, OutOfBoundsError


def _check_dimensions(width, height):
    """Validate dimensions and return the cell count."""
    width = int(width)
    height = int(height)
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError()
    if width > sys.maxsize // height:
        raise InvalidDimensionsError(width, height)
    return width * height


def _clamp01(value):
    """Clamp a scalar to [0, 1]. NaN becomes 0."""
    value = float(value)
    if value > 1.0:
        return 1.0
    if value >= 0.0:
        return value
    return 0.0


def _clip01(values):
    """Clamp an array to [0, 1] in place. NaN becomes 0."""
    np.clip(values, 0.0, 1.0, out=values)
    np.nan_to_num(values, copy=False, nan=0.0)
    return values


class Field:
    """2D scalar field with values clamped to [0, 1] and toroidal wrapping."""

    __slots__ = ("_width", "_height", "_data")

    def __init__(self, width, height):
        """Create a zero-filled field.

        Raises:
            InvalidDimensionsError: width or height is zero, or their
                product does not fit in a machine word.
        """
        n = _check_dimensions(width, height)
        self._width = int(width)
        self._height = int(height)
        self._data = np.zeros(n, dtype=np.float64)

    @classmethod
    def filled(cls, width, height, value):
        """Create a field with every cell set to `value` (clamped)."""
        field = cls(width, height)
        field._data.fill(_clamp01(value))
        return field

    @classmethod
    def from_data(cls, width, height, data):
        """Wrap a copy of an existing buffer of exactly width * height values.

        Values are taken as-is; this is the unchecked construction path.
        """
        n = _check_dimensions(width, height)
        buf = np.array(data, dtype=np.float64).ravel()
        if buf.size != n:
            raise DimensionMismatchError((width, height), (buf.size, 1))
        field = cls.__new__(cls)
        field._width = int(width)
        field._height = int(height)
        field._data = buf
        return field

    # --- Shape ---------------------------------------------------------

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def shape(self):
        """(height, width), matching the numpy layout of `grid`."""
        return (self._height, self._width)

    def __len__(self):
        return self._data.size

    def __repr__(self):
        return f"Field({self._width}x{self._height})"

    # --- Raw access (unchecked) ----------------------------------------

    @property
    def data(self):
        """Flat row-major buffer. Writes bypass clamping."""
        return self._data

    @property
    def grid(self):
        """(height, width) view onto the same buffer. Writes bypass clamping."""
        return self._data.reshape(self._height, self._width)

    # --- Toroidal access -----------------------------------------------

    def _index(self, x, y):
        return (int(y) % self._height) * self._width + (int(x) % self._width)

    def get(self, x, y):
        """Read the cell at (x, y), wrapping out-of-range coordinates."""
        return float(self._data[self._index(x, y)])

    def set(self, x, y, value):
        """Write the cell at (x, y), wrapping coordinates and clamping value."""
        self._data[self._index(x, y)] = _clamp01(value)

    def get_checked(self, x, y):
        """Read the cell at (x, y) without wrapping.

        Raises:
            OutOfBoundsError: (x, y) lies outside the grid.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise OutOfBoundsError(x, y, self._width, self._height)
        return float(self._data[y * self._width + x])

    # --- Arithmetic ----------------------------------------------------

    def _check_same_shape(self, other):
        if self._width != other._width or self._height != other._height:
            raise DimensionMismatchError(
                (self._width, self._height), (other._width, other._height)
            )

    def _with_data(self, buf):
        field = Field.__new__(Field)
        field._width = self._width
        field._height = self._height
        field._data = buf
        return field

    def add(self, other):
        """Element-wise sum, clamped. Returns a new field."""
        self._check_same_shape(other)
        return self._with_data(_clip01(self._data + other._data))

    def multiply(self, other):
        """Element-wise product, clamped. Returns a new field."""
        self._check_same_shape(other)
        return self._with_data(_clip01(self._data * other._data))

    def add_assign(self, other):
        """In-place element-wise sum, clamped."""
        self._check_same_shape(other)
        self._data += other._data
        _clip01(self._data)

    def multiply_assign(self, other):
        """In-place element-wise product, clamped."""
        self._check_same_shape(other)
        self._data *= other._data
        _clip01(self._data)

    def scale(self, factor):
        """Multiply every cell by `factor`, clamped. Returns a new field."""
        return self._with_data(_clip01(self._data * float(factor)))

    def scale_assign(self, factor):
        """Multiply every cell by `factor` in place, clamped."""
        self._data *= float(factor)
        _clip01(self._data)

    def copy(self):
        return self._with_data(self._data.copy())

    # --- Traversal -----------------------------------------------------

    def __iter__(self):
        """Yield (x, y, value) for every cell in row-major order."""
        w = self._width
        for i, v in enumerate(self._data.tolist()):
            yield i % w, i // w, v
