"""
Error Types for the Art Engine

Every failure the engine reports derives from EngineError. Each subclass
also inherits the closest builtin exception, so callers that already catch
ValueError / KeyError / OSError keep working.

Construction errors (bad dimensions, unknown engine) are fatal to that
construction attempt. Field arithmetic reports shape problems as
DimensionMismatchError instead of failing mid-loop. Color and palette
errors only happen at the parsing boundary; color math itself never raises.
"""


class EngineError(Exception):
    """Base class for all engine errors."""


class InvalidDimensionsError(EngineError, ValueError):
    """Width or height was zero, or width * height overflows."""

    def __init__(self, width=None, height=None):
        self.width = width
        self.height = height
        msg = "invalid dimensions: width and height must be non-zero"
        if width is not None and height is not None:
            msg += f" and width * height must fit in a machine word (got {width}x{height})"
        super().__init__(msg)


class DimensionMismatchError(EngineError, ValueError):
    """Two fields (or a field and a buffer) had incompatible shapes."""

    def __init__(self, lhs, rhs):
        self.lhs = tuple(lhs)
        self.rhs = tuple(rhs)
        super().__init__(
            f"dimension mismatch: ({self.lhs[0]}, {self.lhs[1]}) "
            f"vs ({self.rhs[0]}, {self.rhs[1]})"
        )


class OutOfBoundsError(EngineError, IndexError):
    """Non-toroidal access outside the field."""

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(
            f"index ({x}, {y}) out of bounds for field of size ({width}, {height})"
        )


class UnknownEngineError(EngineError, ValueError):
    """No engine is registered under the requested name."""

    def __init__(self, name, known=()):
        self.name = name
        self.known = tuple(known)
        msg = f"unknown engine: {name!r}"
        if self.known:
            msg += f" (available: {', '.join(self.known)})"
        super().__init__(msg)


class InvalidColorError(EngineError, ValueError):
    """A color string could not be parsed."""

    def __init__(self, message):
        super().__init__(f"invalid color: {message}")


class InvalidPaletteError(EngineError, ValueError):
    """A palette could not be built from the given colors."""

    def __init__(self, message):
        super().__init__(f"invalid palette: {message}")


class ParamNotFoundError(EngineError, KeyError):
    """A required parameter is missing from the parameter bag."""

    def __init__(self, name):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"parameter not found: {self.name}"


class ParamTypeMismatchError(EngineError, TypeError):
    """A parameter exists but has the wrong JSON type."""

    def __init__(self, name, expected, got):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(
            f"parameter type mismatch for '{name}': expected {expected}, got {got}"
        )


class SimulationError(EngineError, RuntimeError):
    """An engine detected an inconsistent internal state while stepping."""


class EngineIOError(EngineError, OSError):
    """Reading or writing an artifact (PNG, seed file) failed."""
