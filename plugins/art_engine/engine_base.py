"""
Abstract Base Class for Simulation Engines

All engines (Gray-Scott, ...) implement this interface so callers can drive
any engine interchangeably: hold an Engine, call step(), read engine.field.
Parameters and their schema are plain dicts, so a CLI or UI can be built
without knowing the concrete engine class.
"""

from abc import ABC, abstractmethod


class Engine(ABC):
    """Base class for step-based simulation engines."""

    engine_name = ""   # registry key, e.g. "gray-scott"
    engine_label = ""  # display name, e.g. "Gray-Scott"

    def __init__(self):
        self.generation = 0

    @classmethod
    @abstractmethod
    def from_params(cls, width, height, seed, params):
        """Construct from dimensions, a PRNG seed and a parameter dict.

        Unknown or wrong-typed parameters fall back to defaults.
        """

    @abstractmethod
    def step(self):
        """Advance one time step.

        Raises:
            SimulationError: the engine found its own state inconsistent
        """

    def step_n(self, n):
        """Advance n steps. Returns the output field."""
        for _ in range(n):
            self.step()
        return self.field

    @property
    @abstractmethod
    def field(self):
        """Primary output Field. Treat as read-only."""

    @property
    def hue_field(self):
        """Optional per-cell hue offset field in [0, 1], or None."""
        return None

    @abstractmethod
    def get_params(self):
        """Return dict of current parameter values."""

    @abstractmethod
    def get_param_schema(self):
        """Return parameter schema.

        Each entry maps a parameter name to a dict:
            {"type": "number", "default": 0.055, "min": 0.0, "max": 0.1,
             "description": "Feed rate (F)"}
        """

    @property
    def stats(self):
        """Return current output field statistics."""
        data = self.field.data
        return {
            "generation": self.generation,
            "mass": float(data.sum()),
            "mean": float(data.mean()),
            "max": float(data.max()),
            "alive_pct": float((data > 0.01).sum()) / data.size * 100,
        }
