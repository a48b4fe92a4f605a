"""
Reproducible Run Record

A Seed captures everything needed to recreate a piece: engine name, grid
dimensions, parameter overrides, PRNG seed and step count. Two equal Seeds
run through engines.run_seed() produce bit-identical fields.

JSON form (field names are stable):

    {"engine": "gray-scott", "width": 256, "height": 256,
     "params": {"feed_rate": 0.055}, "seed": 42, "steps": 1000}
"""

import sys

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidDimensionsError

U64_MAX = (1 << 64) - 1


class Seed(BaseModel):
    """Immutable record of one run."""

    # Strict: "64", 64.0 and true are not integers
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    engine: str = Field(description="Registered engine name")
    width: int = Field(ge=0, description="Grid width in cells")
    height: int = Field(ge=0, description="Grid height in cells")
    params: dict = Field(
        default_factory=dict,
        description="Engine parameter overrides",
    )
    seed: int = Field(ge=0, le=U64_MAX, description="PRNG seed (unsigned 64-bit)")
    steps: int = Field(default=0, ge=0, description="Steps to run")

    def validate_dimensions(self):
        """Check the grid is non-empty and width * height fits a machine word.

        Raises:
            InvalidDimensionsError
        """
        if self.width == 0 or self.height == 0:
            raise InvalidDimensionsError()
        if self.width > sys.maxsize // self.height:
            raise InvalidDimensionsError(self.width, self.height)

    def to_json(self, indent=2):
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, text):
        """Parse a Seed from JSON text.

        Raises:
            pydantic.ValidationError: malformed JSON, missing or mistyped fields
        """
        return cls.model_validate_json(text)
