"""
Gray-Scott Reaction-Diffusion Engine

Two chemical species (U, V) react and diffuse on a 2D toroidal grid:
  U + 2V -> 3V  (autocatalytic reaction)
  U is continuously fed in, V is continuously removed.

Equations (explicit Euler, one update per step):
  U' = U + dt * (Du * laplacian(U) - U*V^2 + F*(1-U))
  V' = V + dt * (Dv * laplacian(V) + U*V^2 - (F+k)*V)

Both results are clamped to [0, 1]. The primary output field is V.

Every step is computed from the previous U and V into separate buffers and
only then copied back, so no cell ever sees a partially updated neighbor.
Whole-array numpy operations are applied in a fixed order, which makes the
same seed and parameters produce bit-identical fields on every run.

References:
  Pearson, "Complex Patterns in a Simple System" (1993)
  Karl Sims, RD Tool (karlsims.com/rdtool.html)
"""

import logging
import math
from dataclasses import asdict, dataclass

import numpy as np

from .engine_base import Engine
from .field import Field
from .params import param_float
from .prng import Xorshift64

logger = logging.getLogger(__name__)


DEFAULT_FEED_RATE = 0.055
DEFAULT_KILL_RATE = 0.062
DEFAULT_DIFFUSION_U = 1.0
DEFAULT_DIFFUSION_V = 0.5
DEFAULT_DT = 1.0

# Initial V spots: filled disks of this radius, count scales with area
SPOT_RADIUS = 3
SPOT_DENSITY = 0.0005


@dataclass(frozen=True)
class GrayScottParams:
    """The five constants that control pattern formation.

    Defaults are the classic coral regime (F=0.055, k=0.062).
    """

    feed_rate: float = DEFAULT_FEED_RATE
    kill_rate: float = DEFAULT_KILL_RATE
    diffusion_u: float = DEFAULT_DIFFUSION_U
    diffusion_v: float = DEFAULT_DIFFUSION_V
    dt: float = DEFAULT_DT

    @classmethod
    def from_params(cls, params):
        """Extract from a parameter dict, falling back to defaults.

        Missing or wrong-typed values never fail. `diffusion_a` and
        `diffusion_b` are read when `diffusion_u` / `diffusion_v` are absent.
        """
        du = param_float(params, "diffusion_a", DEFAULT_DIFFUSION_U)
        dv = param_float(params, "diffusion_b", DEFAULT_DIFFUSION_V)
        return cls(
            feed_rate=param_float(params, "feed_rate", DEFAULT_FEED_RATE),
            kill_rate=param_float(params, "kill_rate", DEFAULT_KILL_RATE),
            diffusion_u=param_float(params, "diffusion_u", du),
            diffusion_v=param_float(params, "diffusion_v", dv),
            dt=param_float(params, "dt", DEFAULT_DT),
        )

    def as_dict(self):
        return asdict(self)


PARAM_SCHEMA = {
    "feed_rate": {
        "type": "number", "default": DEFAULT_FEED_RATE, "min": 0.0, "max": 0.1,
        "description": "Feed rate (F): how fast substrate U is replenished",
    },
    "kill_rate": {
        "type": "number", "default": DEFAULT_KILL_RATE, "min": 0.0, "max": 0.1,
        "description": "Kill rate (k): how fast activator V is removed",
    },
    "diffusion_u": {
        "type": "number", "default": DEFAULT_DIFFUSION_U, "min": 0.0, "max": 2.0,
        "description": "Diffusion rate for U (substrate)",
    },
    "diffusion_v": {
        "type": "number", "default": DEFAULT_DIFFUSION_V, "min": 0.0, "max": 2.0,
        "description": "Diffusion rate for V (activator)",
    },
    "dt": {
        "type": "number", "default": DEFAULT_DT, "min": 0.0, "max": 2.0,
        "description": "Time step per step() call",
    },
}


def spot_count(width, height):
    """Number of initial V spots for a grid: ceil(area * density), at least 1."""
    return max(1, math.ceil(width * height * SPOT_DENSITY))


class GrayScott(Engine):

    engine_name = "gray-scott"
    engine_label = "Gray-Scott"

    def __init__(self, width, height, seed=0, params=None):
        """
        Args:
            width, height: grid size in cells (both > 0)
            seed: PRNG seed for spot placement
            params: GrayScottParams, a parameter dict, or None for defaults

        Raises:
            InvalidDimensionsError: width or height is zero
        """
        super().__init__()
        if not isinstance(params, GrayScottParams):
            params = GrayScottParams.from_params(params)
        self.params = params

        self._u = Field.filled(width, height, 1.0)
        self._v = Field(width, height)
        self._seed_spots(Xorshift64(seed))

        shape = self._u.shape
        h, w = shape
        # Pre-allocate work buffers to avoid per-step allocation
        self._padded = np.zeros((h + 2, w + 2), dtype=np.float64)
        self._lap_u = np.empty(shape, dtype=np.float64)
        self._lap_v = np.empty(shape, dtype=np.float64)
        self._reaction = np.empty(shape, dtype=np.float64)
        self._tmp = np.empty(shape, dtype=np.float64)
        self._u_next = np.empty(shape, dtype=np.float64)
        self._v_next = np.empty(shape, dtype=np.float64)

    @classmethod
    def from_params(cls, width, height, seed, params):
        return cls(width, height, seed, GrayScottParams.from_params(params))

    def _seed_spots(self, rng):
        """Seed filled disks of V=1.0 at random, wrapped positions."""
        w, h = self._v.width, self._v.height
        r = SPOT_RADIUS
        count = spot_count(w, h)
        for _ in range(count):
            cx = rng.next_usize(w)
            cy = rng.next_usize(h)
            for dy in range(-r, r + 1):
                for dx in range(-r, r + 1):
                    if dx * dx + dy * dy <= r * r:
                        self._v.set(cx + dx, cy + dy, 1.0)
        logger.debug("seeded %d spots on %dx%d grid", count, w, h)

    def _laplacian(self, grid, out):
        """9-point laplacian under toroidal wrap, into `out`.

        Kernel:
            0.05  0.2  0.05
            0.2  -1.0  0.2
            0.05  0.2  0.05

        Evaluated as 0.2*(n+s+w+e) + 0.05*(nw+ne+sw+se) - center.
        """
        p = self._padded
        p[1:-1, 1:-1] = grid
        p[0, 1:-1] = grid[-1, :]
        p[-1, 1:-1] = grid[0, :]
        p[1:-1, 0] = grid[:, -1]
        p[1:-1, -1] = grid[:, 0]
        p[0, 0] = grid[-1, -1]
        p[0, -1] = grid[-1, 0]
        p[-1, 0] = grid[0, -1]
        p[-1, -1] = grid[0, 0]

        # Cardinals: n, s, w, e
        np.add(p[:-2, 1:-1], p[2:, 1:-1], out=out)
        out += p[1:-1, :-2]
        out += p[1:-1, 2:]
        out *= 0.2
        # Diagonals: nw, ne, sw, se
        np.add(p[:-2, :-2], p[:-2, 2:], out=self._tmp)
        self._tmp += p[2:, :-2]
        self._tmp += p[2:, 2:]
        self._tmp *= 0.05
        out += self._tmp
        out -= grid

    def step(self):
        """Advance one time step."""
        prm = self.params
        f = prm.feed_rate
        fk = prm.feed_rate + prm.kill_rate
        u = self._u.grid
        v = self._v.grid

        self._laplacian(u, self._lap_u)
        self._laplacian(v, self._lap_v)

        # reaction = u * v * v
        r = self._reaction
        np.multiply(u, v, out=r)
        r *= v

        # u' = u + dt * (Du*lap_u - reaction + F*(1-u))
        un = self._u_next
        np.multiply(self._lap_u, prm.diffusion_u, out=un)
        un -= r
        np.subtract(1.0, u, out=self._tmp)
        self._tmp *= f
        un += self._tmp
        un *= prm.dt
        un += u
        np.clip(un, 0.0, 1.0, out=un)

        # v' = v + dt * (Dv*lap_v + reaction - (F+k)*v)
        vn = self._v_next
        np.multiply(self._lap_v, prm.diffusion_v, out=vn)
        vn += r
        np.multiply(v, fk, out=self._tmp)
        vn -= self._tmp
        vn *= prm.dt
        vn += v
        np.clip(vn, 0.0, 1.0, out=vn)

        # Publish both only after both are computed
        np.copyto(u, un)
        np.copyto(v, vn)
        self.generation += 1

    @property
    def field(self):
        return self._v

    @property
    def u_field(self):
        """Substrate concentration."""
        return self._u

    @property
    def v_field(self):
        """Activator concentration (same object as `field`)."""
        return self._v

    @property
    def feed_rate(self):
        return self.params.feed_rate

    @property
    def kill_rate(self):
        return self.params.kill_rate

    def get_params(self):
        return self.params.as_dict()

    def get_param_schema(self):
        return {name: dict(entry) for name, entry in PARAM_SCHEMA.items()}
