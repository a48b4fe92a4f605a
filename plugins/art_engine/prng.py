"""
Deterministic PRNG - Xorshift64

Fast seedable generator used only for stochastic initialization (e.g. the
Gray-Scott seed spots). Pure integer arithmetic on a 64-bit state, so the
same seed yields the same sequence on every platform, and the state can be
saved mid-stream and resumed exactly.

Reference: Marsaglia, "Xorshift RNGs" (2003), shift triple (13, 7, 17).
"""

_MASK64 = 0xFFFF_FFFF_FFFF_FFFF

# Zero is a fixed point of xorshift; a zero seed is replaced with this.
FALLBACK_SEED = 0x5EED_DEAD_BEEF_CAFE

_TWO_POW_53 = float(1 << 53)


class Xorshift64:
    """Xorshift64 generator. Same seed, same sequence."""

    __slots__ = ("_state",)

    def __init__(self, seed=0):
        seed = int(seed) & _MASK64
        self._state = seed if seed != 0 else FALLBACK_SEED

    @property
    def state(self):
        """Current 64-bit state (opaque; never zero)."""
        return self._state

    def next_u64(self):
        """Advance the state and return it."""
        s = self._state
        s ^= (s << 13) & _MASK64
        s ^= s >> 7
        s ^= (s << 17) & _MASK64
        self._state = s
        return s

    def next_f64(self):
        """Uniform float in [0, 1) from the top 53 bits of next_u64()."""
        return (self.next_u64() >> 11) / _TWO_POW_53

    def next_range(self, min_value, max_value):
        """Uniform float in [min_value, max_value)."""
        return min_value + self.next_f64() * (max_value - min_value)

    def next_usize(self, max_value):
        """Integer in [0, max_value) by plain modulo reduction.

        Slightly biased for non-power-of-two max_value; the bias is kept
        because replays depend on the exact sequence. max_value must be
        positive (0 raises ZeroDivisionError).
        """
        return self.next_u64() % max_value

    # --- Serialization -------------------------------------------------

    def to_dict(self):
        return {"state": self._state}

    @classmethod
    def from_dict(cls, d):
        """Resume a generator saved with to_dict()."""
        return cls(d["state"])

    def __getstate__(self):
        return self._state

    def __setstate__(self, state):
        self._state = state

    def __eq__(self, other):
        if not isinstance(other, Xorshift64):
            return NotImplemented
        return self._state == other._state

    def __hash__(self):
        return hash(self._state)

    def __repr__(self):
        return f"Xorshift64(state={self._state:#018x})"
