# traitgen/rng.py
"""
Seeded MT19937 generator.

Each generation run owns its own instance, so two runs with the same seed
draw the same stream regardless of what else is happening in the process.
"""

N = 624
M = 397
MATRIX_A = 0x9908B0DF
UPPER_MASK = 0x80000000
LOWER_MASK = 0x7FFFFFFF
MASK_32 = 0xFFFFFFFF
DEFAULT_SEED = 5489


def normalize_seed(seed):
    """Any int (negative included) reduced to a 32-bit unsigned seed."""
    return int(seed) & MASK_32


class MersenneTwister:
    def __init__(self, seed=DEFAULT_SEED):
        self.mt = [0] * N
        self.mti = N + 1
        self.seed(seed)

    def seed(self, seed):
        mt = self.mt
        mt[0] = normalize_seed(seed)
        for i in range(1, N):
            prev = mt[i - 1]
            mt[i] = (1812433253 * (prev ^ (prev >> 30)) + i) & MASK_32
        self.mti = N

    def _twist(self):
        mt = self.mt
        for kk in range(N):
            y = (mt[kk] & UPPER_MASK) | (mt[(kk + 1) % N] & LOWER_MASK)
            v = mt[(kk + M) % N] ^ (y >> 1)
            if y & 1:
                v ^= MATRIX_A
            mt[kk] = v
        self.mti = 0

    def genrand_int32(self):
        if self.mti >= N:
            self._twist()
        y = self.mt[self.mti]
        self.mti += 1

        # Tempering
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & MASK_32

    def random(self):
        """Float in [0, 1) with 32-bit resolution."""
        return self.genrand_int32() / 4294967296.0

    def randbelow(self, n):
        """Int in [0, n) from a single draw."""
        if n <= 0:
            raise ValueError("randbelow() requires n > 0")
        return min(int(self.random() * n), n - 1)

    def getstate(self):
        return tuple(self.mt), self.mti

    def setstate(self, state):
        mt, mti = state
        self.mt = list(mt)
        self.mti = mti
