"""
Alea pseudo random number generator.

Based on Johannes Baagøe's Alea algorithm. Clustering seeds are fed through
it so that a given seed reproduces the same centroid picks on every platform,
independent of the Python or NumPy random implementations.
"""


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """
    Alea PRNG producing floats in [0, 1).

    Instances are independent: two generators built from the same seed yield
    the same stream, and drawing from one never advances another.
    """

    def __init__(self, seed):
        """Initialize with a seed string, number, or iterable of either."""
        self.seed = seed
        self.draws = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash_n = 0xEFC8249D

        def mash(data):
            nonlocal mash_n
            for char in str(data):
                mash_n = mash_n + ord(char)
                h = 0.02519603282416938 * mash_n
                mash_n = _uint32(h)
                h -= mash_n
                h *= mash_n
                mash_n = _uint32(h)
                h -= mash_n
                mash_n += h * 0x100000000  # 2^32
            return _uint32(mash_n) * 2.3283064365386963e-10  # 2^-32

        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 -= mash(arg)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(arg)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(arg)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.draws += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def next_index(self, size: int) -> int:
        """Uniformly pick an index in [0, size)."""
        if size <= 0:
            raise IndexError("Cannot pick an index from an empty population")
        return min(int(self.random() * size), size - 1)
