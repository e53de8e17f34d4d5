"""
Random number generation utilities.

Every analysis run gets its own Alea PRNG. There is no module-level generator,
so a run can only be influenced by an earlier one through an explicit seed.
"""

import os
from typing import Optional, Union

from ..core.alea_prng import AleaPRNG

Seed = Union[int, str]


def entropy_seed() -> str:
    """Draw a fresh seed string from the operating system."""
    return os.urandom(16).hex()


def make_prng(seed: Optional[Seed] = None) -> AleaPRNG:
    """
    Create a new Alea PRNG.

    Args:
        seed: Seed value; ``None`` draws one from the OS for a
            non-reproducible stream

    Returns:
        AleaPRNG instance owned by the caller
    """
    if seed is None:
        seed = entropy_seed()
    return AleaPRNG(str(seed))
