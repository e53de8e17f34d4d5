"""Shared helpers for randomness and logging."""

from .logging import configure_logging
from .random import make_prng

__all__ = ["configure_logging", "make_prng"]
