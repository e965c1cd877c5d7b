"""Deterministic seeding helpers."""

from __future__ import annotations

import os

# Keep BLAS/OpenMP single-threaded; decoding is sequential anyway.
os.environ.setdefault("OMP_NUM_THREADS", "1")

import random

import numpy as np


def seed_all(seed: int) -> np.random.Generator:
    """Seed Python and NumPy RNGs and return a fresh ``Generator``."""

    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)
    return np.random.default_rng(seed)


__all__ = ["seed_all"]
