"""Systematic encoder for parity-check graphs with an invertible parity part."""

from __future__ import annotations

from typing import Union

import numpy as np

from .graph import ParityCheckGraph


def _as_dense(H: Union[ParityCheckGraph, np.ndarray]) -> np.ndarray:
    if isinstance(H, ParityCheckGraph):
        return H.to_dense()
    H = np.asarray(H)
    if H.ndim != 2:
        raise ValueError("H must be a 2D matrix")
    return (H % 2).astype(np.uint8)


def _solve_square_gf2(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve ``A x = b`` over GF(2) by Gauss-Jordan elimination on ``[A | b]``."""

    m = A.shape[0]
    aug = np.concatenate([A, b[:, None]], axis=1).astype(np.uint8)
    for col in range(m):
        candidates = np.flatnonzero(aug[col:, col])
        if candidates.size == 0:
            raise ValueError("Parity part of H is singular over GF(2)")
        pivot = col + candidates[0]
        if pivot != col:
            aug[[col, pivot]] = aug[[pivot, col]]
        hits = np.flatnonzero(aug[:, col])
        hits = hits[hits != col]
        aug[hits] ^= aug[col]
    return aug[:, -1]


def encode_systematic(message: np.ndarray, H: Union[ParityCheckGraph, np.ndarray]) -> np.ndarray:
    """Return ``[message | parity]`` with ``H @ codeword == 0 (mod 2)``.

    ``H`` is split as ``[H_sys | H_par]`` where ``H_par`` is the trailing
    square block; it must be invertible over GF(2).
    """

    H = _as_dense(H)
    message = np.asarray(message)
    if message.ndim != 1:
        raise ValueError("message must be 1D")
    m, n = H.shape
    k = n - m
    if k <= 0:
        raise ValueError("Parity-check matrix needs more columns than rows")
    if message.size != k:
        raise ValueError(f"message must have {k} bits, got {message.size}")

    systematic = (message.astype(np.uint8) & 1)
    syndrome = (H[:, :k].astype(np.int64) @ systematic) % 2
    parity = _solve_square_gf2(H[:, k:], syndrome.astype(np.uint8))
    return np.concatenate([systematic, parity]).astype(np.uint8)


def generator_matrix(H: Union[ParityCheckGraph, np.ndarray]) -> np.ndarray:
    """Rows are the codewords of the unit messages, so ``msg @ G % 2`` encodes."""

    H = _as_dense(H)
    k = H.shape[1] - H.shape[0]
    return np.stack([encode_systematic(unit, H) for unit in np.eye(k, dtype=np.uint8)])


__all__ = ["encode_systematic", "generator_matrix"]
