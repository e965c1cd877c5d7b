"""Message-combination algebras for belief-propagation decoding.

Each algebra works on a padded ``rows x width`` view of the messages around
a node (see ``ParityCheckGraph.check_slots`` / ``var_slots``) together with a
mask of the real cells. Padded cells hold the operation's identity. Every
fold runs left to right in adjacency order, one term at a time, so sums and
products round exactly as a per-edge loop would; the excluded term of an
"every other neighbour" fold is blanked to the identity, never divided or
subtracted back out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

_FLOAT_MAX = float(np.finfo(np.float64).max)


def sgn(x: np.ndarray) -> np.ndarray:
    """Return +1 where ``x >= 0`` and -1 elsewhere (NaN maps to -1)."""

    return np.where(np.asarray(x) >= 0, 1.0, -1.0)


def phi(x: np.ndarray) -> np.ndarray:
    """phi(x) = -log(tanh(x / 2)); self-inverse on (0, inf)."""

    return -np.log(np.tanh(np.asarray(x, dtype=np.float64) * 0.5))


def ordered_reduce(
    values: np.ndarray,
    op: np.ufunc,
    start: np.ndarray,
) -> np.ndarray:
    """Fold ``op`` over each row, column by column, starting from ``start``."""

    acc = np.array(np.broadcast_to(start, values.shape[:-1]), dtype=values.dtype)
    for t in range(values.shape[-1]):
        acc = op(acc, values[..., t])
    return acc


def exclusive_reduce(
    values: np.ndarray,
    op: np.ufunc,
    identity: float,
    start: Optional[np.ndarray] = None,
) -> np.ndarray:
    """For every cell, fold ``op`` over the other cells of its row.

    The fold for cell ``(r, c)`` starts from ``start[r]`` (``identity`` when
    omitted) and visits the row's cells left to right with cell ``c``
    replaced by ``identity``.
    """

    rows, width = values.shape
    if width == 0:
        return values.copy()
    # blanked[r, c, t]: row r with its own cell c knocked out
    blanked = np.where(np.eye(width, dtype=bool), identity, values[:, None, :])
    if start is None:
        start = identity
    else:
        start = np.asarray(start, dtype=values.dtype)[:, None]
    return ordered_reduce(blanked, op, start)


def _product_check(R: np.ndarray, mask: np.ndarray) -> np.ndarray:
    # (r + 1) / (r - 1) blows up near r = 1; left unclamped
    ratio = np.where(mask, (R + 1.0) / (R - 1.0), 1.0)
    v = exclusive_reduce(ratio, np.multiply, 1.0)
    return (v + 1.0) / (v - 1.0)


def _check_signs(R: np.ndarray, mask: np.ndarray) -> np.ndarray:
    return exclusive_reduce(np.where(mask, sgn(R), 1.0), np.multiply, 1.0)


def _log_check(R: np.ndarray, mask: np.ndarray) -> np.ndarray:
    magnitude = exclusive_reduce(np.where(mask, phi(np.abs(R)), 0.0), np.add, 0.0)
    return _check_signs(R, mask) * phi(magnitude)


def _min_sum_check(R: np.ndarray, mask: np.ndarray) -> np.ndarray:
    # fmin skips NaN magnitudes; an empty minimum stays at the largest double
    magnitude = exclusive_reduce(np.where(mask, np.abs(R), _FLOAT_MAX), np.fmin, _FLOAT_MAX)
    return _check_signs(R, mask) * magnitude


@dataclass(frozen=True)
class BeliefAlgebra:
    """One decoding variant: channel weights, check rule, variable rule, threshold."""

    name: str
    log_domain: bool
    check_rule: Callable[[np.ndarray, np.ndarray], np.ndarray]
    combine: np.ufunc
    threshold: float

    def weights(self, bits: np.ndarray, p: float) -> np.ndarray:
        """Channel evidence for each received bit (ratio of P(0) to P(1))."""

        table = np.array([p / (1.0 - p), (1.0 - p) / p], dtype=np.float64)
        if self.log_domain:
            table = np.log(table)
        return table[bits]

    def check_update(self, R: np.ndarray, mask: np.ndarray) -> np.ndarray:
        return self.check_rule(R, mask)

    def _padded(self, M: np.ndarray, mask: np.ndarray) -> np.ndarray:
        return np.where(mask, M, self.combine.identity)

    def variable_update(self, W: np.ndarray, M: np.ndarray, mask: np.ndarray) -> np.ndarray:
        return exclusive_reduce(self._padded(M, mask), self.combine, self.combine.identity, start=W)

    def beliefs(self, W: np.ndarray, M: np.ndarray, mask: np.ndarray) -> np.ndarray:
        return ordered_reduce(self._padded(M, mask), self.combine, W)

    def decide(self, beliefs: np.ndarray) -> np.ndarray:
        return np.where(beliefs >= self.threshold, 0, 1).astype(np.uint8)


PRODUCT_BP = BeliefAlgebra("bp", False, _product_check, np.multiply, 1.0)
LOG_BP = BeliefAlgebra("logbp", True, _log_check, np.add, 0.0)
MIN_SUM = BeliefAlgebra("min_sum", True, _min_sum_check, np.add, 0.0)

ALGEBRAS = {algebra.name: algebra for algebra in (PRODUCT_BP, LOG_BP, MIN_SUM)}


__all__ = [
    "sgn",
    "phi",
    "ordered_reduce",
    "exclusive_reduce",
    "BeliefAlgebra",
    "PRODUCT_BP",
    "LOG_BP",
    "MIN_SUM",
    "ALGEBRAS",
]
