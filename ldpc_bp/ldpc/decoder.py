"""Iterative belief-propagation decoder over a parity-check graph."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .. import config
from .algebra import ALGEBRAS, LOG_BP, MIN_SUM, PRODUCT_BP, BeliefAlgebra
from .graph import ParityCheckGraph


class LdpcDecoder:
    """Message-passing decoder bound to one parity-check graph.

    The decoder owns scratch storage for the variable-to-check messages
    ``R``, the check-to-variable messages ``M`` (both indexed by edge id) and
    the channel weights ``W``. Every decode call rebuilds them from scratch,
    reusing the buffers, so an instance must not be shared between threads.
    The graph itself is read-only and may back any number of decoders.

    Decoding assumes a systematic code: the message is returned as the first
    ``k = n - m`` bits of the first candidate that satisfies every check.
    """

    def __init__(self, graph: ParityCheckGraph, p: float = config.DEFAULTS.p) -> None:
        if not 0.0 < p < 1.0:
            raise ValueError("p must lie strictly between 0 and 1")
        self.p = float(p)
        self.iterations = 0
        self.init(graph)

    def init(self, graph: ParityCheckGraph) -> None:
        """Bind to ``graph`` and allocate message storage at its dimensions."""

        if graph.n <= graph.m:
            raise ValueError("parity-check graph needs more variables than checks")
        self.graph = graph
        self.k = graph.n - graph.m
        self._R = np.empty(graph.num_edges, dtype=np.float64)
        self._M = np.empty(graph.num_edges, dtype=np.float64)
        self._W = np.empty(graph.n, dtype=np.float64)

    def bp_decode(
        self,
        codeword: np.ndarray,
        max_iter: int = config.DEFAULTS.max_iter,
    ) -> Optional[np.ndarray]:
        """Probability-domain decoding with likelihood-ratio messages."""

        return self._run(PRODUCT_BP, codeword, max_iter)

    def logbp_decode(
        self,
        codeword: np.ndarray,
        max_iter: int = config.DEFAULTS.max_iter,
    ) -> Optional[np.ndarray]:
        """Log-domain sum-product decoding (tanh rule via phi)."""

        return self._run(LOG_BP, codeword, max_iter)

    def min_sum_decode(
        self,
        codeword: np.ndarray,
        max_iter: int = config.DEFAULTS.max_iter,
    ) -> Optional[np.ndarray]:
        """Min-sum approximation of log-domain decoding."""

        return self._run(MIN_SUM, codeword, max_iter)

    def decode(
        self,
        codeword: np.ndarray,
        max_iter: int = config.DEFAULTS.max_iter,
        method: str = config.DEFAULTS.method,
    ) -> Optional[np.ndarray]:
        """Decode with the variant named ``method`` (``bp``, ``logbp`` or ``min_sum``).

        Returns the recovered ``k``-bit message, or ``None`` when no candidate
        satisfied the parity checks within ``max_iter`` rounds.
        """

        algebra = ALGEBRAS.get(method)
        if algebra is None:
            raise ValueError(f"Unknown decoding method: {method}")
        return self._run(algebra, codeword, max_iter)

    def syndrome(self, candidate: np.ndarray) -> np.ndarray:
        """Parity of every check row for ``candidate``."""

        bits = np.asarray(candidate, dtype=np.int64)
        if bits.ndim != 1 or bits.size != self.graph.n:
            raise ValueError("candidate length mismatch")
        g = self.graph
        ones = np.bincount(g.edge_check, weights=bits[g.edge_var] & 1, minlength=g.m)
        return (ones.astype(np.int64) % 2).astype(np.uint8)

    def check(self, candidate: np.ndarray) -> bool:
        """Return True if ``candidate`` satisfies every parity check."""

        return not self.syndrome(candidate).any()

    def _validate(self, codeword: np.ndarray) -> np.ndarray:
        bits = np.asarray(codeword)
        if bits.ndim != 1 or bits.size != self.graph.n:
            raise ValueError("codeword length mismatch")
        if not np.isin(bits, (0, 1)).all():
            raise ValueError("codeword entries must be 0 or 1")
        return bits.astype(np.intp)

    def _run(
        self,
        algebra: BeliefAlgebra,
        codeword: np.ndarray,
        max_iter: int,
    ) -> Optional[np.ndarray]:
        bits = self._validate(codeword)
        g = self.graph
        R, M, W = self._R, self._M, self._W
        check_cells = g.check_slots[g.check_mask]
        var_cells = g.var_slots[g.var_mask]

        R.fill(np.nan)
        M.fill(np.nan)
        W[:] = algebra.weights(bits, self.p)
        R[:] = W[g.edge_var]

        self.iterations = 0
        # degenerate messages propagate as inf/NaN without warnings
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            for it in range(1, max_iter + 1):
                self.iterations = it
                M[check_cells] = algebra.check_update(R[g.check_slots], g.check_mask)[g.check_mask]
                M_cols = M[g.var_slots]
                R[var_cells] = algebra.variable_update(W, M_cols, g.var_mask)[g.var_mask]

                candidate = algebra.decide(algebra.beliefs(W, M_cols, g.var_mask))
                if self.check(candidate):
                    return candidate[: self.k]
        return None


__all__ = ["LdpcDecoder"]
