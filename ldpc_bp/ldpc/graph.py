"""Sparse parity-check graph with an edge-indexed layout for message passing."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np


def _slot_table(groups: Sequence[np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
    """Pad variable-length edge-id groups into a rectangular table and mask."""

    width = max((g.size for g in groups), default=0)
    slots = np.zeros((len(groups), width), dtype=np.int64)
    mask = np.zeros((len(groups), width), dtype=bool)
    for r, group in enumerate(groups):
        slots[r, : group.size] = group
        mask[r, : group.size] = True
    return slots, mask


class ParityCheckGraph:
    """Bipartite graph of ``m`` check nodes and ``n`` variable nodes.

    Edges are numbered row-major (check by check, variables ascending). The
    decoder keeps its messages in flat arrays indexed by edge id, and reads
    them row-wise through ``check_slots`` or column-wise through
    ``var_slots``; padded cells are flagged off in the matching mask.

    ``edge_id`` maps a ``(check, variable)`` pair to its edge id. The
    decoder never needs it, but callers use it to address a single edge
    in per-edge arrays (for example, to inspect ``R`` or ``M`` after a
    decode call).
    """

    def __init__(self, rows: Iterable[Iterable[int]], n: int) -> None:
        if n <= 0:
            raise ValueError("graph must have at least one variable node")
        row_lists: List[np.ndarray] = []
        for j, row in enumerate(rows):
            idx = np.unique(np.asarray(list(row), dtype=np.int64))
            if idx.size and (idx[0] < 0 or idx[-1] >= n):
                raise ValueError(f"check {j} references a variable outside [0, {n})")
            row_lists.append(idx)
        if not row_lists:
            raise ValueError("graph must have at least one check node")

        self.m = len(row_lists)
        self.n = int(n)
        self.rows = tuple(row_lists)

        self.edge_check = np.concatenate(
            [np.full(r.size, j, dtype=np.int64) for j, r in enumerate(self.rows)]
        )
        self.edge_var = np.concatenate(self.rows)
        self.num_edges = int(self.edge_check.size)
        self.edge_id: Dict[Tuple[int, int], int] = {
            (int(j), int(i)): e for e, (j, i) in enumerate(zip(self.edge_check, self.edge_var))
        }

        # stable sort keeps checks ascending within each column
        order = np.argsort(self.edge_var, kind="stable")
        col_edges = np.split(order, np.cumsum(np.bincount(self.edge_var, minlength=self.n))[:-1])
        self.cols = tuple(self.edge_check[e] for e in col_edges)

        row_edges = np.split(
            np.arange(self.num_edges, dtype=np.int64), np.cumsum([r.size for r in self.rows])[:-1]
        )
        self.check_slots, self.check_mask = _slot_table(row_edges)
        self.var_slots, self.var_mask = _slot_table(col_edges)

    @classmethod
    def from_dense(cls, H: np.ndarray) -> "ParityCheckGraph":
        """Build a graph from a binary ``m x n`` matrix."""

        H = np.asarray(H)
        if H.ndim != 2:
            raise ValueError("H must be a 2D matrix")
        if not np.isin(H, (0, 1)).all():
            raise ValueError("H must be binary")
        return cls([np.flatnonzero(row) for row in H], H.shape[1])

    @classmethod
    def from_adjacency(
        cls,
        rows: Sequence[Iterable[int]],
        cols: Sequence[Iterable[int]],
    ) -> "ParityCheckGraph":
        """Build a graph from both adjacency views, rejecting inconsistent ones."""

        graph = cls(rows, len(cols))
        for i, col in enumerate(cols):
            if not np.array_equal(np.unique(np.asarray(list(col), dtype=np.int64)), graph.cols[i]):
                raise ValueError(f"adjacency of variable {i} disagrees with the check lists")
        return graph

    @property
    def k(self) -> int:
        return self.n - self.m

    def to_dense(self) -> np.ndarray:
        H = np.zeros((self.m, self.n), dtype=np.uint8)
        H[self.edge_check, self.edge_var] = 1
        return H

    def __repr__(self) -> str:
        return f"ParityCheckGraph(m={self.m}, n={self.n}, edges={self.num_edges})"


__all__ = ["ParityCheckGraph"]
