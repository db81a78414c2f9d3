"""
Sparse integer matrices and exact graph homology via boundary operators.

rank() row-reduces a dense float copy with partial pivoting. For a graph the
only non-trivial boundary map is vertices x edges (-1 at the source, +1 at the
target), so beta_0 = V - rank and beta_1 = E - rank. The decomposition engine
reports heuristic estimates instead; these functions are the exact reference.
"""

from __future__ import annotations

import numpy as np

from .community_graph import CommunityGraph

ZERO_TOLERANCE = 1e-10


class SparseMatrix:
    def __init__(self, rows: int = 0, cols: int = 0):
        self.rows = rows
        self.cols = cols
        self.entries: dict[tuple[int, int], int] = {}

    def _check_bounds(self, i: int, j: int) -> None:
        if not (0 <= i < self.rows and 0 <= j < self.cols):
            raise IndexError(f"Entry ({i}, {j}) outside {self.rows}x{self.cols} matrix")

    def set(self, i: int, j: int, value: int) -> None:
        self._check_bounds(i, j)
        if value != 0:
            self.entries[(i, j)] = value
        else:
            self.entries.pop((i, j), None)

    def get(self, i: int, j: int) -> int:
        self._check_bounds(i, j)
        return self.entries.get((i, j), 0)

    def to_dense(self) -> np.ndarray:
        mat = np.zeros((self.rows, self.cols), dtype=float)
        for (i, j), value in self.entries.items():
            mat[i, j] = value
        return mat

    def rank(self) -> int:
        if self.rows == 0 or self.cols == 0:
            return 0

        mat = self.to_dense()
        r = 0
        for c in range(self.cols):
            if r >= self.rows:
                break
            pivot = r + int(np.argmax(np.abs(mat[r:, c])))
            if abs(mat[pivot, c]) < ZERO_TOLERANCE:
                continue
            if pivot != r:
                mat[[r, pivot]] = mat[[pivot, r]]

            for i in range(r + 1, self.rows):
                if abs(mat[i, c]) > ZERO_TOLERANCE:
                    factor = mat[i, c] / mat[r, c]
                    mat[i, c:] -= factor * mat[r, c:]
            r += 1
        return r

    def kernel_dim(self) -> int:
        return self.cols - self.rank()


def boundary_operator(graph: CommunityGraph) -> SparseMatrix:
    """Vertex x edge incidence matrix of the graph's 1-skeleton"""
    boundary = SparseMatrix(len(graph.members), len(graph.relationships))
    for j, rel in enumerate(graph.relationships):
        boundary.set(graph.position(rel.source), j, -1)
        boundary.set(graph.position(rel.target), j, 1)
    return boundary


def exact_betti_numbers(graph: CommunityGraph) -> tuple[int, int]:
    """(beta_0, beta_1) from the rank of the boundary operator"""
    rank = boundary_operator(graph).rank()
    return len(graph.members) - rank, len(graph.relationships) - rank
