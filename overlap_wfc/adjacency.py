"""
Compatibility of patterns at every overlap offset.
compatible(p, q, dx, dy) is True when q, shifted by (dx, dy) relative to p,
agrees with p on every pixel of their overlap.
"""
import logging
from time import time
from typing import List, Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class AdjacencyRules:
    """
    Dense compatibility table for a PatternBook.
    Use (dx, dy) offsets, x = column, y = row.
    table[dy + N - 1, dx + N - 1, p, q]: q at offset (dx, dy) from p is allowed
    offsets: every non-zero offset, row-major
    allowed[d, p, q]: table restricted to offsets[d]
    viable[p]: p can appear in a toroidal output at all
    """
    # Cardinal unit offsets (dx, dy): Up, Right, Down, Left
    DIRS: List[Tuple[int, int]] = [(0, -1), (1, 0), (0, 1), (-1, 0)]
    ID2DIRS = {0: 'UP', 1: 'RIGHT', 2: 'DOWN', 3: 'LEFT'}

    def __init__(self, N, table):
        self.N = N
        self.table = table
        self.offsets: List[Tuple[int, int]] = [
            (dx, dy) for dy in range(-N + 1, N) for dx in range(-N + 1, N) if (dx, dy) != (0, 0)
        ]
        if self.offsets:
            self.allowed = np.stack([table[dy + N - 1, dx + N - 1] for dx, dy in self.offsets])
        else:
            self.allowed = np.zeros((0,) + table.shape[2:], dtype=bool)
        self.viable = self._viable_patterns()

    @classmethod
    def build(cls, book):
        """
        Compare every ordered pair of patterns at every offset with |dx| < N, |dy| < N.
        Args:
            book: PatternBook
        Returns:
            AdjacencyRules
        """
        start_time = time()
        N = book.N
        pats = book.patterns
        K = len(pats)
        span = 2 * N - 1
        table = np.zeros((span, span, K, K), dtype=bool)
        for dy in range(-N + 1, N):
            y0, y1 = max(0, dy), min(N, N + dy)
            for dx in range(-N + 1, N):
                x0, x1 = max(0, dx), min(N, N + dx)
                # overlap in p's frame, and the same pixels in q's frame
                p_region = pats[:, y0:y1, x0:x1]
                q_region = pats[:, y0 - dy:y1 - dy, x0 - dx:x1 - dx]
                for i in range(K):
                    table[dy + N - 1, dx + N - 1, i] = (q_region == p_region[i]).all(axis=(1, 2))
        rules = cls(N, table)
        logger.info("Building compatibility took %.2f seconds.", time() - start_time)
        rules.warn_isolated()
        return rules

    @property
    def K(self):
        return self.table.shape[2]

    def compatible(self, p, q, dx, dy):
        """True if pattern q may sit at offset (dx, dy) from pattern p."""
        N = self.N
        if abs(dx) >= N or abs(dy) >= N:
            raise ValueError("offset ({}, {}) outside the overlap range of N={}".format(dx, dy, N))
        return bool(self.table[dy + N - 1, dx + N - 1, p, q])

    def neighbors(self, p, dx, dy):
        """Pattern ids compatible with p at offset (dx, dy)."""
        N = self.N
        if abs(dx) >= N or abs(dy) >= N:
            return np.array([], dtype=np.int64)
        return np.flatnonzero(self.table[dy + N - 1, dx + N - 1, p])

    def _viable_patterns(self):
        """
        Largest pattern set in which every pattern has a compatible partner at every offset.
        This is the fixed point of propagating an unconstrained toroidal wave.
        """
        viable = np.ones(self.K, dtype=bool)
        while True:
            supported = self.allowed[:, viable, :].any(axis=1).all(axis=0) if len(self.offsets) else viable
            new_viable = viable & supported
            if np.array_equal(new_viable, viable):
                return viable
            viable = new_viable

    def warn_isolated(self):
        """Log patterns that have no compatible neighbor in a cardinal direction."""
        for d, (dx, dy) in enumerate(self.DIRS):
            if abs(dx) >= self.N or abs(dy) >= self.N:
                continue
            lonely = np.flatnonzero(~self.table[dy + self.N - 1, dx + self.N - 1].any(axis=1))
            for i in lonely:
                logger.warning("Pattern index %d has no compatible neighbors in direction %s.", i, self.ID2DIRS[d])
        dropped = int((~self.viable).sum())
        if dropped:
            logger.warning("%d of %d patterns can never be placed in a toroidal output.", dropped, self.K)

    def neighbor_table(self):
        """
        Compatible neighbors of each pattern at the four cardinal unit offsets.
        Returns:
            pandas DataFrame indexed by pattern_id with UP, RIGHT, DOWN, LEFT tuples
        """
        rows = {}
        for d, (dx, dy) in enumerate(self.DIRS):
            rows[self.ID2DIRS[d]] = [tuple(self.neighbors(i, dx, dy).tolist()) for i in range(self.K)]
        frame = pd.DataFrame(rows, index=pd.RangeIndex(self.K, name='pattern_id'))
        frame['viable'] = self.viable
        return frame
