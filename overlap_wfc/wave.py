"""
The wave: per-cell sets of still-possible patterns on a toroidal output grid.
Use (x, y) indexing for wave array access: possible[y, x, p].
"""
import logging

import numpy as np

from .errors import NotResolvedError

logger = logging.getLogger(__name__)

# cells whose entropies differ by less than this are tied
ENTROPY_TIE_TOLERANCE = 1e-9


class Wave:
    """
    Output grid state for one solve attempt.
    Attributes:
        possible: (H, W, K) boolean bitset of possible pattern ids per cell
        counts: (H, W) number of possible patterns per cell
        sum_weights: (H, W) sum of the remaining patterns' weights
        sum_weight_logs: (H, W) sum of w * log(w) over the remaining patterns
        entropies: (H, W) cached weighted Shannon entropy
        contradicted: True once any cell has no possible pattern left
    """

    def __init__(self, width, height, book):
        self.width = width
        self.height = height
        self.weights = np.asarray(book.weights, dtype=np.float64)
        self.weight_logs = self.weights * np.log(self.weights)
        K = len(self.weights)
        self.possible = np.ones((height, width, K), dtype=bool)
        self.counts = np.full((height, width), K, dtype=np.int64)
        self.sum_weights = np.full((height, width), self.weights.sum())
        self.sum_weight_logs = np.full((height, width), self.weight_logs.sum())
        self.entropies = np.empty((height, width), dtype=np.float64)
        self.entropies[:] = self._entropy_of(self.sum_weights[0, 0], self.sum_weight_logs[0, 0], K)
        self.contradicted = K == 0

    @property
    def shape(self):
        return self.possible.shape

    @staticmethod
    def _entropy_of(sum_w, sum_wlogw, count):
        if count <= 1:
            return 0.0
        return float(np.log(sum_w) - sum_wlogw / sum_w)

    def _refresh(self, x, y):
        """Recompute cached entropy after the set at (x, y) shrank."""
        n = self.counts[y, x]
        if n == 0:
            self.sum_weights[y, x] = 0.0
            self.sum_weight_logs[y, x] = 0.0
            self.entropies[y, x] = 0.0
            self.contradicted = True
        else:
            self.entropies[y, x] = self._entropy_of(self.sum_weights[y, x], self.sum_weight_logs[y, x], n)

    def entropy(self, x, y):
        """Weighted Shannon entropy of the cell, 0 when resolved."""
        return float(self.entropies[y, x])

    def options(self, x, y):
        """Pattern ids still possible at (x, y)."""
        return np.flatnonzero(self.possible[y, x])

    def is_resolved(self, x, y):
        return self.counts[y, x] == 1

    def resolved_pattern(self, x, y):
        """The single pattern left at (x, y); NotResolvedError otherwise."""
        if self.counts[y, x] != 1:
            raise NotResolvedError(x, y, int(self.counts[y, x]))
        return int(np.argmax(self.possible[y, x]))

    def remove(self, x, y, p):
        """
        Ban pattern p at (x, y).
        Returns:
            True if p was possible and has been removed
        """
        if not self.possible[y, x, p]:
            return False
        self.possible[y, x, p] = False
        self.counts[y, x] -= 1
        self.sum_weights[y, x] -= self.weights[p]
        self.sum_weight_logs[y, x] -= self.weight_logs[p]
        self._refresh(x, y)
        return True

    def restrict(self, x, y, keep):
        """
        Ban every pattern at (x, y) not set in the boolean mask keep.
        Returns:
            array of removed pattern ids (empty if nothing changed)
        """
        cell = self.possible[y, x]
        banned = np.flatnonzero(cell & ~keep)
        if banned.size == 0:
            return banned
        cell[banned] = False
        self.counts[y, x] -= banned.size
        self.sum_weights[y, x] -= self.weights[banned].sum()
        self.sum_weight_logs[y, x] -= self.weight_logs[banned].sum()
        self._refresh(x, y)
        return banned

    def restrict_all(self, keep):
        """Apply the mask keep to every cell at once."""
        banned = ~keep
        if not banned.any():
            return 0
        removed = int(self.possible[:, :, banned].sum())
        self.possible &= keep
        self.counts = self.possible.sum(axis=2)
        self.sum_weights = self.possible @ self.weights
        self.sum_weight_logs = self.possible @ self.weight_logs
        for y in range(self.height):
            for x in range(self.width):
                self._refresh(x, y)
        return removed

    def collapse(self, x, y, rng):
        """
        Commit (x, y) to one pattern drawn with probability proportional to its weight.
        Args:
            x, y: cell coordinates, the cell must have at least 2 possible patterns
            rng: numpy random generator
        Returns:
            the chosen pattern id
        """
        allowed = np.flatnonzero(self.possible[y, x])
        if allowed.size < 2:
            raise ValueError("cannot collapse cell (x={}, y={}) with {} possible patterns".format(x, y, allowed.size))
        local_w = self.weights[allowed]
        local_w = local_w / local_w.sum()
        choice = int(rng.choice(allowed, p=local_w))
        keep = np.zeros(self.possible.shape[2], dtype=bool)
        keep[choice] = True
        self.restrict(x, y, keep)
        logger.debug("Collapsed cell (x=%d, y=%d) to pattern %d.", x, y, choice)
        return choice

    def min_entropy_cell(self, rng):
        """
        Pick the unresolved cell with minimal entropy, ties broken uniformly with rng.
        Returns:
            (x, y), or None when every cell is resolved
        """
        mask = self.counts > 1
        if not mask.any():
            return None
        entropy = np.where(mask, self.entropies, np.inf)
        lowest = entropy.min()
        ys, xs = np.nonzero(entropy <= lowest + ENTROPY_TIE_TOLERANCE)
        i = int(rng.integers(len(xs))) if len(xs) > 1 else 0
        return int(xs[i]), int(ys[i])

    def is_done(self):
        return bool(np.all(self.counts == 1))

    def pattern_grid(self):
        """(H, W) array of resolved pattern ids."""
        unresolved = np.argwhere(self.counts != 1)
        if len(unresolved):
            y, x = unresolved[0]
            raise NotResolvedError(int(x), int(y), int(self.counts[y, x]))
        return np.argmax(self.possible, axis=2)

    def snapshot(self):
        return self.possible.copy()
