"""
Pattern extraction for the overlapping model.
Every NxN window of the source (wrapping around the edges) becomes a candidate
pattern; identical windows are merged and counted.
"""
import logging
from collections import defaultdict
from time import time

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from .errors import EmptyInputError

logger = logging.getLogger(__name__)


def pattern_key(patch):
    """Return a hashable key for a pattern patch."""
    return tuple(patch.reshape(-1).tolist())


def rotate90(p):
    """Rotate a pattern patch by 90 degrees."""
    return np.rot90(p, k=1)


def reflectX(p):
    """Reflect a pattern patch horizontally."""
    return np.flip(p, axis=1)


def symmetries(patch):
    """
    The 8 dihedral variants of a patch, identity first.
    Order: identity, 3 rotations, reflection, reflection + 3 rotations.
    """
    variants = [patch]
    rp = patch
    for _ in range(3):
        rp = rotate90(rp)
        variants.append(rp)
    rp = reflectX(patch)
    variants.append(rp)
    for _ in range(3):
        rp = rotate90(rp)
        variants.append(rp)
    return variants


def as_source_grid(source):
    """Coerce a source grid to a 2D integer array."""
    grid = np.asarray(source)
    if grid.ndim != 2:
        raise ValueError("source must be a 2D grid of color indices, got shape {}".format(grid.shape))
    if grid.size and not np.issubdtype(grid.dtype, np.integer):
        raise ValueError("source must hold integer color indices, got dtype {}".format(grid.dtype))
    return grid.astype(np.int64, copy=False)


class PatternBook:
    """
    Deduplicated NxN patterns with their occurrence counts.
    Attributes:
        N: pattern size
        patterns: (K, N, N) array of color indices, index = pattern id
        weights: (K,) float64 occurrence counts (selection weights)
        key2idx: dict mapping pattern key -> pattern id
        catalog: pandas DataFrame (pattern_id, hash_key, count, weight)
        sample_grid: (H, W) pattern id of the un-augmented window at each source position
    """

    def __init__(self, N, patterns, weights, key2idx, sample_grid=None, include_symmetries=False):
        self.N = N
        self.patterns = patterns
        self.weights = weights
        self.key2idx = key2idx
        self.sample_grid = sample_grid
        self.include_symmetries = include_symmetries
        self.catalog = pd.DataFrame({
            'pattern_id': range(len(patterns)),
            'hash_key': list(key2idx.keys()),
            'count': weights.astype(np.int64),
            'weight': weights / weights.sum() if len(weights) else weights,
        })
        if sample_grid is not None:
            self.sample_counts = np.bincount(sample_grid.reshape(-1), minlength=len(patterns)).astype(np.float64)
        else:
            self.sample_counts = None

    @classmethod
    def build(cls, source, N, include_symmetries=False):
        """
        Extract all NxN overlapping patterns from the source, wrapping at the edges.
        Args:
            source: (H, W) grid of color indices
            N: pattern size (NxN)
            include_symmetries: If True, adds the 8 rotations/reflections of each window
        Returns:
            PatternBook
        """
        if N < 1:
            raise ValueError("pattern size must be positive, got {}".format(N))
        sample = as_source_grid(source)
        H, W = sample.shape
        if H < N or W < N:
            raise EmptyInputError(H, W, N)
        start_time = time()
        padded = np.pad(sample, ((0, N-1), (0, N-1)), mode='wrap')
        patches = sliding_window_view(padded, (N, N))  # shape = (H, W, N, N)
        counts = defaultdict(int)
        sample_keys = [[None] * W for _ in range(H)]
        for y in range(H):
            for x in range(W):
                patch = patches[y, x]
                sample_keys[y][x] = pattern_key(patch)
                variants = symmetries(patch) if include_symmetries else [patch]
                for p in variants:
                    counts[pattern_key(p)] += 1
        unique_keys = list(counts.keys())
        key2idx = {key: i for i, key in enumerate(unique_keys)}
        patterns = np.array(unique_keys, dtype=np.int64).reshape(len(unique_keys), N, N)
        weights = np.array([counts[key] for key in unique_keys], dtype=np.float64)
        sample_grid = np.array([[key2idx[key] for key in row] for row in sample_keys], dtype=np.int64)
        logger.info("Pattern extraction took %.2f seconds.", time() - start_time)
        logger.info(
            "Extracted %d unique patterns (N=%d, symmetries=%s) from a %dx%d source.",
            len(unique_keys), N, include_symmetries, H, W,
        )
        return cls(N, patterns, weights, key2idx, sample_grid, include_symmetries)

    @classmethod
    def from_patterns(cls, patterns, weights=None):
        """
        Build a book from explicit pattern blocks.
        Args:
            patterns: sequence of NxN blocks, all distinct
            weights: per-pattern counts (>= 1), default 1 each
        """
        arr = np.asarray(patterns, dtype=np.int64)
        if arr.ndim != 3 or arr.shape[1] != arr.shape[2] or arr.shape[0] == 0:
            raise ValueError("patterns must be a non-empty (K, N, N) array, got shape {}".format(arr.shape))
        K, N, _ = arr.shape
        w = np.ones(K, dtype=np.float64) if weights is None else np.asarray(weights, dtype=np.float64)
        if w.shape != (K,):
            raise ValueError("expected {} weights, got shape {}".format(K, w.shape))
        if np.any(w < 1):
            raise ValueError("pattern weights must be >= 1")
        key2idx = {}
        for i in range(K):
            key = pattern_key(arr[i])
            if key in key2idx:
                raise ValueError("pattern {} duplicates pattern {}".format(i, key2idx[key]))
            key2idx[key] = i
        return cls(N, arr, w, key2idx)

    def __len__(self):
        return len(self.patterns)

    @property
    def K(self):
        return len(self.patterns)

    @property
    def top_left(self):
        """Color index of each pattern's origin pixel, shape (K,)."""
        return self.patterns[:, 0, 0]

    def index_of(self, patch):
        """Pattern id of a block, or None if it is not in the book."""
        return self.key2idx.get(pattern_key(np.asarray(patch)))
