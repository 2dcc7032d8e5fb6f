"""Turning pattern assignments and partial waves into color grids."""
import numpy as np


def resolved_colors(pattern_grid, book):
    """
    Each cell contributes the origin pixel of its pattern.
    Args:
        pattern_grid: (H, W) array of pattern ids
        book: PatternBook
    Returns:
        (H, W) array of color indices
    """
    return book.top_left[np.asarray(pattern_grid)]


def preview_colors(wave, book, palette=None):
    """
    Best-guess color of every cell: the weight-averaged origin color of the
    patterns still possible there. Cells with no pattern left are 0.
    Args:
        wave: Wave
        book: PatternBook
        palette: optional (num_colors, C) array mapping color index -> color
    Returns:
        (H, W) float array without a palette, (H, W, C) with one
    """
    p = wave.possible * book.weights  # shape = (H, W, K)
    p_sum = p.sum(axis=2, keepdims=True)
    p_norm = np.divide(p, p_sum, out=np.zeros_like(p), where=(p_sum > 0))
    if palette is None:
        return p_norm @ book.top_left.astype(np.float64)
    colors = np.asarray(palette, dtype=np.float64)[book.top_left]  # shape = (K, C)
    return p_norm @ colors


def to_rgb(colors, palette):
    """Map an index grid through a palette, as uint8."""
    return np.asarray(palette)[np.asarray(colors)].astype(np.uint8)
