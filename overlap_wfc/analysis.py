"""Statistics comparing a generated pattern grid with its source."""
import numpy as np


def analyze_output_distribution(book, wfc_grid, use_augmented_counts=False, epsilon=1e-12):
    """
    Compare pattern distribution of a generated grid against the sample via KL-divergence.
    Args:
        book: PatternBook the grid was generated from
        wfc_grid: 2D array of pattern indices produced by a solver
        use_augmented_counts: if True, compare against augmented pattern counts (rot/flip);
            otherwise use the raw NxN extraction from the input sample.
        epsilon: numerical floor to avoid log(0)
    Returns:
        dict with sample/output counts and distributions plus KL value (sample || output)
    """
    wfc_grid = np.asarray(wfc_grid)
    K = len(book)
    if wfc_grid.ndim != 2:
        raise ValueError("wfc_grid must be a 2D array of pattern indices.")
    if wfc_grid.size == 0:
        raise ValueError("wfc_grid is empty.")
    if wfc_grid.max() >= K or wfc_grid.min() < 0:
        raise ValueError("wfc_grid contains invalid pattern indices.")

    # output distribution from generated grid
    out_counts = np.bincount(wfc_grid.reshape(-1), minlength=K).astype(np.float64)
    out_dist = out_counts / out_counts.sum()

    # sample distribution baseline
    if use_augmented_counts or book.sample_counts is None:
        sample_counts = np.asarray(book.weights, dtype=np.float64)
    else:
        sample_counts = book.sample_counts
    sample_dist = sample_counts / sample_counts.sum()

    safe_out = np.clip(out_dist, epsilon, 1.0)
    safe_sample = np.clip(sample_dist, epsilon, 1.0)
    kl = float(np.sum(safe_sample * np.log(safe_sample / safe_out)))
    return {
        "kl_divergence": kl,
        "sample_counts": sample_counts,
        "sample_distribution": sample_dist,
        "output_counts": out_counts,
        "output_distribution": out_dist,
        "missing_in_output": np.where((sample_counts > 0) & (out_counts == 0))[0],
    }
