"""matplotlib views of patterns, neighbors and pattern distributions."""
import matplotlib.pyplot as plt
import numpy as np


def _as_image(arr, palette):
    arr = np.asarray(arr)
    if palette is None:
        return arr
    return np.asarray(palette)[arr]


def plot_pattern(ax, arr, palette=None):
    """Draw one pattern (or any index grid) on ax."""
    img = _as_image(arr, palette)
    if img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]
    if img.ndim == 2:
        ax.pcolormesh(img, cmap='gray', edgecolors='blue', linewidth=0.2)
        ax.invert_yaxis()
    else:
        ax.imshow(img.astype(np.uint8), interpolation='nearest')
    ax.set_aspect('equal')
    ax.axis('off')


def plot_neighbors(book, rules, idx, palette=None, rng=None):
    """
    plot a random compatible neighbor of a pattern in each cardinal direction.
    Args:
        book: PatternBook
        rules: AdjacencyRules
        idx: pattern index
    Returns:
        fig, axes
    """
    rng = rng if rng is not None else np.random.default_rng()
    # (row, col) of the neighbor panel for UP, RIGHT, DOWN, LEFT
    panels = [(0, 1), (1, 2), (2, 1), (1, 0)]
    fig, axes = plt.subplots(3, 3, figsize=(5, 5))
    for ax in axes.flat:
        ax.axis('off')
    plot_pattern(axes[1, 1], book.patterns[idx], palette)
    choices = []
    for d, (dx, dy) in enumerate(rules.DIRS):
        neighbors = rules.neighbors(idx, dx, dy)
        j = int(rng.choice(neighbors)) if len(neighbors) > 0 else None
        choices.append(j)
        if j is not None:
            r, c = panels[d]
            plot_pattern(axes[r, c], book.patterns[j], palette)
    fig.suptitle("Pattern index: {} and its neighbors\nUP: {}, RIGHT: {}, DOWN: {}, LEFT: {}".format(idx, *choices))
    fig.tight_layout()
    return fig, axes


def plot_distribution_bars(sample_dist, output_dist, title="Pattern distribution"):
    """
    Plot side-by-side bars comparing sample vs generated pattern distributions.
    """
    ids = np.arange(len(sample_dist))
    width = 0.4
    fig, ax = plt.subplots(figsize=(12, 4))
    ax.bar(ids - width / 2, sample_dist, width=width, label="sample")
    ax.bar(ids + width / 2, output_dist, width=width, label="output")
    ax.set_xlabel("pattern id")
    ax.set_ylabel("probability")
    ax.set_title(title)
    ax.legend()
    ax.set_xticks(ids)
    ax.set_xticklabels(ids, rotation=90)
    fig.tight_layout()
    return fig, ax


def plot_sample_and_output(sample, output, palette=None, N=None):
    """Sample next to a generated output."""
    fig, axes = plt.subplots(1, 2, figsize=(8, 4))
    plot_pattern(axes[0], sample, palette)
    axes[0].set_title("Sample Input: {}".format(np.shape(sample)))
    plot_pattern(axes[1], output, palette)
    axes[1].set_title("WFC Output: {}{}".format(np.shape(output), "" if N is None else ", N={}".format(N)))
    fig.tight_layout()
    return fig, axes
