import logging

import numpy as np

from .adjacency import AdjacencyRules
from .analysis import analyze_output_distribution
from .config import WFCConfig
from .patterns import PatternBook
from .render import to_rgb
from .solver import Solver

logger = logging.getLogger(__name__)


class OverlappingWFC:
    """
    Overlapping Wave Function Collapse (WFC) model for procedural pattern generation.
    Builds the pattern book and compatibility table once; every run() starts a
    fresh solver that shares them read-only.
    """

    def __init__(self, sample, config=None, palette=None):
        """
        Initialize the WFC model with input sample and parameters.
        Args:
            sample: (H, W) grid of color indices
            config: WFCConfig, defaults to WFCConfig()
            palette: optional (num_colors, C) array used to render indices as colors
        """
        self.config = config if config is not None else WFCConfig()
        self.sample = np.asarray(sample)
        self.palette = None if palette is None else np.asarray(palette)
        self.book = PatternBook.build(self.sample, self.config.pattern_size, self.config.include_symmetries)
        self.rules = AdjacencyRules.build(self.book)

    @property
    def K(self):
        return len(self.book)

    @property
    def catalog(self):
        """Pattern catalog joined with the cardinal neighbor table."""
        return self.book.catalog.join(self.rules.neighbor_table(), on='pattern_id')

    def solver(self, seed=None, width=None, height=None, should_stop=None):
        """
        A new step-wise solver, for callers that redraw between steps.
        Args:
            seed: random seed or numpy Generator, default config.random_seed
        """
        return Solver(
            self.book,
            self.rules,
            width if width is not None else self.config.output_width,
            height if height is not None else self.config.output_height,
            max_retries=self.config.max_retries,
            rng=seed if seed is not None else self.config.random_seed,
            should_stop=should_stop,
        )

    def run(self, seed=None, width=None, height=None):
        """
        Run the WFC algorithm to collapse the cell grid.
        Args:
            seed: random seed for reproducibility, default config.random_seed
            width, height: override the configured output size
        Returns:
            SolveResult
        """
        return self.solver(seed, width, height).run()

    def render(self, result):
        """Output image for a SolveResult: RGB with a palette, else the index grid."""
        if self.palette is None:
            return result.colors
        return to_rgb(result.colors, self.palette)

    def analyze(self, result, use_augmented_counts=False):
        return analyze_output_distribution(self.book, result.pattern_grid, use_augmented_counts)
