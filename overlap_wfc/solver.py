"""
The WFC driving loop: observe, collapse, propagate, restart on contradiction.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from time import time
from typing import Callable, Optional

import numpy as np

from .errors import ContradictionError, ExhaustedRetriesError, SolveCancelled
from .propagator import propagate
from .render import preview_colors, resolved_colors
from .wave import Wave

logger = logging.getLogger(__name__)


class SolverState(Enum):
    READY = "ready"
    RUNNING = "running"
    SOLVED = "solved"
    CONTRADICTED = "contradicted"


@dataclass
class SolveResult:
    pattern_grid: np.ndarray  # (H, W) pattern ids
    colors: np.ndarray  # (H, W) color indices
    attempts: int
    contradictions: int
    elapsed: float


class Solver:
    """
    Step-wise overlapping WFC solver on a toroidal output grid.
    States: READY -> RUNNING -> SOLVED | CONTRADICTED, and back to READY on reset().
    The wave belongs to the current attempt and is rebuilt on every reset.
    """

    def __init__(self, book, rules, width, height, max_retries=0, rng=None,
                 should_stop: Optional[Callable[[], bool]] = None):
        """
        Args:
            book: PatternBook
            rules: AdjacencyRules built from book
            width, height: output cell grid size
            max_retries: restarts allowed after contradictions (0 = fail on the first one)
            rng: numpy random generator, or an int seed, or None
            should_stop: polled between steps by run(); returning True cancels the solve
        """
        if width < 1 or height < 1:
            raise ValueError("output size must be positive, got {}x{}".format(height, width))
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0, got {}".format(max_retries))
        self.book = book
        self.rules = rules
        self.width = width
        self.height = height
        self.max_retries = max_retries
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
        self.should_stop = should_stop
        self.attempts = 0
        self.contradictions = 0
        self.steps = 0
        self.last_cell = None
        self.last_contradiction: Optional[ContradictionError] = None
        self.wave = None
        self.state = SolverState.READY
        self.reset()

    def reset(self):
        """Start a new attempt from a fully unconstrained wave."""
        self.attempts += 1
        self.steps = 0
        self.last_cell = None
        self.wave = Wave(self.width, self.height, self.book)
        # patterns that cannot be placed anywhere on a torus
        self.wave.restrict_all(self.rules.viable)
        if self.wave.contradicted:
            self._contradiction(ContradictionError())
        else:
            self.state = SolverState.READY
        return self.state

    def _contradiction(self, exc):
        exc.attempt = self.attempts
        self.contradictions += 1
        self.last_contradiction = exc
        self.state = SolverState.CONTRADICTED
        logger.info("Attempt %d hit a contradiction at (x=%s, y=%s) after %d steps.",
                    self.attempts, exc.x, exc.y, self.steps)

    def step(self):
        """
        Advance by one observe + collapse + propagate cycle.
        Returns:
            the solver state after the step
        """
        if self.state in (SolverState.SOLVED, SolverState.CONTRADICTED):
            return self.state
        self.state = SolverState.RUNNING
        cell = self.wave.min_entropy_cell(self.rng)
        if cell is None:
            # all cells are collapsed
            self.state = SolverState.SOLVED
            return self.state
        x, y = cell
        self.wave.collapse(x, y, self.rng)
        self.last_cell = cell
        self.steps += 1
        try:
            propagate(self.wave, self.rules, [cell])
        except ContradictionError as exc:
            self._contradiction(exc)
        return self.state

    def run(self):
        """
        Solve to completion, restarting on contradiction up to max_retries times.
        Returns:
            SolveResult
        Raises:
            ContradictionError: a contradiction occurred and max_retries is 0
            ExhaustedRetriesError: every allowed attempt contradicted
            SolveCancelled: should_stop returned True
        """
        start_time = time()
        while True:
            if self.should_stop is not None and self.should_stop():
                raise SolveCancelled("Solve cancelled after {} attempts.".format(self.attempts))
            state = self.step()
            if state == SolverState.SOLVED:
                break
            if state == SolverState.CONTRADICTED:
                if self.max_retries == 0:
                    raise self.last_contradiction
                if self.attempts > self.max_retries:
                    raise ExhaustedRetriesError(self.max_retries, self.contradictions)
                self.reset()
        pattern_grid = self.wave.pattern_grid()
        elapsed = time() - start_time
        logger.info("Solved %dx%d output in %d attempt(s), %.2f seconds.",
                    self.height, self.width, self.attempts, elapsed)
        return SolveResult(
            pattern_grid=pattern_grid,
            colors=resolved_colors(pattern_grid, self.book),
            attempts=self.attempts,
            contradictions=self.contradictions,
            elapsed=elapsed,
        )

    def preview(self, palette=None):
        """Best-guess colors of the current wave, for live display."""
        return preview_colors(self.wave, self.book, palette)
