"""Constraint propagation (arc consistency) over the overlap neighborhood."""
import logging
from collections import deque
from typing import Iterable, Tuple

import numpy as np

from .errors import ContradictionError

logger = logging.getLogger(__name__)


def propagate(wave, rules, start_cells: Iterable[Tuple[int, int]]):
    """
    Arc-consistency propagation using a queue.
    Each queued cell has just lost patterns; every neighbor within the overlap
    neighborhood keeps only the patterns that still have a compatible partner
    at the queued cell, and is queued in turn when it loses anything.
    Args:
        wave: Wave to update in place
        rules: AdjacencyRules
        start_cells: (x, y) cells whose possibility sets just shrank
    Returns:
        number of (cell, pattern) pairs removed
    Raises:
        ContradictionError: a cell ran out of possible patterns
    """
    if wave.contradicted:
        raise ContradictionError()
    H, W = wave.height, wave.width
    offsets = rules.offsets
    q = deque()
    queued = set()
    for cell in start_cells:
        if cell not in queued:
            q.append(cell)
            queued.add(cell)
    removed = 0
    while q:
        x, y = q.popleft()
        queued.discard((x, y))
        possible_here = wave.possible[y, x]
        if not possible_here.any():
            raise ContradictionError(x, y)
        # support[d, j]: some pattern still possible here allows j at offsets[d]
        support = rules.allowed[:, possible_here, :].any(axis=1)
        for d, (dx, dy) in enumerate(offsets):
            nx, ny = (x + dx) % W, (y + dy) % H
            banned = wave.restrict(nx, ny, support[d])
            if banned.size == 0:
                continue
            removed += banned.size
            if wave.counts[ny, nx] == 0:
                # contradiction: no possible patterns left
                raise ContradictionError(nx, ny)
            if (nx, ny) not in queued:
                q.append((nx, ny))  # add neighbor cell to queue for further propagation
                queued.add((nx, ny))
    logger.debug("Propagation removed %d patterns.", removed)
    return removed


def is_consistent(wave, rules):
    """
    True if every possible pattern in every cell has a partner at every offset.
    Equivalent to propagate() having nothing left to remove.
    """
    H, W = wave.height, wave.width
    for y in range(H):
        for x in range(W):
            support = rules.allowed[:, wave.possible[y, x], :].any(axis=1)
            for d, (dx, dy) in enumerate(rules.offsets):
                nx, ny = (x + dx) % W, (y + dy) % H
                if np.any(wave.possible[ny, nx] & ~support[d]):
                    return False
    return True
