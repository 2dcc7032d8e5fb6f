"""Overlapping-model Wave Function Collapse."""
from .adjacency import AdjacencyRules
from .config import WFCConfig
from .errors import (
    ContradictionError,
    EmptyInputError,
    ExhaustedRetriesError,
    NotResolvedError,
    SolveCancelled,
    WFCError,
)
from .model import OverlappingWFC
from .patterns import PatternBook
from .propagator import propagate
from .solver import SolveResult, Solver, SolverState
from .wave import Wave

__version__ = "0.1.0"
