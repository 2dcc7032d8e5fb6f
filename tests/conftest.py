"""Shared fixtures for overlap_wfc tests."""
import numpy as np
import pytest

from overlap_wfc import AdjacencyRules, PatternBook


@pytest.fixture
def single_color():
    """3x3 source of one color."""
    return np.full((3, 3), 4, dtype=np.int64)


@pytest.fixture
def stripes():
    """Vertical stripes 0 1 2; with N=2 every row of the output is forced by one cell."""
    return np.array([[0, 1, 2]] * 3, dtype=np.int64)


@pytest.fixture
def box():
    """A square of 1s on a 0 background."""
    return np.array([
        [0, 0, 0, 0, 0],
        [0, 1, 1, 0, 0],
        [0, 1, 1, 0, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
    ], dtype=np.int64)


@pytest.fixture
def stripes_book(stripes):
    return PatternBook.build(stripes, 2)


@pytest.fixture
def stripes_rules(stripes_book):
    return AdjacencyRules.build(stripes_book)


@pytest.fixture
def box_book(box):
    return PatternBook.build(box, 2)


@pytest.fixture
def box_rules(box_book):
    return AdjacencyRules.build(box_book)


@pytest.fixture
def dead_end_book():
    """
    A: [[0,1],[0,1]] has no partner to its left or right; B is a plain block of 2s.
    A can never be placed on a torus.
    """
    return PatternBook.from_patterns([
        [[0, 1], [0, 1]],
        [[2, 2], [2, 2]],
    ])


@pytest.fixture
def dead_end_rules(dead_end_book):
    return AdjacencyRules.build(dead_end_book)
