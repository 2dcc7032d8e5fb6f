"""Tests for overlap_wfc.patterns."""
import numpy as np
import pytest

from overlap_wfc import EmptyInputError, PatternBook, WFCError
from overlap_wfc.patterns import pattern_key, symmetries


class TestExtraction:
    """Windows, wrap-around and deduplication."""

    def test_single_color_gives_one_pattern(self, single_color):
        book = PatternBook.build(single_color, 2)
        assert len(book) == 1
        assert book.weights.tolist() == [9.0]
        assert (book.patterns[0] == 4).all()

    def test_windows_wrap_around_edges(self):
        source = np.arange(9).reshape(3, 3)
        book = PatternBook.build(source, 2)
        # bottom-right window takes its right column and bottom row from the opposite edges
        assert book.patterns[book.sample_grid[2, 2]].tolist() == [[8, 6], [2, 0]]
        assert book.patterns[book.sample_grid[0, 2]].tolist() == [[2, 0], [5, 3]]
        assert book.patterns[book.sample_grid[2, 0]].tolist() == [[6, 7], [0, 1]]

    def test_ids_follow_row_major_scan(self):
        source = np.arange(9).reshape(3, 3)
        book = PatternBook.build(source, 2)
        assert book.sample_grid.tolist() == np.arange(9).reshape(3, 3).tolist()

    def test_patterns_are_distinct(self, box):
        book = PatternBook.build(box, 3, include_symmetries=True)
        keys = {pattern_key(p) for p in book.patterns}
        assert len(keys) == len(book)

    def test_frequency_mass(self):
        source = np.random.default_rng(3).integers(0, 3, size=(5, 4))
        assert PatternBook.build(source, 3).weights.sum() == 5 * 4
        assert PatternBook.build(source, 3, include_symmetries=True).weights.sum() == 5 * 4 * 8

    def test_weights_count_occurrences(self, stripes):
        book = PatternBook.build(stripes, 2)
        assert len(book) == 3
        assert book.weights.tolist() == [3.0, 3.0, 3.0]
        assert book.patterns[0].tolist() == [[0, 1], [0, 1]]

    def test_sample_counts_cover_source(self, box):
        book = PatternBook.build(box, 2, include_symmetries=True)
        assert book.sample_counts.sum() == box.size

    def test_deterministic(self, box):
        a = PatternBook.build(box, 3, include_symmetries=True)
        b = PatternBook.build(box, 3, include_symmetries=True)
        assert np.array_equal(a.patterns, b.patterns)
        assert np.array_equal(a.weights, b.weights)

    def test_top_left(self, stripes_book):
        assert stripes_book.top_left.tolist() == [0, 1, 2]

    def test_index_of(self, stripes_book):
        assert stripes_book.index_of([[1, 2], [1, 2]]) == 1
        assert stripes_book.index_of([[1, 1], [1, 1]]) is None


class TestSymmetries:
    """Rotations and reflections."""

    def test_eight_variants(self):
        patch = np.array([[1, 2], [3, 4]])
        variants = symmetries(patch)
        assert len(variants) == 8
        assert len({pattern_key(v) for v in variants}) == 8
        assert variants[0].tolist() == patch.tolist()

    def test_every_variant_is_in_book(self, box):
        book = PatternBook.build(box, 2, include_symmetries=True)
        for p in book.patterns:
            for v in symmetries(p):
                assert book.index_of(v) is not None

    def test_symmetric_source_keeps_pattern_count(self, single_color):
        book = PatternBook.build(single_color, 2, include_symmetries=True)
        assert len(book) == 1
        assert book.weights[0] == 72


class TestInvalidInput:
    """Inputs the book refuses."""

    def test_source_smaller_than_pattern(self):
        with pytest.raises(EmptyInputError):
            PatternBook.build(np.zeros((2, 5), dtype=int), 3)

    def test_pattern_larger_than_smaller_dimension(self):
        with pytest.raises(EmptyInputError) as info:
            PatternBook.build(np.zeros((5, 2), dtype=int), 3)
        assert info.value.N == 3

    def test_empty_source(self):
        with pytest.raises(EmptyInputError):
            PatternBook.build(np.zeros((0, 0), dtype=int), 2)

    def test_empty_input_error_is_value_error(self):
        with pytest.raises(ValueError):
            PatternBook.build(np.zeros((1, 1), dtype=int), 2)
        assert issubclass(EmptyInputError, WFCError)

    def test_not_two_dimensional(self):
        with pytest.raises(ValueError):
            PatternBook.build(np.zeros((3, 3, 3), dtype=int), 2)

    def test_float_source(self):
        with pytest.raises(ValueError):
            PatternBook.build(np.zeros((3, 3)), 2)

    def test_accepts_nested_lists(self):
        book = PatternBook.build([[0, 1], [1, 0]], 2)
        assert len(book) == 2


class TestFromPatterns:
    """Books built from explicit blocks."""

    def test_default_weights(self, dead_end_book):
        assert dead_end_book.weights.tolist() == [1.0, 1.0]
        assert dead_end_book.N == 2
        assert dead_end_book.sample_counts is None

    def test_duplicates_rejected(self):
        with pytest.raises(ValueError):
            PatternBook.from_patterns([[[0, 0], [0, 0]], [[0, 0], [0, 0]]])

    def test_weights_below_one_rejected(self):
        with pytest.raises(ValueError):
            PatternBook.from_patterns([[[0, 0], [0, 0]]], weights=[0.5])

    def test_not_square_rejected(self):
        with pytest.raises(ValueError):
            PatternBook.from_patterns([[[0, 0, 0], [0, 0, 0]]])


class TestCatalog:
    """pandas pattern catalog."""

    def test_columns_and_counts(self, stripes_book):
        catalog = stripes_book.catalog
        assert list(catalog.columns) == ['pattern_id', 'hash_key', 'count', 'weight']
        assert catalog['count'].tolist() == [3, 3, 3]
        assert catalog['weight'].sum() == pytest.approx(1.0)
        assert catalog.at[0, 'hash_key'] == (0, 1, 0, 1)
