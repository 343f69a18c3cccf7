"""
Unit tests for the counting functions.

Tests cover:
- Factorial
- Distinct anagram counts, with and without repeated characters
- Search space sizes and 64-bit overflow
"""
import pytest

from anagrams.engine.combinatorics import (
    INT64_MAX,
    factorial,
    partition_share,
    total_anagrams,
    total_permutations,
)
from conftest import reference_anagrams


class TestFactorial:
    """Tests for factorial function."""

    def test_small_values(self):
        assert factorial(0) == 1
        assert factorial(1) == 1
        assert factorial(5) == 120

    def test_largest_in_range(self):
        """20! is the largest factorial that fits in 64 bits."""
        assert factorial(20) == 2432902008176640000
        assert factorial(20) <= INT64_MAX

    def test_overflow_raises(self):
        with pytest.raises(OverflowError, match="64-bit"):
            factorial(21)

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            factorial(-1)


class TestTotalAnagrams:
    """Tests for total_anagrams function."""

    def test_repeated_characters(self):
        assert total_anagrams("aab") == 3

    def test_distinct_characters(self):
        assert total_anagrams("abc") == 6

    @pytest.mark.parametrize("word", ["a", "aaa", "abab", "banana", "mississ"])
    def test_matches_reference(self, word):
        assert total_anagrams(word) == len(reference_anagrams(word))

    def test_long_word_overflows(self):
        with pytest.raises(OverflowError):
            total_anagrams("abcdefghijklmnopqrstu")


class TestTotalPermutations:
    """Tests for total_permutations and partition_share."""

    def test_values(self):
        assert total_permutations(2, 3) == 8
        assert total_permutations(3, 3) == 27
        assert total_permutations(1, 5) == 1

    def test_partition_share(self):
        assert partition_share(2, 3) == 4
        assert partition_share(5, 5) == 625
        assert partition_share(3, 1) == 1

    def test_overflow_raises(self):
        with pytest.raises(OverflowError):
            total_permutations(26, 14)
