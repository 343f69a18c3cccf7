"""Tests for the candidate validator and formatting helpers."""

from anagrams.engine.utils import get_alphabet, int_comma, is_valid_anagram, percent, time_str


class TestIsValidAnagram:
    """Tests for is_valid_anagram function."""

    def test_valid(self):
        assert is_valid_anagram("aab", "baa")
        assert is_valid_anagram("aab", "aba")
        assert is_valid_anagram("baa", "aab")

    def test_wrong_character(self):
        assert not is_valid_anagram("aab", "aac")

    def test_missing_input_character(self):
        """A candidate made only of characters from the input can still miss one."""
        assert not is_valid_anagram("aaa", "aab")
        assert not is_valid_anagram("abb", "aab")

    def test_identity(self):
        assert is_valid_anagram("abc", "abc")


def test_alphabet_first_occurrence_order():
    assert get_alphabet("banana") == "ban"
    assert get_alphabet("aab") == "ab"
    assert get_alphabet("") == ""


def test_formatting():
    assert int_comma(1234567) == "1,234,567"
    assert percent(1, 3) == "33.33%"
    assert percent(0, 0) == "0.00%"
    assert time_str(3723.5) == "01:02:03.50"
