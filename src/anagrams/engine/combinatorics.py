"""Counting functions used to size the search space and report progress.

All results are limited to the signed 64-bit range; larger values raise OverflowError
instead of being silently truncated.
"""

from anagrams.engine.utils import get_word_counter

INT64_MAX = 2**63 - 1


def _checked(value: int, what: str) -> int:
    if value > INT64_MAX:
        raise OverflowError(f"{what} exceeds the 64-bit range ({value})")
    return value


def factorial(n: int) -> int:
    """Return n! computed as an iterative product; factorial(0) == factorial(1) == 1."""
    if n < 0:
        raise ValueError(f"factorial is undefined for negative numbers ({n})")
    result = 1
    for i in range(2, n + 1):
        result = _checked(result * i, f"{n}!")
    return result


def total_permutations(alphabet_size: int, length: int) -> int:
    """Return the number of sequences of `length` symbols over `alphabet_size` symbols."""
    return _checked(alphabet_size**length, f"{alphabet_size}^{length}")


def total_anagrams(word: str) -> int:
    """Return the number of distinct anagrams of `word`.

    Computed as len(word)! / (c1! * c2! * ...), where c1, c2, ... are the counts of the
    characters that occur more than once.
    """
    duplicates = 1
    for count in get_word_counter(word).values():
        if count > 1:
            duplicates *= factorial(count)
    return factorial(len(word)) // duplicates


def partition_share(alphabet_size: int, length: int) -> int:
    """Return the number of positions in one worker's partition (A^(L-1))."""
    if length == 0:
        return 0
    return total_permutations(alphabet_size, length) // alphabet_size
