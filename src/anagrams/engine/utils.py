"""Utility functions for the anagram enumeration engine."""

from collections import Counter
from functools import lru_cache

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S.%f %Z%z"


def get_alphabet(word: str) -> str:
    """Return the distinct characters of `word`, in first-occurrence order."""
    return "".join(dict.fromkeys(word))


@lru_cache(maxsize=1024)
def get_word_counter(word: str) -> Counter[str]:
    """Return a cached Counter for a word.

    Called once per validated candidate, always with the same input token.

    Note: the returned Counter must be treated as immutable.
    """
    return Counter(word)


def is_valid_anagram(candidate: str, word: str) -> bool:
    """Returns whether `candidate` uses exactly the characters of `word`.

    Every character of the input is counted in both strings, so a candidate missing a
    needed character is rejected.  The caller guarantees that both have the same length.

    Args:
        candidate (str): The candidate sequence.
        word (str): The input token.
    """
    return all(candidate.count(ch) == n for ch, n in get_word_counter(word).items())


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a human-readable string.

    Args:
        seconds: Time duration in seconds.

    Returns:
        A string formatted as "HH:MM:SS.ss".
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    """Format an integer with commas as thousands separators."""
    return f"{n:,}"


def percent(part: int, total: int) -> str:
    """Format `part / total` as a percentage with two decimals."""
    if total == 0:
        return "0.00%"
    return f"{100.0 * part / total:.2f}%"
