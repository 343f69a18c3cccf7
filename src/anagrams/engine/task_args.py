"""Run-wide arguments shared by every worker."""

from datetime import datetime
from time import time

from anagrams.engine.combinatorics import partition_share, total_anagrams, total_permutations
from anagrams.engine.utils import TIMESTAMP_FMT, get_alphabet

MAX_ALPHABET_SIZE = 256


class InputError(ValueError):
    """Exception raised for an unusable input token."""

    pass


class TaskArgs:
    """Wrapper for the input token and the quantities derived from it.

    Pickleable, so that it can be used with multiprocessing (passed to worker processes).
    """

    def __init__(self, word: str) -> None:
        """Derive the search space for `word`.

        Raises:
            InputError: If the word is empty or has too many distinct characters.
            OverflowError: If the search space does not fit in 64 bits.
        """
        if not word:
            raise InputError("No input word provided")

        self.word = word
        """The input token."""

        self.alphabet = get_alphabet(word)
        """Distinct characters of the input, in first-occurrence order."""

        if len(self.alphabet) > MAX_ALPHABET_SIZE:
            raise InputError(
                f"Input has {len(self.alphabet)} distinct characters; "
                f"at most {MAX_ALPHABET_SIZE} are supported."
            )

        self.total_permutations = total_permutations(self.n_partitions, self.length)
        """Size of the whole search space, A^L."""

        self.per_worker = partition_share(self.n_partitions, self.length)
        """Number of positions in each worker's partition."""

        self.total_anagrams = total_anagrams(word)
        """Number of distinct anagrams of the input."""

        self.start_time = time()
        """Timestamp when the run started, in seconds since the epoch."""

    @property
    def length(self) -> int:
        return len(self.word)

    @property
    def n_partitions(self) -> int:
        """Number of partitions (and workers): one per distinct character."""
        return len(self.alphabet)

    def summary(self) -> dict[str, object]:
        """Return a dictionary-based summary of the task arguments."""
        return {
            "word": self.word,
            "alphabet": self.alphabet,
            "length": self.length,
            "partitions": self.n_partitions,
            "total_permutations": self.total_permutations,
            "per_worker": self.per_worker,
            "total_anagrams": self.total_anagrams,
            "start_time": datetime.fromtimestamp(self.start_time)
            .astimezone()
            .strftime(TIMESTAMP_FMT),
        }
