"""Append-only line sink for accepted anagrams."""

from pathlib import Path
from typing import TextIO

from anagrams.engine.checkpoint import ResumeStateError


class FileSink:
    """Append candidates to a text file, one per line.

    Write errors propagate to the caller; nothing is retried.
    """

    def __init__(self, path: str | Path, *, truncate: bool = False) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._f: TextIO = open(self.path, "w" if truncate else "a", encoding="utf-8")

    def write_line(self, line: str) -> None:
        self._f.write(line)
        self._f.write("\n")

    def flush(self) -> None:
        self._f.flush()

    def close(self) -> None:
        if not self._f.closed:
            self._f.close()

    def __enter__(self) -> "FileSink":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def count_lines(path: str | Path) -> int:
    """Return the number of lines already in the sink at `path`.

    Raises:
        ResumeStateError: If the file is missing or cannot be read.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return sum(1 for _ in f)
    except OSError as e:
        raise ResumeStateError(f"Cannot read output file {path}: {e}") from e
