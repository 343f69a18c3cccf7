"""Durable per-worker checkpoint records."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

UINT64_MAX = 2**64 - 1


class ResumeStateError(Exception):
    """Exception raised when saved state cannot be used to resume a run."""

    pass


@dataclass
class CheckpointRecord:
    """A snapshot of one worker's odometer, taken when the worker was cancelled."""

    position: int
    """Number of positions visited by the worker, cumulative across resumes."""

    digits: list[int]
    """Odometer digits of the next position to visit. Digit 0 is the partition index."""

    def to_lines(self) -> list[str]:
        """Return the record layout: the position counter, then one digit per line."""
        return [str(self.position), *(str(d) for d in self.digits)]

    @classmethod
    def from_lines(cls, lines: list[str]) -> "CheckpointRecord":
        """Parse a record from its line layout.

        Raises:
            ValueError: If the record is empty or contains a non-integer value.
        """
        lines = [line.strip() for line in lines if line.strip()]
        if len(lines) < 2:
            raise ValueError(f"Expected a position counter and at least one digit, got {lines}")
        try:
            position = int(lines[0])
            digits = [int(line) for line in lines[1:]]
        except ValueError:
            raise ValueError(f"Non-integer value in record: {lines}") from None
        if not 0 <= position <= UINT64_MAX:
            raise ValueError(f"Position counter {position} is not an unsigned 64-bit value")
        return cls(position=position, digits=digits)


class CheckpointStore(Protocol):
    """Read/write access to checkpoint records, keyed by partition index."""

    def save(self, partition: int, record: CheckpointRecord) -> None: ...

    def load(self, partition: int, *, length: int | None = None) -> CheckpointRecord: ...

    def mark_completed(self, partition: int) -> None: ...

    def is_completed(self, partition: int) -> bool: ...

    def clear(self, partition: int) -> None: ...


@dataclass(frozen=True)
class FileCheckpointStore:
    """Checkpoint records stored as one text file per partition.

    Pickleable, so that it can be handed to worker processes.
    """

    directory: str = "."
    prefix: str = "worker-state-"
    suffix: str = ".txt"

    def path(self, partition: int) -> Path:
        """Path of the checkpoint record for `partition`."""
        return Path(self.directory) / f"{self.prefix}{partition}{self.suffix}"

    def done_path(self, partition: int) -> Path:
        """Path of the completion marker for `partition`."""
        return Path(self.directory) / f"{self.prefix}{partition}.done"

    def save(self, partition: int, record: CheckpointRecord) -> None:
        path = self.path(partition)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(record.to_lines()) + "\n", encoding="utf-8")

    def load(self, partition: int, *, length: int | None = None) -> CheckpointRecord:
        """Load the record for `partition`.

        Args:
            partition (int): Partition index.
            length (int | None): Expected number of digits, if known.

        Raises:
            ResumeStateError: If the record is missing, unreadable or malformed.
        """
        path = self.path(partition)
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            raise ResumeStateError(f"No checkpoint record for partition {partition}: {path}") from None
        except OSError as e:
            raise ResumeStateError(f"Cannot read checkpoint record {path}: {e}") from e

        try:
            record = CheckpointRecord.from_lines(lines)
        except ValueError as e:
            raise ResumeStateError(f"Malformed checkpoint record {path}: {e}") from e

        if length is not None and len(record.digits) != length:
            raise ResumeStateError(
                f"Malformed checkpoint record {path}: "
                f"{len(record.digits)} digits, expected {length}."
            )
        return record

    def mark_completed(self, partition: int) -> None:
        path = self.done_path(partition)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        self.path(partition).unlink(missing_ok=True)

    def is_completed(self, partition: int) -> bool:
        return self.done_path(partition).is_file()

    def clear(self, partition: int) -> None:
        """Remove the record and completion marker for `partition`, if present."""
        self.path(partition).unlink(missing_ok=True)
        self.done_path(partition).unlink(missing_ok=True)
