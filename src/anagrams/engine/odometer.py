"""Classes for representing a worker's position in its partition of the search space."""

from array import array
from typing import Iterable


class PartitionError(ValueError):
    """Exception raised when odometer digits do not belong to the worker's partition."""

    pass


class Odometer:
    """Store a fixed-width base-`A` counter as a 1D array of digits.

    Digit 0 is pinned to the partition index for the lifetime of the odometer; the
    remaining digits are advanced like an odometer, least significant digit last.  The
    position counter counts visited positions, cumulatively across resumes.
    """

    def __init__(self, partition: int, base: int, length: int) -> None:
        if not 0 <= partition < base:
            raise PartitionError(f"Partition {partition} is outside the alphabet (size {base}).")
        self.partition = partition
        self.base = base
        self.digits = array("B", [0] * length)
        self.digits[0] = partition
        self.position = 0

    @classmethod
    def resume(cls, partition: int, base: int, digits: Iterable[int], position: int) -> "Odometer":
        """Create an odometer restored from checkpointed digits and position counter.

        Raises:
            PartitionError: If the digits do not describe a position in `partition`.
        """
        digits = list(digits)
        if not digits:
            raise PartitionError(f"Partition {partition}: restored digit sequence is empty.")
        bad = [d for d in digits if not 0 <= d < base]
        if bad:
            raise PartitionError(
                f"Partition {partition}: restored digits {bad} are outside [0, {base})."
            )
        if digits[0] != partition:
            raise PartitionError(
                f"Partition {partition}: restored digit 0 is {digits[0]}, expected {partition}."
            )
        if position < 0:
            raise PartitionError(f"Partition {partition}: negative position counter {position}.")

        odometer = cls(partition, base, len(digits))
        odometer.digits = array("B", digits)
        odometer.position = position
        return odometer

    def __len__(self) -> int:
        return len(self.digits)

    def __getitem__(self, idx: int) -> int:
        return self.digits[idx]

    def __str__(self) -> str:
        return "".join(str(d) for d in self.digits) if self.base <= 10 else str(list(self.digits))

    def copy(self) -> "Odometer":
        """Generate a copy of the odometer."""
        return Odometer.resume(self.partition, self.base, self.digits, self.position)

    def advance(self) -> bool:
        """Move to the next position in the partition.

        The position counter is always incremented.  Carries propagate from the last digit
        towards digit 1; digit 0 is never touched.

        Returns:
            True if the partition is exhausted (the digits are left unchanged), else False.
        """
        self.position += 1
        digits = self.digits
        last = self.base - 1
        for i in range(len(digits) - 1, 0, -1):
            if digits[i] != last:
                digits[i] += 1
                for j in range(i + 1, len(digits)):
                    digits[j] = 0
                return False
        return True
