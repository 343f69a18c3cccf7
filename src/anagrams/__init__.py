"""Anagram Generator.

Enumerates every distinct anagram of an input word by walking all sequences of the
word's length over its distinct characters, one worker per first character, and
appending the sequences that use exactly the input's characters to an output file.
A run interrupted with Ctrl+C saves each worker's position and can be resumed.
"""

from sys import argv, exit

from .engine.checkpoint import ResumeStateError
from .engine.enumerator import run


def main() -> None:
    """Main entry point for the anagram generator."""
    # Expect the input word, optionally followed by -r/--resume
    if len(argv) < 2:
        print("No input word provided")
        print("Usage: python -m anagrams <word> [-r|--resume]")
        exit(1)
    word = argv[1]
    resume = len(argv) > 2 and argv[2] in ("-r", "--resume")

    try:
        report = run(word, resume=resume)
    except (ResumeStateError, ValueError, OverflowError, OSError) as e:
        # InputError is a ValueError; OSError covers sink and checkpoint I/O
        print(f"Error: {e}")
        exit(1)

    if report.status == "error":
        exit(1)
