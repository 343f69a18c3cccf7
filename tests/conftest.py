"""Shared fixtures for the enumeration engine tests."""

from itertools import permutations

import pytest

from anagrams.engine.config import EngineConfig


@pytest.fixture
def engine_config(tmp_path):
    """Thread-mode settings writing every file under a temporary directory."""
    return EngineConfig(
        executor="thread",
        output_path=str(tmp_path / "output.txt"),
        state_dir=str(tmp_path / "state"),
        log_dir=str(tmp_path / "logs"),
        idle_sleep=0.0001,
        progress_interval=0.05,
    )


def reference_anagrams(word: str) -> set[str]:
    """All distinct anagrams of `word`, straight from itertools."""
    return {"".join(p) for p in permutations(word)}
