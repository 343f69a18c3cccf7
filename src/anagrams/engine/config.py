"""Anagram enumeration engine configuration."""

from typing import Literal

from dotenv import find_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class EngineConfig(BaseSettings):
    """Configuration settings for the anagram enumeration engine."""

    output_path: str = "output.txt"
    """File that accepted anagrams are appended to, one per line. Default: output.txt."""

    state_dir: str = "."
    """Directory holding the per-worker checkpoint records. Default: current directory."""

    state_prefix: str = "worker-state-"
    """File name prefix of a checkpoint record; the partition index follows it."""

    state_suffix: str = ".txt"
    """File name suffix of a checkpoint record. Default: .txt."""

    executor: Literal["process", "thread"] = "process"
    """Which pool runs the workers. Default: process."""

    max_workers: int | None = None
    """Maximum number of workers to run at once.

    If None (default), one per partition, capped at os.cpu_count() for process pools.
    """

    report_interval: int = Field(default=5_000_000_000, gt=0)
    """Interval (in visited positions) at which each worker prints progress."""

    publish_interval: int = Field(default=1_000_000, gt=0)
    """Interval (in visited positions) at which each worker publishes its position for
    progress snapshots. Default: 1,000,000."""

    idle_sleep: float = 0.001
    """Seconds the collector sleeps when the result queue is empty. Default: 0.001."""

    progress_interval: float = 10.0
    """Seconds between progress snapshots written to the run log. Default: 10."""

    log_dir: str = "logs"

    model_config = SettingsConfigDict(
        env_prefix="ANAGRAMS_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="forbid",
    )


config = EngineConfig()
