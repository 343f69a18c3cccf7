"""Tests for checkpoint records, the file checkpoint store and the output sink."""

import pickle

import pytest

from anagrams.engine.checkpoint import CheckpointRecord, FileCheckpointStore, ResumeStateError
from anagrams.engine.sink import FileSink, count_lines


@pytest.fixture
def store(tmp_path):
    return FileCheckpointStore(directory=str(tmp_path / "state"))


class TestCheckpointRecord:
    """Tests for the record line layout."""

    def test_layout(self):
        record = CheckpointRecord(position=42, digits=[1, 0, 2])
        assert record.to_lines() == ["42", "1", "0", "2"]

    def test_parse(self):
        record = CheckpointRecord.from_lines(["7", "0", "1", "1", ""])
        assert record == CheckpointRecord(position=7, digits=[0, 1, 1])

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError, match="Non-integer"):
            CheckpointRecord.from_lines(["7", "x"])

    def test_parse_rejects_missing_digits(self):
        with pytest.raises(ValueError):
            CheckpointRecord.from_lines(["7"])

    def test_parse_rejects_negative_counter(self):
        with pytest.raises(ValueError, match="unsigned"):
            CheckpointRecord.from_lines(["-1", "0"])


class TestFileCheckpointStore:
    """Tests for FileCheckpointStore."""

    def test_save_and_load(self, store):
        record = CheckpointRecord(position=12, digits=[2, 1, 0, 1])
        store.save(2, record)
        assert store.path(2).read_text() == "12\n2\n1\n0\n1\n"
        assert store.load(2, length=4) == record

    def test_missing_record(self, store):
        with pytest.raises(ResumeStateError, match="No checkpoint record for partition 3"):
            store.load(3)

    def test_malformed_record(self, store):
        store.path(0).parent.mkdir(parents=True)
        store.path(0).write_text("abc\n0\n")
        with pytest.raises(ResumeStateError, match="Malformed"):
            store.load(0)

    def test_wrong_length(self, store):
        store.save(0, CheckpointRecord(position=1, digits=[0, 1]))
        with pytest.raises(ResumeStateError, match="expected 3"):
            store.load(0, length=3)

    def test_completion_marker_replaces_record(self, store):
        store.save(1, CheckpointRecord(position=1, digits=[1, 0]))
        assert not store.is_completed(1)
        store.mark_completed(1)
        assert store.is_completed(1)
        assert not store.path(1).exists()

    def test_clear(self, store):
        store.save(0, CheckpointRecord(position=1, digits=[0, 0]))
        store.mark_completed(1)
        store.clear(0)
        store.clear(1)
        store.clear(2)  # Nothing saved
        assert not store.path(0).exists()
        assert not store.is_completed(1)

    def test_pickleable(self, store):
        assert pickle.loads(pickle.dumps(store)) == store


class TestFileSink:
    """Tests for FileSink and count_lines."""

    def test_append_and_count(self, tmp_path):
        path = tmp_path / "out" / "output.txt"
        with FileSink(path) as sink:
            sink.write_line("ab")
            sink.write_line("ba")
        with FileSink(path) as sink:
            sink.write_line("cd")
        assert path.read_text() == "ab\nba\ncd\n"
        assert count_lines(path) == 3

    def test_truncate(self, tmp_path):
        path = tmp_path / "output.txt"
        path.write_text("old\n")
        with FileSink(path, truncate=True) as sink:
            sink.write_line("new")
        assert path.read_text() == "new\n"

    def test_count_missing_file(self, tmp_path):
        with pytest.raises(ResumeStateError, match="Cannot read output file"):
            count_lines(tmp_path / "missing.txt")
