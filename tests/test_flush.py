import os
import time

import pytest

from cloudstore.flush import FileFlush, LogFlush, RollFileFlush, StdoutFlush, create_flush
from cloudstore.logconf import LogConfig, LogFileMode


def test_stdout_flush_writes(capsys):
    StdoutFlush().flush("héllo\n".encode("utf-8"))
    assert capsys.readouterr().out == "héllo\n"


def test_file_flush_creates_directories_and_appends(tmp_path):
    target = tmp_path / "a" / "b" / "out.log"
    flush = FileFlush(str(target), LogConfig())
    flush.flush(b"first\n")
    flush.flush(b"second\n")
    flush.close()
    assert target.read_bytes() == b"first\nsecond\n"

    again = FileFlush(str(target), LogConfig())
    again.flush(b"third\n")
    again.close()
    assert target.read_bytes() == b"first\nsecond\nthird\n"


@pytest.mark.parametrize("mode", [1, 2])
def test_file_flush_syncs_immediately(tmp_path, mode):
    target = tmp_path / "sync.log"
    flush = FileFlush(str(target), LogConfig(flush_log=mode))
    flush.flush(b"visible")
    assert target.read_bytes() == b"visible"
    flush.close()


def test_file_flush_after_close_raises(tmp_path):
    flush = FileFlush(str(tmp_path / "x.log"), LogConfig())
    flush.close()
    with pytest.raises(ValueError):
        flush.flush(b"data")


def test_roll_by_size_starts_new_files(tmp_path):
    base = str(tmp_path / "logs" / "roll_")
    config = LogConfig(log_file_mode=LogFileMode.SIZE_ROLL, retention_days=1)
    flush = RollFileFlush(base, 10, config)
    flush.flush(b"0123456789AB")
    first = flush.current_filename
    flush.flush(b"more")
    second = flush.current_filename
    flush.close()
    assert first != second
    assert first.startswith(base) and first.endswith("-1.log")
    assert second.endswith("-2.log")
    with open(first, "rb") as fh:
        assert fh.read() == b"0123456789AB"
    with open(second, "rb") as fh:
        assert fh.read() == b"more"


def test_roll_by_size_keeps_file_below_limit(tmp_path):
    base = str(tmp_path / "roll_")
    flush = RollFileFlush(base, 100, LogConfig(log_file_mode=LogFileMode.SIZE_ROLL))
    flush.flush(b"a")
    first = flush.current_filename
    flush.flush(b"b")
    assert flush.current_filename == first
    flush.close()
    with open(first, "rb") as fh:
        assert fh.read() == b"ab"


def test_roll_by_time(tmp_path):
    base = str(tmp_path / "t_")
    long_cfg = LogConfig(log_file_mode=LogFileMode.TIME_ROLL, rolling_interval=3600)
    flush = RollFileFlush(base, 0, long_cfg)
    flush.flush(b"x")
    first = flush.current_filename
    flush.flush(b"y")
    assert flush.current_filename == first
    flush.close()

    short_cfg = LogConfig(log_file_mode=LogFileMode.TIME_ROLL, rolling_interval=0)
    eager = RollFileFlush(str(tmp_path / "u_"), 0, short_cfg)
    eager.flush(b"x")
    a = eager.current_filename
    eager.flush(b"y")
    assert eager.current_filename != a
    eager.close()


def test_old_files_are_removed(tmp_path):
    directory = tmp_path / "logs"
    directory.mkdir()
    old = directory / "ancient.log"
    old.write_bytes(b"old")
    past = time.time() - 10 * 24 * 3600
    os.utime(old, (past, past))
    flush = RollFileFlush(str(directory / "r_"), 1000, LogConfig(retention_days=1))
    flush.flush(b"new")
    flush.close()
    assert not old.exists()
    assert os.path.exists(flush.current_filename)


def test_create_flush(tmp_path):
    target = tmp_path / "f.log"
    flush = create_flush(FileFlush, str(target), LogConfig(flush_log=1))
    assert isinstance(flush, FileFlush)
    flush.flush(b"z")
    flush.close()
    assert target.read_bytes() == b"z"


def test_create_flush_rejects_other_types():
    with pytest.raises(TypeError):
        create_flush(dict)
    with pytest.raises(TypeError):
        LogFlush()