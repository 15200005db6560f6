"""Destinations that log data is written to."""

from __future__ import annotations

import os
import sys
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any

from .logconf import LogConfig, LogFileMode, create_directory, get_config, now, parent_path


class LogFlush(ABC):
    """A place log data goes to."""

    @abstractmethod
    def flush(self, data: bytes) -> None:
        """Write ``data`` to the destination."""

    def close(self) -> None:
        """Release any resources held by the destination."""


class StdoutFlush(LogFlush):
    """Writes log data to standard output."""

    def flush(self, data: bytes) -> None:
        stream = sys.stdout
        stream.write(data.decode("utf-8", errors="replace"))
        stream.flush()


def _sync(handle: IO[bytes], mode: int) -> None:
    if mode == 1:
        handle.flush()
    elif mode == 2:
        handle.flush()
        os.fsync(handle.fileno())


class FileFlush(LogFlush):
    """Appends log data to a single file."""

    def __init__(self, filename: str, config: LogConfig | None = None) -> None:
        self._config = config if config is not None else get_config()
        self.filename = filename
        directory = parent_path(filename)
        if directory:
            create_directory(directory)
        self._lock = threading.Lock()
        self._handle: IO[bytes] | None = open(filename, "ab")

    def flush(self, data: bytes) -> None:
        with self._lock:
            if self._handle is None:
                raise ValueError("write to closed log file")
            self._handle.write(data)
            _sync(self._handle, self._config.flush_log)

    def close(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.close()
                self._handle = None


class RollFileFlush(LogFlush):
    """Writes to a series of files, starting a new one by size or by time."""

    def __init__(self, basename: str, max_size: int, config: LogConfig | None = None) -> None:
        self._config = config if config is not None else get_config()
        self.basename = basename
        self.max_size = max_size
        self._directory = parent_path(basename)
        if self._directory:
            create_directory(self._directory)
        self._lock = threading.Lock()
        self._handle: IO[bytes] | None = None
        self._count = 1
        self._cur_size = 0
        self._last_roll = 0
        self._last_check = 0
        self.current_filename: str | None = None

    def flush(self, data: bytes) -> None:
        with self._lock:
            self._init_log_file()
            assert self._handle is not None
            self._handle.write(data)
            self._cur_size += len(data)
            _sync(self._handle, self._config.flush_log)
            self._check_log_files()

    def close(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.close()
                self._handle = None

    def _init_log_file(self) -> None:
        mode = self._config.log_file_mode
        if mode == LogFileMode.SIZE_ROLL:
            if self._handle is None or self._cur_size >= self.max_size:
                self._reopen()
                self._cur_size = 0
        elif mode == LogFileMode.TIME_ROLL:
            current = now()
            if self._handle is None or current - self._last_roll >= self._config.rolling_interval:
                self._reopen()
                self._last_roll = current
        elif self._handle is None:
            self._reopen()

    def _check_log_files(self) -> None:
        current = time.time()
        retention = self._config.retention_days * 24 * 3600
        if int(current) - self._last_check < retention:
            return
        self._last_check = int(current)
        directory = Path(self._directory or ".")
        files = [entry for entry in directory.iterdir() if entry.is_file()]
        if len(files) <= 1:
            return
        files.sort(key=lambda entry: entry.stat().st_mtime)
        for entry in files:
            if current - entry.stat().st_mtime > retention:
                entry.unlink(missing_ok=True)

    def _create_filename(self) -> str:
        t = time.localtime(now())
        name = (
            f"{self.basename}{t.tm_year}{t.tm_mon}{t.tm_mday}"
            f"{t.tm_hour + 1}{t.tm_min + 1}{t.tm_sec + 1}-{self._count}.log"
        )
        self._count += 1
        return name

    def _reopen(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self.current_filename = self._create_filename()
        self._handle = open(self.current_filename, "ab")


def create_flush(flush_type: type, *args: Any, **kwargs: Any) -> LogFlush:
    """Instantiate a flush of the given type."""
    if not (isinstance(flush_type, type) and issubclass(flush_type, LogFlush)):
        raise TypeError(f"{flush_type!r} is not a LogFlush type")
    return flush_type(*args, **kwargs)