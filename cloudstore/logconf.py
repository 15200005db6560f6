"""Logging configuration and small filesystem helpers used by the logger."""

from __future__ import annotations

import json
import os
import re
import threading
import time
from dataclasses import dataclass, fields
from enum import IntEnum
from pathlib import Path

DEFAULT_CONFIG_PATH = os.environ.get("CLOUDSTORE_LOG_CONFIG", "config.conf")

_SEPARATORS = re.compile(r"[/\\]")


class LogFileMode(IntEnum):
    """How a rolling log file decides to start a new file."""

    TIME_ROLL = 1
    SIZE_ROLL = 2


@dataclass
class LogConfig:
    """Settings shared by buffers, workers and flushes."""

    buffer_size: int = 4096
    threshold: int = 10 * 1024 * 1024
    linear_growth: int = 1024 * 1024
    flush_log: int = 0
    backup_addr: str = "127.0.0.1"
    backup_port: int = 8080
    thread_count: int = 1
    retention_days: int = 7
    log_file_mode: int = LogFileMode.SIZE_ROLL
    rolling_interval: int = 3600
    write_thread_count: int = 1

    @classmethod
    def from_json(cls, text: str | bytes) -> "LogConfig":
        """Build a configuration from a JSON object; missing keys keep defaults."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid log configuration: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("log configuration must be a JSON object")
        defaults = cls()
        values = {}
        for field in fields(cls):
            if field.name in data:
                convert = type(getattr(defaults, field.name))
                if convert is LogFileMode:
                    convert = int
                try:
                    values[field.name] = convert(data[field.name])
                except (TypeError, ValueError) as exc:
                    raise ValueError(f"bad value for {field.name!r}: {data[field.name]!r}") from exc
        return cls(**values)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "LogConfig":
        """Read a configuration file."""
        return cls.from_json(read_content(path))


_config: LogConfig | None = None
_config_lock = threading.Lock()


def get_config() -> LogConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    with _config_lock:
        if _config is None:
            try:
                _config = LogConfig.load(DEFAULT_CONFIG_PATH)
            except (OSError, ValueError):
                _config = LogConfig()
        return _config


def set_config(config: LogConfig) -> None:
    """Replace the process-wide configuration."""
    global _config
    with _config_lock:
        _config = config


def now() -> int:
    """Current time in whole seconds since the epoch."""
    return int(time.time())


def file_exists(filename: str | os.PathLike) -> bool:
    return os.path.exists(filename)


def parent_path(filename: str) -> str:
    """Directory part of a path including its trailing separator, or ''."""
    matches = list(_SEPARATORS.finditer(filename))
    if not matches:
        return ""
    return filename[: matches[-1].start() + 1]


def create_directory(pathname: str) -> None:
    """Create every missing directory along a '/' or '\\' separated path."""
    if not pathname:
        raise ValueError("directory path is empty")
    if file_exists(pathname):
        return
    for match in _SEPARATORS.finditer(pathname):
        sub_path = pathname[: match.start()]
        if not sub_path or sub_path in (".", "..") or file_exists(sub_path):
            continue
        os.mkdir(sub_path, 0o755)
    last = _SEPARATORS.split(pathname)[-1]
    if last and not file_exists(pathname):
        os.mkdir(pathname, 0o755)


def file_size(filename: str | os.PathLike) -> int:
    return os.stat(filename).st_size


def read_content(filename: str | os.PathLike) -> bytes:
    return Path(filename).read_bytes()