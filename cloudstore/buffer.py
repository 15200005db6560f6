"""Growable byte buffer with separate read and write positions."""

from __future__ import annotations

from .logconf import LogConfig, get_config


class Buffer:
    """Byte buffer that grows geometrically below a threshold and linearly above."""

    def __init__(self, config: LogConfig | None = None) -> None:
        self._config = config if config is not None else get_config()
        self._data = bytearray(self._config.buffer_size)
        self._write_pos = 0
        self._read_pos = 0

    def push(self, data: bytes) -> None:
        """Append bytes, growing the storage as needed."""
        self._ensure(len(data))
        end = self._write_pos + len(data)
        self._data[self._write_pos:end] = data
        self._write_pos = end

    def peek(self, length: int) -> bytes:
        """Return up to ``length`` readable bytes without consuming them."""
        if length > self.readable_size():
            raise ValueError("requested more bytes than are readable")
        return bytes(self._data[self._read_pos:self._read_pos + length])

    def is_empty(self) -> bool:
        return self._write_pos == self._read_pos

    def swap(self, other: "Buffer") -> None:
        """Exchange contents and positions with another buffer."""
        self._data, other._data = other._data, self._data
        self._read_pos, other._read_pos = other._read_pos, self._read_pos
        self._write_pos, other._write_pos = other._write_pos, self._write_pos

    def writable_size(self) -> int:
        return len(self._data) - self._write_pos

    def readable_size(self) -> int:
        return self._write_pos - self._read_pos

    def capacity(self) -> int:
        return len(self._data)

    def move_write_pos(self, length: int) -> None:
        if length > self.writable_size():
            raise ValueError("cannot move write position past the end")
        self._write_pos += length

    def move_read_pos(self, length: int) -> None:
        if length > self.readable_size():
            raise ValueError("cannot move read position past the written data")
        self._read_pos += length

    def reset(self) -> None:
        self._write_pos = 0
        self._read_pos = 0

    def _ensure(self, length: int) -> None:
        while length >= self.writable_size():
            size = len(self._data)
            if size < self._config.threshold:
                new_size = 3 * size
            else:
                new_size = size + self._config.linear_growth
            if new_size <= size:
                new_size = self._write_pos + length + 1
            self._data.extend(bytes(new_size - size))